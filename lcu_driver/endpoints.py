"""
lcu-driver
Copyright (C) 2024 thiccaxe

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import json
from typing import Optional, Union

from lcu_driver.dispatcher import EndpointRequest, Method

"""
Requests for the client features we use. Responses are left to the caller to decode.
"""

GAMEFLOW_URL = "/lol-gameflow/v1"
CHAMP_SELECT_URL = "/lol-champ-select/v1"
PERKS_URL = "/lol-perks/v1"
SUMMONER_URL = "/lol-summoner/v1"


def _body(body: Union[None, str, dict, list]) -> Optional[str]:
    if body is None or isinstance(body, str):
        return body
    return json.dumps(body)


def gameflow_session() -> EndpointRequest:
    return EndpointRequest(f"{GAMEFLOW_URL}/session")


def champ_select_session() -> EndpointRequest:
    return EndpointRequest(f"{CHAMP_SELECT_URL}/session")


def champ_select_my_selection(selection: Union[str, dict]) -> EndpointRequest:
    return EndpointRequest(f"{CHAMP_SELECT_URL}/session/my-selection", Method.PATCH, body=_body(selection))


def perks_inventory() -> EndpointRequest:
    return EndpointRequest(f"{PERKS_URL}/inventory")


def perks_pages(method: Method = Method.GET, body: Union[None, str, dict] = None) -> EndpointRequest:
    return EndpointRequest(f"{PERKS_URL}/pages", method, body=_body(body))


def perks_page(page_id: int, method: Method = Method.GET) -> EndpointRequest:
    return EndpointRequest(f"{PERKS_URL}/pages/{page_id}", method)


def current_summoner() -> EndpointRequest:
    return EndpointRequest(f"{SUMMONER_URL}/current-summoner")
