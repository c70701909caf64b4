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

import asyncio
import dataclasses
import enum
import json
import logging
from typing import Optional

import aiohttp

from lcu_driver.connection import Connection
from lcu_driver.errors import (
    LcuDriverError,
    NoActiveDelegate,
    RequestSendFailed,
    ResponseUnreadable,
    UnknownApiError,
)

NO_ACTIVE_DELEGATE = "No active delegate"


class Method(enum.Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclasses.dataclass(frozen=True)
class EndpointRequest:
    path: str
    method: Method = Method.GET
    headers: Optional[dict] = None
    body: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class ApiErrorPayload:
    error_code: str
    http_status: int
    message: str

    @staticmethod
    def decode(status: int, body: str) -> "ApiErrorPayload":
        try:
            packet = json.loads(body)
        except json.JSONDecodeError as e:
            raise ResponseUnreadable(f"Error response ({status}) is not JSON") from e
        if not isinstance(packet, dict) or not isinstance(packet.get("message"), str):
            raise ResponseUnreadable(f"Error response ({status}) has no message")
        http_status = packet.get("httpStatus")
        return ApiErrorPayload(
            error_code=str(packet.get("errorCode", "")),
            http_status=http_status if isinstance(http_status, int) else status,
            message=packet["message"],
        )


def api_error(payload: ApiErrorPayload) -> LcuDriverError:
    if payload.message == NO_ACTIVE_DELEGATE:
        return NoActiveDelegate(payload=payload)
    return UnknownApiError(payload.message, payload=payload)


async def dispatch(connection: Connection, request: EndpointRequest) -> str:
    """
    Send ``request`` over ``connection`` and return the raw response body.

    Raises:
        RequestSendFailed: the request never got a response.
        ResponseUnreadable: the body could not be read, or an error body could not be decoded.
        NoActiveDelegate: the client has no screen open that can answer.
        UnknownApiError: any other non-success response.
    """
    headers = dict(request.headers or {})
    if request.body is not None:
        headers.setdefault("Content-Type", "application/json")

    url = connection.url(request.path)
    try:
        async with connection.http.request(request.method.value, url, headers=headers,
                                           data=request.body) as response:
            status = response.status
            try:
                body = await response.text()
            except (aiohttp.ClientPayloadError, UnicodeDecodeError) as e:
                raise ResponseUnreadable(f"Could not read response of {request.method.value} {request.path}") from e
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise RequestSendFailed(f"{request.method.value} {request.path} failed: {e}") from e

    if 200 <= status < 300:
        return body

    payload = ApiErrorPayload.decode(status, body)
    logging.debug(f"{request.method.value} {request.path} -> {status} {payload.message}")
    raise api_error(payload)
