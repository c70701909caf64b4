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
import logging
from typing import Optional

from websockets.exceptions import ConnectionClosed, InvalidHandshake

from lcu_driver.config import Settings
from lcu_driver.connection import Connection, ConnectionBuilder
from lcu_driver.dispatcher import EndpointRequest, dispatch
from lcu_driver.errors import DriverClosed, RequestSendFailed, ResponseUnreadable
from lcu_driver.process import ProcessLocator, default_locator
from lcu_driver.session import SessionState, Supervisor, SupervisorState

WAMP_SUBSCRIBE = 5
WAMP_EVENT = 8


class LcuDriver:
    """
    Handle on a running client.

    Only :meth:`connect` hands these out, and only once the client has answered, so every method
    here can assume a live session. The handle keeps itself connected across client restarts
    until :meth:`close`.
    """

    def __init__(self, session: SessionState, supervisor: Supervisor):
        self._session = session
        self._supervisor = supervisor
        self._closed = False

    @classmethod
    async def connect(cls, settings: Optional[Settings] = None, locator: Optional[ProcessLocator] = None,
                      builder: Optional[ConnectionBuilder] = None) -> "LcuDriver":
        settings = settings if settings is not None else Settings()
        locator = locator if locator is not None else default_locator(settings)
        builder = builder if builder is not None else ConnectionBuilder(settings.certificate)

        supervisor = Supervisor(settings, locator, builder)
        connection = await supervisor.bootstrap()
        driver = cls(SessionState(connection), supervisor)
        supervisor.start(driver._session)
        return driver

    @property
    def state(self) -> SupervisorState:
        return self._supervisor.state

    @property
    def supervisor(self) -> Supervisor:
        return self._supervisor

    @property
    def closed(self) -> bool:
        return self._closed

    async def connection(self) -> Connection:
        """
        the current connection, waits while the supervisor is reconnecting
        """
        async with self._session.read() as connection:
            self._check_open()
            return connection

    async def execute(self, request: EndpointRequest) -> str:
        async with self._session.read() as connection:
            self._check_open()
            return await dispatch(connection, request)

    async def execute_json(self, request: EndpointRequest):
        body = await self.execute(request)
        if not body:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ResponseUnreadable(f"{request.method.value} {request.path} did not return JSON") from e

    async def subscribe(self, event: str = "OnJsonApiEvent"):
        """
        Yield the payload of every ``event`` pushed over the websocket.

        Ends when the socket closes, which is what happens when the client restarts. Subscribe
        again to follow the next session.
        """
        connection = await self.connection()
        try:
            async with connection.websocket() as websocket:
                await websocket.send(json.dumps([WAMP_SUBSCRIBE, event]))
                logging.debug(f"Subscribed to {event} on {connection.websocket_url}")
                async for message in websocket:
                    try:
                        packet = json.loads(message)
                    except json.JSONDecodeError as e:
                        logging.warning(f"Websocket sent non-JSON data; details:")
                        logging.exception(e)
                        continue
                    if isinstance(packet, list) and len(packet) == 3 and packet[0] == WAMP_EVENT:
                        yield packet[2]
        except ConnectionClosed:
            logging.debug(f"Websocket connection closed")
        except (OSError, InvalidHandshake) as e:
            raise RequestSendFailed(f"Could not open websocket {connection.websocket_url}: {e}") from e

    async def close(self):
        if self._closed:
            return
        self._closed = True
        await self._supervisor.stop()
        async with self._session.exclusive():
            await self._session.current.close()
        logging.debug("Driver closed")

    def _check_open(self):
        if self._closed:
            raise DriverClosed()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
