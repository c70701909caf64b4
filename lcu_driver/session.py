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
import contextlib
import enum
import logging
from typing import Optional

from lcu_driver import lockfile
from lcu_driver.config import Settings
from lcu_driver.connection import Connection, ConnectionBuilder
from lcu_driver.dispatcher import EndpointRequest, dispatch
from lcu_driver.errors import PROBE_ERRORS, RECOVERABLE_ERRORS
from lcu_driver.process import ProcessLocator
from lcu_driver.rwlock import ReadWriteLock

"""
Keeping one valid Connection around while the client comes and goes.

Bootstrapping -> Live -> Recovering -> Live -> ... -> Closed

While Recovering the supervisor holds the write side of the lock for the whole retry loop, so
callers wait for fresh credentials instead of using stale ones.
"""


class SupervisorState(enum.Enum):
    BOOTSTRAPPING = "bootstrapping"
    LIVE = "live"
    RECOVERING = "recovering"
    CLOSED = "closed"


class SessionState:
    """
    the single live Connection, replaced whole and only under the write lock
    """

    def __init__(self, connection: Connection):
        self._connection = connection
        self._lock = ReadWriteLock()

    @property
    def current(self) -> Connection:
        return self._connection

    @contextlib.asynccontextmanager
    async def read(self):
        async with self._lock.read():
            yield self._connection

    def exclusive(self):
        return self._lock.write()

    def replace(self, connection: Connection) -> Connection:
        if not self._lock.writing:
            raise RuntimeError("SessionState.replace called without exclusive access")
        old, self._connection = self._connection, connection
        return old


class Supervisor:

    def __init__(self, settings: Settings, locator: ProcessLocator, builder: ConnectionBuilder):
        self._settings = settings
        self._locator = locator
        self._builder = builder
        self._task: Optional[asyncio.Task] = None
        self.state = SupervisorState.BOOTSTRAPPING
        self.attempts = 0
        self.swaps = 0

    async def attempt(self) -> Connection:
        """
        one locate -> load -> build -> probe pass
        """
        self.attempts += 1
        process = await self._locator.locate()
        handshake = await lockfile.load(process.install_directory / self._settings.lockfile,
                                        self._settings.username)
        connection = self._builder.build(process, handshake)
        try:
            await dispatch(connection, EndpointRequest(self._settings.probe_path))
        except BaseException:
            await connection.close()
            raise
        return connection

    async def bootstrap(self) -> Connection:
        """
        retry ``attempt`` until the client answers, there is no attempt limit

        only the errors of an absent or starting client are retried, anything else is raised
        """
        delay = self._settings.retry_interval
        failures = 0
        while True:
            try:
                connection = await self.attempt()
            except RECOVERABLE_ERRORS + PROBE_ERRORS as e:
                failures += 1
                if failures == 1:
                    logging.info(f"Waiting for the client: {e}")
                else:
                    logging.debug(f"Client not ready (attempt {failures}): {e}")
                await asyncio.sleep(delay)
                delay = min(delay * self._settings.retry_backoff, self._settings.max_retry_interval)
                continue

            logging.info(f"Connected to the client at {connection.base_url}")
            return connection

    def start(self, session: SessionState):
        self.state = SupervisorState.LIVE
        self._task = asyncio.create_task(self.watch(session))

    async def watch(self, session: SessionState):
        while True:
            await asyncio.sleep(self._settings.poll_interval)
            try:
                if await lockfile.changed(session.current.handshake):
                    await self.recover(session)
            except Exception as e:
                logging.exception(e)

    async def recover(self, session: SessionState):
        logging.info("Lockfile changed or removed, reconnecting")
        async with session.exclusive():
            self.state = SupervisorState.RECOVERING
            try:
                connection = await self.bootstrap()
                old = session.replace(connection)
            finally:
                self.state = SupervisorState.LIVE
        self.swaps += 1
        await old.close()

    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.state = SupervisorState.CLOSED
