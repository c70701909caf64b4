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

import base64
import dataclasses
import logging
from pathlib import Path
from typing import Optional, Union

import aiofiles

from lcu_driver.errors import HandshakeUnreadable, HandshakeMalformed

"""
The client writes ``<install directory>/lockfile`` on every start:

    LeagueClient:<pid>:<port>:<password>:<protocol>

Only the port and the password are used. The password is turned into a basic auth credential.
"""

LOCKFILE_NAME = "lockfile"
DEFAULT_USERNAME = "riot"


@dataclasses.dataclass(frozen=True)
class Handshake:
    path: Path
    port: int
    token: str  # base64("riot:<password>")
    raw_contents: str  # kept to detect a rewritten lockfile

    @property
    def authorization(self) -> str:
        return f"Basic {self.token}"


def credential(raw_token: str, username: str = DEFAULT_USERNAME) -> str:
    return base64.b64encode(f"{username}:{raw_token}".encode("utf-8")).decode("ascii")


def parse(path: Path, contents: str, username: str = DEFAULT_USERNAME) -> Handshake:
    fields = contents.split(":")
    if len(fields) < 4:
        raise HandshakeMalformed(f"Lockfile {path} has {len(fields)} fields, expected at least 4")

    port_field = fields[2]
    if not (port_field.isascii() and port_field.isdigit()):
        raise HandshakeMalformed(f"Lockfile {path} has a non-numeric port {port_field!r}")
    port = int(port_field)
    if not 0 < port < 65536:
        raise HandshakeMalformed(f"Lockfile {path} has an out of range port {port}")

    return Handshake(
        path=path,
        port=port,
        token=credential(fields[3], username),
        raw_contents=contents,
    )


async def read_raw(path: Union[str, Path]) -> str:
    try:
        async with aiofiles.open(path, "rb") as lockfile:
            data = await lockfile.read()
    except OSError as e:
        raise HandshakeUnreadable(f"Could not open lockfile {path}: {e}") from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HandshakeMalformed(f"Lockfile {path} is not utf-8") from e


async def load(path: Union[str, Path], username: str = DEFAULT_USERNAME) -> Handshake:
    path = Path(path)
    contents = await read_raw(path)
    handshake = parse(path, contents, username)
    logging.debug(f"Loaded lockfile {path} (port {handshake.port})")
    return handshake


def exists(path: Union[str, Path]) -> bool:
    return Path(path).is_file()


async def changed(previous: Handshake) -> bool:
    """
    True when the lockfile no longer holds the bytes ``previous`` was loaded from.

    A missing or unreadable lockfile counts as changed, this never raises for a gone file.
    """
    contents: Optional[str]
    try:
        contents = await read_raw(previous.path)
    except (HandshakeUnreadable, HandshakeMalformed):
        contents = None
    return contents != previous.raw_contents
