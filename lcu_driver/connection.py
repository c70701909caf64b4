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

import dataclasses
import logging
import ssl
from pathlib import Path
from typing import Optional, Union

import aiohttp
from cryptography import x509
from websockets.asyncio.client import connect as websocket_connect

from lcu_driver.errors import TlsSetupFailed, ClientBuildFailed
from lcu_driver.lockfile import Handshake
from lcu_driver.process import ProcessInfo

DEFAULT_CERTIFICATE = Path("riotgames.pem")


@dataclasses.dataclass(frozen=True)
class Connection:
    """
    everything needed to talk to one running client instance

    never patched, a new lockfile means a new Connection
    """
    http: aiohttp.ClientSession
    base_url: str
    websocket_url: str
    handshake: Handshake
    process: ProcessInfo
    ssl_context: Optional[ssl.SSLContext] = None

    @property
    def port(self) -> int:
        return self.handshake.port

    def url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url + path

    def websocket(self):
        return websocket_connect(
            self.websocket_url,
            ssl=self.ssl_context,
            additional_headers={"Authorization": self.handshake.authorization},
        )

    async def close(self):
        if not self.http.closed:
            await self.http.close()
            logging.debug(f"Closed HTTP client for port {self.port}")


def default_headers(handshake: Handshake) -> dict:
    return {
        "Authorization": handshake.authorization,
        "Accept": "*/*",
    }


def load_certificate(path: Union[str, Path]) -> bytes:
    try:
        with open(path, "rb") as certificate_file:
            pem = certificate_file.read()
    except OSError as e:
        raise TlsSetupFailed(f"Could not open certificate {path}: {e}") from e

    try:
        certificate = x509.load_pem_x509_certificate(pem)
    except ValueError as e:
        raise TlsSetupFailed(f"Certificate {path} is not a PEM certificate") from e
    logging.debug(f"Loaded certificate {certificate.subject.rfc4514_string()}")
    return pem


def create_ssl_context(pem: bytes) -> ssl.SSLContext:
    try:
        context = ssl.create_default_context(cadata=pem.decode("ascii"))
    except (ssl.SSLError, ValueError) as e:
        raise TlsSetupFailed(f"Could not trust certificate: {e}") from e
    # the loopback certificate carries no subject alt name for 127.0.0.1 or localhost
    context.check_hostname = False
    context.verify_mode = ssl.CERT_REQUIRED
    return context


class ConnectionBuilder:

    def __init__(self, certificate: Union[str, Path] = DEFAULT_CERTIFICATE):
        self._certificate = Path(certificate)
        self._pem: Optional[bytes] = None

    def ssl_context(self) -> ssl.SSLContext:
        if self._pem is None:
            self._pem = load_certificate(self._certificate)
        return create_ssl_context(self._pem)

    def build(self, process: ProcessInfo, handshake: Handshake) -> Connection:
        """
        configure trust and headers for ``handshake``, no request is made here
        """
        context = self.ssl_context()
        try:
            http = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(ssl=context),
                headers=default_headers(handshake),
            )
        except (RuntimeError, ValueError, TypeError) as e:
            raise ClientBuildFailed(f"Could not create HTTP client: {e}") from e

        return Connection(
            http=http,
            base_url=f"https://127.0.0.1:{handshake.port}",
            websocket_url=f"wss://localhost:{handshake.port}/",
            handshake=handshake,
            process=process,
            ssl_context=context,
        )
