import asyncio
import datetime
import json
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from lcu_driver.connection import Connection
from lcu_driver.errors import ProcessNotFound
from lcu_driver.lockfile import Handshake
from lcu_driver.process import ProcessInfo, ProcessLocator


def run(coro):
    """Run a coroutine synchronously."""
    return asyncio.run(coro)


async def wait_until(predicate, timeout: float = 5.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


def write_lockfile(directory: Path, port: int, password: str = "qSxvLaMHgq17mxUKaFfSdg", pid: int = 1234) -> Path:
    path = directory / "lockfile"
    path.write_text(f"LeagueClient:{pid}:{port}:{password}:https", encoding="utf-8")
    return path


def make_certificate() -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "LoL Game Engineering Certificate Authority")])
    now = datetime.datetime.now(datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.PEM)


class FakeResponse:

    def __init__(self, status: int, body, read_error: Exception = None):
        self.status = status
        self._body = body
        self._read_error = read_error

    async def text(self):
        if self._read_error is not None:
            raise self._read_error
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class _PendingRequest:

    def __init__(self, http, method, url, headers, data):
        self._http = http
        self._call = (method, url, headers, data)

    async def __aenter__(self):
        if self._http.closed:
            raise RuntimeError("Session is closed")
        self._http.requests.append(self._call)
        await asyncio.sleep(0)
        result = self._http.responder(*self._call)
        if isinstance(result, Exception):
            raise result
        return result

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeHttp:
    """Stands in for aiohttp.ClientSession."""

    def __init__(self, responder=None):
        self.responder = responder or (lambda method, url, headers, data: FakeResponse(200, ""))
        self.requests = []
        self.closed = False

    def request(self, method, url, headers=None, data=None):
        return _PendingRequest(self, method, url, headers, data)

    async def close(self):
        self.closed = True


def make_connection(port: int = 50261, responder=None, path: Path = Path("lockfile"),
                    websocket_url: str = None) -> Connection:
    handshake = Handshake(path=path, port=port, token="dG9rZW4=", raw_contents=f"x:1:{port}:token:https")
    return Connection(
        http=FakeHttp(responder),
        base_url=f"https://127.0.0.1:{port}",
        websocket_url=websocket_url or f"wss://localhost:{port}/",
        handshake=handshake,
        process=ProcessInfo("LeagueClientUx --install-directory=/games", Path("/games")),
    )


class StubLocator(ProcessLocator):

    def __init__(self, install_directory: Path, failures: int = 0, error: Exception = None):
        super(StubLocator, self).__init__()
        self.install_directory = install_directory
        self.failures = failures
        self.error = error if error is not None else ProcessNotFound()
        self.calls = 0

    async def locate(self) -> ProcessInfo:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return ProcessInfo(f"LeagueClientUx --install-directory={self.install_directory}", self.install_directory)


def echo_responder(handshake: Handshake):
    def respond(method, url, headers, data):
        return FakeResponse(200, json.dumps({"handshake_port": handshake.port, "url": url}))
    return respond


class FakeBuilder:
    """Builds connections over FakeHttp; the first ``probe_failures`` connections fail their probe."""

    def __init__(self, probe_failures: int = 0, websocket_url: str = None):
        self.probe_failures = probe_failures
        self.websocket_url = websocket_url
        self.built = []

    def build(self, process: ProcessInfo, handshake: Handshake) -> Connection:
        if len(self.built) < self.probe_failures:
            responder = lambda method, url, headers, data: FakeResponse(
                503, json.dumps({"errorCode": "RPC_ERROR", "httpStatus": 503, "message": "Not ready"}))
        else:
            responder = echo_responder(handshake)
        connection = Connection(
            http=FakeHttp(responder),
            base_url=f"https://127.0.0.1:{handshake.port}",
            websocket_url=self.websocket_url or f"wss://localhost:{handshake.port}/",
            handshake=handshake,
            process=process,
        )
        self.built.append(connection)
        return connection
