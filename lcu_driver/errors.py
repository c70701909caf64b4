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


class LcuDriverError(Exception):
    message = "LCU driver error"

    def __init__(self, message: str = None):
        super(LcuDriverError, self).__init__(message if message is not None else self.message)


class ProcessNotFound(LcuDriverError):
    message = "Failed to find LeagueClientUx process"


class PrefixNotFound(LcuDriverError):
    message = "Failed to find the wine prefix of the client"


class HandshakeUnreadable(LcuDriverError):
    message = "Failed to read lockfile"


class HandshakeMalformed(LcuDriverError):
    message = "Failed to parse lockfile"


class TlsSetupFailed(LcuDriverError):
    message = "Failed to set up TLS trust for the client certificate"


class ClientBuildFailed(LcuDriverError):
    message = "Failed to build the HTTP client"


class RequestSendFailed(LcuDriverError):
    message = "Failed to send request"


class ResponseUnreadable(LcuDriverError):
    message = "Failed to read response"


class ApiError(LcuDriverError):
    """
    non-success response from the client api, ``payload`` is the decoded error body
    """

    def __init__(self, message: str = None, payload=None):
        super(ApiError, self).__init__(message)
        self.payload = payload


class NoActiveDelegate(ApiError):
    message = "No active delegate was found"


class UnknownApiError(ApiError):
    pass


class OtherError(LcuDriverError):
    pass


class DriverClosed(OtherError):
    message = "Driver is closed"


# expected while the client is absent or restarting, retried by the supervisor
RECOVERABLE_ERRORS = (
    ProcessNotFound,
    PrefixNotFound,
    HandshakeUnreadable,
    HandshakeMalformed,
    TlsSetupFailed,
    ClientBuildFailed,
)

# raised by the readiness probe while the client is still starting, also retried
PROBE_ERRORS = (
    RequestSendFailed,
    ResponseUnreadable,
    ApiError,
)
