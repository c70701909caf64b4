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

from lcu_driver.config import Config, ConfigurationLoadError, Settings
from lcu_driver.connection import Connection, ConnectionBuilder
from lcu_driver.dispatcher import ApiErrorPayload, EndpointRequest, Method
from lcu_driver.driver import LcuDriver
from lcu_driver.errors import (
    ApiError,
    ClientBuildFailed,
    DriverClosed,
    HandshakeMalformed,
    HandshakeUnreadable,
    LcuDriverError,
    NoActiveDelegate,
    OtherError,
    PrefixNotFound,
    ProcessNotFound,
    PROBE_ERRORS,
    RECOVERABLE_ERRORS,
    RequestSendFailed,
    ResponseUnreadable,
    TlsSetupFailed,
    UnknownApiError,
)
from lcu_driver.lockfile import Handshake
from lcu_driver.process import ProcessInfo, ProcessLocator
from lcu_driver.session import SupervisorState

__all__ = [
    "ApiError",
    "ApiErrorPayload",
    "ClientBuildFailed",
    "Config",
    "ConfigurationLoadError",
    "Connection",
    "ConnectionBuilder",
    "DriverClosed",
    "EndpointRequest",
    "Handshake",
    "HandshakeMalformed",
    "HandshakeUnreadable",
    "LcuDriver",
    "LcuDriverError",
    "Method",
    "NoActiveDelegate",
    "OtherError",
    "PrefixNotFound",
    "ProcessInfo",
    "ProcessLocator",
    "ProcessNotFound",
    "PROBE_ERRORS",
    "RECOVERABLE_ERRORS",
    "RequestSendFailed",
    "ResponseUnreadable",
    "Settings",
    "SupervisorState",
    "TlsSetupFailed",
    "UnknownApiError",
]
