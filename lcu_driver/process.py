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
import logging
import sys
from pathlib import Path
from typing import Optional

from lcu_driver.errors import ProcessNotFound, PrefixNotFound

"""
Finding the running client and its launch arguments.

Every platform lists processes differently, but all locators hand back the same ProcessInfo.
"""


class ArgumentStyle:
    """
    how a platform joins the arguments of a command line
    """

    def value(self, command_line: str, prefix: str) -> Optional[str]:
        return None

    @staticmethod
    def _match(token: str, prefix: str) -> Optional[str]:
        token = token.strip().strip('"').lstrip("-")
        if token.startswith(prefix):
            return token[len(prefix):].strip().strip('"')
        return None


class SpaceDelimitedArguments(ArgumentStyle):
    """
    ``/path/LeagueClientUx --region=EUW --install-directory=C:\\Riot Games\\League of Legends``

    values may contain spaces, so tokens are split on `` --`` rather than on whitespace
    """

    def value(self, command_line: str, prefix: str) -> Optional[str]:
        prefix = prefix.lstrip("-")
        for token in command_line.split(" --"):
            found = self._match(token, prefix)
            if found is not None:
                return found
        return None


class QuotedArguments(SpaceDelimitedArguments):
    """
    ``"C:/Riot Games/LeagueClientUx.exe" "--region=EUW" "--install-directory=C:\\Riot Games"``

    wmic keeps the quoting of the launch, which may cover some arguments or none, so quotes are
    dropped word by word before reading the line space delimited
    """

    def value(self, command_line: str, prefix: str) -> Optional[str]:
        unquoted = " ".join(word.strip('"') for word in command_line.split(" "))
        return super(QuotedArguments, self).value(unquoted, prefix)


@dataclasses.dataclass(frozen=True)
class ProcessInfo:
    command_line: str
    install_directory: Path
    arguments: ArgumentStyle = dataclasses.field(default_factory=SpaceDelimitedArguments, compare=False, repr=False)

    def argument(self, prefix: str) -> Optional[str]:
        return self.arguments.value(self.command_line, prefix)


class ProcessLocator:
    arguments: ArgumentStyle = SpaceDelimitedArguments()

    def __init__(self, executable: str = "LeagueClientUx", install_argument: str = "install-directory="):
        self._executable = executable
        self._install_argument = install_argument.lstrip("-")

    async def locate(self) -> ProcessInfo:
        command_line = await self.find_command_line()
        return self.process_info(command_line)

    async def find_command_line(self) -> str:
        raise NotImplementedError

    def process_info(self, command_line: str) -> ProcessInfo:
        install_directory = self.arguments.value(command_line, self._install_argument)
        if not install_directory:
            raise ProcessNotFound(f"No --{self._install_argument} argument in {self._executable} command line")
        return ProcessInfo(command_line.strip(), Path(install_directory), self.arguments)

    async def _run(self, *command: str) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ProcessNotFound(f"Could not run {command[0]}: {e}") from e
        stdout, _ = await process.communicate()
        if process.returncode != 0:
            raise ProcessNotFound(f"{command[0]} exited with {process.returncode}")
        return stdout.decode("utf-8", errors="replace")


class WmicProcessLocator(ProcessLocator):
    arguments = QuotedArguments()

    async def find_command_line(self) -> str:
        output = await self._run(
            "cmd", "/c", "WMIC", "PROCESS", "WHERE", f"name='{self._executable}.exe'", "GET", "commandline"
        )
        # first line is the "CommandLine" column header
        for line in output.splitlines()[1:]:
            line = line.strip()
            if self._executable in line and f"--{self._install_argument}" in line:
                return line
        raise ProcessNotFound()


class PsProcessLocator(ProcessLocator):

    async def find_command_line(self) -> str:
        output = await self._run("ps", "x", "-o", "args")
        for line in output.splitlines():
            if self._executable in line and f"--{self._install_argument}" in line:
                return line
        raise ProcessNotFound()


class LutrisProcessLocator(PsProcessLocator):
    """
    client running under wine through lutris

    the install directory in the command line is a windows path inside the wine prefix, so it is
    remapped onto the prefix lutris reports for ``identifier``
    """

    def __init__(self, executable: str = "LeagueClientUx", install_argument: str = "install-directory=",
                 identifier: str = "league-of-legends"):
        super(LutrisProcessLocator, self).__init__(executable, install_argument)
        self._identifier = identifier

    async def locate(self) -> ProcessInfo:
        process = await super(LutrisProcessLocator, self).locate()
        prefix = await self.find_prefix()
        install_directory = wine_path(prefix, process.argument(self._install_argument))
        if not install_directory.exists():
            raise PrefixNotFound(f"{install_directory} does not exist")
        logging.debug(f"Remapped install directory to {install_directory}")
        return dataclasses.replace(process, install_directory=install_directory)

    async def find_prefix(self) -> Path:
        try:
            output = await self._run("lutris", "-l")
        except ProcessNotFound as e:
            raise PrefixNotFound(str(e)) from e

        for line in output.splitlines():
            fields = [field.strip() for field in line.split("|")]
            if len(fields) > 1 and self._identifier in fields:
                return Path(fields[-1])
        raise PrefixNotFound(f"lutris has no game named {self._identifier}")


def wine_path(prefix: Path, windows_path: str) -> Path:
    path = windows_path.replace("\\", "/")
    drive, separator, rest = path.partition(":/")
    if separator and len(drive) == 1:
        path = f"drive_{drive.lower()}/{rest}"
    return prefix / path


def default_locator(settings) -> ProcessLocator:
    if sys.platform.startswith("win"):
        return WmicProcessLocator(settings.executable, settings.install_directory_argument)
    if sys.platform == "darwin":
        return PsProcessLocator(settings.executable, settings.install_directory_argument)
    return LutrisProcessLocator(settings.executable, settings.install_directory_argument,
                                settings.lutris_identifier)
