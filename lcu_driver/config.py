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
from pathlib import Path

import aiofiles
import tomlkit
import tomlkit.exceptions
import voluptuous.error
from voluptuous import Schema, Optional, All, Range, Length, Coerce


class ConfigurationLoadError(Exception): pass


@dataclasses.dataclass(frozen=True)
class Settings:
    # [client]
    executable: str = "LeagueClientUx"
    install_directory_argument: str = "install-directory="
    lockfile: str = "lockfile"
    username: str = "riot"
    certificate: Path = Path("riotgames.pem")
    lutris_identifier: str = "league-of-legends"
    # [session]
    poll_interval: float = 1.0
    retry_interval: float = 1.0
    retry_backoff: float = 1.0
    max_retry_interval: float = 30.0
    probe_path: str = "/riotclient/region-locale"


def _path_validator(path: str) -> Path:
    return Path(path).expanduser()


def _probe_path_validator(path: str) -> str:
    if not path.startswith("/"):
        raise voluptuous.error.Invalid(message="Probe path must start with /")
    return path


positive_seconds = All(Coerce(float), Range(min=0, min_included=False))

config_schema = Schema({
    Optional('client'): {
        Optional('executable'): All(str, Length(min=1)),
        Optional('install_directory_argument'): All(str, Length(min=1)),
        Optional('lockfile'): All(str, Length(min=1)),
        Optional('username'): All(str, Length(min=1)),
        Optional('certificate'): All(str, Length(min=1), _path_validator),
        Optional('lutris_identifier'): All(str, Length(min=1)),
    },
    Optional('session'): {
        Optional('poll_interval'): positive_seconds,
        Optional('retry_interval'): positive_seconds,
        Optional('retry_backoff'): All(Coerce(float), Range(min=1.0)),
        Optional('max_retry_interval'): positive_seconds,
        Optional('probe_path'): All(str, _probe_path_validator),
    },
})


def settings_from(document: dict) -> Settings:
    validated = config_schema(document)
    values = {}
    values.update(validated.get('client', {}))
    values.update(validated.get('session', {}))
    return Settings(**values)


class Config:
    config: tomlkit.TOMLDocument
    settings: Settings = Settings()
    config_opened: bool = False

    def __init__(self, config_location: Path):
        self.config_location = Path(config_location)

    async def initialize(self) -> Settings:
        try:
            async with aiofiles.open(self.config_location, 'r') as config_file:
                file_data = await config_file.read()
                self.config = tomlkit.parse(file_data)
                logging.debug("Loaded Configuration without toml format error")
                logging.debug("Validating against Schema.")
                self.settings = settings_from(self.config.unwrap())
                self.config_opened = True
                logging.debug("Validated against Schema.")
        except FileNotFoundError as e:
            logging.exception(e)
            logging.warning(f"Could not find {self.config_location}.")
            raise ConfigurationLoadError() from e
        except IOError as e:
            logging.exception(e)
            logging.warning(f"Could not open file {self.config_location}")
            raise ConfigurationLoadError() from e
        except tomlkit.exceptions.ParseError as e:
            logging.exception(e)
            logging.warning(f"Configuration in {self.config_location} is invalid")
            raise ConfigurationLoadError() from e
        except voluptuous.error.MultipleInvalid as e:
            logging.exception(e)
            logging.warning(f"Configuration in {self.config_location} does not match expected format")
            logging.warning(f"Issue configuration item: {e.path}")
            raise ConfigurationLoadError() from e

        logging.info(f"Configuration loaded.")
        return self.settings
