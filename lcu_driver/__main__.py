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
import logging
import os

from lcu_driver.config import Config, ConfigurationLoadError, Settings
from lcu_driver.driver import LcuDriver
from lcu_driver.errors import RequestSendFailed
from lcu_driver.logger import setup_logging


async def watch(driver: LcuDriver, settings: Settings):
    while True:
        try:
            async for event in driver.subscribe():
                if isinstance(event, dict):
                    logging.info(f"{event.get('eventType')} {event.get('uri')}")
        except RequestSendFailed as e:
            logging.warning(f"Websocket unavailable: {e}")
        await asyncio.sleep(settings.retry_interval)


async def main():
    logging.info("Starting lcu driver ...")

    settings = Settings()
    config_location = os.environ.get("LCU_DRIVER_CONFIG")
    if config_location:
        try:
            settings = await Config(config_location).initialize()
        except ConfigurationLoadError:
            logging.error("Could not load configuration. Exiting")
            return

    driver = await LcuDriver.connect(settings)
    async with driver:
        connection = await driver.connection()
        logging.info(f"Client live at {connection.base_url}")
        try:
            logging.info("Ctrl^C to quit")
            await watch(driver, settings)
        except asyncio.CancelledError:
            logging.info("Cancelled ...")
        finally:
            logging.info("Stopping driver ...")


if __name__ == "__main__":
    setup_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
