"""
Main settings object.
"""

import logging
from typing import Literal

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.typing import FilteringBoundLogger

from .managers import FirestoreManager


class Settings(BaseSettings):
    firestore_project: str | None = None
    firestore_database: str = "(default)"

    # Set to e.g. localhost:8080 to use the Firestore emulator
    firestore_emulator_host: str | None = None

    log_level: Literal["debug", "info", "warning", "error", "critical"] = "info"

    model_config = SettingsConfigDict(env_prefix="GROUPSYNC_", env_file=".env")

    @property
    def log_level_number(self) -> int:
        match self.log_level:
            case "debug":
                return logging.DEBUG
            case "info":
                return logging.INFO
            case "warning":
                return logging.WARNING
            case "error":
                return logging.ERROR
            case "critical":
                return logging.CRITICAL
            case _:
                raise ValueError

    def manager(self) -> FirestoreManager:
        return FirestoreManager(
            project=self.firestore_project,
            database=self.firestore_database,
            emulator_host=self.firestore_emulator_host,
        )

    def logger(self) -> FilteringBoundLogger:
        """
        A structured logger that drops events below `log_level`.
        """
        return structlog.wrap_logger(
            structlog.PrintLogger(),
            wrapper_class=structlog.make_filtering_bound_logger(
                self.log_level_number
            ),
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(),
            ],
        )
