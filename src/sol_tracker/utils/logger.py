import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional, Union
import os

PACKAGE_LOGGER = "sol_tracker"

_DEFAULT_LEVEL = os.getenv("SOL_TRACKER_LOG_LEVEL", "DEBUG").upper()
_DEFAULT_MAX_MB = int(os.getenv("SOL_TRACKER_LOG_MAX_MB", "5"))
_DEFAULT_BACKUPS = int(os.getenv("SOL_TRACKER_LOG_BACKUPS", "3"))


class AnalyzerLogger:
    """
    Logger for analysis runs.

    Names live under the ``sol_tracker`` hierarchy so the engine modules'
    ``logging.getLogger(__name__)`` loggers propagate to the handlers
    configured here. Handlers are attached once per name.
    """

    def __init__(self,
                 name: str = PACKAGE_LOGGER,
                 log_dir: Optional[str] = None,
                 console_output: bool = False,
                 level: Union[str, int] = _DEFAULT_LEVEL):
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
            name = f"{PACKAGE_LOGGER}.{name}"
        self.name = name
        self.log_dir = log_dir

        self.logger = logging.getLogger(name)
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.DEBUG)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            self._setup_handlers(console_output)

    def _setup_handlers(self, console_output: bool):
        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
            self.logger.addHandler(console_handler)

        # One file per run, rotated if a long wallet scan grows it past the cap
        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            file_handler = RotatingFileHandler(
                os.path.join(self.log_dir, f'analysis_{timestamp}.log'),
                maxBytes=_DEFAULT_MAX_MB * 1024 * 1024,
                backupCount=_DEFAULT_BACKUPS,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            self.logger.addHandler(file_handler)

    def child(self, suffix: str) -> logging.Logger:
        """Logger for a component, propagating to this one's handlers"""
        return self.logger.getChild(suffix)

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)
