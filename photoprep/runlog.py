"""
Execution log for photoprep runs.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .constants import PROGRAM, RUN_LOG_TIMESTAMP


class RunLog:
    """Writes a per-run log file, named by start time, into the processed directory."""

    def __init__(self, directory: Path, started: Optional[datetime] = None):
        self.directory = directory
        self.started = started or datetime.now()
        self.log_path = directory / f"{PROGRAM}_{self.started.strftime(RUN_LOG_TIMESTAMP)}.log"
        self._handler: Optional[logging.Handler] = None

    def attach(self, logger: logging.Logger) -> None:
        """Configure logger to also write to the run's log file."""
        file_handler = logging.FileHandler(self.log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Ensure logger level allows DEBUG messages to reach the file handler
        logger.setLevel(logging.DEBUG)
        self._handler = file_handler

    def detach(self, logger: logging.Logger) -> None:
        """Remove and close the run's file handler."""
        if self._handler is not None:
            logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None
