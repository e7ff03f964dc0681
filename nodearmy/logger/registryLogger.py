import itertools
import logging
import time
from typing import Optional

_INSTANCES = itertools.count(1)


class RegistryLogger:
    """Logger for registry call processing.

    Every entry is tagged with an emoji marker and forwarded to a stdlib
    logger of its own, ``nodearmy.<name>.<n>``, so that level and file handler
    stay private to the instance while records still propagate to
    ``nodearmy.<name>``. When *log_file* is given the entries are also appended
    to that file.
    """

    def __init__(self, name: str, log_file: Optional[str] = None, level: str = "INFO") -> None:
        """Initialize the registry logger.

        Args:
            name: Name of the registry instance (used in the logger name)
            log_file: Optional log file path
            level: Minimum level name, e.g. ``"DEBUG"``
        """
        self.name = name
        self.log_file = log_file
        self._logger = logging.getLogger(f"nodearmy.{name}").getChild(str(next(_INSTANCES)))
        self._logger.setLevel(level.upper())
        self._file_handler: Optional[logging.FileHandler] = None

        if log_file:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter("[%(asctime)s] %(name)s: %(message)s"))
            self._logger.addHandler(handler)
            self._file_handler = handler
            self._logger.info(f"=== {self.name} Registry Log ===")
            self._logger.info(f"Started at: {time.strftime('%Y-%m-%d %H:%M:%S')}")

    def log(self, message: str, level: int = logging.INFO) -> None:
        """Log a message at the given stdlib level."""
        self._logger.log(level, message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.log(f"❌ ERROR: {message}", logging.ERROR)

    def info(self, message: str) -> None:
        """Log an info message."""
        self.log(f"ℹ️  INFO: {message}")

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.log(f"⚠️  WARNING: {message}", logging.WARNING)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.log(f"🐛 DEBUG: {message}", logging.DEBUG)

    def success(self, message: str) -> None:
        """Log a success message."""
        self.log(f"✅ SUCCESS: {message}")

    def transfer(self, message: str) -> None:
        """Log a fee transfer message."""
        self.log(f"🔄 TRANSFER: {message}")

    def merit(self, message: str) -> None:
        """Log a merit-related message."""
        self.log(f"🏅 MERIT: {message}")

    def close(self) -> None:
        """Detach and close the file handler, if any."""
        if self._file_handler is not None:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
