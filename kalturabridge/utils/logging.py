"""Logging utilities module."""

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import ClassVar

import colorama
from colorama import Fore, Style

from kalturabridge.utils.terminal import supports_color

__all__ = ["CleanFormatter", "ColorFormatter", "Logger", "get_logger"]

# $$'value'$$ highlights a value, $${key: value}$$ marks auxiliary context
QUOTED_PATTERN = re.compile(r"\$\$'((?:[^']|'(?!\$\$))*)'\$\$")
BRACED_PATTERN = re.compile(r"\$\$\{(.*?)\}\$\$")

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColorFormatter(logging.Formatter):
    """Formatter that renders log markers and levels with ANSI colors.

    Color Scheme:
        DEBUG: Cyan
        INFO: Green
        SUCCESS: Bright Green
        WARNING: Yellow
        ERROR: Red
        CRITICAL: Bright Red
        Quoted values: Light Blue (e.g., $$'0_abcd1234'$$)
        Braced values: Dimmed (e.g., $${profile_id: 12}$$)
    """

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "SUCCESS": Fore.GREEN + Style.BRIGHT,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Formats a log record with ANSI color codes.

        The record is restored to its original state afterwards so that other
        handlers see the unmodified message.
        """
        orig_msg, orig_levelname = record.msg, record.levelname
        color = self.COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname}{Style.RESET_ALL}"

        if isinstance(record.msg, str):
            msg = QUOTED_PATTERN.sub(
                f"{Fore.LIGHTBLUE_EX}'\\1'{Style.RESET_ALL}", record.msg
            )
            record.msg = BRACED_PATTERN.sub(
                f"{Style.DIM}{{\\1}}{Style.RESET_ALL}", msg
            )

        try:
            return super().format(record)
        finally:
            record.msg, record.levelname = orig_msg, orig_levelname


class CleanFormatter(logging.Formatter):
    """Formatter that strips the color markers, used for file output."""

    def format(self, record: logging.LogRecord) -> str:
        if not isinstance(record.msg, str):
            return super().format(record)

        orig_msg = record.msg
        record.msg = BRACED_PATTERN.sub("{\\1}", QUOTED_PATTERN.sub("'\\1'", orig_msg))
        try:
            return super().format(record)
        finally:
            record.msg = orig_msg


class Logger(logging.Logger):
    """Project logger with a SUCCESS level and automatic class-name prefixes.

    When a logging call is made from inside a method, the message is prefixed
    with the owning class name, so ``log.error("boom")`` inside
    ``MediaClient.remove`` is emitted as ``"MediaClient: boom"``.
    """

    SUCCESS = logging.INFO + 5

    def __init__(self, name: str, level: int = logging.NOTSET) -> None:
        super().__init__(name, level)
        if logging.getLevelName(self.SUCCESS) != "SUCCESS":
            logging.addLevelName(self.SUCCESS, "SUCCESS")

    def _log(
        self,
        level,
        msg,
        args,
        exc_info=None,
        extra=None,
        stack_info=False,
        stacklevel=1,
    ):
        # Frame 0 is _log, frame 1 the public logging method, frame 2 the caller
        try:
            caller_locals = sys._getframe(2).f_locals
            owner = None
            if "self" in caller_locals and not isinstance(
                caller_locals["self"], logging.Logger
            ):
                owner = type(caller_locals["self"]).__name__
            elif isinstance(caller_locals.get("cls"), type):
                owner = caller_locals["cls"].__name__

            if owner and isinstance(msg, str) and not msg.startswith(f"{owner}:"):
                msg = f"{owner}: {msg}"
        except (ValueError, KeyError, AttributeError):
            pass

        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def setLevel(self, level) -> None:  # noqa: N802
        """Set the level and drop cached ``isEnabledFor`` answers.

        The logging manager only clears the caches of loggers it created, so
        a directly constructed ``Logger`` would otherwise keep stale results.
        """
        super().setLevel(level)
        self._cache.clear()

    def success(self, msg, *args, **kwargs) -> None:
        """Log a message with SUCCESS level."""
        if self.isEnabledFor(self.SUCCESS):
            self._log(self.SUCCESS, msg, args, **kwargs)

    def setup(self, log_level: str, log_dir: str | Path | None = None) -> None:
        """Configure console output and, when a directory is given, a log file.

        Args:
            log_level (str): Logging level name ('DEBUG', 'INFO', 'SUCCESS', ...)
            log_dir (str | Path | None): Directory for the rotating log file.
        """
        level_name = str(log_level).upper()
        level = self.SUCCESS if level_name == "SUCCESS" else getattr(logging, level_name)
        self.setLevel(level)

        for handler in self.handlers[:]:
            self.removeHandler(handler)
            handler.close()

        if level <= logging.DEBUG:
            log_format = (
                "%(asctime)s - %(name)s - %(levelname)s\t%(filename)s:%(lineno)d\t"
                "%(message)s"
            )
        else:
            log_format = "%(asctime)s - %(name)s - %(levelname)s\t%(message)s"

        use_color = False
        try:
            if supports_color():
                colorama.just_fix_windows_console()
                use_color = True
        except (AttributeError, OSError):
            use_color = False

        formatter_cls = ColorFormatter if use_color else CleanFormatter
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter_cls(log_format, datefmt=LOG_DATE_FORMAT))
        console_handler.setLevel(level)
        self.addHandler(console_handler)

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path / f"{self.name}.log",
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(CleanFormatter(log_format, datefmt=LOG_DATE_FORMAT))
            file_handler.setLevel(level)
            self.addHandler(file_handler)


logging.setLoggerClass(Logger)


def get_logger(
    log_name: str = "KalturaBridge",
    log_level: str = "INFO",
    log_dir: str | Path | None = None,
) -> Logger:
    """Get a configured instance of Logger.

    Args:
        log_name (str): Name of the logger and base name of its log file.
        log_level (str): Logging level. Defaults to "INFO".
        log_dir (str | Path | None): Directory where log files will be stored.

    Returns:
        Logger: Configured logger instance
    """
    logger = logging.getLogger(log_name)
    if not isinstance(logger, Logger):
        # Created before this module set the logger class
        logger = Logger(log_name)

    logger.setup(log_level, log_dir)
    return logger
