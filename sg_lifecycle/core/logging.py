"""
Logging Configuration Module
============================

Centralized logging setup for sg-lifecycle.

Security group operations log one line per lifecycle step ("creating",
"created", "deleting", "deleted") followed by ``key=value`` pairs naming
the resources involved, so the output stays greppable whether it goes to
the Rich console handler or to a plain log file.

Functions
---------
setup_logging
    Configure application-wide logging.
kv
    Render keyword arguments as ``key=value`` pairs.

Example
-------
>>> import logging
>>> from sg_lifecycle.core.logging import setup_logging, kv
>>>
>>> setup_logging(level="INFO", log_file="sg-lifecycle.log")
>>> logger = logging.getLogger(__name__)
>>> logger.info("deleting securityGroup %s", kv(securityGroupID="sg-123"))

See Also
--------
rich.logging : Rich library's logging handler.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty SDK loggers kept at WARNING unless asked otherwise
NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def _coerce_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configure application-wide logging.

    Installs a Rich console handler on the root logger (replacing any
    existing handlers) and, optionally, a file handler.

    Parameters
    ----------
    level : str or int, default="INFO"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_file : str, optional
        Path to log file. If provided, logs are also written there.
    rich_tracebacks : bool, default=True
        Whether to use Rich for exception tracebacks.
    console : Console, optional
        Rich Console instance. Defaults to a stderr console.
    quiet_loggers : iterable of str
        Logger names pinned to WARNING.

    Examples
    --------
    >>> setup_logging(level="DEBUG")
    >>> setup_logging(level="INFO", log_file="sg-lifecycle.log")
    """
    level = _coerce_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured: level=%s, file=%s",
        logging.getLevelName(level),
        log_file or "None",
    )


def kv(**fields: Any) -> str:
    """
    Render keyword arguments as space separated ``key=value`` pairs.

    Example
    -------
    >>> kv(resourceID="web/sg", securityGroupID="sg-123")
    'resourceID=web/sg securityGroupID=sg-123'
    """
    return " ".join(f"{key}={value}" for key, value in fields.items())
