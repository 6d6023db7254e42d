"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

_HTTP_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    ``level`` defaults to ``LUDEX_LOG_LEVEL`` (a level name such as ``DEBUG``), else
    INFO. HTTP client libraries never log below WARNING. Pass ``force=True`` to
    reconfigure an already configured root logger.
    """

    resolved = level if level is not None else _level_from_env()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def _level_from_env() -> int:
    name = optional_env_var("LUDEX_LOG_LEVEL")
    if name is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"LUDEX_LOG_LEVEL must be a logging level name, got {name!r}")
    return level
