"""
Logging setup shared by the server and the CLI.
"""

import logging
import os

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_CONFIGURED = False


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    try:
        return int(level)
    except (TypeError, ValueError):
        return getattr(logging, str(level).strip().upper(), logging.INFO)


def configure_logging(level: str | int | None = None, *, force: bool = False) -> None:
    """Install a basic root handler once; HOMONYMS_LOG_LEVEL sets the default level."""
    global _CONFIGURED

    if _CONFIGURED and not force:
        return

    resolved = _resolve_level(level if level is not None else os.environ.get("HOMONYMS_LOG_LEVEL"))
    logging.basicConfig(level=resolved, format=_DEFAULT_FORMAT, force=force)
    logging.getLogger("homonyms").setLevel(resolved)
    _CONFIGURED = True
