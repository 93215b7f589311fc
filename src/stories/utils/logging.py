"""
Logging setup shared by the CLI and the web server.

Modules log through ``logging.getLogger(__name__)``; this only configures
the root handler once per process.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LEVELS: dict[str, int] = {
    "minimal": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.INFO,
}


def resolve_level(level_name: str = "normal", debug: bool = False) -> int:
    """
    Map an execution log level name to a logging level.

    Unknown names fall back to WARNING.

    Example:
        >>> resolve_level("verbose")
        20
        >>> resolve_level("minimal", debug=True)
        10
    """
    if debug:
        return logging.DEBUG
    return LEVELS.get(level_name, logging.WARNING)


def setup_logging(level_name: str = "normal", debug: bool = False) -> None:
    """
    Configure root logging on stderr.

    Args:
        level_name: One of minimal, normal, verbose
        debug: If True, force DEBUG regardless of level_name
    """
    level = resolve_level(level_name, debug)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    # basicConfig is a no-op once a handler exists; keep the level in sync
    logging.getLogger().setLevel(level)
