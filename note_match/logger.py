"""Cached logger lookup for note_match.

``setup_logging`` only attaches a handler to the ``note_match`` logger, so
every logger handed out here is kept inside that tree.
"""
import logging
from typing import Dict

PACKAGE = "note_match"

_logger_cache: Dict[str, logging.Logger] = {}


def qualified_name(name: str) -> str:
    """Map a module name onto the ``note_match`` logger tree.

    ``__main__`` (a module run with ``python -m``) becomes the package logger,
    and any other name outside the tree is nested under it.
    """
    if not name or name == "__main__":
        return PACKAGE
    if name == PACKAGE or name.startswith(PACKAGE + "."):
        return name
    return f"{PACKAGE}.{name}"


def get_logger(name: str) -> logging.Logger:
    """
    Get a cached logger for the given module name.

    Args:
        name: The module name, normally ``__name__``

    Returns:
        The logger for ``qualified_name(name)``
    """
    name = qualified_name(name)
    if name not in _logger_cache:
        _logger_cache[name] = logging.getLogger(name)
    return _logger_cache[name]
