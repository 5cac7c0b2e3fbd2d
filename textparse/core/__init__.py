"""
Core infrastructure shared by every textparse package: settings, logging
and the exception hierarchy.
"""

from .config import Settings, get_settings
from .errors import ErrorKind, GradeError, InvalidArgumentError, JSONError, ParseError
from .logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "ErrorKind",
    "ParseError",
    "JSONError",
    "GradeError",
    "InvalidArgumentError",
    "get_logger",
    "setup_logging",
]
