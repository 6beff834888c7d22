"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import HomeCareError, InvalidDateError

__all__ = [
    "get_logger",
    "setup_logging",
    "HomeCareError",
    "InvalidDateError",
]
