"""
Error handling utilities for Wealth Manager.

This module provides centralized error handling and logging for the calculator
application. It includes custom exception classes and decorators for consistent
error reporting across the codebase.

Formula functions in ``wealth_mngr.core.formulas`` are not wrapped; they
return 0 or an identity value for missing inputs instead of raising.
"""

import os
import traceback
import logging
from functools import wraps
import sys
from datetime import datetime

# Configure logging; the file handler can be disabled with WEALTH_MNGR_NO_LOG_FILE
_handlers = [logging.StreamHandler(sys.stdout)]
if not os.getenv("WEALTH_MNGR_NO_LOG_FILE"):
    _handlers.append(logging.FileHandler(os.getenv("WEALTH_MNGR_LOG_FILE", "wealth_mngr.log")))

logging.basicConfig(
    level=os.getenv("WEALTH_MNGR_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=_handlers,
)

logger = logging.getLogger(__name__)


class WealthMngrError(Exception):
    """Base exception class for Wealth Manager errors"""

    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        self.timestamp = datetime.now()
        super().__init__(self.message)


class StorageError(WealthMngrError):
    """Raised when saved calculations or preferences cannot be persisted"""


def error_handler(func):
    """Decorator for handling errors and providing detailed information"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except WealthMngrError:
            raise
        except Exception as e:
            exc_type, exc_value, exc_tb = sys.exc_info()
            tb = traceback.extract_tb(exc_tb)

            # Get the most relevant parts of the traceback
            error_location = f"{tb[-1].filename}:{tb[-1].lineno}"
            error_function = tb[-1].name

            error_details = {
                "error_type": exc_type.__name__,
                "location": error_location,
                "function": error_function,
                "arguments": {"args": str(args), "kwargs": str(kwargs)},
                "traceback": traceback.format_exc(),
            }

            logger.error(f"Error in {error_location} - {error_function}: {str(e)}")
            logger.debug(f"Detailed error information: {error_details}")

            raise WealthMngrError(
                f"Error in {error_function} at {error_location}: {str(e)}",
                error_details,
            )

    return wrapper
