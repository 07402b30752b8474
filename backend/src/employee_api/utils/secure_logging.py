"""Database error logging that keeps employee data out of production logs.

Constraint violations from PostgreSQL echo the offending row values
(``Key (email)=(ana@empresa.com) already exists``). Outside debug mode
those values are masked before the message is logged.
"""

import logging
import re

from employee_api.config import get_settings

_KEY_VALUES = re.compile(r"=\(([^)]*)\)")
_EMAIL = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
_MAX_LENGTH = 200


def redact_database_message(message: str) -> str:
    """Mask row values and email addresses in a driver error message."""
    message = _KEY_VALUES.sub("=([REDACTED])", message)
    message = _EMAIL.sub("[EMAIL]", message)
    if len(message) > _MAX_LENGTH:
        message = message[: _MAX_LENGTH - 3] + "..."
    return message


def log_error(logger: logging.Logger, message: str, error: Exception) -> None:
    """Log a database error, in full only when debugging.

    SQLAlchemy wraps driver errors; the driver's own message is the one
    that names the constraint, so it is preferred when present.
    """
    if get_settings().debug:
        logger.error("%s: %s", message, error, exc_info=error)
        return

    cause = getattr(error, "orig", None) or error
    logger.error("%s: %s: %s", message, type(cause).__name__, redact_database_message(str(cause)))
