"""Utility functions for ec2ctl."""

import logging
import sys
from datetime import datetime
from typing import Any

from ec2ctl.constants import (
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SECONDS_PER_MONTH,
    SECONDS_PER_YEAR,
)

_AGE_UNITS = (
    (SECONDS_PER_YEAR, "year"),
    (SECONDS_PER_MONTH, "month"),
    (SECONDS_PER_DAY, "day"),
    (SECONDS_PER_HOUR, "hour"),
    (SECONDS_PER_MINUTE, "minute"),
)


def format_age(then: datetime, now: datetime) -> str:
    """Format the time elapsed between two datetimes as a human phrase.

    Values are floored to the largest whole unit, so 90 seconds is
    "1 minute" and 47 hours is "1 day".

    Parameters
    ----------
    then : datetime
        Earlier instant (timezone-aware)
    now : datetime
        Reference instant (timezone-aware)

    Returns
    -------
    str
        Phrase such as "a few seconds", "1 minute", "3 hours", "2 days"

    Raises
    ------
    ValueError
        If either datetime is naive
    """
    if then.tzinfo is None or now.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")

    seconds = max(0, int((now - then).total_seconds()))

    for unit_seconds, unit in _AGE_UNITS:
        if seconds >= unit_seconds:
            count = seconds // unit_seconds
            return f"{count} {unit}" if count == 1 else f"{count} {unit}s"

    return "a few seconds"


def format_elapsed(seconds: float) -> str:
    """Format a stopwatch reading (e.g. "4.2 s", "2 min 5.0 s")."""
    if seconds < SECONDS_PER_MINUTE:
        return f"{seconds:.1f} s"

    minutes, remainder = divmod(seconds, SECONDS_PER_MINUTE)
    return f"{int(minutes)} min {remainder:.1f} s"


def log_and_print_error(message: str, *args: Any) -> None:
    """Log error message and print to stderr.

    Parameters
    ----------
    message : str
        Error message with optional format placeholders
    *args : Any
        Format arguments for message
    """
    logging.debug(message, *args)
    formatted_msg = message % args if args else message
    print(f"Error: {formatted_msg}", file=sys.stderr)


def coerce_expression(value: Any) -> str | None:
    """Return a filter expression as a string.

    Fire parses option values as Python literals, so ``--name 42`` arrives as
    an int, ``--name a,b`` as a tuple and ``--name [1,2]`` as a list. The
    brackets of a list are put back so character classes survive.
    """
    if value is None or value == "":
        return None

    if isinstance(value, list):
        return "[" + ",".join(str(item) for item in value) + "]"

    if isinstance(value, tuple):
        return ",".join(str(item) for item in value)

    return str(value)
