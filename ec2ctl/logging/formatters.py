"""Logging formatters for CLI output."""

import logging


class StreamFormatter(logging.Formatter):
    """Logging formatter that prefixes non-INFO records with their level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a level prefix when relevant.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message, e.g. ``warning: region not set``
        """
        msg = super().format(record)

        if record.levelno == logging.INFO:
            return msg

        return f"{record.levelname.lower()}: {msg}"
