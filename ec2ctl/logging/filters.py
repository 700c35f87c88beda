"""Routing of log records between stdout and stderr."""

import logging
import sys

from ec2ctl.logging.formatters import StreamFormatter

QUIET_LOGGERS = ("botocore", "boto3", "urllib3")


class StreamRoutingFilter(logging.Filter):
    """Pass only the records that belong on one output stream.

    Listing output on stdout is data (often piped into other tools), so log
    records go to stderr unless they are tagged ``extra={"stream": "stdout"}``.

    Parameters
    ----------
    stream : str
        ``"stdout"`` or ``"stderr"``
    """

    def __init__(self, stream: str) -> None:
        super().__init__()

        if stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout' or 'stderr', got '{stream}'")

        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "stream", "stderr") == self.stream


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Install stdout/stderr handlers on the root logger.

    Parameters
    ----------
    level : str | int
        Root log level (name or number)
    """
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logging.basicConfig(
        level=level,
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
