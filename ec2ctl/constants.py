"""Global constants for ec2ctl.

This module contains application-wide constants shared by the listing,
rendering and waiting commands.
"""

from enum import Enum

DEFAULT_REGION = "us-east-1"
"""Fallback region when neither configuration nor the ambient SDK setup name one."""

DEFAULT_AWAIT_TIMEOUT_SECONDS = 300
"""Default time budget for ``await`` before the deadline fires."""

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
"""Pause between two state checks while awaiting an instance state."""

WAITER_DELAY_SECONDS = 15
"""Delay between attempts of the blocking (bare) boto3 waiter."""

WAITER_MAX_ATTEMPTS = 40
"""Maximum attempts of the blocking (bare) boto3 waiter."""

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
SECONDS_PER_MONTH = 30 * SECONDS_PER_DAY
SECONDS_PER_YEAR = 365 * SECONDS_PER_DAY

NAME_TAG = "Name"
"""Tag key promoted to the ``name`` attribute of a record."""

MISSING_VALUE = "--"
"""Placeholder rendered for absent values in plain output."""

EXIT_SUCCESS = 0
"""Exit code indicating successful program completion."""

EXIT_ERROR = 1
"""Exit code for remote failures, timeouts and fatal poll errors."""

EXIT_CONFIG_ERROR = 2
"""Exit code for invalid configuration or invalid command-line input."""


class InstanceState(str, Enum):
    """EC2 instance lifecycle states."""

    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    STOPPING = "stopping"
    STOPPED = "stopped"
    TERMINATED = "terminated"


AWAIT_STATES = {
    InstanceState.RUNNING.value: "instance_running",
    InstanceState.STOPPED.value: "instance_stopped",
    InstanceState.TERMINATED.value: "instance_terminated",
}
"""Target states accepted by ``await`` mapped to boto3 waiter names."""

DEBUG_ENV_VAR = "EC2CTL_DEBUG"
"""Set to ``1`` to re-raise errors with tracebacks and log at DEBUG level."""

LOG_LEVEL_ENV_VAR = "EC2CTL_LOG_LEVEL"
"""Overrides the configured log level."""
