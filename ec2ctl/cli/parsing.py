"""CLI argument parsing and parameter conversion utilities."""

from __future__ import annotations

from typing import Any

from ec2ctl.models import FilterSpec
from ec2ctl.utils import coerce_expression


def parse_flag(value: Any, name: str) -> bool:
    """Parse a boolean flag that Fire may deliver as a string.

    Raises
    ------
    ValueError
        If the value is not a boolean or "true"/"false"
    """
    if isinstance(value, bool):
        return value

    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"

    raise ValueError(f"{name} must be 'true' or 'false', got: {value}")


def parse_seconds(value: Any, name: str, allow_zero: bool = True) -> float | None:
    """Parse a duration in seconds; None passes through.

    Raises
    ------
    ValueError
        If the value is not numeric, is negative, or is zero when
        ``allow_zero`` is False
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number of seconds, got: {value}")

    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number of seconds, got: {value}") from None

    if seconds < 0:
        raise ValueError(f"{name} must not be negative, got: {value}")

    if seconds == 0 and not allow_zero:
        raise ValueError(f"{name} must be greater than zero, got: {value}")

    return seconds


def build_filter_spec(
    instance_id: Any = None,
    name: Any = None,
    state: Any = None,
    private_ip: Any = None,
    public_ip: Any = None,
    ssh_key: Any = None,
    tag_key: Any = None,
    tag_value: Any = None,
    case_sensitive: Any = False,
) -> FilterSpec:
    """Build a FilterSpec from raw command-line values.

    Parameters
    ----------
    instance_id, name, state, private_ip, public_ip, ssh_key, tag_key, tag_value : Any
        Regular expressions as parsed by Fire (possibly ints or tuples)
    case_sensitive : Any
        Case sensitivity flag

    Returns
    -------
    FilterSpec
        Criteria with every expression coerced to a string
    """
    return FilterSpec(
        instance_id=coerce_expression(instance_id),
        name=coerce_expression(name),
        state=coerce_expression(state),
        private_ip=coerce_expression(private_ip),
        public_ip=coerce_expression(public_ip),
        ssh_key=coerce_expression(ssh_key),
        tag_key=coerce_expression(tag_key),
        tag_value=coerce_expression(tag_value),
        case_sensitive=parse_flag(case_sensitive, "case_sensitive"),
    )


__all__ = ["parse_flag", "parse_seconds", "build_filter_spec"]
