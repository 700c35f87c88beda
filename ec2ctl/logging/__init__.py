"""Logging setup helpers for the ec2ctl CLI."""

from ec2ctl.logging.formatters import StreamFormatter
from ec2ctl.logging.filters import StreamRoutingFilter, configure_logging

__all__ = ["StreamFormatter", "StreamRoutingFilter", "configure_logging"]
