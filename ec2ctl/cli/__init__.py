"""CLI argument parsing and handling."""

from __future__ import annotations

from ec2ctl.cli.parsing import build_filter_spec, parse_flag, parse_seconds

__all__ = ["build_filter_spec", "parse_flag", "parse_seconds"]
