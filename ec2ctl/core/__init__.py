"""Core ec2ctl functionality."""

from __future__ import annotations

from ec2ctl.core.config import ConfigLoader

__all__ = ["ConfigLoader"]
