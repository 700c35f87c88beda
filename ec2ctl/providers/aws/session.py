"""Resolution of the effective AWS region."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import boto3

from ec2ctl.constants import DEFAULT_REGION

logger = logging.getLogger(__name__)


def resolve_region(
    region: str | None = None,
    session_factory: Callable[[], Any] | None = None,
) -> str:
    """Return the region ec2ctl operates in.

    Parameters
    ----------
    region : str | None
        Explicit region from the command line or configuration
    session_factory : Callable[[], Any] | None
        Factory for a boto3 session (default: ``boto3.session.Session``)

    Returns
    -------
    str
        The explicit region, else the ambient SDK region (``AWS_REGION``,
        ``AWS_DEFAULT_REGION``, ``~/.aws/config``), else ``DEFAULT_REGION``
    """
    if region:
        return region

    session = (session_factory or boto3.session.Session)()
    ambient = session.region_name

    if ambient:
        return ambient

    logger.debug("No region configured, falling back to %s", DEFAULT_REGION)
    return DEFAULT_REGION
