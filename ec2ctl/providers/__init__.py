"""Cloud provider adapters and the exceptions they raise."""

from __future__ import annotations

from ec2ctl.providers.exceptions import (
    NOT_READY_CODE,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
    ResourceNotReadyError,
    is_not_ready,
)

__all__ = [
    "NOT_READY_CODE",
    "ProviderError",
    "ProviderCredentialsError",
    "ProviderAPIError",
    "ProviderConnectionError",
    "ResourceNotReadyError",
    "is_not_ready",
]
