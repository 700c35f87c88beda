"""Provider-agnostic exceptions raised by cloud provider adapters."""

from __future__ import annotations

NOT_READY_CODE = "ResourceNotReady"
"""Error code carried by the non-fatal "target state not reached yet" signal."""


class ProviderError(Exception):
    """Base class for all provider errors."""


class ProviderCredentialsError(ProviderError):
    """Raised when provider credentials are missing or incomplete."""


class ProviderConnectionError(ProviderError):
    """Raised when the provider endpoint cannot be reached."""


class ProviderAPIError(ProviderError):
    """Raised when a provider API call fails.

    Parameters
    ----------
    message : str
        Human readable error message
    error_code : str | None
        Provider error code (e.g. ``UnauthorizedOperation``)
    """

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class ResourceNotReadyError(ProviderAPIError):
    """Raised when a resource has not reached the requested state yet."""

    def __init__(self, message: str = "Resource is not ready") -> None:
        super().__init__(message, error_code=NOT_READY_CODE)


def is_not_ready(error: BaseException) -> bool:
    """Return True if ``error`` is the non-fatal not-ready signal."""
    return getattr(error, "error_code", None) == NOT_READY_CODE
