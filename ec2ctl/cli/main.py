"""CLI entry point for ec2ctl."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import Any

import fire

from ec2ctl.constants import (
    DEBUG_ENV_VAR,
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
)
from ec2ctl.filters import InvalidFilterError
from ec2ctl.logging import configure_logging
from ec2ctl.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)
from ec2ctl.utils import log_and_print_error


def get_ec2ctl_base_class() -> type:
    """Get Ec2Ctl base class on-demand to avoid circular imports.

    Returns
    -------
    type
        Ec2Ctl base class
    """
    from ec2ctl.__main__ import Ec2Ctl

    return Ec2Ctl


class Ec2CtlCLI:
    """CLI wrapper that turns command outcomes into process exit codes.

    This is defined as a factory that creates a subclass of Ec2Ctl at runtime
    to avoid circular import issues. A failed ``await`` exits with its code; a
    successful one returns None so Fire prints nothing after the message.

    Parameters
    ----------
    compute_provider_factory : Callable[..., Any] | None
        Optional factory for compute provider instances
    """

    _cached_class: type | None = None

    def __new__(cls, compute_provider_factory: Callable[..., Any] | None = None) -> Any:
        if cls._cached_class is None:
            Ec2Ctl = get_ec2ctl_base_class()

            class Ec2CtlCLIImpl(Ec2Ctl):
                """CLI wrapper implementation for Ec2Ctl."""

                def _await_state(self, *args: Any, **kwargs: Any) -> None:
                    exit_code = super()._await_state(*args, **kwargs)

                    if exit_code != EXIT_SUCCESS:
                        sys.exit(exit_code)

            cls._cached_class = Ec2CtlCLIImpl

        return cls._cached_class(compute_provider_factory=compute_provider_factory)


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle provider credentials error.

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print("AWS credentials not found\n", file=sys.stderr)
    print("Configure your credentials:", file=sys.stderr)
    print("  aws configure\n", file=sys.stderr)
    print("Or set environment variables:", file=sys.stderr)
    print("  export AWS_ACCESS_KEY_ID=...", file=sys.stderr)
    print("  export AWS_SECRET_ACCESS_KEY=...", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle invalid input or configuration.

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    if isinstance(error, InvalidFilterError):
        print(f"Invalid filter expression: {error}", file=sys.stderr)
    else:
        print(f"Configuration error: {error}", file=sys.stderr)

    sys.exit(EXIT_CONFIG_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider API error with code-specific hints.

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    error_code = error.error_code

    if error_code == "UnauthorizedOperation":
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print("ec2ctl needs:", file=sys.stderr)
        print("  - ec2:DescribeInstances", file=sys.stderr)
        print("  - ec2:DescribeAddresses", file=sys.stderr)
    elif error_code in ["ExpiredToken", "RequestExpired", "ExpiredTokenException"]:
        print("AWS credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using AWS SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    else:
        print(f"AWS API error: {error}", file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_connection_error(error: ProviderConnectionError, debug_mode: bool) -> None:
    if debug_mode:
        raise

    log_and_print_error("Could not reach AWS: %s", error)
    sys.exit(EXIT_ERROR)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    if debug_mode:
        raise

    log_and_print_error("Unexpected error: %s", error)
    sys.exit(EXIT_ERROR)


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the public methods of Ec2Ctl (plus the ``await`` command) to
    sub-commands and handles argument parsing and help text generation.
    """
    debug_mode = os.environ.get(DEBUG_ENV_VAR) == "1"

    try:
        configure_logging("DEBUG" if debug_mode else "WARNING")
        fire.Fire(Ec2CtlCLI(), name="ec2ctl")
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except ProviderConnectionError as e:
        handle_connection_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)
