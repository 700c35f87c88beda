"""Translation of botocore exceptions into provider exceptions."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    WaiterError,
)

from ec2ctl.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ResourceNotReadyError,
)

logger = logging.getLogger(__name__)

MAX_ATTEMPTS_REASON = "Max attempts exceeded"
WAITER_FAILURE_CODE = "WaiterFailure"


def waiter_error_code(error: WaiterError) -> str:
    """Return the API error code behind a failed waiter, if the response has one."""
    last_response = getattr(error, "last_response", None) or {}
    code = (last_response.get("Error") or {}).get("Code")
    return code or WAITER_FAILURE_CODE


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Re-raise botocore exceptions as provider exceptions.

    Raises
    ------
    ProviderCredentialsError
        If AWS credentials are missing or incomplete
    ProviderConnectionError
        If the EC2 endpoint cannot be reached
    ResourceNotReadyError
        If a waiter ran out of attempts before the target state was reached
    ProviderAPIError
        For every other client or waiter failure
    """
    try:
        yield
    except (NoCredentialsError, PartialCredentialsError) as e:
        raise ProviderCredentialsError(str(e)) from e
    except NoRegionError as e:
        raise ProviderAPIError(str(e), error_code="NoRegion") from e
    except EndpointConnectionError as e:
        raise ProviderConnectionError(str(e)) from e
    except ClientError as e:
        error = e.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message") or str(e)
        logger.debug("AWS client error %s: %s", code, message)
        raise ProviderAPIError(f"{code}: {message}", error_code=code) from e
    except WaiterError as e:
        if MAX_ATTEMPTS_REASON in str(e):
            raise ResourceNotReadyError(str(e)) from e

        code = waiter_error_code(e)
        logger.debug("AWS waiter failure %s: %s", code, e)
        raise ProviderAPIError(str(e), error_code=code) from e
