"""EC2 queries used by ec2ctl."""

import logging
from typing import Any

import boto3

from ec2ctl.constants import AWAIT_STATES, WAITER_DELAY_SECONDS, WAITER_MAX_ATTEMPTS
from ec2ctl.extract import flatten_reservations
from ec2ctl.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


def waiter_name(state: str) -> str:
    """Return the boto3 waiter name for an ``await`` target state.

    Raises
    ------
    ValueError
        If the state cannot be awaited
    """
    try:
        return AWAIT_STATES[state]
    except KeyError:
        raise ValueError(
            f"Cannot await state '{state}'. Valid states: {', '.join(AWAIT_STATES)}"
        ) from None


class EC2Manager:
    """Read-only EC2 operations for a single region."""

    def __init__(
        self,
        region: str,
        boto3_client_factory: Any | None = None,
        waiter_delay: float = WAITER_DELAY_SECONDS,
        waiter_max_attempts: int = WAITER_MAX_ATTEMPTS,
    ) -> None:
        """Initialize EC2 manager.

        Parameters
        ----------
        region : str
            AWS region for EC2 operations
        boto3_client_factory : Callable[..., Any] | None
            Optional factory for creating boto3 clients. If None, uses boto3.client
        waiter_delay : float
            Delay between attempts of the blocking waiter
        waiter_max_attempts : int
            Maximum attempts of the blocking waiter
        """
        self.region = region
        self.boto3_client_factory = boto3_client_factory or boto3.client
        self.ec2_client = self.boto3_client_factory("ec2", region_name=region)
        self.waiter_delay = waiter_delay
        self.waiter_max_attempts = waiter_max_attempts

    def describe_instances(self) -> list[dict[str, Any]]:
        """Return raw instances from a single ``DescribeInstances`` call.

        Returns
        -------
        list[dict[str, Any]]
            Instances flattened out of their reservations

        Raises
        ------
        ProviderError
            If the API call fails
        """
        with handle_aws_errors():
            response = self.ec2_client.describe_instances()

        instances = list(flatten_reservations(response))
        logger.debug("Fetched %d instances in %s", len(instances), self.region)
        return instances

    def describe_addresses(self) -> list[dict[str, Any]]:
        """Return raw elastic IP entries from ``DescribeAddresses``.

        Raises
        ------
        ProviderError
            If the API call fails
        """
        with handle_aws_errors():
            response = self.ec2_client.describe_addresses()

        addresses = response.get("Addresses", [])
        logger.debug("Fetched %d elastic IPs in %s", len(addresses), self.region)
        return addresses

    def check_state(self, instance_id: str, state: str) -> None:
        """Check once whether an instance has reached ``state``.

        Parameters
        ----------
        instance_id : str
            Instance to check
        state : str
            Target state (running, stopped or terminated)

        Raises
        ------
        ResourceNotReadyError
            If the instance is not in the target state yet
        ProviderError
            If the check failed for any other reason
        """
        waiter = self.ec2_client.get_waiter(waiter_name(state))

        with handle_aws_errors():
            waiter.wait(
                InstanceIds=[instance_id],
                WaiterConfig={"Delay": 1, "MaxAttempts": 1},
            )

    def wait_for_state(self, instance_id: str, state: str) -> None:
        """Block until an instance reaches ``state`` using the boto3 waiter.

        Raises
        ------
        ResourceNotReadyError
            If the waiter ran out of attempts
        ProviderError
            If the waiter failed for any other reason
        """
        waiter = self.ec2_client.get_waiter(waiter_name(state))

        logger.debug(
            "Waiting for %s to be %s (delay=%s, attempts=%s)",
            instance_id,
            state,
            self.waiter_delay,
            self.waiter_max_attempts,
        )

        with handle_aws_errors():
            waiter.wait(
                InstanceIds=[instance_id],
                WaiterConfig={
                    "Delay": self.waiter_delay,
                    "MaxAttempts": self.waiter_max_attempts,
                },
            )
