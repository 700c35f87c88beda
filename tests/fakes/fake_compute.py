"""Fake compute provider for testing with dependency injection."""

import threading
from typing import Any

from ec2ctl.providers.exceptions import ProviderError, ResourceNotReadyError


class FakeEC2Manager:
    """Fake EC2Manager that serves canned listings and scripted state checks.

    Parameters
    ----------
    region : str
        AWS region name
    instances : list[dict[str, Any]] | None
        Raw instances returned by ``describe_instances``
    addresses : list[dict[str, Any]] | None
        Raw addresses returned by ``describe_addresses``
    check_outcomes : list[BaseException | None] | None
        Results of successive ``check_state`` calls; None means the state was
        reached. Once exhausted the last outcome repeats.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        instances: list[dict[str, Any]] | None = None,
        addresses: list[dict[str, Any]] | None = None,
        check_outcomes: list[BaseException | None] | None = None,
    ) -> None:
        self.region = region
        self.instances = instances or []
        self.addresses = addresses or []
        self.check_outcomes = list(check_outcomes or [None])
        self.listing_error: ProviderError | None = None
        self.wait_error: ProviderError | None = None
        self.check_calls: list[tuple[str, str]] = []
        self.wait_calls: list[tuple[str, str]] = []
        self.describe_calls = 0
        self.block_checks = threading.Event()
        self.release_checks = threading.Event()

    def describe_instances(self) -> list[dict[str, Any]]:
        self.describe_calls += 1
        if self.listing_error is not None:
            raise self.listing_error
        return list(self.instances)

    def describe_addresses(self) -> list[dict[str, Any]]:
        self.describe_calls += 1
        if self.listing_error is not None:
            raise self.listing_error
        return list(self.addresses)

    def check_state(self, instance_id: str, state: str) -> None:
        self.check_calls.append((instance_id, state))

        if self.block_checks.is_set():
            self.release_checks.wait(5)

        index = min(len(self.check_calls), len(self.check_outcomes)) - 1
        outcome = self.check_outcomes[index]

        if outcome is not None:
            raise outcome

    def wait_for_state(self, instance_id: str, state: str) -> None:
        self.wait_calls.append((instance_id, state))
        if self.wait_error is not None:
            raise self.wait_error


def not_ready() -> ResourceNotReadyError:
    return ResourceNotReadyError("Waiter InstanceRunning failed: Max attempts exceeded")
