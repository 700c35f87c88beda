#!/usr/bin/env python3
"""ec2ctl - inspect and await EC2 instances in one region."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Any

import boto3

from ec2ctl import __version__
from ec2ctl.cli.parsing import build_filter_spec, parse_flag, parse_seconds
from ec2ctl.constants import DEBUG_ENV_VAR, LOG_LEVEL_ENV_VAR
from ec2ctl.core.config import ConfigLoader
from ec2ctl.inventory import InventoryManager
from ec2ctl.providers.aws.compute import EC2Manager
from ec2ctl.providers.aws.session import resolve_region
from ec2ctl.waiter import StateWaiter, report_outcome


class Ec2Ctl:
    """Inspect and await EC2 instances in one region."""

    def __init__(
        self,
        compute_provider_factory: Callable[..., Any] | None = None,
        boto3_client_factory: Callable | None = None,
        config_loader: ConfigLoader | None = None,
    ) -> None:
        """Initialize ec2ctl with optional dependency injection."""
        self._config_loader = config_loader or ConfigLoader()
        self._boto3_client_factory = boto3_client_factory or boto3.client
        self._compute_provider_factory_override = compute_provider_factory

    def _settings(self, **overrides: Any) -> dict[str, Any]:
        config = self._config_loader.load_config()
        settings = self._config_loader.get_settings(config, overrides)

        log_level = os.environ.get(LOG_LEVEL_ENV_VAR) or settings["log_level"]
        if os.environ.get(DEBUG_ENV_VAR) == "1":
            log_level = "DEBUG"
        logging.getLogger().setLevel(log_level.upper())

        return settings

    def _provider_factory(self, settings: dict[str, Any]) -> Callable[..., Any]:
        if self._compute_provider_factory_override is not None:
            return self._compute_provider_factory_override

        def create(region: str) -> EC2Manager:
            return EC2Manager(
                region=region,
                boto3_client_factory=self._boto3_client_factory,
                waiter_delay=settings["waiter_delay"],
                waiter_max_attempts=settings["waiter_max_attempts"],
            )

        return create

    def list(
        self,
        instance_id: str | None = None,
        id: str | None = None,
        name: str | None = None,
        state: str | None = None,
        private_ip: str | None = None,
        public_ip: str | None = None,
        ssh_key: str | None = None,
        tag_key: str | None = None,
        tag_value: str | None = None,
        json: bool = False,
        quiet: bool = False,
        extended: bool = False,
        case_sensitive: bool | None = None,
        quiet_field: str = "name",
        region: str | None = None,
    ) -> None:
        """List EC2 instances, optionally filtered by regular expressions.

        Parameters
        ----------
        instance_id : str | None
            Instance id regex (``--id`` is accepted as well)
        name : str | None
            Regex on the value of the Name tag
        state : str | None
            State regex (pending | running | shutting-down | stopping |
            stopped | terminated)
        private_ip : str | None
            Private IP regex
        public_ip : str | None
            Public IP regex
        ssh_key : str | None
            SSH key name regex
        tag_key : str | None
            Matches when any tag key matches the regex
        tag_value : str | None
            Matches when any tag value matches the regex
        json : bool
            Output JSON with extended details about each instance
        quiet : bool
            Only output one field per instance (no summary)
        extended : bool
            Show addresses and image id
        case_sensitive : bool | None
            Make filter expressions case sensitive
        quiet_field : str
            Field printed in quiet mode: name, id, public_ip or private_ip
        region : str | None
            Region override
        """
        settings = self._settings(region=region)

        if case_sensitive is None:
            case_sensitive = settings["case_sensitive"]

        filter_spec = build_filter_spec(
            instance_id=instance_id if instance_id is not None else id,
            name=name,
            state=state,
            private_ip=private_ip,
            public_ip=public_ip,
            ssh_key=ssh_key,
            tag_key=tag_key,
            tag_value=tag_value,
            case_sensitive=case_sensitive,
        )

        inventory = InventoryManager(
            compute_provider_factory=self._provider_factory(settings),
            region=resolve_region(settings["region"]),
        )
        return inventory.list(
            filter_spec,
            json_output=parse_flag(json, "json"),
            quiet=parse_flag(quiet, "quiet"),
            extended=parse_flag(extended, "extended"),
            quiet_field=str(quiet_field),
        )

    def ips(
        self,
        json: bool = False,
        quiet: bool = False,
        quiet_field: str = "public_ip",
        region: str | None = None,
    ) -> None:
        """List elastic IPs for the region.

        Parameters
        ----------
        json : bool
            Output the elastic IP entries as JSON
        quiet : bool
            Only output one field per elastic IP (no summary)
        quiet_field : str
            Field printed in quiet mode: public_ip, private_ip or name
        region : str | None
            Region override
        """
        settings = self._settings(region=region)

        inventory = InventoryManager(
            compute_provider_factory=self._provider_factory(settings),
            region=resolve_region(settings["region"]),
        )
        return inventory.ips(
            json_output=parse_flag(json, "json"),
            quiet=parse_flag(quiet, "quiet"),
            quiet_field=str(quiet_field),
        )

    def _await_state(
        self,
        state: str,
        instance_id: str,
        timeout: float | None = None,
        poll_interval: float | None = None,
        region: str | None = None,
    ) -> int:
        settings = self._settings(
            timeout=parse_seconds(timeout, "timeout"),
            poll_interval=parse_seconds(
                poll_interval, "poll_interval", allow_zero=False
            ),
            region=region,
        )

        factory = self._provider_factory(settings)
        compute_provider = factory(region=resolve_region(settings["region"]))

        waiter = StateWaiter(compute_provider, poll_interval=settings["poll_interval"])
        result = waiter.wait(str(instance_id), str(state), timeout=settings["timeout"])

        return report_outcome(result)

    def version(self) -> str:
        """Print the ec2ctl version."""
        return __version__


def _await_command(
    self: Ec2Ctl,
    state: str,
    instance_id: str,
    timeout: float | None = None,
    poll_interval: float | None = None,
    region: str | None = None,
) -> Any:
    """Await a state (running | stopped | terminated) for an EC2 instance.

    Parameters
    ----------
    state : str
        Target state: running, stopped or terminated
    instance_id : str
        The ID of the instance to await
    timeout : float | None
        Max time in seconds to await the state transition (default 300);
        0 issues one blocking wait with the SDK's own retry budget
    poll_interval : float | None
        Seconds between state checks (default 5)
    region : str | None
        Region override
    """
    return self._await_state(
        state,
        instance_id,
        timeout=timeout,
        poll_interval=poll_interval,
        region=region,
    )


setattr(Ec2Ctl, "await", _await_command)


if __name__ == "__main__":
    from ec2ctl.cli.main import main

    main()
