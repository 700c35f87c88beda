"""Field extraction from raw EC2 API records.

Functions here are pure: they never touch the network and never fail on a
missing optional key.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from typing import Any

from ec2ctl.constants import NAME_TAG
from ec2ctl.models import AddressRecord, ResourceRecord, Tag


def normalize_tags(raw_tags: Iterable[dict[str, Any]] | None) -> tuple[Tag, ...]:
    """Convert an EC2 ``Tags`` list into ordered ``(key, value)`` pairs."""
    if not raw_tags:
        return ()

    return tuple(
        (str(tag.get("Key", "")), str(tag.get("Value", ""))) for tag in raw_tags
    )


def find_name(tags: Iterable[Tag]) -> str | None:
    """Return the value of the first ``Name`` tag, or None."""
    for key, value in tags:
        if key == NAME_TAG:
            return value

    return None


def parse_launch_time(value: Any) -> datetime | None:
    """Normalize a launch time to an aware UTC datetime.

    Parameters
    ----------
    value : Any
        ``datetime`` as returned by boto3, an ISO-8601 string, or None

    Returns
    -------
    datetime | None
        Aware UTC datetime, or None when the value is missing or unparsable
    """
    if value is None:
        return None

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    if not isinstance(value, datetime):
        return None

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc)


def extract_instance(raw: dict[str, Any]) -> ResourceRecord:
    """Map one raw ``DescribeInstances`` instance into a ResourceRecord.

    Parameters
    ----------
    raw : dict[str, Any]
        Instance dictionary from ``Reservations[*].Instances[*]``

    Returns
    -------
    ResourceRecord
        Normalized record
    """
    cpu_options = raw.get("CpuOptions") or {}
    cores = cpu_options.get("CoreCount")
    threads_per_core = cpu_options.get("ThreadsPerCore")

    threads = None
    if cores is not None and threads_per_core is not None:
        threads = cores * threads_per_core

    tags = normalize_tags(raw.get("Tags"))

    return ResourceRecord(
        id=raw.get("InstanceId", ""),
        state=(raw.get("State") or {}).get("Name"),
        az=(raw.get("Placement") or {}).get("AvailabilityZone"),
        instance_type=raw.get("InstanceType"),
        image=raw.get("ImageId"),
        cores=cores,
        threads=threads,
        launch_time=parse_launch_time(raw.get("LaunchTime")),
        ssh_key=raw.get("KeyName"),
        private_ip=raw.get("PrivateIpAddress"),
        public_ip=raw.get("PublicIpAddress"),
        tags=tags,
        name=find_name(tags),
    )


def extract_address(raw: dict[str, Any]) -> AddressRecord:
    """Map one raw ``DescribeAddresses`` entry into an AddressRecord."""
    tags = normalize_tags(raw.get("Tags"))

    return AddressRecord(
        public_ip=raw.get("PublicIp"),
        nic_id=raw.get("NetworkInterfaceId"),
        private_ip=raw.get("PrivateIpAddress"),
        allocation_id=raw.get("AllocationId"),
        tags=tags,
        name=find_name(tags),
    )


def flatten_reservations(response: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield raw instances from a ``DescribeInstances`` response."""
    for reservation in response.get("Reservations") or []:
        yield from reservation.get("Instances") or []
