"""Normalized records and filter criteria used by the listing commands."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

Tag = tuple[str, str]


@dataclass(frozen=True)
class ResourceRecord:
    """Normalized view of one EC2 instance.

    Shape fields (``cores``, ``threads``) are ``None`` when the provider did
    not report CPU options, never zero.
    """

    id: str
    state: str | None = None
    az: str | None = None
    instance_type: str | None = None
    image: str | None = None
    cores: int | None = None
    threads: int | None = None
    launch_time: datetime | None = None
    ssh_key: str | None = None
    private_ip: str | None = None
    public_ip: str | None = None
    tags: tuple[Tag, ...] = ()
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON document for this record."""
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state,
            "az": self.az,
            "type": self.instance_type,
            "image": self.image,
            "sshKey": self.ssh_key,
            "launchTime": (
                self.launch_time.isoformat().replace("+00:00", "Z")
                if self.launch_time
                else None
            ),
            "cpus": {"cores": self.cores, "threads": self.threads},
            "network": {"privateIp": self.private_ip, "publicIp": self.public_ip},
            "tags": [{"Key": key, "Value": value} for key, value in self.tags],
        }


@dataclass(frozen=True)
class AddressRecord:
    """Normalized view of one elastic IP."""

    public_ip: str | None = None
    nic_id: str | None = None
    private_ip: str | None = None
    allocation_id: str | None = None
    tags: tuple[Tag, ...] = ()
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON document for this record."""
        return {
            "publicIp": self.public_ip,
            "networkInterfaceId": self.nic_id,
            "privateIp": self.private_ip,
            "allocationId": self.allocation_id,
            "name": self.name,
            "tags": [{"Key": key, "Value": value} for key, value in self.tags],
        }


@dataclass(frozen=True)
class FilterSpec:
    """User supplied match criteria for one ``list`` invocation.

    Every criterion is an optional regular expression; ``None`` or an empty
    string means the field is not constrained.
    """

    instance_id: str | None = None
    name: str | None = None
    state: str | None = None
    private_ip: str | None = None
    public_ip: str | None = None
    ssh_key: str | None = None
    tag_key: str | None = None
    tag_value: str | None = None
    case_sensitive: bool = False

    def active_criteria(self) -> dict[str, str]:
        """Return the criteria that were actually supplied, keyed by field."""
        criteria = {
            "instance_id": self.instance_id,
            "name": self.name,
            "state": self.state,
            "private_ip": self.private_ip,
            "public_ip": self.public_ip,
            "ssh_key": self.ssh_key,
            "tag_key": self.tag_key,
            "tag_value": self.tag_value,
        }
        return {field: value for field, value in criteria.items() if value}
