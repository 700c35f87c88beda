"""Pytest configuration and fixtures for ec2ctl tests."""

import sys
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
import yaml

project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.fakes import FakeEC2Manager, make_instance  # noqa: E402


@pytest.fixture(autouse=True)
def clean_ec2ctl_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Isolate tests from the developer's ec2ctl environment.

    Points EC2CTL_CONFIG at a file that does not exist and clears the debug
    and log level switches. The ambient region is pinned to eu-west-1.
    """
    monkeypatch.setenv("EC2CTL_CONFIG", str(tmp_path / "missing-ec2ctl.yaml"))
    monkeypatch.delenv("EC2CTL_DEBUG", raising=False)
    monkeypatch.delenv("EC2CTL_LOG_LEVEL", raising=False)
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-aws-config"))
    yield


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set fake AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point EC2CTL_CONFIG at a temporary config file path.

    Returns
    -------
    Path
        Path to temporary config file (not yet written)
    """
    config_path = tmp_path / "ec2ctl.yaml"
    monkeypatch.setenv("EC2CTL_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def write_config(config_file: Path):
    """Helper fixture to write config data to file.

    Returns
    -------
    callable
        Function that takes config_data dict and writes to file
    """

    def _write(config_data: dict[str, Any]) -> None:
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

    return _write


@pytest.fixture
def fleet() -> list[dict[str, Any]]:
    """A small heterogeneous fleet of raw instances."""
    return [
        make_instance(
            "i-0000000000000web1",
            name="web-1",
            launch_time=datetime(2024, 6, 1, 11, 0, tzinfo=timezone.utc),
            tags=[
                {"Key": "Name", "Value": "web-1"},
                {"Key": "env", "Value": "prod"},
            ],
        ),
        make_instance(
            "i-0000000000000web2",
            name="web-2",
            state="stopped",
            launch_time=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            PublicIpAddress="10.10.10.10",
            tags=[
                {"Key": "Name", "Value": "web-2"},
                {"Key": "env", "Value": "staging"},
            ],
        ),
        make_instance(
            "i-00000000000000db1",
            name="db-1",
            launch_time=datetime(2024, 6, 1, 11, 58, 30, tzinfo=timezone.utc),
            KeyName="ops",
            PrivateIpAddress="172.31.5.20",
            tags=[{"Key": "Name", "Value": "db-1"}, {"Key": "role", "Value": "db"}],
        ),
        {
            "InstanceId": "i-000000000000bare1",
            "State": {"Name": "pending"},
        },
    ]


@pytest.fixture
def fake_ec2(fleet: list[dict[str, Any]]) -> FakeEC2Manager:
    """FakeEC2Manager serving the fleet and two elastic IPs."""
    return FakeEC2Manager(
        instances=fleet,
        addresses=[
            {
                "PublicIp": "54.1.2.3",
                "AllocationId": "eipalloc-1",
                "NetworkInterfaceId": "eni-1",
                "PrivateIpAddress": "172.31.0.10",
                "Tags": [{"Key": "Name", "Value": "web-ip"}],
            },
            {"PublicIp": "54.9.9.9", "AllocationId": "eipalloc-2"},
        ],
    )


@pytest.fixture
def ec2ctl(fake_ec2: FakeEC2Manager) -> Any:
    """Ec2Ctl instance wired to the fake compute provider."""
    from ec2ctl.__main__ import Ec2Ctl

    created: list[str] = []

    def factory(region: str) -> FakeEC2Manager:
        created.append(region)
        fake_ec2.region = region
        return fake_ec2

    instance = Ec2Ctl(compute_provider_factory=factory)
    instance.created_regions = created
    return instance
