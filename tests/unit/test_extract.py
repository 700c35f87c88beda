"""Tests for field extraction from raw EC2 records."""

from datetime import datetime, timedelta, timezone

from ec2ctl.extract import (
    extract_address,
    extract_instance,
    find_name,
    flatten_reservations,
    parse_launch_time,
)
from tests.fakes import NOW, make_instance


class TestExtractInstance:
    """Tests for extract_instance."""

    def test_maps_all_fields(self) -> None:
        record = extract_instance(make_instance("i-1", name="web-1"))

        assert record.id == "i-1"
        assert record.name == "web-1"
        assert record.state == "running"
        assert record.az == "us-east-1a"
        assert record.instance_type == "t3.micro"
        assert record.image == "ami-0abcdef1234567890"
        assert record.ssh_key == "deploy"
        assert record.private_ip == "172.31.0.10"
        assert record.public_ip == "3.3.3.3"
        assert record.launch_time == NOW
        assert record.tags == (("Name", "web-1"),)

    def test_threads_are_cores_times_threads_per_core(self) -> None:
        raw = make_instance("i-1", CpuOptions={"CoreCount": 4, "ThreadsPerCore": 2})

        record = extract_instance(raw)

        assert record.cores == 4
        assert record.threads == 8

    def test_missing_cpu_options_leaves_shape_absent(self) -> None:
        raw = make_instance("i-1")
        del raw["CpuOptions"]

        record = extract_instance(raw)

        assert record.cores is None
        assert record.threads is None

    def test_minimal_record_does_not_fail(self) -> None:
        record = extract_instance({"InstanceId": "i-bare"})

        assert record.id == "i-bare"
        assert record.state is None
        assert record.tags == ()
        assert record.name is None
        assert record.public_ip is None
        assert record.launch_time is None

    def test_missing_name_tag_leaves_name_absent(self) -> None:
        raw = make_instance("i-1", tags=[{"Key": "env", "Value": "prod"}])

        assert extract_instance(raw).name is None

    def test_first_name_tag_wins(self) -> None:
        raw = make_instance(
            "i-1",
            tags=[
                {"Key": "Name", "Value": "first"},
                {"Key": "Name", "Value": "second"},
            ],
        )

        assert extract_instance(raw).name == "first"

    def test_tag_order_is_preserved(self) -> None:
        raw = make_instance(
            "i-1",
            tags=[{"Key": "b", "Value": "2"}, {"Key": "a", "Value": "1"}],
        )

        assert extract_instance(raw).tags == (("b", "2"), ("a", "1"))


class TestExtractAddress:
    """Tests for extract_address."""

    def test_maps_fields_and_name(self) -> None:
        record = extract_address(
            {
                "PublicIp": "54.1.2.3",
                "AllocationId": "eipalloc-1",
                "NetworkInterfaceId": "eni-1",
                "PrivateIpAddress": "172.31.0.10",
                "Tags": [{"Key": "Name", "Value": "web-ip"}],
            }
        )

        assert record.public_ip == "54.1.2.3"
        assert record.nic_id == "eni-1"
        assert record.private_ip == "172.31.0.10"
        assert record.allocation_id == "eipalloc-1"
        assert record.name == "web-ip"

    def test_unassociated_address(self) -> None:
        record = extract_address({"PublicIp": "54.9.9.9"})

        assert record.nic_id is None
        assert record.private_ip is None
        assert record.name is None
        assert record.tags == ()


class TestHelpers:
    """Tests for extraction helpers."""

    def test_find_name_without_tags(self) -> None:
        assert find_name(()) is None

    def test_parse_launch_time_from_iso_string(self) -> None:
        parsed = parse_launch_time("2024-06-01T12:00:00Z")

        assert parsed == NOW

    def test_parse_launch_time_converts_to_utc(self) -> None:
        local = datetime(2024, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        parsed = parse_launch_time(local)

        assert parsed == NOW
        assert parsed.tzinfo == timezone.utc

    def test_parse_launch_time_assumes_utc_for_naive(self) -> None:
        parsed = parse_launch_time(datetime(2024, 6, 1, 12, 0))

        assert parsed == NOW

    def test_parse_launch_time_rejects_garbage(self) -> None:
        assert parse_launch_time("yesterday") is None
        assert parse_launch_time(None) is None

    def test_flatten_reservations(self) -> None:
        response = {
            "Reservations": [
                {"Instances": [{"InstanceId": "i-1"}, {"InstanceId": "i-2"}]},
                {"Instances": []},
                {"Instances": [{"InstanceId": "i-3"}]},
            ]
        }

        ids = [raw["InstanceId"] for raw in flatten_reservations(response)]

        assert ids == ["i-1", "i-2", "i-3"]

    def test_flatten_reservations_empty_response(self) -> None:
        assert list(flatten_reservations({})) == []
