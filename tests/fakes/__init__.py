"""Test fake implementations for dependency injection testing."""

from tests.fakes.fake_compute import FakeEC2Manager, not_ready
from tests.fakes.records import NOW, make_instance

__all__ = ["FakeEC2Manager", "not_ready", "NOW", "make_instance"]
