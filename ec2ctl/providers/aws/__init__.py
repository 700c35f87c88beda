"""AWS provider implementation."""

from ec2ctl.providers.aws.compute import EC2Manager
from ec2ctl.providers.aws.session import resolve_region

__all__ = ["EC2Manager", "resolve_region"]
