"""AWS control-plane queries: instance tags and autoscaling group capacity."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from clusterboot.errors import UpstreamQueryError

if TYPE_CHECKING:
    from mypy_boto3_autoscaling import AutoScalingClient
    from mypy_boto3_ec2 import EC2Client


class ControlPlane(Protocol):
    """Read-only control-plane operations the resolvers depend on."""

    def instance_tags(self, instance_id: str) -> dict[str, str]: ...

    def group_desired_capacity(self, group_name: str) -> int: ...


class AWSControlPlane:
    """boto3-backed control plane for a single region."""

    def __init__(self, region: str) -> None:
        self.region = region

    @cached_property
    def _ec2(self) -> EC2Client:
        import boto3

        return boto3.client("ec2", region_name=self.region)

    @cached_property
    def _autoscaling(self) -> AutoScalingClient:
        import boto3

        return boto3.client("autoscaling", region_name=self.region)

    def instance_tags(self, instance_id: str) -> dict[str, str]:
        """Return every tag attached to the instance. Empty if none yet."""
        tags: dict[str, str] = {}
        try:
            paginator = self._ec2.get_paginator("describe_tags")
            for page in paginator.paginate(
                Filters=[{"Name": "resource-id", "Values": [instance_id]}],
            ):
                for tag in page.get("Tags", []):
                    tags[tag["Key"]] = tag.get("Value", "")
        except (ClientError, BotoCoreError) as e:
            raise UpstreamQueryError(f"DescribeTags failed for {instance_id}: {e}") from e
        return tags

    def group_desired_capacity(self, group_name: str) -> int:
        """Return the autoscaling group's DesiredCapacity."""
        try:
            response = self._autoscaling.describe_auto_scaling_groups(
                AutoScalingGroupNames=[group_name],
            )
        except (ClientError, BotoCoreError) as e:
            raise UpstreamQueryError(
                f"DescribeAutoScalingGroups failed for {group_name}: {e}"
            ) from e

        groups = response.get("AutoScalingGroups", [])
        if not groups:
            raise UpstreamQueryError(f"Autoscaling group '{group_name}' not found")
        return groups[0]["DesiredCapacity"]
