"""Cluster size resolution from the surrounding autoscaling group."""

from __future__ import annotations

from loguru import logger

from clusterboot.aws.control_plane import AWSControlPlane, ControlPlane
from clusterboot.aws.tags import TagSet
from clusterboot.constants import AWSTag

STANDALONE_CLUSTER_SIZE = 1


def group_name(tags: TagSet, group_tag_key: str = AWSTag.AUTOSCALING_GROUP) -> str | None:
    return tags.get(group_tag_key) or None


def resolve_cluster_size(
    tags: TagSet,
    region: str,
    *,
    control_plane: ControlPlane | None = None,
    group_tag_key: str = AWSTag.AUTOSCALING_GROUP,
) -> int:
    """Return the expected cluster size.

    Instances outside an autoscaling group are treated as standalone and
    get a size of 1. Otherwise the group's desired capacity is returned
    verbatim from a single query; it is a point-in-time hint and may change
    if the group is resized concurrently.

    Raises:
        UpstreamQueryError: The group query failed (not retried).
    """
    log = logger.bind(component="cluster_size", region=region)

    name = group_name(tags, group_tag_key)
    if name is None:
        log.warning(
            "Tag {key} not found, assuming standalone cluster of {size}",
            key=group_tag_key,
            size=STANDALONE_CLUSTER_SIZE,
        )
        return STANDALONE_CLUSTER_SIZE

    control_plane = control_plane or AWSControlPlane(region)
    size = control_plane.group_desired_capacity(name)

    if size < 1:
        log.bind(group=name).warning(
            "Group desired capacity is {size}, passing it through unchanged", size=size
        )
    else:
        log.bind(group=name).info("Cluster size {size}", size=size)
    return size
