"""AWS lookups for node bootstrap.

Example:
    from clusterboot.aws import fetch_identity, resolve_cluster_size, resolve_tags

    identity = fetch_identity()
    tags = resolve_tags(identity.instance_id, identity.region)
    size = resolve_cluster_size(tags, identity.region)
"""

from clusterboot.aws.cluster_size import resolve_cluster_size
from clusterboot.aws.control_plane import AWSControlPlane, ControlPlane
from clusterboot.aws.metadata import InstanceIdentity, InstanceMetadata, fetch_identity
from clusterboot.aws.tags import TagSet, resolve_tags

__all__ = [
    "AWSControlPlane",
    "ControlPlane",
    "InstanceIdentity",
    "InstanceMetadata",
    "TagSet",
    "fetch_identity",
    "resolve_cluster_size",
    "resolve_tags",
]
