"""clusterboot: membership-service config generator for cloud instances.

At boot, resolves the node's identity, tags and autoscaling-group size,
then writes a role-specific config and starts the service.

Example:
    from clusterboot import BootstrapRequest, BootstrapSettings, NodeRole, generate

    config = generate(BootstrapRequest(role=NodeRole.SERVER), BootstrapSettings())
    print(config.render())
"""

from loguru import logger

from clusterboot.aws import (
    InstanceIdentity,
    TagSet,
    fetch_identity,
    resolve_cluster_size,
    resolve_tags,
)
from clusterboot.config import BootstrapSettings, load_settings
from clusterboot.document import BootstrapConfig, NodeRole, assemble, join_directive
from clusterboot.errors import (
    ActivationError,
    ClusterBootError,
    ConfigAssemblyError,
    InvalidRole,
    PersistenceError,
    TagsUnavailable,
    UpstreamQueryError,
    UserInputError,
)
from clusterboot.pipeline import BootstrapRequest, generate, run
from clusterboot.retry import RetryPolicy

# Library behavior: silent until the CLI (or the caller) enables it.
logger.disable("clusterboot")

__all__ = [
    "ActivationError",
    "BootstrapConfig",
    "BootstrapRequest",
    "BootstrapSettings",
    "ClusterBootError",
    "ConfigAssemblyError",
    "InstanceIdentity",
    "InvalidRole",
    "NodeRole",
    "PersistenceError",
    "RetryPolicy",
    "TagSet",
    "TagsUnavailable",
    "UpstreamQueryError",
    "UserInputError",
    "assemble",
    "fetch_identity",
    "generate",
    "join_directive",
    "load_settings",
    "resolve_cluster_size",
    "resolve_tags",
    "run",
]
