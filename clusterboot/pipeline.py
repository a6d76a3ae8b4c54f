"""End-to-end bootstrap pipeline.

identity -> tags -> cluster size -> document -> file -> service restart.
Each step runs once per boot; only the final document touches the disk.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from clusterboot.aws.cluster_size import resolve_cluster_size
from clusterboot.aws.control_plane import AWSControlPlane, ControlPlane
from clusterboot.aws.metadata import InstanceIdentity, fetch_identity
from clusterboot.aws.tags import resolve_tags
from clusterboot.config import BootstrapSettings
from clusterboot.document import BootstrapConfig, NodeRole, assemble
from clusterboot.persistence import restart_service, write_config
from clusterboot.retry import RetryPolicy

log = logger.bind(component="pipeline")


@dataclass(frozen=True, slots=True)
class BootstrapRequest:
    """Operator input for one run."""

    role: NodeRole
    tag_key: str | None = None
    tag_value: str | None = None
    datacenter: str | None = None


def generate(
    request: BootstrapRequest,
    settings: BootstrapSettings,
    *,
    identity_source: Callable[[], InstanceIdentity] | None = None,
    control_plane_factory: Callable[[str], ControlPlane] = AWSControlPlane,
    policy: RetryPolicy | None = None,
) -> BootstrapConfig:
    """Resolve every input and assemble the document in memory.

    The retry policy is built from ``settings`` before any network call, so
    invalid retry settings fail first.
    """
    policy = policy or settings.tag_retry_policy()

    if identity_source is None:
        identity = fetch_identity(settings.metadata_url, settings.metadata_timeout)
    else:
        identity = identity_source()

    control_plane = control_plane_factory(identity.region)

    tags = resolve_tags(
        identity.instance_id,
        identity.region,
        control_plane=control_plane,
        policy=policy,
    )
    cluster_size = resolve_cluster_size(
        tags,
        identity.region,
        control_plane=control_plane,
        group_tag_key=settings.group_tag_key,
    )

    config = assemble(
        request.role,
        identity,
        cluster_size,
        tags,
        request.tag_key,
        request.tag_value,
        request.datacenter,
        settings=settings,
    )
    log.bind(role=config.role).info(
        "Assembled config: datacenter={dc} bootstrap_expect={expect} retry_join={join}",
        dc=config.datacenter,
        expect=config.bootstrap_expect,
        join=config.retry_join,
    )
    return config


def run(
    request: BootstrapRequest,
    settings: BootstrapSettings,
    *,
    start: bool = True,
    identity_source: Callable[[], InstanceIdentity] | None = None,
    control_plane_factory: Callable[[str], ControlPlane] = AWSControlPlane,
    policy: RetryPolicy | None = None,
    restart: Callable[[str], None] = restart_service,
) -> BootstrapConfig:
    """Generate the document, write it, and (re)start the service."""
    config = generate(
        request,
        settings,
        identity_source=identity_source,
        control_plane_factory=control_plane_factory,
        policy=policy,
    )
    text = config.render()

    write_config(
        text,
        settings.config_path,
        owner=settings.service_user,
        group=settings.service_group,
    )
    if start:
        restart(settings.service_name)
    return config
