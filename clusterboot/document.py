"""Bootstrap config document for the membership service.

The document is built as a typed value with optional fields and serialized
exactly once, so a malformed intermediate form never exists.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from clusterboot.aws.metadata import InstanceIdentity
from clusterboot.aws.tags import TagSet
from clusterboot.config import BootstrapSettings
from clusterboot.errors import ConfigAssemblyError, InvalidRole


class NodeRole(StrEnum):
    SERVER = "server"
    CLIENT = "client"

    @classmethod
    def parse(cls, value: object) -> NodeRole:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidRole(value) from None


@dataclass(frozen=True, slots=True)
class Telemetry:
    prometheus_retention_time: str
    disable_hostname: bool = True


@dataclass(frozen=True, slots=True)
class BootstrapConfig:
    """Complete membership-service config for one node.

    ``bootstrap_expect`` and ``telemetry`` are set only on servers;
    ``retry_join`` only when a join directive exists. Unset fields are
    omitted from the rendered document, never written as placeholders.
    """

    server: bool
    data_dir: str
    bind_addr: str
    advertise_addr: str
    client_addr: str
    datacenter: str
    node_name: str
    ui: bool
    bootstrap_expect: int | None = None
    retry_join: str | None = None
    telemetry: Telemetry | None = None

    @property
    def role(self) -> NodeRole:
        return NodeRole.SERVER if self.server else NodeRole.CLIENT

    def to_dict(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "server": self.server,
            "data_dir": self.data_dir,
            "bind_addr": self.bind_addr,
            "advertise_addr": self.advertise_addr,
            "client_addr": self.client_addr,
            "datacenter": self.datacenter,
            "node_name": self.node_name,
        }
        if self.bootstrap_expect is not None:
            doc["bootstrap_expect"] = self.bootstrap_expect
        if self.retry_join is not None:
            doc["retry_join"] = [self.retry_join]
        if self.telemetry is not None:
            doc["telemetry"] = {
                "prometheus_retention_time": self.telemetry.prometheus_retention_time,
                "disable_hostname": self.telemetry.disable_hostname,
            }
        doc["ui"] = self.ui
        return doc

    def render(self) -> str:
        """Serialize to pretty-printed JSON.

        Raises:
            ConfigAssemblyError: If the document cannot be serialized.
        """
        try:
            return json.dumps(self.to_dict(), indent=2, allow_nan=False) + "\n"
        except (TypeError, ValueError) as e:
            raise ConfigAssemblyError(f"Cannot serialize bootstrap config: {e}") from e


def join_directive(
    provider: str,
    region: str,
    tag_key: str | None,
    tag_value: str | None,
) -> str | None:
    """Cloud auto-join expression, or None unless both key and value are set.

    Example:
        >>> join_directive("aws", "us-east-1", "ClusterX", "prod")
        'provider=aws region=us-east-1 tag_key=ClusterX tag_value=prod'
    """
    if not tag_key or not tag_value:
        return None
    return f"provider={provider} region={region} tag_key={tag_key} tag_value={tag_value}"


def assemble(
    role: NodeRole | str,
    identity: InstanceIdentity,
    cluster_size: int,
    tags: TagSet,
    tag_key: str | None = None,
    tag_value: str | None = None,
    datacenter: str | None = None,
    *,
    settings: BootstrapSettings | None = None,
) -> BootstrapConfig:
    """Build the bootstrap config for this node. Pure, no I/O.

    ``tags`` is accepted for callers that already hold them; the document
    depends only on the operator-supplied ``tag_key`` / ``tag_value``.

    Raises:
        InvalidRole: If ``role`` is neither server nor client.
    """
    settings = settings or BootstrapSettings()
    node_role = NodeRole.parse(role)

    common: dict[str, Any] = {
        "data_dir": settings.data_dir,
        "bind_addr": identity.private_address,
        "advertise_addr": identity.private_address,
        "client_addr": settings.client_addr,
        "datacenter": datacenter or identity.region,
        "node_name": identity.instance_id,
        "retry_join": join_directive(
            settings.cloud_provider, identity.region, tag_key, tag_value
        ),
    }

    match node_role:
        case NodeRole.SERVER:
            return BootstrapConfig(
                server=True,
                ui=True,
                bootstrap_expect=cluster_size,
                telemetry=Telemetry(prometheus_retention_time=settings.prometheus_retention),
                **common,
            )
        case NodeRole.CLIENT:
            return BootstrapConfig(server=False, ui=False, **common)
        case _:
            raise InvalidRole(role)
