"""Centralized constants for clusterboot.

Defaults for every ambient value live here; ``BootstrapSettings`` copies
them and lets an operator override them from TOML.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

# =============================================================================
# AWS Resource Tags
# =============================================================================


class AWSTag(StrEnum):
    """Tag keys set by AWS itself."""

    AUTOSCALING_GROUP = "aws:autoscaling:groupName"


CLOUD_PROVIDER: Final = "aws"


# =============================================================================
# Instance Metadata Service (IMDSv2)
# =============================================================================

IMDS_URL: Final = "http://169.254.169.254"
IMDS_TOKEN_PATH: Final = "/latest/api/token"
IMDS_TOKEN_TTL_SECONDS: Final = 21600
IMDS_TIMEOUT_SECONDS: Final = 2.0


# =============================================================================
# Tag Retry
# =============================================================================

# Tags are attached by the orchestration layer, sometimes after boot starts.
TAG_RETRY_ATTEMPTS: Final = 30
TAG_RETRY_DELAY_SECONDS: Final = 10.0


# =============================================================================
# Filesystem Paths / Service
# =============================================================================

CONSUL_CONFIG_PATH: Final = "/etc/consul.d/consul.json"
CONSUL_DATA_DIR: Final = "/opt/consul/data"
CONSUL_CLIENT_ADDR: Final = "0.0.0.0"
SERVICE_USER: Final = "consul"
SERVICE_GROUP: Final = "consul"
SERVICE_NAME: Final = "consul"

SYSTEM_CONFIG_PATH: Final = "/etc/clusterboot/defaults.toml"


# =============================================================================
# Telemetry
# =============================================================================

PROMETHEUS_RETENTION: Final = "24h"
