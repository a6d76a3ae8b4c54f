"""EC2 instance metadata (IMDSv2) lookups.

Single-shot: the metadata endpoint is local to the instance, so a failure
here means something is wrong with the host and is never retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

import httpx
from loguru import logger

from clusterboot.constants import (
    IMDS_TIMEOUT_SECONDS,
    IMDS_TOKEN_PATH,
    IMDS_TOKEN_TTL_SECONDS,
    IMDS_URL,
)
from clusterboot.errors import UpstreamQueryError

log = logger.bind(component="metadata")

INSTANCE_ID_PATH = "/latest/meta-data/instance-id"
PRIVATE_IPV4_PATH = "/latest/meta-data/local-ipv4"
REGION_PATH = "/latest/meta-data/placement/region"


@dataclass(frozen=True, slots=True)
class InstanceIdentity:
    """Identity facts of the instance this process runs on."""

    instance_id: str
    private_address: str
    region: str


class InstanceMetadata:
    """Client for the instance metadata endpoint.

    Args:
        base_url: Endpoint root. Default: http://169.254.169.254
        timeout: Per-request timeout in seconds.
        client: Optional preconfigured httpx client (tests inject a
            MockTransport here).
    """

    def __init__(
        self,
        base_url: str = IMDS_URL,
        timeout: float = IMDS_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(base_url=base_url, timeout=timeout)
        self._client = client

    def __enter__(self) -> InstanceMetadata:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _token(self) -> str:
        response = self._client.put(
            IMDS_TOKEN_PATH,
            headers={"X-aws-ec2-metadata-token-ttl-seconds": str(IMDS_TOKEN_TTL_SECONDS)},
        )
        response.raise_for_status()
        return response.text.strip()

    def _get(self, path: str, token: str) -> str:
        response = self._client.get(path, headers={"X-aws-ec2-metadata-token": token})
        response.raise_for_status()
        value = response.text.strip()
        if not value:
            raise UpstreamQueryError(f"Metadata path {path} returned an empty value")
        return value

    def fetch_identity(self) -> InstanceIdentity:
        """Fetch instance id, private IPv4 address and region.

        Raises:
            UpstreamQueryError: If any metadata request fails.
        """
        try:
            token = self._token()
            identity = InstanceIdentity(
                instance_id=self._get(INSTANCE_ID_PATH, token),
                private_address=self._get(PRIVATE_IPV4_PATH, token),
                region=self._get(REGION_PATH, token),
            )
        except httpx.HTTPError as e:
            raise UpstreamQueryError(f"Instance metadata request failed: {e}") from e

        log.info(
            "Resolved identity: instance={id} address={addr} region={region}",
            id=identity.instance_id,
            addr=identity.private_address,
            region=identity.region,
        )
        return identity


def fetch_identity(
    base_url: str = IMDS_URL,
    timeout: float = IMDS_TIMEOUT_SECONDS,
) -> InstanceIdentity:
    """Fetch this instance's identity with a throwaway client."""
    with InstanceMetadata(base_url, timeout) as metadata:
        return metadata.fetch_identity()
