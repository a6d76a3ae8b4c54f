from __future__ import annotations

import httpx
import pytest

from clusterboot.aws.metadata import InstanceIdentity, InstanceMetadata
from clusterboot.errors import UpstreamQueryError

pytestmark = [pytest.mark.unit]

TOKEN = "AQAEAtoken=="

VALUES = {
    "/latest/meta-data/instance-id": "i-0abc",
    "/latest/meta-data/local-ipv4": "10.0.2.20",
    "/latest/meta-data/placement/region": "eu-west-1",
}


def _client(handler) -> httpx.Client:
    return httpx.Client(
        base_url="http://169.254.169.254",
        transport=httpx.MockTransport(handler),
    )


def _imds(request: httpx.Request) -> httpx.Response:
    if request.method == "PUT" and request.url.path == "/latest/api/token":
        assert request.headers["X-aws-ec2-metadata-token-ttl-seconds"] == "21600"
        return httpx.Response(200, text=TOKEN)
    if request.headers.get("X-aws-ec2-metadata-token") != TOKEN:
        return httpx.Response(401)
    if request.url.path in VALUES:
        return httpx.Response(200, text=VALUES[request.url.path] + "\n")
    return httpx.Response(404)


class TestInstanceMetadata:
    def test_fetch_identity(self):
        metadata = InstanceMetadata(client=_client(_imds))
        assert metadata.fetch_identity() == InstanceIdentity(
            instance_id="i-0abc",
            private_address="10.0.2.20",
            region="eu-west-1",
        )

    def test_single_shot_on_failure(self):
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(503)

        with pytest.raises(UpstreamQueryError):
            InstanceMetadata(client=_client(handler)).fetch_identity()
        assert calls == ["/latest/api/token"]

    def test_missing_path_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/latest/meta-data/placement/region":
                return httpx.Response(404)
            return _imds(request)

        with pytest.raises(UpstreamQueryError):
            InstanceMetadata(client=_client(handler)).fetch_identity()

    def test_empty_value_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/latest/meta-data/local-ipv4":
                return httpx.Response(200, text="")
            return _imds(request)

        with pytest.raises(UpstreamQueryError, match="empty"):
            InstanceMetadata(client=_client(handler)).fetch_identity()

    def test_connection_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(UpstreamQueryError):
            InstanceMetadata(client=_client(handler)).fetch_identity()

    def test_injected_client_is_not_closed(self):
        client = _client(_imds)
        with InstanceMetadata(client=client) as metadata:
            metadata.fetch_identity()
        assert not client.is_closed
