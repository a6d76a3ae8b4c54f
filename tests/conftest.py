from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger

from clusterboot.aws.metadata import InstanceIdentity
from clusterboot.retry import RetryPolicy


@pytest.fixture
def identity() -> InstanceIdentity:
    return InstanceIdentity(
        instance_id="i-0123456789abcdef0",
        private_address="10.0.1.15",
        region="us-east-1",
    )


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def policy(sleeps: list[float]) -> RetryPolicy:
    return RetryPolicy(max_attempts=30, delay=10.0, sleep=sleeps.append)


@pytest.fixture
def log_records() -> Iterator[list[dict]]:
    """Capture clusterboot log records emitted through loguru."""
    records: list[dict] = []
    logger.enable("clusterboot")
    hid = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(hid)
    logger.disable("clusterboot")
