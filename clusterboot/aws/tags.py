"""Instance tag resolution with bounded retry.

Tags may be attached by the orchestration layer after the instance has
already started booting, so an empty tag set is retried, not trusted.
"""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from clusterboot.aws.control_plane import AWSControlPlane, ControlPlane
from clusterboot.errors import RetryExhausted, TagsUnavailable
from clusterboot.retry import RetryPolicy

type TagSet = Mapping[str, str]


def resolve_tags(
    instance_id: str,
    region: str,
    *,
    control_plane: ControlPlane | None = None,
    policy: RetryPolicy | None = None,
) -> TagSet:
    """Fetch the instance's tags, retrying while none are visible.

    Raises:
        TagsUnavailable: Every attempt in the budget returned no tags.
        UpstreamQueryError: The tag query itself failed (not retried).
    """
    log = logger.bind(component="tags", instance_id=instance_id, region=region)
    control_plane = control_plane or AWSControlPlane(region)
    policy = policy or RetryPolicy()

    try:
        tags = policy.call(
            lambda: control_plane.instance_tags(instance_id),
            until=bool,
            description=f"Tags for {instance_id}",
        )
    except RetryExhausted as e:
        log.debug("No tags after {n} attempts", n=e.attempts)
        raise TagsUnavailable(instance_id, e.attempts) from e

    log.debug("Resolved {n} tags", n=len(tags))
    return tags
