from __future__ import annotations

import pytest

from clusterboot.aws.tags import resolve_tags
from clusterboot.errors import TagsUnavailable, UpstreamQueryError
from clusterboot.retry import RetryPolicy
from tests.fakes import FakeControlPlane

pytestmark = [pytest.mark.unit]

INSTANCE = "i-0123456789abcdef0"
TAGS = {"Name": "consul-1", "aws:autoscaling:groupName": "consul-asg"}


class TestResolveTags:
    def test_tags_present_on_first_attempt(self, policy: RetryPolicy, sleeps: list[float]):
        cp = FakeControlPlane(tag_responses=[TAGS])
        assert resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy) == TAGS
        assert cp.tag_calls == 1
        assert sleeps == []

    def test_empty_then_tags_on_third_attempt(self, policy: RetryPolicy, sleeps: list[float]):
        cp = FakeControlPlane(tag_responses=[{}, {}, TAGS])
        assert resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy) == TAGS
        assert cp.tag_calls == 3
        assert sleeps == [10.0, 10.0]

    def test_empty_for_whole_budget_is_fatal(self, policy: RetryPolicy, sleeps: list[float]):
        cp = FakeControlPlane(tag_responses=[{}])
        with pytest.raises(TagsUnavailable) as exc_info:
            resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy)
        assert exc_info.value.attempts == 30
        assert exc_info.value.instance_id == INSTANCE
        assert cp.tag_calls == 30
        assert len(sleeps) == 29

    def test_tags_on_last_attempt_succeed(self, sleeps: list[float]):
        policy = RetryPolicy(max_attempts=3, delay=0.5, sleep=sleeps.append)
        cp = FakeControlPlane(tag_responses=[{}, {}, {"Name": "x"}])
        assert resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy) == {"Name": "x"}
        assert cp.tag_calls == 3

    def test_tags_without_group_key_are_not_retried(self, policy: RetryPolicy):
        cp = FakeControlPlane(tag_responses=[{"Name": "standalone"}])
        tags = resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy)
        assert tags == {"Name": "standalone"}
        assert cp.tag_calls == 1

    def test_query_error_propagates_without_retry(self, policy: RetryPolicy, sleeps: list[float]):
        class Broken(FakeControlPlane):
            def instance_tags(self, instance_id: str) -> dict[str, str]:
                self.tag_calls += 1
                raise UpstreamQueryError("DescribeTags failed")

        cp = Broken()
        with pytest.raises(UpstreamQueryError):
            resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy)
        assert cp.tag_calls == 1
        assert sleeps == []

    def test_empty_attempts_log_warnings(self, log_records, sleeps: list[float]):
        policy = RetryPolicy(max_attempts=3, delay=1.0, sleep=sleeps.append)
        cp = FakeControlPlane(tag_responses=[{}, {}, TAGS])
        resolve_tags(INSTANCE, "us-east-1", control_plane=cp, policy=policy)
        warnings = [r for r in log_records if r["level"].name == "WARNING"]
        assert len(warnings) == 2
        assert "attempt 1/3" in warnings[0]["message"]

    def test_exhaustion_is_raised_not_logged_as_error(self, log_records, sleeps: list[float]):
        policy = RetryPolicy(max_attempts=2, delay=1.0, sleep=sleeps.append)
        with pytest.raises(TagsUnavailable):
            resolve_tags(
                INSTANCE, "us-east-1",
                control_plane=FakeControlPlane(tag_responses=[{}]), policy=policy,
            )
        assert not [r for r in log_records if r["level"].name == "ERROR"]
