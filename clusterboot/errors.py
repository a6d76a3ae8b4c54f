"""Exception hierarchy for clusterboot.

Every fatal condition of a bootstrap run derives from ``ClusterBootError`` so
the command-line entry point can report it and exit non-zero in one place.
"""

from __future__ import annotations

from typing import Any


class ClusterBootError(Exception):
    """Base class for every fatal bootstrap error."""


class UserInputError(ClusterBootError):
    """Missing or conflicting operator input."""


class InvalidRole(UserInputError):
    """Role is neither server nor client."""

    def __init__(self, role: object):
        self.role = role
        super().__init__(f"Invalid node role {role!r}: expected 'server' or 'client'")


class UpstreamQueryError(ClusterBootError):
    """Metadata endpoint or control-plane call failed. Never retried."""


class TagsUnavailable(ClusterBootError):
    """Instance tags were still empty after the whole retry budget."""

    def __init__(self, instance_id: str, attempts: int):
        self.instance_id = instance_id
        self.attempts = attempts
        super().__init__(
            f"No tags visible on instance {instance_id} after {attempts} attempts"
        )


class ConfigAssemblyError(ClusterBootError):
    """Bootstrap document could not be serialized."""


class PersistenceError(ClusterBootError):
    """Config file could not be written or chowned."""


class ActivationError(ClusterBootError):
    """Service manager refused to restart the membership service."""


class RetryExhausted(Exception):
    """Retry policy ran out of attempts without a successful result."""

    def __init__(self, description: str, attempts: int, last_result: Any):
        self.description = description
        self.attempts = attempts
        self.last_result = last_result
        super().__init__(f"{description} not ready after {attempts} attempts")
