"""Error taxonomy for the hub reconciliation engine."""

from __future__ import annotations


class SubscriptionHubError(RuntimeError):
    """Base class for engine and collaborator failures."""


class NotFoundError(SubscriptionHubError):
    """Raised by the resource store when the requested object does not exist."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} {key} not found")
        self.kind = kind
        self.key = key


class ConflictOrTransportError(SubscriptionHubError):
    """Raised for any resource store failure other than not-found.

    The engine never retries these; the caller re-runs the whole cycle.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConflictError(ConflictOrTransportError):
    """Optimistic-concurrency conflict: the object changed since it was read."""


class SerializationError(SubscriptionHubError):
    """Raised when a payload cannot be serialized or decoded."""


class PatchApplicationError(SubscriptionHubError):
    """Raised when a global override cannot be applied to a template."""


class FilterEvaluationError(SubscriptionHubError):
    """Raised for malformed label selectors or version ranges."""
