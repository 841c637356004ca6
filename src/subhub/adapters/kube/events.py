"""Event recorder that posts ``core/v1`` Events to the API server."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from subhub.config.hub import DEFAULT_COMPONENT
from subhub.domain.model.codec import format_time
from subhub.domain.ports import EventType
from subhub.domain.propagation.clock import Clock, utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from subhub.domain.model import JsonObject, Resource
    from subhub.domain.ports import EventRecorder

log = getLogger(__name__)


def event_document(
    obj: Resource,
    reason: str,
    message: str,
    error: BaseException | None,
    *,
    component: str,
    now: datetime,
) -> JsonObject:
    event_type = EventType.NORMAL if error is None else EventType.WARNING
    if error is not None:
        message = f"{message}, error: {error}"
    timestamp = format_time(now)
    return {
        "apiVersion": "v1",
        "kind": "Event",
        "metadata": {"generateName": f"{obj.name}.", "namespace": obj.namespace},
        "involvedObject": {
            "apiVersion": obj.API_VERSION,
            "kind": obj.KIND,
            "name": obj.name,
            "namespace": obj.namespace,
            "uid": obj.metadata.uid,
            "resourceVersion": obj.metadata.resource_version,
        },
        "reason": reason,
        "message": message,
        "type": str(event_type),
        "source": {"component": component},
        "firstTimestamp": timestamp,
        "lastTimestamp": timestamp,
        "count": 1,
    }


@dataclass(slots=True)
class HttpEventRecorder:
    """Best-effort recorder: a failed post is logged, never raised."""

    client: httpx.Client
    component: str = DEFAULT_COMPONENT
    clock: Clock = field(default=utcnow)

    def record_event(
        self,
        obj: Resource,
        reason: str,
        message: str,
        error: BaseException | None = None,
    ) -> None:
        body = event_document(
            obj, reason, message, error, component=self.component, now=self.clock()
        )
        path = f"/api/v1/namespaces/{obj.namespace}/events"
        try:
            response = self.client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("Failed to record %s event on %s %s: %s", reason, obj.KIND, obj.key, exc)
            return
        log.debug("Recorded %s event %r on %s %s", body["type"], reason, obj.KIND, obj.key)


if TYPE_CHECKING:

    def _as_event_recorder(recorder: HttpEventRecorder) -> EventRecorder:
        return recorder
