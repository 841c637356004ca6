"""Synchronous HTTP resource store backed by a Kubernetes-style API server."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Self

import httpx
from pydantic import ValidationError

from subhub.domain.errors import (
    ConflictError,
    ConflictOrTransportError,
    NotFoundError,
    SerializationError,
)
from subhub.domain.model import API_VERSION, ObjectKey

from .schema import StatusPayload
from .translator import from_document, list_from_document, to_document

if TYPE_CHECKING:
    from types import TracebackType

    from subhub.config import HubConfig
    from subhub.domain.model import LabelSelector, Resource
    from subhub.domain.ports import ResourceStore

log = getLogger(__name__)

_LIST_PAGE_SIZE = 500


def resource_path(kind: type[Resource], namespace: str, name: str | None = None) -> str:
    path = f"/apis/{API_VERSION}/namespaces/{namespace}/{kind.PLURAL}"
    if name is not None:
        path = f"{path}/{name}"
    return path


def build_http_client(config: HubConfig) -> httpx.Client:
    headers = {"Accept": "application/json"}
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"
    return httpx.Client(
        base_url=config.api_server,
        headers=headers,
        verify=config.verify,
        timeout=httpx.Timeout(config.timeout_seconds),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        status = StatusPayload.model_validate(response.json())
    except (ValueError, ValidationError):
        return response.text.strip() or response.reason_phrase
    return status.message or status.reason or response.reason_phrase


class HttpResourceStore:
    """``ResourceStore`` over the API server REST interface.

    Every call is bounded by the client timeout and never retried. HTTP 404
    maps to ``NotFoundError``, 409 to ``ConflictError`` and anything else that
    fails to ``ConflictOrTransportError``.
    """

    def __init__(self, *, config: HubConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = client or build_http_client(config)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get[T: Resource](self, kind: type[T], key: ObjectKey) -> T:
        payload = self._request(
            "GET", resource_path(kind, key.namespace, key.name), kind=kind, key=key
        )
        return from_document(kind, payload)

    def list[T: Resource](
        self,
        kind: type[T],
        namespace: str,
        *,
        selector: LabelSelector | None = None,
    ) -> list[T]:
        params: dict[str, str | int] = {"limit": _LIST_PAGE_SIZE}
        if selector is not None and not selector.is_empty:
            params["labelSelector"] = selector.to_query()

        items: list[T] = []
        while True:
            payload = self._request(
                "GET",
                resource_path(kind, namespace),
                kind=kind,
                key=ObjectKey(namespace=namespace, name=""),
                params=params,
            )
            items.extend(list_from_document(kind, payload))
            token = _continue_token(payload)
            if not token:
                return items
            params["continue"] = token

    def create[T: Resource](self, obj: T) -> T:
        payload = self._request(
            "POST",
            resource_path(type(obj), obj.namespace),
            kind=type(obj),
            key=obj.key,
            json=to_document(obj),
        )
        log.debug("Created %s %s", obj.KIND, obj.key)
        return from_document(type(obj), payload)

    def update[T: Resource](self, obj: T) -> T:
        payload = self._request(
            "PUT",
            resource_path(type(obj), obj.namespace, obj.name),
            kind=type(obj),
            key=obj.key,
            json=to_document(obj),
        )
        return from_document(type(obj), payload)

    def update_status[T: Resource](self, obj: T) -> T:
        payload = self._request(
            "PUT",
            resource_path(type(obj), obj.namespace, obj.name) + "/status",
            kind=type(obj),
            key=obj.key,
            json=to_document(obj),
        )
        return from_document(type(obj), payload)

    def delete(self, obj: Resource) -> None:
        body: dict[str, Any] = {"kind": "DeleteOptions", "apiVersion": "v1"}
        if obj.metadata.uid:
            body["preconditions"] = {"uid": obj.metadata.uid}
        self._request(
            "DELETE",
            resource_path(type(obj), obj.namespace, obj.name),
            kind=type(obj),
            key=obj.key,
            json=body,
        )
        log.debug("Deleted %s %s", obj.KIND, obj.key)

    def _request(
        self,
        method: str,
        path: str,
        *,
        kind: type[Resource],
        key: ObjectKey,
        params: dict[str, str | int] | None = None,
        json: object = None,
    ) -> object:
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise ConflictOrTransportError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(kind.KIND, str(key))
        if response.status_code == httpx.codes.CONFLICT:
            raise ConflictError(
                f"{kind.KIND} {key}: {_error_message(response)}",
                status_code=response.status_code,
            )
        if response.is_error:
            message = _error_message(response)
            log.debug("%s %s returned %s: %s", method, path, response.status_code, message)
            raise ConflictOrTransportError(
                f"{method} {kind.KIND} {key} failed ({response.status_code}): {message}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise SerializationError(f"{method} {path} returned invalid JSON") from exc


def _continue_token(payload: object) -> str:
    if not isinstance(payload, dict):
        return ""
    metadata = payload.get("metadata")
    if not isinstance(metadata, dict):
        return ""
    token = metadata.get("continue")
    return token if isinstance(token, str) else ""


if TYPE_CHECKING:

    def _as_resource_store(store: HttpResourceStore) -> ResourceStore:
        return store
