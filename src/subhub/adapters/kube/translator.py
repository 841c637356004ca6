"""Translate between API server documents and domain resources."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, cast

from pydantic import ValidationError

from subhub.domain.errors import SerializationError
from subhub.domain.model import Channel, Deployable, Resource, Subscription
from subhub.domain.model.codec import (
    channel_from_document,
    channel_to_document,
    deployable_from_document,
    deployable_to_document,
    subscription_from_document,
    subscription_to_document,
)

from .schema import ObjectListPayload, ObjectPayload

if TYPE_CHECKING:
    from subhub.domain.model import JsonObject

_DECODERS: dict[type[Resource], Callable[[Mapping[str, Any]], Resource]] = {
    Subscription: subscription_from_document,
    Deployable: deployable_from_document,
    Channel: channel_from_document,
}


def to_document(obj: Resource) -> JsonObject:
    match obj:
        case Subscription():
            return subscription_to_document(obj)
        case Deployable():
            return deployable_to_document(obj)
        case Channel():
            return channel_to_document(obj)
        case _:
            raise SerializationError(f"unsupported resource type {type(obj).__name__}")


def from_document[T: Resource](kind: type[T], payload: object) -> T:
    decoder = _DECODERS.get(kind)
    if decoder is None:
        raise SerializationError(f"unsupported resource type {kind.__name__}")
    try:
        ObjectPayload.model_validate(payload)
    except ValidationError as exc:
        raise SerializationError(f"malformed {kind.KIND} payload: {exc}") from exc
    return cast(T, decoder(cast(Mapping[str, Any], payload)))


def list_from_document[T: Resource](kind: type[T], payload: object) -> list[T]:
    try:
        parsed = ObjectListPayload.model_validate(payload)
    except ValidationError as exc:
        raise SerializationError(f"malformed {kind.KIND} list payload: {exc}") from exc
    items: list[T] = []
    for item in parsed.items:
        # list items omit apiVersion/kind
        item.setdefault("apiVersion", kind.API_VERSION)
        item.setdefault("kind", kind.KIND)
        items.append(from_document(kind, item))
    return items
