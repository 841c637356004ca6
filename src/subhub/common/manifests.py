"""Load resource manifests from YAML or JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import yaml

from subhub.domain.errors import SerializationError


def load_documents(path: str | Path) -> list[dict[str, Any]]:
    """Return every non-empty document in ``path``.

    JSON is a subset of YAML, so one loader covers both. ``List`` kinds are
    flattened into their items.
    """

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
        loaded = list(yaml.safe_load_all(text))
    except OSError as exc:
        raise SerializationError(f"cannot read {source}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SerializationError(f"cannot parse {source}: {exc}") from exc

    documents: list[dict[str, Any]] = []
    for document in loaded:
        if document is None:
            continue
        if not isinstance(document, dict):
            raise SerializationError(f"{source}: expected an object, got {type(document).__name__}")
        mapping = cast(dict[str, Any], document)
        if str(mapping.get("kind", "")).endswith("List") and isinstance(mapping.get("items"), list):
            documents.extend(cast(list[dict[str, Any]], mapping["items"]))
        else:
            documents.append(mapping)
    return documents


def load_document(path: str | Path) -> dict[str, Any]:
    documents = load_documents(path)
    if len(documents) != 1:
        raise SerializationError(f"{path}: expected exactly one document, found {len(documents)}")
    return documents[0]
