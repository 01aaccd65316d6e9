"""Index document projection + writing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .catalogue import CollectionSpec
from .models import LoadedCollection


INDEX_VERSION = "0.2.0"
INDEX_SCHEMA_PREFIX = "urn:usg:index"
INDEX_SCHEMA_VERSION = "1.0"


def index_file_name(spec: CollectionSpec) -> str:
    return f"{spec.name}.index.json"


def build_entries(spec: CollectionSpec, collection: LoadedCollection) -> list[dict[str, Any]]:
    return [spec.project(record) for record in collection.sorted_records()]


def build_index_document(
    spec: CollectionSpec,
    collection: LoadedCollection,
    *,
    generated_at: str,
    index_version: str = INDEX_VERSION,
    schema_prefix: str = INDEX_SCHEMA_PREFIX,
    schema_version: str = INDEX_SCHEMA_VERSION,
) -> dict[str, Any]:
    entries = build_entries(spec, collection)
    return {
        "index_version": index_version,
        "generated_at": generated_at,
        "schema": f"{schema_prefix}:{spec.name}:{schema_version}",
        "count": len(entries),
        spec.key: entries,
    }


def write_index(index_dir: Path, spec: CollectionSpec, document: dict[str, Any]) -> Path:
    index_dir.mkdir(parents=True, exist_ok=True)
    path = index_dir / index_file_name(spec)
    write_json(path, document)
    return path


def write_json(path: Path, payload: dict[str, Any]) -> None:
    """Replace `path` with `payload` in one write."""
    text = json.dumps(payload, ensure_ascii=True, indent=2) + "\n"
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)
