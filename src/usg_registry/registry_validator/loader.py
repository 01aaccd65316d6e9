"""Per-collection record loading with shape and duplicate checks."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

from .catalogue import CollectionSpec
from .errors import (
    ID_DUPLICATE,
    ID_MISSING,
    ID_NOT_STRING,
    PARSE_ERROR,
    RECORD_NOT_MAPPING,
    RegistryError,
)
from .hashing import sha256_bytes
from .models import LoadedCollection, LoadedRecord
from .report import RecordIssue, RegistryReport


logger = logging.getLogger(__name__)

# Extra acceptance check run on a parsed record with a fresh identifier.
Screen = Callable[[str, dict[str, Any]], RecordIssue | None]


def list_record_files(directory: Path, suffix: str = ".json") -> list[Path]:
    """Record files directly under `directory`, in file-name order."""
    return sorted(
        (path for path in directory.iterdir() if path.is_file() and path.name.endswith(suffix)),
        key=lambda path: path.name,
    )


def load_collection(
    spec: CollectionSpec,
    registry_root: Path,
    report: RegistryReport,
    *,
    suffix: str = ".json",
    screen: Screen | None = None,
) -> LoadedCollection:
    directory = registry_root / spec.name
    if not directory.is_dir():
        raise RegistryError("COLLECTION_DIR_MISSING", str(directory))

    files = list_record_files(directory, suffix)
    collection = LoadedCollection(name=spec.name, file_count=len(files))
    for path in files:
        relative = path.relative_to(registry_root).as_posix()
        data = path.read_bytes()
        body, issue = _parse_record(spec, relative, data)
        if issue is None:
            record_id = body[spec.id_field]
            first = collection.records.get(record_id)
            if first is not None:
                issue = RecordIssue(spec.label, ID_DUPLICATE, record_id, f"already loaded from {first.path}")
            elif screen is not None:
                issue = screen(record_id, body)
        if issue is not None:
            report.add_issue(issue)
            collection.error_count += 1
            continue
        collection.records[record_id] = LoadedRecord(
            record_id=record_id,
            path=relative,
            digest=sha256_bytes(data),
            body=body,
        )
        collection.ok_count += 1

    logger.info(
        "Loaded %s: files=%d ok=%d errors=%d",
        spec.name,
        collection.file_count,
        collection.ok_count,
        collection.error_count,
    )
    return collection


def _parse_record(
    spec: CollectionSpec, relative: str, data: bytes
) -> tuple[dict[str, Any], RecordIssue | None]:
    try:
        body = json.loads(data.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        return {}, RecordIssue(spec.label, PARSE_ERROR, relative, str(exc))
    if not isinstance(body, dict):
        return {}, RecordIssue(spec.label, RECORD_NOT_MAPPING, relative, type(body).__name__)
    record_id = body.get(spec.id_field)
    if record_id is None or record_id == "":
        return body, RecordIssue(spec.label, ID_MISSING, relative, f"missing {spec.id_field}")
    if not isinstance(record_id, str):
        return body, RecordIssue(
            spec.label, ID_NOT_STRING, relative, f"{spec.id_field} is {type(record_id).__name__}"
        )
    return body, None
