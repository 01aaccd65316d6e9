"""Loaded record and collection types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class LoadedRecord:
    """A parsed record plus the loader-owned path and digest.

    `body` is the file content as parsed; `path` and `digest` are never
    merged into it.
    """

    record_id: str
    path: str
    digest: str
    body: dict[str, Any]

    def get(self, name: str, default: Any = None) -> Any:
        return self.body.get(name, default)


@dataclass
class LoadedCollection:
    name: str
    records: dict[str, LoadedRecord] = field(default_factory=dict)
    file_count: int = 0
    ok_count: int = 0
    error_count: int = 0

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.records

    def sorted_records(self) -> list[LoadedRecord]:
        return [self.records[key] for key in sorted(self.records)]

    def summaries(self) -> list[dict[str, str]]:
        return [
            {"id": record.record_id, "path": record.path, "digest": record.digest}
            for record in self.sorted_records()
        ]
