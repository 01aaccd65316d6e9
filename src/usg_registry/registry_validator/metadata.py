"""Registry metadata read-modify-write."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Mapping

from .errors import RegistryError
from .index import write_json


@dataclass
class RegistryMetadata:
    path: Path
    payload: dict[str, Any]

    @classmethod
    def load(cls, path: Path) -> "RegistryMetadata":
        if not path.exists():
            raise RegistryError("METADATA_MISSING", str(path))
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (ValueError, RecursionError) as exc:
            raise RegistryError("METADATA_INVALID", f"{path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise RegistryError("METADATA_INVALID", f"metadata is not a mapping: {path}")
        counts = payload.get("counts")
        if counts is not None and not isinstance(counts, dict):
            raise RegistryError("METADATA_INVALID", "counts must be a mapping")
        return cls(path=path, payload=payload)

    def update_counts(self, tallies: Mapping[str, tuple[int, int]]) -> dict[str, Any]:
        """Overwrite `<key>_files`/`<key>_valid`; every other field is kept."""
        counts = self.payload.get("counts")
        if counts is None:
            counts = self.payload["counts"] = {}
        for key, (files, valid) in tallies.items():
            counts[f"{key}_files"] = files
            counts[f"{key}_valid"] = valid
        return counts

    def write(self) -> None:
        write_json(self.path, self.payload)
