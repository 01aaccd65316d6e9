"""Run-scoped arena of loaded collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .models import LoadedCollection


@dataclass
class RegistryContext:
    """Collections loaded so far in one run, keyed by collection name.

    Each collection is added once, after loading, and only read afterwards.
    """

    registry_root: Path
    collections: dict[str, LoadedCollection] = field(default_factory=dict)

    def add(self, collection: LoadedCollection) -> None:
        if collection.name in self.collections:
            raise ValueError(f"collection already loaded: {collection.name}")
        self.collections[collection.name] = collection

    def get(self, name: str) -> LoadedCollection:
        try:
            return self.collections[name]
        except KeyError:
            raise KeyError(f"collection not loaded: {name}") from None

    def resolves(self, collection: str, record_id: str) -> bool:
        return record_id in self.get(collection)
