from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from usg_registry.registry_validator.config import RegistryPolicy, RegistryProfile, RegistryWiring


EVENT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": [
        "event_id",
        "league_id",
        "start_time",
        "home_team_id",
        "away_team_id",
        "broadcaster_id",
    ],
    "properties": {
        "event_id": {"type": "string", "minLength": 1},
        "league_id": {"type": "string"},
        "start_time": {"type": "string"},
        "home_team_id": {"type": "string"},
        "away_team_id": {"type": "string"},
        "broadcaster_id": {"type": "string"},
        "venue_id": {"type": ["string", "null"]},
        "rights_bundle_id": {"type": ["string", "null"]},
    },
}


class RegistryTree:
    """Throwaway registry + schema layout under a temp directory."""

    collections = ("leagues", "teams", "venues", "broadcasters", "rights-bundles", "events")

    def __init__(self, base: Path) -> None:
        self.base = base
        self.root = base / "registry"
        self.schema_root = base / "schemas" / "usg"
        for name in self.collections:
            (self.root / name).mkdir(parents=True, exist_ok=True)
        self.schema_root.mkdir(parents=True, exist_ok=True)
        self.write_schema(EVENT_SCHEMA)
        self.write_metadata({"registry_id": "usg-test", "owner": "ops", "counts": {}})

    def write_schema(self, schema: dict[str, Any], name: str = "event-schema.v1.0.json") -> Path:
        path = self.schema_root / name
        path.write_text(json.dumps(schema), encoding="utf-8")
        return path

    def write_metadata(self, payload: dict[str, Any]) -> Path:
        path = self.root / "registry-metadata.json"
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    def write(self, collection: str, file_name: str, payload: Any) -> Path:
        path = self.root / collection / file_name
        text = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    def league(self, league_id: str, **fields: Any) -> Path:
        return self.write("leagues", f"{league_id.lower()}.json", {"league_id": league_id, "name": league_id, **fields})

    def team(self, team_id: str, league_id: str, **fields: Any) -> Path:
        return self.write(
            "teams", f"{team_id.lower()}.json", {"team_id": team_id, "name": team_id, "league_id": league_id, **fields}
        )

    def venue(self, venue_id: str, **fields: Any) -> Path:
        return self.write("venues", f"{venue_id.lower()}.json", {"venue_id": venue_id, "name": venue_id, **fields})

    def broadcaster(self, broadcaster_id: str, **fields: Any) -> Path:
        return self.write(
            "broadcasters",
            f"{broadcaster_id.lower()}.json",
            {"broadcaster_id": broadcaster_id, "name": broadcaster_id, **fields},
        )

    def rights_bundle(self, bundle_id: str, league_id: str, **fields: Any) -> Path:
        return self.write(
            "rights-bundles",
            f"{bundle_id.lower()}.json",
            {"rights_bundle_id": bundle_id, "name": bundle_id, "league_id": league_id, **fields},
        )

    def event(self, event_id: str, file_name: str | None = None, **fields: Any) -> Path:
        payload = {
            "event_id": event_id,
            "league_id": "L1",
            "start_time": "2026-03-01T19:00:00Z",
            "home_team_id": "T1",
            "away_team_id": "T2",
            "broadcaster_id": "B1",
        }
        payload.update(fields)
        return self.write("events", file_name or f"{event_id.lower()}.json", payload)

    def seed_valid(self) -> None:
        self.league("L1", sport="football", region="EU")
        self.team("T1", "L1")
        self.team("T2", "L1")
        self.venue("V1", city="Oslo")
        self.broadcaster("B1", region="EU")
        self.rights_bundle("R1", "L1")

    def profile(self) -> RegistryProfile:
        return RegistryProfile(
            profile_id="test",
            policy=RegistryPolicy(),
            wiring=RegistryWiring(registry_root="registry", schema_root="schemas/usg"),
            base_dir=self.base,
        )

    def read_index(self, collection: str) -> dict[str, Any]:
        path = self.root / "_index" / f"{collection}.index.json"
        return json.loads(path.read_text(encoding="utf-8"))

    def read_metadata(self) -> dict[str, Any]:
        return json.loads((self.root / "registry-metadata.json").read_text(encoding="utf-8"))


@pytest.fixture
def tree(tmp_path: Path) -> RegistryTree:
    return RegistryTree(tmp_path)
