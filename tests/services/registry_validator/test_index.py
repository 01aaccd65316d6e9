from __future__ import annotations

import json

from usg_registry.registry_validator.catalogue import EVENTS, LEAGUES, RIGHTS_BUNDLES
from usg_registry.registry_validator.index import build_index_document, write_index
from usg_registry.registry_validator.models import LoadedCollection, LoadedRecord


def _collection(name: str, *records: LoadedRecord) -> LoadedCollection:
    return LoadedCollection(
        name=name,
        records={record.record_id: record for record in records},
        file_count=len(records),
        ok_count=len(records),
    )


def test_league_entries_sorted_with_defaults() -> None:
    collection = _collection(
        "leagues",
        LoadedRecord("nfl", "leagues/nfl.json", "b" * 64, {"league_id": "nfl", "name": "NFL", "status": "paused"}),
        LoadedRecord("NBA", "leagues/nba.json", "a" * 64, {"league_id": "NBA", "name": "NBA", "region": "US"}),
    )
    document = build_index_document(LEAGUES, collection, generated_at="2026-01-01T00:00:00+00:00")

    assert list(document) == ["index_version", "generated_at", "schema", "count", "leagues"]
    assert document["schema"] == "urn:usg:index:leagues:1.0"
    assert document["count"] == 2
    assert [entry["league_id"] for entry in document["leagues"]] == ["NBA", "nfl"]
    assert document["leagues"][0] == {
        "league_id": "NBA",
        "path": "leagues/nba.json",
        "name": "NBA",
        "sport": None,
        "region": "US",
        "status": "active",
        "hash_sha256": "a" * 64,
    }
    assert document["leagues"][1]["status"] == "paused"


def test_event_entries_null_optional_references() -> None:
    body = {
        "event_id": "E1",
        "league_id": "L1",
        "start_time": "2026-03-01T19:00:00Z",
        "home_team_id": "T1",
        "away_team_id": "T2",
        "broadcaster_id": "B1",
        "venue_id": "",
    }
    collection = _collection("events", LoadedRecord("E1", "events/e1.json", "c" * 64, body))
    entry = build_index_document(EVENTS, collection, generated_at="t")["events"][0]
    assert entry["venue_id"] is None
    assert entry["rights_bundle_id"] is None
    assert entry["broadcaster_id"] == "B1"
    assert entry["hash_sha256"] == "c" * 64


def test_rights_bundle_document_key_and_file(tmp_path) -> None:
    collection = _collection(
        "rights-bundles",
        LoadedRecord("R1", "rights-bundles/r1.json", "d" * 64, {"rights_bundle_id": "R1", "league_id": "L1"}),
    )
    document = build_index_document(RIGHTS_BUNDLES, collection, generated_at="t", index_version="9.9.9")
    path = write_index(tmp_path / "_index", RIGHTS_BUNDLES, document)

    assert path.name == "rights-bundles.index.json"
    written = path.read_text(encoding="utf-8")
    assert written.endswith("\n")
    payload = json.loads(written)
    assert payload["index_version"] == "9.9.9"
    assert payload["schema"] == "urn:usg:index:rights-bundles:1.0"
    assert payload["rights_bundles"][0]["rights_bundle_id"] == "R1"
    assert list(path.parent.iterdir()) == [path]


def test_write_replaces_previous_content(tmp_path) -> None:
    index_dir = tmp_path / "_index"
    index_dir.mkdir()
    stale = index_dir / "leagues.index.json"
    stale.write_text(json.dumps({"count": 99, "leagues": [{"league_id": "OLD"}], "extra": True}), encoding="utf-8")
    document = build_index_document(LEAGUES, _collection("leagues"), generated_at="t")
    write_index(index_dir, LEAGUES, document)
    payload = json.loads(stale.read_text(encoding="utf-8"))
    assert payload["count"] == 0
    assert payload["leagues"] == []
    assert "extra" not in payload
