"""Registry collection catalogue and load-order resolution."""

from __future__ import annotations

from dataclasses import dataclass
from graphlib import CycleError, TopologicalSorter
from typing import Any, Callable, Iterable, Sequence

from .errors import RegistryError
from .models import LoadedRecord


Projection = Callable[[LoadedRecord], dict[str, Any]]


@dataclass(frozen=True)
class ReferenceSpec:
    field: str
    target: str
    required: bool = True


@dataclass(frozen=True)
class CollectionSpec:
    """How one collection is loaded, checked and indexed.

    `strict` collections are screened (schema + references) while loading and
    failing records are excluded. Non-strict collections are loaded as-is and
    their references are checked afterwards; failures are counted but the
    records stay in the collection.
    """

    name: str
    id_field: str
    label: str
    project: Projection
    references: tuple[ReferenceSpec, ...] = ()
    strict: bool = False

    @property
    def key(self) -> str:
        return self.name.replace("-", "_")

    @property
    def depends_on(self) -> tuple[str, ...]:
        seen: list[str] = []
        for ref in self.references:
            if ref.target not in seen:
                seen.append(ref.target)
        return tuple(seen)


def project_fields(id_field: str, fields: Sequence[str], *, nullable: Iterable[str] = ()) -> Projection:
    blank_as_null = frozenset(nullable)

    def project(record: LoadedRecord) -> dict[str, Any]:
        entry: dict[str, Any] = {id_field: record.record_id, "path": record.path}
        for name in fields:
            value = record.get(name)
            if name in blank_as_null and value == "":
                value = None
            entry[name] = value
        entry["status"] = record.get("status") or "active"
        entry["hash_sha256"] = record.digest
        return entry

    return project


LEAGUES = CollectionSpec(
    name="leagues",
    id_field="league_id",
    label="league",
    project=project_fields("league_id", ("name", "sport", "region")),
)

TEAMS = CollectionSpec(
    name="teams",
    id_field="team_id",
    label="team",
    project=project_fields("team_id", ("name", "league_id", "city")),
    references=(ReferenceSpec("league_id", "leagues"),),
)

VENUES = CollectionSpec(
    name="venues",
    id_field="venue_id",
    label="venue",
    project=project_fields("venue_id", ("name", "city", "country", "timezone")),
)

BROADCASTERS = CollectionSpec(
    name="broadcasters",
    id_field="broadcaster_id",
    label="broadcaster",
    project=project_fields("broadcaster_id", ("name", "region")),
)

RIGHTS_BUNDLES = CollectionSpec(
    name="rights-bundles",
    id_field="rights_bundle_id",
    label="rights-bundle",
    project=project_fields("rights_bundle_id", ("name", "league_id", "territory")),
    references=(ReferenceSpec("league_id", "leagues"),),
)

# Reference order is the check order; the first failure rejects the event.
EVENTS = CollectionSpec(
    name="events",
    id_field="event_id",
    label="event",
    project=project_fields(
        "event_id",
        (
            "league_id",
            "start_time",
            "home_team_id",
            "away_team_id",
            "broadcaster_id",
            "venue_id",
            "rights_bundle_id",
        ),
        nullable=("venue_id", "rights_bundle_id"),
    ),
    references=(
        ReferenceSpec("league_id", "leagues"),
        ReferenceSpec("home_team_id", "teams"),
        ReferenceSpec("away_team_id", "teams"),
        ReferenceSpec("broadcaster_id", "broadcasters"),
        ReferenceSpec("venue_id", "venues", required=False),
        ReferenceSpec("rights_bundle_id", "rights-bundles", required=False),
    ),
    strict=True,
)

DEFAULT_COLLECTIONS: tuple[CollectionSpec, ...] = (
    LEAGUES,
    TEAMS,
    VENUES,
    BROADCASTERS,
    RIGHTS_BUNDLES,
    EVENTS,
)


def resolve_load_order(specs: Sequence[CollectionSpec]) -> list[CollectionSpec]:
    """Order collections so every reference target loads before its referrers.

    Ties keep declaration order, so the result is stable for a given input.
    """
    by_name = {spec.name: spec for spec in specs}
    if len(by_name) != len(specs):
        raise RegistryError("COLLECTION_GRAPH_INVALID", "duplicate collection name")
    position = {spec.name: idx for idx, spec in enumerate(specs)}
    sorter: TopologicalSorter[str] = TopologicalSorter()
    for spec in specs:
        for target in spec.depends_on:
            if target not in by_name:
                raise RegistryError("COLLECTION_GRAPH_INVALID", f"{spec.name}->{target}")
        sorter.add(spec.name, *spec.depends_on)
    try:
        sorter.prepare()
    except CycleError as exc:
        raise RegistryError("COLLECTION_GRAPH_INVALID", f"cycle:{exc.args[1]}") from exc
    ordered: list[CollectionSpec] = []
    while sorter.is_active():
        ready = sorted(sorter.get_ready(), key=position.__getitem__)
        ordered.extend(by_name[name] for name in ready)
        sorter.done(*ready)
    return ordered
