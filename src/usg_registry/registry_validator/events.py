"""Event loading: schema conformance plus reference screening."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .catalogue import EVENTS, CollectionSpec
from .context import RegistryContext
from .errors import SCHEMA_FAIL
from .loader import load_collection
from .models import LoadedCollection
from .references import first_reference_issue
from .report import RecordIssue, RegistryReport
from .schemas import EventSchemaValidator


@dataclass(frozen=True)
class EventScreen:
    """Schema first, then references in declared order; first failure wins."""

    spec: CollectionSpec
    schema: EventSchemaValidator
    context: RegistryContext

    def __call__(self, record_id: str, body: dict[str, Any]) -> RecordIssue | None:
        result = self.schema.check(body)
        if not result.ok:
            return RecordIssue(
                self.spec.label,
                SCHEMA_FAIL,
                record_id,
                f"{len(result.violations)} schema violation(s)",
                violations=tuple(item.as_dict() for item in result.violations),
            )
        return first_reference_issue(self.spec, record_id, body, self.context)


def load_events(
    registry_root: Path,
    schema: EventSchemaValidator,
    context: RegistryContext,
    report: RegistryReport,
    *,
    spec: CollectionSpec = EVENTS,
    suffix: str = ".json",
) -> LoadedCollection:
    screen = EventScreen(spec=spec, schema=schema, context=context)
    return load_collection(spec, registry_root, report, suffix=suffix, screen=screen)
