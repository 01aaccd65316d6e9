"""Referential integrity checks across loaded collections."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from .catalogue import CollectionSpec, ReferenceSpec
from .context import RegistryContext
from .errors import REF_DANGLING, REF_MISSING
from .report import RecordIssue, RegistryReport


logger = logging.getLogger(__name__)


def check_reference(
    ref: ReferenceSpec, body: Mapping[str, Any], context: RegistryContext
) -> tuple[str, str] | None:
    """Return `(code, detail)` when the reference fails, else None.

    Blank optional references count as absent.
    """
    value = body.get(ref.field)
    if value is None or value == "":
        if ref.required:
            return REF_MISSING, f"{ref.field} is required (-> {ref.target})"
        return None
    if not isinstance(value, str) or not context.resolves(ref.target, value):
        return REF_DANGLING, f'{ref.field}="{value}" not found in {ref.target}'
    return None


def first_reference_issue(
    spec: CollectionSpec,
    record_id: str,
    body: Mapping[str, Any],
    context: RegistryContext,
) -> RecordIssue | None:
    for ref in spec.references:
        failure = check_reference(ref, body, context)
        if failure is not None:
            code, detail = failure
            return RecordIssue(spec.label, code, record_id, detail)
    return None


def check_cross_references(
    specs: Iterable[CollectionSpec],
    context: RegistryContext,
    report: RegistryReport,
) -> dict[str, set[str]]:
    """Check references of already-loaded collections.

    Failing records are reported and counted but stay in their collection.
    Returns the flagged identifiers per collection.
    """
    flagged: dict[str, set[str]] = {}
    for spec in specs:
        if not spec.references:
            continue
        collection = context.get(spec.name)
        failed = flagged.setdefault(spec.name, set())
        for record in collection.sorted_records():
            issue = first_reference_issue(spec, record.record_id, record.body, context)
            if issue is None:
                continue
            report.add_issue(issue)
            report.tally(spec.key).reference_errors += 1
            failed.add(record.record_id)
        logger.info("Reference check %s: checked=%d failed=%d", spec.name, len(collection.records), len(failed))
    return flagged
