"""Registry validation run: load, cross-check, index, update metadata."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Callable, Sequence

from .catalogue import DEFAULT_COLLECTIONS, CollectionSpec, resolve_load_order
from .config import RegistryProfile
from .context import RegistryContext
from .events import load_events
from .index import build_index_document, write_index
from .loader import load_collection
from .metadata import RegistryMetadata
from .references import check_cross_references
from .report import RegistryReport
from .schemas import EventSchemaValidator


logger = logging.getLogger(__name__)


class RegistryValidator:
    """Validates a registry tree and rebuilds its index documents.

    Per-record problems are reported and counted; the run still writes every
    index and the metadata counts. Structural problems raise `RegistryError`
    before anything is written.
    """

    def __init__(
        self,
        profile: RegistryProfile,
        *,
        collections: Sequence[CollectionSpec] = DEFAULT_COLLECTIONS,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self.profile = profile
        self.load_order = resolve_load_order(collections)
        self._clock = clock or _utc_now

    def run(self) -> RegistryReport:
        profile = self.profile
        registry_root = profile.registry_root
        suffix = profile.wiring.record_suffix
        report = RegistryReport(generated_at=self._clock())
        logger.info("Validating USG registry at %s", registry_root)

        schema = EventSchemaValidator.load(profile.schema_root, profile.policy.event_schema_version)
        metadata = RegistryMetadata.load(profile.metadata_path)

        context = RegistryContext(registry_root=registry_root)
        lenient = [spec for spec in self.load_order if not spec.strict]
        strict = [spec for spec in self.load_order if spec.strict]
        for spec in lenient:
            context.add(load_collection(spec, registry_root, report, suffix=suffix))
        flagged = check_cross_references(lenient, context, report)
        for spec in strict:
            context.add(load_events(registry_root, schema, context, report, spec=spec, suffix=suffix))

        counts: dict[str, tuple[int, int]] = {}
        for spec in self.load_order:
            collection = context.get(spec.name)
            tally = report.tally(spec.key)
            tally.files = collection.file_count
            tally.errors = collection.error_count
            tally.valid = collection.ok_count - len(flagged.get(spec.name, ()))
            counts[spec.key] = (tally.files, tally.valid)

        policy = profile.policy
        for spec in self.load_order:
            document = build_index_document(
                spec,
                context.get(spec.name),
                generated_at=report.generated_at or self._clock(),
                index_version=policy.index_version,
                schema_prefix=policy.index_schema_urn_prefix,
                schema_version=policy.index_schema_version,
            )
            path = write_index(profile.index_dir, spec, document)
            report.indexes.append(path.name)

        metadata.update_counts(counts)
        metadata.write()

        report.finalize()
        _log_summary(report, self.load_order, policy.index_version)
        return report


def _log_summary(report: RegistryReport, specs: Sequence[CollectionSpec], index_version: str) -> None:
    logger.info("Registry validation complete.")
    for spec in specs:
        tally = report.tally(spec.key)
        logger.info(
            "  %-15s files=%d valid=%d errors=%d",
            spec.name,
            tally.files,
            tally.valid,
            tally.errors + tally.reference_errors,
        )
    logger.info("  Indexes rebuilt: %s", ", ".join(report.indexes))
    if report.ok():
        logger.info("Registry is consistent and schema-valid (index v%s).", index_version)
    else:
        logger.error("Registry has %d validation error(s). See log above.", report.error_count)


def _utc_now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()
