"""Run report: per-record issues, tallies and the final verdict."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordIssue:
    collection: str
    code: str
    record: str
    detail: str | None = None
    violations: tuple[dict[str, str], ...] = ()

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "collection": self.collection,
            "code": self.code,
            "record": self.record,
        }
        if self.detail:
            payload["detail"] = self.detail
        if self.violations:
            payload["violations"] = [dict(item) for item in self.violations]
        return payload


@dataclass
class CollectionTally:
    files: int = 0
    valid: int = 0
    errors: int = 0
    reference_errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "files": self.files,
            "valid": self.valid,
            "errors": self.errors,
            "reference_errors": self.reference_errors,
        }


@dataclass
class RegistryReport:
    status: str = "OK"
    generated_at: str | None = None
    reason_codes: list[str] = field(default_factory=list)
    issues: list[RecordIssue] = field(default_factory=list)
    tallies: dict[str, CollectionTally] = field(default_factory=dict)
    indexes: list[str] = field(default_factory=list)

    def ok(self) -> bool:
        return self.status == "OK"

    @property
    def reference_errors(self) -> int:
        return sum(tally.reference_errors for tally in self.tallies.values())

    @property
    def error_count(self) -> int:
        loader_errors = sum(tally.errors for tally in self.tallies.values())
        return loader_errors + self.reference_errors

    def tally(self, collection: str) -> CollectionTally:
        return self.tallies.setdefault(collection, CollectionTally())

    def add_issue(self, issue: RecordIssue) -> None:
        """Record a rejected record and emit its diagnostic immediately."""
        if issue.code not in self.reason_codes:
            self.reason_codes.append(issue.code)
        self.issues.append(issue)
        message = f"[{issue.collection}] {issue.record} {issue.code}"
        if issue.detail:
            message = f"{message}: {issue.detail}"
        logger.error(message)
        for violation in issue.violations:
            logger.error("    %s: %s", violation.get("path", "<root>"), violation.get("message", ""))

    def finalize(self) -> None:
        self.status = "OK" if self.error_count == 0 else "FAIL"

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "generated_at": self.generated_at,
            "error_count": self.error_count,
            "reference_errors": self.reference_errors,
            "reason_codes": list(self.reason_codes),
            "issues": [issue.as_dict() for issue in self.issues],
            "tallies": {name: tally.as_dict() for name, tally in self.tallies.items()},
            "indexes": list(self.indexes),
        }
