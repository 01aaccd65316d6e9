"""Registry validator error taxonomy and helpers."""

from __future__ import annotations


class RegistryError(RuntimeError):
    """Structural precondition failure; aborts the run."""

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail
        message = f"{code}:{detail}" if detail else code
        super().__init__(message)


PARSE_ERROR = "PARSE_ERROR"
RECORD_NOT_MAPPING = "RECORD_NOT_MAPPING"
ID_MISSING = "ID_MISSING"
ID_NOT_STRING = "ID_NOT_STRING"
ID_DUPLICATE = "ID_DUPLICATE"
SCHEMA_FAIL = "SCHEMA_FAIL"
REF_MISSING = "REF_MISSING"
REF_DANGLING = "REF_DANGLING"
