"""Event JSON Schema loading + validation."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import unquote, urlparse

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from referencing import Registry, Resource
from referencing.exceptions import NoSuchResource, Unresolvable
from referencing.jsonschema import DRAFT202012

from .errors import RegistryError


def event_schema_name(version: str) -> str:
    return f"event-schema.v{version}.json"


@dataclass(frozen=True)
class SchemaViolation:
    path: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass
class SchemaCheck:
    violations: list[SchemaViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


class EventSchemaValidator:
    """Compiled event schema. Sibling `$ref`s resolve from the schema root."""

    def __init__(self, schema: dict[str, Any], *, base_uri: str, root: Path) -> None:
        self.root = root
        self.base_uri = base_uri
        self._resources: dict[str, Resource[Any]] = {}
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as exc:
            raise RegistryError("SCHEMA_INVALID", exc.message) from exc
        registry: Registry = Registry(retrieve=self._retrieve_resource)
        registry = registry.with_resource(
            base_uri,
            Resource.from_contents(schema, default_specification=DRAFT202012),
        )
        _check_refs(schema, registry.resolver(base_uri=base_uri), set())
        self._validator = Draft202012Validator(
            schema,
            registry=registry,
            format_checker=Draft202012Validator.FORMAT_CHECKER,
        )

    @classmethod
    def load(cls, root: Path, version: str) -> "EventSchemaValidator":
        path = _resolve_schema_path(root, version)
        schema = _read_document(path)
        if not isinstance(schema, dict):
            raise RegistryError("SCHEMA_INVALID", f"schema is not a mapping: {path}")
        return cls(schema, base_uri=path.resolve().as_uri(), root=root)

    def check(self, record: Mapping[str, Any]) -> SchemaCheck:
        try:
            errors = sorted(self._validator.iter_errors(dict(record)), key=lambda e: list(map(str, e.path)))
        except Unresolvable as exc:
            raise RegistryError("SCHEMA_INVALID", f"unresolvable $ref: {exc}") from exc
        return SchemaCheck(
            violations=[
                SchemaViolation(path=".".join(str(item) for item in error.path) or "<root>", message=error.message)
                for error in errors
            ]
        )

    def _retrieve_resource(self, uri: str) -> Resource[Any]:
        if uri in self._resources:
            return self._resources[uri]
        path = self._uri_to_path(uri)
        resource = Resource.from_contents(_read_document(path), default_specification=DRAFT202012)
        self._resources[uri] = resource
        return resource

    def _uri_to_path(self, uri: str) -> Path:
        parsed = urlparse(uri)
        if parsed.scheme not in ("", "file"):
            raise NoSuchResource(uri)
        path_str = unquote(parsed.path)
        if path_str.startswith("/") and len(path_str) > 2 and path_str[2] == ":":
            path_str = path_str.lstrip("/")
        path = Path(path_str)
        if not path.is_absolute():
            path = self.root / path
        if not path.exists():
            raise NoSuchResource(uri)
        return path


def _resolve_schema_path(root: Path, version: str) -> Path:
    path = root / event_schema_name(version)
    if path.exists():
        return path
    fallback = path.with_suffix(".yaml")
    if fallback.exists():
        return fallback
    raise RegistryError("SCHEMA_MISSING", str(path))


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (ValueError, RecursionError, yaml.YAMLError) as exc:
        raise RegistryError("SCHEMA_INVALID", f"{path}: {exc}") from exc


def _check_refs(node: Any, resolver: Any, seen: set[int]) -> None:
    """Resolve every `$ref` reachable from `node`; sub-schemas are walked once."""
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            try:
                resolved = resolver.lookup(ref)
            except Unresolvable as exc:
                raise RegistryError("SCHEMA_INVALID", f"unresolvable $ref: {ref}") from exc
            if id(resolved.contents) not in seen:
                seen.add(id(resolved.contents))
                _check_refs(resolved.contents, resolved.resolver, seen)
        for key, value in node.items():
            if key != "$ref":
                _check_refs(value, resolver, seen)
    elif isinstance(node, list):
        for item in node:
            _check_refs(item, resolver, seen)
