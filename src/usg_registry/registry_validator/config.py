"""Registry validator profile loader."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .errors import RegistryError
from .index import INDEX_SCHEMA_PREFIX, INDEX_SCHEMA_VERSION, INDEX_VERSION


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _resolve_env(value: Any) -> Any:
    if not value or not isinstance(value, str):
        return value
    match = _ENV_PATTERN.fullmatch(value.strip())
    if match:
        return os.getenv(match.group(1)) or ""
    return value


@dataclass(frozen=True)
class RegistryPolicy:
    index_version: str = INDEX_VERSION
    event_schema_version: str = "1.0"
    index_schema_urn_prefix: str = INDEX_SCHEMA_PREFIX
    index_schema_version: str = INDEX_SCHEMA_VERSION


@dataclass(frozen=True)
class RegistryWiring:
    registry_root: str = "registry"
    schema_root: str = "schemas/usg"
    index_dir: str = "_index"
    metadata_file: str = "registry-metadata.json"
    record_suffix: str = ".json"


@dataclass(frozen=True)
class RegistryProfile:
    profile_id: str
    policy: RegistryPolicy
    wiring: RegistryWiring
    base_dir: Path = Path(".")

    @classmethod
    def default(cls, base_dir: Path | None = None) -> "RegistryProfile":
        return cls(
            profile_id="default",
            policy=RegistryPolicy(),
            wiring=RegistryWiring(),
            base_dir=base_dir or Path.cwd(),
        )

    @classmethod
    def load(cls, path: Path, *, base_dir: Path | None = None) -> "RegistryProfile":
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise RegistryError("PROFILE_INVALID", f"{path}: {exc}") from exc
        if not isinstance(data, dict):
            raise RegistryError("PROFILE_INVALID", f"profile is not a mapping: {path}")
        profile_id = data.get("profile_id")
        if not profile_id:
            raise RegistryError("PROFILE_INVALID", "profile_id is required")
        policy = data.get("policy") or {}
        wiring = data.get("wiring") or {}
        for section, value in (("policy", policy), ("wiring", wiring)):
            if not isinstance(value, dict):
                raise RegistryError("PROFILE_INVALID", f"{section} must be a mapping")
        defaults_policy = RegistryPolicy()
        defaults_wiring = RegistryWiring()
        return cls(
            profile_id=str(profile_id),
            policy=RegistryPolicy(
                index_version=str(policy.get("index_version", defaults_policy.index_version)),
                event_schema_version=str(
                    policy.get("event_schema_version", defaults_policy.event_schema_version)
                ),
                index_schema_urn_prefix=str(
                    policy.get("index_schema_urn_prefix", defaults_policy.index_schema_urn_prefix)
                ),
                index_schema_version=str(
                    policy.get("index_schema_version", defaults_policy.index_schema_version)
                ),
            ),
            wiring=RegistryWiring(
                registry_root=_resolve_env(wiring.get("registry_root")) or defaults_wiring.registry_root,
                schema_root=_resolve_env(wiring.get("schema_root")) or defaults_wiring.schema_root,
                index_dir=wiring.get("index_dir", defaults_wiring.index_dir),
                metadata_file=wiring.get("metadata_file", defaults_wiring.metadata_file),
                record_suffix=wiring.get("record_suffix", defaults_wiring.record_suffix),
            ),
            base_dir=base_dir or Path.cwd(),
        )

    def with_overrides(
        self,
        *,
        registry_root: str | None = None,
        schema_root: str | None = None,
    ) -> "RegistryProfile":
        wiring = self.wiring
        if registry_root:
            wiring = replace(wiring, registry_root=registry_root)
        if schema_root:
            wiring = replace(wiring, schema_root=schema_root)
        return replace(self, wiring=wiring)

    @property
    def registry_root(self) -> Path:
        return self.base_dir / self.wiring.registry_root

    @property
    def schema_root(self) -> Path:
        return self.base_dir / self.wiring.schema_root

    @property
    def index_dir(self) -> Path:
        return self.registry_root / self.wiring.index_dir

    @property
    def metadata_path(self) -> Path:
        return self.registry_root / self.wiring.metadata_file
