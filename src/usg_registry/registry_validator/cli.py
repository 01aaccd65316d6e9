"""CLI entrypoint for registry validation + index rebuild."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import RegistryProfile
from .errors import RegistryError
from .logging_utils import configure_logging
from .runner import RegistryValidator


logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="USG registry validator + index builder")
    parser.add_argument("--profile", help="Path to registry profile YAML")
    parser.add_argument("--registry-root", help="Registry directory (overrides profile)")
    parser.add_argument("--schema-root", help="Schema directory (overrides profile)")
    parser.add_argument("--report", help="Write the JSON run report to this path")
    parser.add_argument("--json", action="store_true", help="Print the JSON run report to stdout")
    parser.add_argument("--log-file", action="append", help="Also log to this file (repeatable)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_paths=args.log_file)
    try:
        if args.profile:
            profile = RegistryProfile.load(Path(args.profile))
        else:
            profile = RegistryProfile.default()
        profile = profile.with_overrides(registry_root=args.registry_root, schema_root=args.schema_root)
        report = RegistryValidator(profile).run()
    except RegistryError as exc:
        logger.error("Registry validation aborted (%s): %s", exc.code, exc.detail or "")
        raise SystemExit(2) from exc

    payload = report.as_dict()
    if args.report:
        path = Path(args.report)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, sort_keys=True, ensure_ascii=True, indent=2) + "\n", encoding="utf-8")
    if args.json:
        print(json.dumps(payload, sort_keys=True, ensure_ascii=True))
    raise SystemExit(0 if report.ok() else 1)


if __name__ == "__main__":
    main()
