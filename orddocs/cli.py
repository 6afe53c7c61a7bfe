"""Documentation generator for the ord client.

Generates:
    docs/api-docs.json  - Methods and types, consumed by the HTML renderer
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import DocsConfig
from .errors import DocsError
from .generators import generate_docs, write_docs
from .sources import relative_path
from .validators import compute_coverage, validate_docs

log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="orddocs",
        description="Generate API documentation JSON from the ord client sources.",
    )
    parser.add_argument("--root", type=Path, help="Project root (default: current directory)")
    parser.add_argument("--source-dir", type=Path, help="Directory scanned for sources (default: src)")
    parser.add_argument("--output", type=Path, help="Output JSON file (default: docs/api-docs.json)")
    parser.add_argument("--types-file", type=Path, help="Central type descriptions file")
    parser.add_argument("--path-table", type=Path, help="File declaring the endpoint path table")
    parser.add_argument("--path-table-name", help="Variable holding the path table")
    parser.add_argument("--strict", action="store_true", help="Fail on undocumented methods")
    parser.add_argument("-v", "--verbose", action="store_true", help="List warnings and debug logs")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> DocsConfig:
    options = {
        "root": args.root,
        "source_dir": args.source_dir,
        "output": args.output,
        "type_descriptions": args.types_file,
        "path_table": args.path_table,
        "path_table_name": args.path_table_name,
    }
    return DocsConfig(
        strict=args.strict,
        **{key: value for key, value in options.items() if value is not None},
    )


def main(argv: list[str] | None = None) -> int:
    """Generate the documentation JSON."""
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _build_config(args)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2
    log.debug(f"Using configuration: {config.model_dump()}")

    print("Extracting documentation...")

    try:
        documentation, sources = generate_docs(config)
    except DocsError as e:
        print(f"  ✗ {e}", file=sys.stderr)
        return 1

    print(f"  ✓ {len(sources)} source files")
    print(f"  ✓ methods: {len(documentation.methods)}")
    print(f"  ✓ types: {len(documentation.types)}")

    validation = validate_docs(documentation, strict=config.strict)
    if validation.warnings:
        if args.verbose:
            print("\nWarnings:")
            for warning in validation.warnings:
                print(f"  ⚠ {warning}")
        else:
            print(f"\n  ⚠ {len(validation.warnings)} warnings (use -v to list)")

    if validation.errors:
        print("\nValidation errors:")
        for err in validation.errors:
            print(f"  ✗ {err}")
        return 1

    coverage = compute_coverage(documentation)
    print(f"\nCoverage: methods {coverage['methods']:.0%}, types {coverage['types']:.0%}")

    write_docs(config.output_path, documentation)
    output = relative_path(config.output_path, config.root)
    print(f"\nDocumentation generated from {len(sources)} files at {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
