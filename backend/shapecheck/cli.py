"""Command line validation of JSON/YAML documents against a schema file."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml

from shapecheck.config import get_settings
from shapecheck.errors import SchemaFaultError
from shapecheck.logging import cli_logger, configure_logging
from shapecheck.validation import SchemaValidator, ValidationMode

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def load_document(path: Path) -> Any:
    """Load a JSON document, or YAML for ``.yaml``/``.yml`` files."""
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shapecheck",
        description="Validate a JSON or YAML document against a JSON-Schema-style schema",
    )
    parser.add_argument("schema", type=Path, help="Schema file (JSON or YAML)")
    parser.add_argument("data", type=Path, help="Document to validate (JSON or YAML)")
    parser.add_argument("--coerce", action="store_true", help="Coerce a copy of the data and print it when valid")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first finding")
    parser.add_argument("--no-implicit-default", action="store_true",
                        help="Only use explicit defaults when filling missing properties")
    parser.add_argument("--set-missing-to-default", action="store_true",
                        help="Also fill optional properties that declare a default")
    parser.add_argument("--ignore-null-properties", action="store_true",
                        help="Honor the ignoreNullProperties schema keyword")
    parser.add_argument("--json", action="store_true", help="Print a JSON report")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    log = cli_logger()

    try:
        schema = load_document(args.schema)
        data = load_document(args.data)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error("document_load_failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    options = settings.validation_options(
        no_implicit_default=args.no_implicit_default,
        set_missing_to_default=args.set_missing_to_default,
        enable_ignore_null_properties=args.ignore_null_properties,
    )
    validator = SchemaValidator(schema, options)

    mode = ValidationMode.FAIL_FAST if args.fail_fast else ValidationMode.COLLECT_ALL
    try:
        outcome = validator.coerce(data, mode) if args.coerce else validator.validate(data, mode)
    except SchemaFaultError as e:
        if args.json:
            print(json.dumps({"valid": None, "fault": e.fault.to_dict()}, indent=2))
        else:
            print(f"schema error at {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        report = outcome.to_dict()
        if args.coerce and outcome.valid:
            report["value"] = outcome.value
        print(json.dumps(report, indent=2, ensure_ascii=False))
    elif outcome.valid:
        if args.coerce:
            print(json.dumps(outcome.value, indent=2, ensure_ascii=False))
        else:
            print("valid")
    else:
        for finding in outcome.findings:
            print(finding)

    log.info("cli_completed", schema=str(args.schema), data=str(args.data), valid=outcome.valid)
    return EXIT_VALID if outcome.valid else EXIT_INVALID
