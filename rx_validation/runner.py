#!/usr/bin/env python3
"""CLI entry point for prescription validation.

Usage:
    # Validate a draft against a catalog file
    python -m rx_validation.runner draft.json --catalog catalog.json

    # Draft file carrying its own "catalog" array
    python -m rx_validation.runner draft.json

    # Machine-readable output
    python -m rx_validation.runner draft.json --catalog catalog.json --json

    # Evaluate as of a given date (expiry and start date rules)
    python -m rx_validation.runner draft.json --catalog catalog.json --today 2026-01-15

Exit codes: 0 valid, 1 invalid, 2 unreadable input.
"""

import argparse
import json
import logging
import sys
from datetime import date

from rx_validation.catalog import MedicationCatalog
from rx_validation.models import PrescriptionDraft
from rx_validation.validators import validate_form


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def print_summary(result, draft: PrescriptionDraft) -> None:
    print("\n" + "=" * 60)
    print("PRESCRIPTION VALIDATION")
    print("=" * 60)
    print(f"  {'medications':20}: {len(draft.lines)}")
    print(f"  {'valid':20}: {result.is_valid}")

    for key, value in result.errors.items():
        if isinstance(value, dict):
            print(f"\n  {key}:")
            for field_name, message in value.items():
                print(f"    - {field_name}: {message}")
        else:
            print(f"\n  {key}: {value}")

    warnings = result.warnings
    if warnings:
        print(f"\n  Warnings: {len(warnings)}")
        for flag in warnings:
            print(f"    - {flag.key}.{flag.field}: {flag.message}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Prescription Safety Validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("draft", help="Prescription draft JSON file")
    parser.add_argument("--catalog", help="Medication catalog JSON file (array of medications)")
    parser.add_argument("--today", type=date.fromisoformat, help="Evaluation date YYYY-MM-DD (default: today)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        with open(args.draft, "r", encoding="utf-8") as f:
            payload = json.load(f)

        if args.catalog:
            catalog = MedicationCatalog.from_json(args.catalog)
        else:
            catalog = MedicationCatalog.from_dicts(payload.get("catalog", []))

        draft = PrescriptionDraft.from_dict(payload)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.error(f"Could not read input: {e}")
        return 2

    result = validate_form(draft, catalog, today=args.today)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_summary(result, draft)

    return 0 if result.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
