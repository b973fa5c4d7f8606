from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path

from config import VENDOR_DATA_FILE
from .models import WeddingRequirements
from .services.chat_formatter import format_vendor_matches_for_chat
from .services.matching_service import MatchingService
from .services.validation import ValidationError, parse_match_request, validate_vendor
from .services.vendor_repository import JsonVendorRepository


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Match wedding vendors against a couple's requirements."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match = subparsers.add_parser("match", help="Rank vendors for a location and print the results")
    match.add_argument("--location", required=True, help="Suburb, region or city (e.g. 'Newcastle')")
    match.add_argument("--guests", type=int, help="Expected guest count")
    match.add_argument("--budget", type=int, help="Total wedding budget in cents (e.g. 4000000 for $40k)")
    match.add_argument("--style", help="Wedding style (e.g. 'Rustic')")
    match.add_argument(
        "--preference",
        action="append",
        default=[],
        help="Keyword to look for in vendor descriptions (repeatable)",
    )
    match.add_argument("--json", action="store_true", help="Print machine-readable JSON instead of chat text")
    match.add_argument("--file", type=Path, default=VENDOR_DATA_FILE, help="Vendor JSON file")

    validate = subparsers.add_parser("validate-vendors", help="Check vendor data quality")
    validate.add_argument("--file", type=Path, default=VENDOR_DATA_FILE, help="Vendor JSON file")

    return parser.parse_args(argv)


def run_match(args: argparse.Namespace) -> int:
    try:
        requirements: WeddingRequirements = parse_match_request({
            "location": args.location,
            "guest_count": args.guests,
            "budget_total": args.budget,
            "style": args.style,
            "preferences": args.preference,
        })
    except ValidationError as e:
        print(f"❌ {e}")
        return 2

    matches = MatchingService(JsonVendorRepository(args.file)).find_matching_vendors(requirements)
    if args.json:
        print(json.dumps(matches.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_vendor_matches_for_chat(matches))
    return 0


def run_validate(args: argparse.Namespace) -> int:
    vendors = JsonVendorRepository(args.file).all_vendors()
    print(f"🔍 Validating {len(vendors)} vendors from {args.file}...\n")

    failed = 0
    for vendor in vendors:
        errors = validate_vendor(vendor)
        if errors:
            failed += 1
            print(f"❌ {vendor.id}: {vendor.name}")
            for err in errors:
                print(f"   - {err}")
            print()

    print("📊 By category:")
    for category, count in Counter(v.category.value for v in vendors).most_common():
        print(f"   • {category}: {count}")

    if failed:
        print(f"\n❌ {failed} vendor(s) failed validation.")
        return 1
    print("\n✅ All vendors validated successfully!")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "match":
        return run_match(args)
    return run_validate(args)


if __name__ == "__main__":
    raise SystemExit(main())
