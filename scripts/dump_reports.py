#!/usr/bin/env python3
"""Fetch, decrypt and print reports for one accessory.

Usage
-----
Set environment variables and run::

    export FINDR_API_URL="https://reports.example/query"
    export FINDR_PRIVATE_KEY="base64 private key"
    python scripts/dump_reports.py

Options::

    --name NAME          Accessory display name (default: accessory)
    --json               Output as machine-readable JSON
    --kml FILE           Also write the report trail to FILE as KML
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfindr import Accessory, DecryptionFailure, FindrClient, FindrConfig, write_kml  # noqa: E402


def _section(title: str) -> str:
    return f"\n{'═' * 60}\n  {title}\n{'═' * 60}"


async def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch and decrypt offline finding reports.")
    parser.add_argument("--name", default="accessory", help="Accessory display name")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--kml", help="Also write the report trail to FILE as KML")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    private_key = os.environ.get("FINDR_PRIVATE_KEY", "")
    if not private_key:
        print("FINDR_PRIVATE_KEY is not set", file=sys.stderr)
        sys.exit(2)

    accessory = Accessory(id=args.name, private_key=private_key, name=args.name)
    failures: list[DecryptionFailure] = []

    async with FindrClient(FindrConfig.from_env(), on_failure=failures.append) as client:
        reports = await client.get_reports(accessory)
        best = client.cached_best_location(accessory)

    if args.kml:
        write_kml(reports, args.kml, name=args.name)

    if args.json_mode:
        result: dict[str, Any] = {
            "advertisement_key": FindrClient.advertisement_key(accessory),
            "reports": [r.to_dict() for r in reports],
            "failures": [f.to_dict() for f in failures],
            "best_location": best.to_dict() if best else None,
        }
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    out = [_section(f"pyfindr reports for {args.name}")]
    out.append(f"  adv key   : {FindrClient.advertisement_key(accessory)}")
    out.append(f"  decrypted : {len(reports)}")
    out.append(f"  dropped   : {len(failures)}")
    for report in reports:
        loc = report.location
        out.append(
            f"  {report.seen_at.isoformat()}  {loc.latitude:.6f},{loc.longitude:.6f}"
            f"  ±{loc.accuracy}m  conf={report.confidence}  battery={report.battery}"
        )
    for failure in failures:
        out.append(f"  ! {failure.source_id}: {failure.kind} {failure.message}")

    out.append(_section("BEST LOCATION"))
    if best is None:
        out.append("  no valid reports")
    else:
        out.append(f"  {best.latitude:.6f},{best.longitude:.6f}")
        out.append(f"  cluster   : {best.reports_in_cluster} of {best.total_valid_reports}")
    print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
