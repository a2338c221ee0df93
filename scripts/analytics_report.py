"""
Print the analytics dashboard (or one section) as JSON.

Usage examples:
  # Whole dashboard, sections loaded three at a time
    python scripts/analytics_report.py --batch-size 3

  # A single section
    python scripts/analytics_report.py --section kpi_stats
"""
import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.handlers import to_json
from core.exceptions import StudioAnalyticsError
from database import close_db
from database.repositories import repository_scope
from services.analytics import SECTIONS, AnalyticsService, CurrentUser

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Print studio analytics as JSON")
    p.add_argument("--section", choices=sorted(SECTIONS), help="Only load this section")
    p.add_argument("--batch-size", type=int, help="Sections queried concurrently")
    p.add_argument("--timezone", help="Override the studio timezone")
    p.add_argument("--indent", type=int, default=2, help="JSON indentation")
    return p.parse_args(argv)


async def build_report(args) -> object:
    async def operator():
        # Local operator running the script against the database directly
        return CurrentUser(id="cli", role="admin")

    service = AnalyticsService(
        store_factory=lambda: repository_scope(timezone=args.timezone),
        user_resolver=operator,
        batch_size=args.batch_size,
        timezone=args.timezone,
    )
    if args.section:
        return to_json(await service.get_section(args.section))
    return to_json(await service.get_dashboard())


async def main(argv=None) -> int:
    logging.basicConfig(level=logging.WARNING)
    args = parse_args(argv)
    try:
        report = await build_report(args)
    except StudioAnalyticsError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await close_db()
    print(json.dumps(report, indent=args.indent, ensure_ascii=False))
    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
