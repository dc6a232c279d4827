#!/usr/bin/env python3
"""
Event Value Chart Crawler - ranks datacenter prices into named packs.

For each pack definition:
    catalogue query -> datacenter scrape -> price upsert -> rank -> pack
then merges all packs into the stored report in one write.

Usage:
    # All packs
    python services/crawler/main.py

    # Selected packs, visible browser, no database writes
    python services/crawler/main.py --pack LN_TOP_85 HG_TOP_90 --headed --dry-run
"""
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import uuid
from typing import Callable, List, Optional, Sequence

from core.catalogue import search_players
from core.database import close_db, ensure_indexes
from core.logging import get_logger
from core.models.report import AggregateDocument, PackDefinition
from core.ranking import rank_results
from services.crawler.aggregator import PackAggregator
from services.crawler.browser import BrowserSessionManager
from services.crawler.packs import DEFAULT_PACKS, select_packs
from services.crawler.persistence import save_price_records
from services.crawler.price_scraper import PriceScraper

logger = get_logger("crawler")


def run_crawl(
    definitions: Sequence[PackDefinition],
    scraper: PriceScraper,
    aggregator: PackAggregator,
    search: Callable = search_players,
    persist: Callable = save_price_records,
    dry_run: bool = False,
) -> Optional[AggregateDocument]:
    """
    Run every pack definition and write the merged report.

    Returns:
        The written report, or None in dry-run mode
    """
    for definition in definitions:
        logger.info(
            f"Processing pack: {definition.pack_name}",
            extra={"pack_key": definition.key, "seasons": definition.seasons, "grades": definition.grades},
        )

        players = search(definition.seasons, definition.min_ovr)
        results = scraper.scrape(players, definition.grades)
        ranked = rank_results(results, definition.limit)

        if dry_run:
            print(f"\n{'=' * 70}")
            print(f"{definition.pack_name}  ({len(ranked)}/{len(results)})")
            for position, result in enumerate(ranked, start=1):
                print(f"{position:4d}. {result.id}  +{result.grade}  {result.price_text}")
            continue

        persist(results)
        pack = aggregator.build_pack(definition.pack_name, ranked)
        aggregator.stage(pack)

    if dry_run:
        logger.info("DRY RUN - report not written")
        return None

    existing = aggregator.load_report()
    return aggregator.merge_and_persist(existing, aggregator.staged)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    parser = argparse.ArgumentParser(
        description="Event Value Chart Crawler - datacenter prices ranked into packs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Pack keys:\n" + "\n".join(f"  {d.key:16s} {d.pack_name}" for d in DEFAULT_PACKS),
    )
    parser.add_argument(
        "--pack",
        nargs="+",
        metavar="KEY",
        help="Only crawl these packs (default: all)",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Run browser in headed mode (for debugging)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Scrape and rank without database writes",
    )
    args = parser.parse_args(argv)

    session_id = str(uuid.uuid4())[:8]
    logger.info("=" * 60)
    logger.info("EVENT VALUE CHART CRAWLER")
    logger.info("=" * 60)

    try:
        definitions = select_packs(args.pack)
        logger.info(
            "Starting crawler session",
            extra={
                "session_id": session_id,
                "packs": [d.key for d in definitions],
                "dry_run": args.dry_run,
                "headless": not args.headed,
            },
        )

        if not args.dry_run:
            ensure_indexes()

        scraper = PriceScraper(session=BrowserSessionManager(headless=not args.headed))
        document = run_crawl(definitions, scraper, PackAggregator(), dry_run=args.dry_run)

        if document is not None:
            logger.info(
                "Crawling process completed",
                extra={"session_id": session_id, "packs": document.pack_names()},
            )
        return 0

    except KeyboardInterrupt:
        logger.info("Crawler interrupted by user", extra={"session_id": session_id})
        return 1

    except Exception:
        logger.critical("Error in crawler", exc_info=True, extra={"session_id": session_id})
        return 1

    finally:
        close_db()


if __name__ == "__main__":
    sys.exit(main())
