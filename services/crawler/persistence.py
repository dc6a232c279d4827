"""
Price record persistence.

Every scrape result becomes one upsert keyed by (id, grade) in the prices
collection, submitted as a single bulk write. Persistence keeps price history
for other readers; ranking within a run works from in-memory results, so a
failed bulk write is logged and the run goes on.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from pymongo import UpdateOne
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, PyMongoError

from core.config import config
from core.database import get_collection
from core.logging import get_logger, log_execution_time
from core.models.price import PriceResult

logger = get_logger("price-store")


def build_price_upserts(results: Sequence[PriceResult], now: Optional[datetime] = None) -> List[UpdateOne]:
    """One upsert per result; failed results store the failure sentinel."""
    now = now or datetime.now(timezone.utc)
    return [
        UpdateOne(
            {"id": str(result.id), "grade": result.grade},
            {"$set": {"price": result.price_text, "updated_at": now}},
            upsert=True,
        )
        for result in results
    ]


@log_execution_time(logger)
def save_price_records(
    results: Sequence[PriceResult],
    collection: Optional[Collection] = None,
) -> Dict[str, int]:
    """
    Upsert scrape results into the prices collection.

    Args:
        results: Scrape results of one pack
        collection: Target collection (defaults to config.PRICE_COLLECTION)

    Returns:
        Stats dictionary with upserted/modified/matched/errors counts
    """
    stats = {"upserted": 0, "modified": 0, "matched": 0, "errors": 0}

    if not results:
        logger.warning("No price data to save")
        return stats

    if collection is None:
        collection = get_collection(config.PRICE_COLLECTION)

    operations = build_price_upserts(results)

    try:
        result = collection.bulk_write(operations, ordered=True)
        stats["upserted"] = result.upserted_count
        stats["modified"] = result.modified_count
        stats["matched"] = result.matched_count
        logger.info("Price records updated", extra=dict(stats, operations=len(operations)))

    except BulkWriteError as e:
        details = e.details or {}
        stats["upserted"] = details.get("nUpserted", 0)
        stats["modified"] = details.get("nModified", 0)
        stats["matched"] = details.get("nMatched", 0)
        stats["errors"] = len(details.get("writeErrors", [])) or 1
        logger.error(
            "Price bulk write partially failed",
            exc_info=True,
            extra=dict(stats, operations=len(operations)),
        )

    except PyMongoError:
        stats["errors"] = len(operations)
        logger.error("Price bulk write failed", exc_info=True, extra={"operations": len(operations)})

    return stats
