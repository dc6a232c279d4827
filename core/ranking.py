"""
Price ranking for scrape results.
"""
from typing import List, Optional, Sequence

from core.models.price import PriceResult


def rank_results(results: Sequence[PriceResult], limit: Optional[int] = None) -> List[PriceResult]:
    """
    Rank results by parsed price, highest first, and keep the top `limit`.

    Failed and unparsable prices sort last. Equal prices keep their input order
    (sorted() is stable, also with reverse=True). The input is not modified.

    Args:
        results: Scrape results for one pack
        limit: Maximum number of entries to return (None keeps all)

    Returns:
        New list of ranked results

    Raises:
        ValueError: if limit is negative
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    ranked = sorted(results, key=lambda result: result.price_value, reverse=True)

    if limit is not None:
        ranked = ranked[:limit]

    return ranked
