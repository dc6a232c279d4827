"""
Crawler Core Models

Exports for price results/records, pack report, and catalogue models.
"""

# Price models (scrape outcomes and persisted records)
from core.models.price import (
    # Outcome variants
    ObservedPrice,
    FailedPrice,
    PriceOutcome,
    # Main models
    PriceResult,
    PriceRecord,
    # Factory functions
    observed_result,
    failed_result,
    # Constants
    FAILURE_SENTINEL,
)

# Report models (packs and aggregate document)
from core.models.report import (
    RankedEntry,
    Pack,
    AggregateDocument,
    PackDefinition,
)

# Catalogue models
from core.models.player import CatalogueEntity

__all__ = [
    # Price models
    "ObservedPrice",
    "FailedPrice",
    "PriceOutcome",
    "PriceResult",
    "PriceRecord",
    "observed_result",
    "failed_result",
    "FAILURE_SENTINEL",
    # Report models
    "RankedEntry",
    "Pack",
    "AggregateDocument",
    "PackDefinition",
    # Catalogue models
    "CatalogueEntity",
]
