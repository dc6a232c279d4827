"""
Price Schema - Scrape outcomes and persisted price records.

Architecture: Tagged outcome pattern
- A scrape of one (player, grade) pair either observed a price text or failed
- The outcome is a discriminated union on 'status', never a bare string
- Persisted records keep the raw text; failures are stored as the "Error" sentinel

Collections:
- prices: one PriceRecord per (id, grade)

Usage:
    result = observed_result("300123456", 9, "12억 3,000만")
    result.price_text   # "12억 3,000만"
    result.price_value  # 1230000000.0

    result = failed_result("300123456", 9, "Timeout 80000ms exceeded")
    result.price_text   # "Error"
    result.price_value  # float("-inf")
"""
from typing import Any, Literal, Union, Annotated
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from core.numerals import parse_price, UNPARSABLE_PRICE


# Stored in place of a price when extraction failed
FAILURE_SENTINEL = "Error"


# ============================================================================
# OUTCOME VARIANTS
# ============================================================================

class ObservedPrice(BaseModel):
    """Price text read from the datacenter page."""
    status: Literal["OBSERVED"] = "OBSERVED"
    text: str = Field(..., min_length=1, description="Raw price text, e.g. '1조 2,345억'")


class FailedPrice(BaseModel):
    """Navigation, polling or extraction failed for this pair."""
    status: Literal["FAILED"] = "FAILED"
    reason: str = Field("", description="Error message captured at failure time")


PriceOutcome = Annotated[
    Union[ObservedPrice, FailedPrice],
    Field(discriminator="status")
]


# ============================================================================
# SCRAPE RESULT
# ============================================================================

class PriceResult(BaseModel):
    """
    One scraped (player, grade) pair. Transient, never stored as-is.

    Examples:
        PriceResult(id="253000001", grade=10, outcome=ObservedPrice(text="12,000"))
        PriceResult(id="253000002", grade=10, outcome=FailedPrice(reason="timeout"))
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Player spid")
    grade: int = Field(..., ge=1, description="Upgrade grade (n1Strong)")
    outcome: PriceOutcome

    @property
    def is_failed(self) -> bool:
        return isinstance(self.outcome, FailedPrice)

    @property
    def price_text(self) -> str:
        """Text to persist: the observed text or the failure sentinel."""
        if isinstance(self.outcome, ObservedPrice):
            return self.outcome.text
        return FAILURE_SENTINEL

    @property
    def price_value(self) -> float:
        """Comparable magnitude; failures are always UNPARSABLE_PRICE."""
        if isinstance(self.outcome, FailedPrice):
            return UNPARSABLE_PRICE
        return parse_price(self.outcome.text)


def observed_result(player_id, grade: int, text: str) -> PriceResult:
    """Factory for a successful scrape."""
    return PriceResult(id=str(player_id), grade=grade, outcome=ObservedPrice(text=text))


def failed_result(player_id, grade: int, reason: str = "") -> PriceResult:
    """Factory for a failed scrape."""
    return PriceResult(id=str(player_id), grade=grade, outcome=FailedPrice(reason=reason))


# ============================================================================
# PERSISTED RECORD
# ============================================================================

class PriceRecord(BaseModel):
    """
    Last observed price for one (id, grade). Stored in the 'prices' collection.

    Example Document:
        {
            "_id": ObjectId("..."),
            "id": "253000001",
            "grade": 10,
            "price": "12억 3,000만",
            "updated_at": "2026-10-17T09:00:00Z"
        }
    """
    model_config = ConfigDict(populate_by_name=True)

    record_id: Any = Field(None, alias="_id")
    id: str
    grade: int
    price: str
    updated_at: datetime | None = None
