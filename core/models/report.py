"""
Report Schema - Named packs and the aggregate event value chart.

Architecture: One aggregate document per report id
- Each run computes a set of ranked packs ("season packs")
- Packs are merged by name into the stored document
- Field names follow the stored document read by the web front end
  (seasonPack / packName / playerPrice / updateTime)

Collections:
- eventvaluecharts: one AggregateDocument per report id

Example Document:
    {
        "id": "챔피언스 저니 4000p",
        "updateTime": ISODate("2026-10-17T18:00:00"),
        "seasonPack": [
            {
                "packName": "BOE21 클래스 Top Price 100 스페셜팩 (10강, 90+)",
                "playerPrice": [
                    {"grade": 10, "playerPrice": ObjectId("...")},
                    ...
                ]
            }
        ]
    }
"""
from typing import Any, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator


# ============================================================================
# PACK MODELS
# ============================================================================

class RankedEntry(BaseModel):
    """Reference from a ranked position to a persisted PriceRecord."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    grade: int
    price_record_ref: Any = Field(
        ...,
        alias="playerPrice",
        description="_id of the PriceRecord in the prices collection"
    )


class Pack(BaseModel):
    """
    A named, ranked top-N list. Identity is pack_name.

    Extra fields on stored packs are kept so packs untouched by a run are
    written back exactly as they were read.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    pack_name: str = Field(..., alias="packName", min_length=1)
    entries: List[RankedEntry] = Field(default_factory=list, alias="playerPrice")


class AggregateDocument(BaseModel):
    """The event value chart combining all packs across runs."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Fixed report identifier")
    update_time: Optional[datetime] = Field(None, alias="updateTime")
    packs: List[Pack] = Field(default_factory=list, alias="seasonPack")

    def pack_names(self) -> List[str]:
        return [pack.pack_name for pack in self.packs]

    def get_pack(self, pack_name: str) -> Optional[Pack]:
        for pack in self.packs:
            if pack.pack_name == pack_name:
                return pack
        return None

    def to_dict_for_db(self) -> dict:
        """Convert to dictionary for MongoDB (keeps datetime and ObjectId as BSON types)."""
        return self.model_dump(by_alias=True)


# ============================================================================
# BATCH DEFINITION
# ============================================================================

class PackDefinition(BaseModel):
    """
    What to crawl for one pack.

    Example:
        PackDefinition(
            key="BOE21_TOP_100",
            pack_name="BOE21 클래스 Top Price 100 스페셜팩 (10강, 90+)",
            seasons=[253],
            min_ovr=90,
            grades=[10],
            limit=100,
        )
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Short CLI key")
    pack_name: str = Field(..., min_length=1)
    seasons: List[int] = Field(default_factory=list, description="Season ids (last 3 digits used)")
    min_ovr: int = Field(0, ge=0, description="Minimum best position rating")
    grades: List[int] = Field(..., min_length=1, description="Upgrade grades to scrape")
    limit: Optional[int] = Field(None, ge=0, description="Top-N cap (None keeps all)")

    @field_validator("grades", "seasons", mode="before")
    @classmethod
    def _wrap_single_value(cls, value):
        if isinstance(value, int):
            return [value]
        return value
