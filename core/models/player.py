"""
Catalogue entity read from the player report collection.
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class CatalogueEntity(BaseModel):
    """
    A player as seen by the crawler: only the spid matters, everything else
    in the player report document is ignored.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1, description="Player spid")
    name: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _spid_as_str(cls, value):
        # spids are stored as numbers in player reports and as strings in prices
        return str(value) if value is not None else value

