"""
Player catalogue queries.

Player reports are owned by another application; this module only reads them.
A spid encodes its season: spid // 1_000_000 is the season number, so a season
maps to the id range [n * 1_000_000, n * 1_000_000 + 999_999].
"""
from typing import Iterable, List, Optional, Union

from pymongo import DESCENDING
from pymongo.collection import Collection

from core.config import config
from core.database import get_collection
from core.logging import get_logger
from core.models.player import CatalogueEntity

logger = get_logger("catalogue")

# Field paths in the player report documents
BEST_OVR_FIELD = "능력치.포지션능력치.최고능력치"
BEST_POSITION_OVR_FIELD = "능력치.포지션능력치.포지션최고능력치"

SEASON_SPAN = 1_000_000
MAX_RESULTS_PER_SEASON = 10_000
# Ratings at or below this are treated as "no rating filter"
MIN_OVR_FLOOR = 10


def season_number(season: Union[int, str]) -> int:
    """Season number from a season id: the last three digits ('10253' -> 253)."""
    return int(str(season)[-3:])


def season_id_range(season: Union[int, str]) -> dict:
    """Mongo condition selecting every spid of one season."""
    start = season_number(season) * SEASON_SPAN
    return {"id": {"$gte": start, "$lte": start + SEASON_SPAN - 1}}


def build_player_queries(seasons: Iterable[Union[int, str]], min_ovr: int = 0) -> List[dict]:
    """
    Build one query per season (or a single query when no season is given).

    Args:
        seasons: Season ids
        min_ovr: Minimum best rating; ignored unless above MIN_OVR_FLOOR

    Returns:
        List of Mongo filter documents, in season order
    """
    base_conditions = []
    if min_ovr and min_ovr > MIN_OVR_FLOOR:
        base_conditions.append({BEST_OVR_FIELD: {"$gte": int(min_ovr)}})

    season_list = list(seasons)
    if not season_list:
        return [{"$and": base_conditions} if base_conditions else {}]

    return [
        {"$and": base_conditions + [season_id_range(season)]}
        for season in season_list
    ]


def search_players(
    seasons: Iterable[Union[int, str]],
    min_ovr: int = 0,
    collection: Optional[Collection] = None,
) -> List[CatalogueEntity]:
    """
    Select candidate players by season and minimum rating.

    Results are ordered by best position rating (highest first) within each
    season and concatenated in season order.
    """
    seasons = list(seasons)
    if collection is None:
        collection = get_collection(config.PLAYER_REPORT_COLLECTION)

    players: List[CatalogueEntity] = []
    for query in build_player_queries(seasons, min_ovr):
        cursor = (
            collection.find(query, {"id": 1, "name": 1})
            .sort(BEST_POSITION_OVR_FIELD, DESCENDING)
            .limit(MAX_RESULTS_PER_SEASON)
        )
        batch = [CatalogueEntity.model_validate(doc) for doc in cursor]
        logger.debug(f"Catalogue query matched {len(batch)} players", extra={"query": str(query)})
        players.extend(batch)

    logger.info(
        f"Found {len(players)} candidate players",
        extra={"seasons": seasons, "min_ovr": min_ovr},
    )
    return players
