"""
Pack aggregation - builds ranked packs and merges them into the event value chart.

A pack is replaced as a whole when a pack with the same name is produced again;
individual grade entries are never merged. Packs the current run does not
produce stay exactly as stored.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from pymongo.collection import Collection

from core.config import config, Config
from core.database import get_collection
from core.logging import get_logger, log_execution_time
from core.models.price import PriceResult
from core.models.report import AggregateDocument, Pack, RankedEntry

logger = get_logger("pack-aggregator")


def report_time(offset_hours: int, now: Optional[datetime] = None) -> datetime:
    """
    Current wall-clock time at a fixed UTC offset, as a naive datetime.

    The report is read as local time of that offset (KST by default), so the
    offset is applied and then dropped before storage.
    """
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(timezone(timedelta(hours=offset_hours)))
    return local.replace(tzinfo=None)


def merge_season_packs(existing: Sequence[Pack], incoming: Iterable[Pack]) -> List[Pack]:
    """
    Merge packs by name.

    - same name: the incoming pack replaces the stored one at its position
    - new name: appended in incoming order
    - everything else: kept untouched
    """
    merged = list(existing)
    for pack in incoming:
        index = next(
            (i for i, current in enumerate(merged) if current.pack_name == pack.pack_name),
            -1,
        )
        if index > -1:
            merged[index] = pack
        else:
            merged.append(pack)
    return merged


class PackAggregator:
    """
    Resolves ranked results to price record ids, stages packs, and writes the
    merged report once at the end of a run.

    Attributes:
        staged: Packs built during this run, in build order
        dropped: Per pack name, how many ranked entries had no price record
    """

    def __init__(
        self,
        price_collection: Optional[Collection] = None,
        report_collection: Optional[Collection] = None,
        settings: Config = config,
    ):
        self.settings = settings
        self.report_id = settings.REPORT_ID
        self._price_collection = price_collection
        self._report_collection = report_collection
        self.staged: List[Pack] = []
        self.dropped: Dict[str, int] = {}

    @property
    def price_collection(self) -> Collection:
        if self._price_collection is None:
            self._price_collection = get_collection(self.settings.PRICE_COLLECTION)
        return self._price_collection

    @property
    def report_collection(self) -> Collection:
        if self._report_collection is None:
            self._report_collection = get_collection(self.settings.REPORT_COLLECTION)
        return self._report_collection

    def build_pack(self, pack_name: str, ranked: Sequence[PriceResult]) -> Pack:
        """
        Turn ranked results into a pack referencing stored price records.

        Results whose record cannot be found are dropped and counted.
        """
        entries: List[RankedEntry] = []
        dropped = 0

        for result in ranked:
            record = self.price_collection.find_one(
                {"id": str(result.id), "grade": result.grade},
                {"_id": 1},
            )
            if record and record.get("_id") is not None:
                entries.append(RankedEntry(grade=result.grade, price_record_ref=record["_id"]))
            else:
                dropped += 1
                logger.warning(
                    f"No price record for ID {result.id} / Grade {result.grade}, dropping",
                    extra={"pack_name": pack_name, "player_id": result.id, "grade": result.grade},
                )

        self.dropped[pack_name] = dropped
        logger.info(
            f"Built pack with {len(entries)} entries ({dropped} dropped)",
            extra={"pack_name": pack_name, "entries": len(entries), "dropped": dropped},
        )
        return Pack(pack_name=pack_name, entries=entries)

    def stage(self, pack: Pack) -> None:
        """Queue a pack for the final merge; a later pack with the same name wins."""
        self.staged = merge_season_packs(self.staged, [pack])

    def load_report(self) -> Optional[AggregateDocument]:
        doc = self.report_collection.find_one({"id": self.report_id})
        if doc is None:
            logger.info("No existing report, starting fresh", extra={"report_id": self.report_id})
            return None
        return AggregateDocument.model_validate(doc)

    @log_execution_time(logger)
    def merge_and_persist(
        self,
        existing: Optional[AggregateDocument],
        new_packs: Optional[Sequence[Pack]] = None,
    ) -> AggregateDocument:
        """
        Merge new packs into the existing report and upsert it.

        A single update_one on the report document, so either the whole merged
        document is written or the stored one is left as it was. Errors propagate.
        """
        if new_packs is None:
            new_packs = self.staged

        existing_packs = existing.packs if existing is not None else []
        merged = merge_season_packs(existing_packs, new_packs)

        document = AggregateDocument(
            id=self.report_id,
            update_time=report_time(self.settings.REPORT_UTC_OFFSET_HOURS),
            packs=merged,
        )
        payload = document.to_dict_for_db()

        self.report_collection.update_one(
            {"id": self.report_id},
            {"$set": {"updateTime": payload["updateTime"], "seasonPack": payload["seasonPack"]}},
            upsert=True,
        )

        logger.info(
            "Report updated",
            extra={
                "report_id": self.report_id,
                "packs": document.pack_names(),
                "replaced_or_added": [pack.pack_name for pack in new_packs],
            },
        )
        return document
