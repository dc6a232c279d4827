#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Integration test for the crawl pipeline and the CLI exit codes.
The scraper is mocked; persistence and the report run on mongomock (see conftest.py).
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from core.config import Config
from core.models.player import CatalogueEntity
from core.models.price import observed_result, failed_result
from core.models.report import PackDefinition
from services.crawler import main as crawler_main
from services.crawler.aggregator import PackAggregator
from services.crawler.packs import DEFAULT_PACKS, select_packs
from services.crawler.persistence import save_price_records


def _definitions():
    return [
        PackDefinition(key="X", pack_name="X pack", seasons=[253], min_ovr=90, grades=[9], limit=1),
        PackDefinition(key="Y", pack_name="Y pack", seasons=[237], min_ovr=90, grades=[10], limit=5),
    ]


def _scraper():
    scraper = MagicMock()
    scraper.scrape.side_effect = [
        [observed_result("A", 9, "12,000"), failed_result("B", 9, "timeout")],
        [observed_result("C", 10, "1억"), observed_result("D", 10, "2억")],
    ]
    return scraper


def _search(seasons, min_ovr):
    return [CatalogueEntity(id=f"{seasons[0]}000001")]


def test_run_crawl_end_to_end(mongo_db, price_collection):
    db = mongo_db
    settings = Config()
    settings.REPORT_ID = "report"
    aggregator = PackAggregator(price_collection=db.prices, report_collection=db.reports, settings=settings)

    document = crawler_main.run_crawl(
        _definitions(),
        _scraper(),
        aggregator,
        search=_search,
        persist=lambda results: save_price_records(results, collection=price_collection),
    )

    stored = db.reports.find_one({"id": "report"})
    assert [p["packName"] for p in stored["seasonPack"]] == ["X pack", "Y pack"]

    x_pack, y_pack = stored["seasonPack"]
    assert len(x_pack["playerPrice"]) == 1
    assert x_pack["playerPrice"][0]["playerPrice"] == db.prices.find_one({"id": "A", "grade": 9})["_id"]
    assert [e["playerPrice"] for e in y_pack["playerPrice"]] == [
        db.prices.find_one({"id": "D"})["_id"],
        db.prices.find_one({"id": "C"})["_id"],
    ]
    assert db.prices.find_one({"id": "B"})["price"] == "Error"
    assert document.pack_names() == ["X pack", "Y pack"]


def test_run_crawl_dry_run_writes_nothing(capsys):
    persist = MagicMock()
    aggregator = MagicMock()

    result = crawler_main.run_crawl(_definitions(), _scraper(), aggregator, search=_search, persist=persist, dry_run=True)

    assert result is None
    persist.assert_not_called()
    aggregator.merge_and_persist.assert_not_called()
    assert "X pack" in capsys.readouterr().out


def test_run_crawl_merge_failure_propagates():
    aggregator = MagicMock()
    aggregator.merge_and_persist.side_effect = RuntimeError("write failed")

    with pytest.raises(RuntimeError):
        crawler_main.run_crawl(_definitions(), _scraper(), aggregator, search=_search, persist=MagicMock())


@patch.object(crawler_main, "close_db")
@patch.object(crawler_main, "ensure_indexes")
@patch.object(crawler_main, "run_crawl")
def test_main_exit_codes(run_crawl, ensure_indexes, close_db):
    run_crawl.return_value = MagicMock()
    assert crawler_main.main(["--pack", "LN_TOP_85"]) == 0
    assert run_crawl.call_args[0][0] == [select_packs(["LN_TOP_85"])[0]]

    run_crawl.side_effect = RuntimeError("boom")
    assert crawler_main.main([]) == 1

    assert close_db.call_count == 2


@patch.object(crawler_main, "close_db")
@patch.object(crawler_main, "ensure_indexes")
@patch.object(crawler_main, "run_crawl")
def test_main_unknown_pack_fails(run_crawl, ensure_indexes, close_db):
    assert crawler_main.main(["--pack", "NOPE"]) == 1
    run_crawl.assert_not_called()


def test_default_packs():
    assert len(DEFAULT_PACKS) == 8
    assert len({d.pack_name for d in DEFAULT_PACKS}) == 8
    assert select_packs() == DEFAULT_PACKS
    hr22 = select_packs(["HR22_TOP_110"])[0]
    assert hr22.seasons == [261, 256, 254, 251, 247, 294]
    assert (hr22.min_ovr, hr22.grades, hr22.limit) == (103, [9], 110)
