#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for price result and report models.
Validates the tagged outcome union and the stored report field names.
"""
import sys
from pathlib import Path
from datetime import datetime

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from bson import ObjectId
from pydantic import ValidationError

from core.models import (
    AggregateDocument,
    CatalogueEntity,
    FailedPrice,
    ObservedPrice,
    Pack,
    PackDefinition,
    PriceRecord,
    PriceResult,
    RankedEntry,
    FAILURE_SENTINEL,
    failed_result,
    observed_result,
)
from core.numerals import UNPARSABLE_PRICE


def test_observed_result():
    result = observed_result(253000001, 10, "1억 2,000만")

    assert result.id == "253000001"
    assert isinstance(result.outcome, ObservedPrice)
    assert not result.is_failed
    assert result.price_text == "1억 2,000만"
    assert result.price_value == 120_000_000


def test_failed_result():
    result = failed_result("253000002", 10, "Timeout 80000ms exceeded.")

    assert isinstance(result.outcome, FailedPrice)
    assert result.is_failed
    assert result.price_text == FAILURE_SENTINEL == "Error"
    assert result.price_value == UNPARSABLE_PRICE


def test_outcome_discriminator_from_dict():
    """Outcome variant is chosen by 'status'."""
    result = PriceResult.model_validate(
        {"id": "1", "grade": 9, "outcome": {"status": "FAILED", "reason": "net::ERR_ABORTED"}}
    )
    assert isinstance(result.outcome, FailedPrice)

    with pytest.raises(ValidationError):
        PriceResult.model_validate({"id": "1", "grade": 9, "outcome": {"status": "MAYBE"}})


def test_observed_price_requires_text():
    with pytest.raises(ValidationError):
        ObservedPrice(text="")


def test_price_record_from_db_document():
    oid = ObjectId()
    record = PriceRecord.model_validate({"_id": oid, "id": "1", "grade": 9, "price": "12,000"})

    assert record.record_id == oid
    assert record.price == "12,000"


def test_report_document_uses_stored_field_names():
    oid = ObjectId()
    document = AggregateDocument(
        id="챔피언스 저니 4000p",
        update_time=datetime(2026, 10, 17, 9, 0),
        packs=[Pack(pack_name="X", entries=[RankedEntry(grade=9, price_record_ref=oid)])],
    )

    payload = document.to_dict_for_db()

    assert payload["updateTime"] == datetime(2026, 10, 17, 9, 0)
    assert payload["seasonPack"] == [{"packName": "X", "playerPrice": [{"grade": 9, "playerPrice": oid}]}]


def test_report_document_from_db_keeps_pack_extras():
    doc = {
        "_id": ObjectId(),
        "id": "report",
        "updateTime": datetime(2026, 1, 1),
        "seasonPack": [{"packName": "Y", "playerPrice": [], "note": "manual"}],
        "__v": 0,
    }

    document = AggregateDocument.model_validate(doc)

    assert document.pack_names() == ["Y"]
    assert document.get_pack("Y").model_dump(by_alias=True)["note"] == "manual"
    assert document.get_pack("Z") is None


def test_pack_definition_single_values_wrapped():
    definition = PackDefinition(key="K", pack_name="K pack", seasons=253, grades=10, limit=5)

    assert definition.seasons == [253]
    assert definition.grades == [10]


def test_pack_definition_validation():
    with pytest.raises(ValidationError):
        PackDefinition(key="K", pack_name="K pack", grades=[], limit=5)

    with pytest.raises(ValidationError):
        PackDefinition(key="K", pack_name="K pack", grades=[9], limit=-1)


def test_catalogue_entity_ignores_report_fields():
    entity = CatalogueEntity.model_validate(
        {"_id": ObjectId(), "id": 253000001, "name": "Son", "능력치": {"포지션능력치": {}}}
    )

    assert entity.id == "253000001"
    assert entity.name == "Son"
