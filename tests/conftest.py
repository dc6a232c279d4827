#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared pytest fixtures.

mongomock's bulk_write does not accept the UpdateOne requests built by current
pymongo releases, so the price collection fixture applies each request through
update_one instead. Filters, update documents and upsert flags are the ones
save_price_records builds.
"""
from types import SimpleNamespace

import mongomock
import pytest


class UpsertReplayCollection:
    """mongomock collection whose bulk_write runs each UpdateOne as update_one."""

    def __init__(self, collection):
        self._collection = collection
        self.bulk_requests = []

    def __getattr__(self, name):
        return getattr(self._collection, name)

    def bulk_write(self, requests, ordered=True):
        self.bulk_requests.append(list(requests))
        upserted = matched = modified = 0
        for request in requests:
            result = self._collection.update_one(request._filter, request._doc, upsert=request._upsert)
            if result.upserted_id is not None:
                upserted += 1
            else:
                matched += result.matched_count
                modified += result.modified_count
        return SimpleNamespace(upserted_count=upserted, matched_count=matched, modified_count=modified)


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient().db


@pytest.fixture
def price_collection(mongo_db):
    return UpsertReplayCollection(mongo_db.prices)
