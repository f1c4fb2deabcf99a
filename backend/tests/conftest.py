"""
backend/tests/conftest.py

Purpose:
    Shared pytest bootstrap: import paths, an in-memory stand-in for the
    Motor database (users and bets collections) and a scripted random
    source for deterministic game rounds.
"""

from __future__ import annotations

import copy
import re
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

_THIS_FILE = Path(__file__).resolve()
_BACKEND_DIR = _THIS_FILE.parents[1]
_REPO_ROOT = _THIS_FILE.parents[2]

for candidate in (str(_BACKEND_DIR), str(_REPO_ROOT)):
    if candidate not in sys.path:
        sys.path.insert(0, candidate)

import app.database as _db  # noqa: E402
from app.services.random_source import RandomOutcomeSource  # noqa: E402


def _matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
            continue
        value = doc.get(key)
        if isinstance(cond, dict) and any(k.startswith("$") for k in cond):
            for op, arg in cond.items():
                if op == "$in" and value not in arg:
                    return False
                if op == "$gte" and (value is None or value < arg):
                    return False
                if op == "$ne" and value == arg:
                    return False
                if op == "$regex":
                    flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
                    if not isinstance(value, str) or not re.search(arg, value, flags):
                        return False
        elif value != cond:
            return False
    return True


def _project(doc: dict, projection: dict | None) -> dict:
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    if all(not v for v in projection.values()):
        return {k: v for k, v in doc.items() if k not in projection}
    return {k: v for k, v in doc.items() if k == "_id" or projection.get(k)}


def _apply_update(doc: dict, update: dict) -> None:
    for key, value in update.get("$set", {}).items():
        doc[key] = value
    for key, value in update.get("$inc", {}).items():
        doc[key] = doc.get(key, 0) + value


class FakeCursor:
    def __init__(self, docs: list[dict]):
        self._docs = docs
        self._sort: tuple[str, int] | None = None
        self._skip = 0
        self._limit: int | None = None

    def sort(self, key: str, direction: int):
        self._sort = (key, direction)
        return self

    def skip(self, value: int):
        self._skip = int(value)
        return self

    def limit(self, value: int):
        self._limit = int(value)
        return self

    async def to_list(self, length: int | None = None):
        rows = list(self._docs)
        if self._sort is not None:
            key, direction = self._sort
            rows.sort(key=lambda d: d.get(key), reverse=direction < 0)
        rows = rows[self._skip:]
        if self._limit is not None:
            rows = rows[: self._limit]
        if length is not None:
            rows = rows[:length]
        return rows


class FakeCollection:
    def __init__(self, docs: list[dict] | None = None, unique: tuple[str, ...] = ()):
        self.docs: list[dict] = [dict(d) for d in (docs or [])]
        self.unique = unique
        for doc in self.docs:
            doc.setdefault("_id", ObjectId())

    async def find_one(self, query: dict, projection: dict | None = None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    def find(self, query: dict | None = None, projection: dict | None = None):
        rows = [_project(d, projection) for d in self.docs if _matches(d, query or {})]
        return FakeCursor(rows)

    async def insert_one(self, doc: dict):
        for field in self.unique:
            if field in doc and any(d.get(field) == doc[field] for d in self.docs):
                raise DuplicateKeyError(
                    f"E11000 duplicate key error: {field}",
                    details={"keyValue": {field: doc[field]}},
                )
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: dict, update: dict, upsert: bool = False):
        for doc in self.docs:
            if _matches(doc, query):
                _apply_update(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(self, query: dict, update: dict, return_document=ReturnDocument.BEFORE):
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                _apply_update(doc, update)
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def count_documents(self, query: dict) -> int:
        return sum(1 for d in self.docs if _matches(d, query))

    def aggregate(self, pipeline: list[dict]):
        rows = [copy.deepcopy(d) for d in self.docs]
        for stage in pipeline:
            if "$match" in stage:
                rows = [r for r in rows if _matches(r, stage["$match"])]
            elif "$group" in stage:
                group_spec = stage["$group"]
                group_field = group_spec["_id"].lstrip("$")
                groups: dict = {}
                for row in rows:
                    key = row.get(group_field)
                    out = groups.setdefault(key, {"_id": key, **{f: 0 for f in group_spec if f != "_id"}})
                    for field, acc in group_spec.items():
                        if field == "_id":
                            continue
                        arg = acc["$sum"]
                        out[field] += row.get(arg.lstrip("$"), 0) if isinstance(arg, str) else arg
                rows = list(groups.values())
            elif "$sort" in stage:
                for key, direction in reversed(list(stage["$sort"].items())):
                    rows.sort(key=lambda r: r.get(key), reverse=direction < 0)
        return FakeCursor(rows)


class FakeDatabase:
    def __init__(self, users: list[dict] | None = None, bets: list[dict] | None = None):
        self.users = FakeCollection(users, unique=("email", "username"))
        self.bets = FakeCollection(bets)

    async def command(self, name: str):
        return {"ok": 1.0}


class ScriptedSource(RandomOutcomeSource):
    """Returns queued draws; shuffle puts ``top_cards`` on top in deal order."""

    def __init__(self, draws=(), top_cards=()):
        super().__init__()
        self.draws = list(draws)
        self.top_cards = list(top_cards)

    def randint(self, low: int, high: int) -> int:
        value = self.draws.pop(0)
        assert low <= value <= high
        return value

    def shuffle(self, items):
        for card in self.top_cards:
            items.remove(card)
        items.extend(reversed(self.top_cards))
        return items


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDatabase()
    monkeypatch.setattr(_db, "db", db, raising=False)
    return db


@pytest.fixture
def scripted_source():
    return ScriptedSource
