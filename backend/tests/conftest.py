"""Shared fixtures: an in-memory document store and an HTTP client bound to it."""

import os

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")

from copy import deepcopy
from dataclasses import dataclass
from typing import Any

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from marketplace.core.database import ensure_indexes, get_db
from marketplace.core.rate_limit import limiter
from marketplace.main import app


@dataclass
class InsertResult:
    inserted_id: ObjectId


@dataclass
class UpdateResult:
    matched_count: int


@dataclass
class DeleteResult:
    deleted_count: int


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]):
        self.documents = documents

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self.documents[:length] if length else list(self.documents)


class FakeCollection:
    """Subset of AsyncCollection used by the repositories: equality filters only."""

    def __init__(self, name: str, database: "FakeDatabase"):
        self.name = name
        self.database = database
        self.documents: list[dict[str, Any]] = []
        self.indexes: dict[str, dict[str, Any]] = {}

    def _touch(self) -> None:
        self.database.operations += 1
        if self.database.fail:
            raise ServerSelectionTimeoutError("No servers available")

    @staticmethod
    def _matches(document: dict[str, Any], query: dict[str, Any] | None) -> bool:
        return all(document.get(key) == value for key, value in (query or {}).items())

    def find(self, query=None, sort=None) -> FakeCursor:
        self._touch()
        found = [deepcopy(d) for d in self.documents if self._matches(d, query)]
        for key, direction in reversed(sort or []):
            found.sort(
                key=lambda d: (d.get(key) is None, d.get(key)),
                reverse=direction == -1,
            )
        return FakeCursor(found)

    async def find_one(self, query=None) -> dict[str, Any] | None:
        self._touch()
        for document in self.documents:
            if self._matches(document, query):
                return deepcopy(document)
        return None

    async def insert_one(self, document: dict[str, Any]) -> InsertResult:
        self._touch()
        document.setdefault("_id", ObjectId())
        for index in self.indexes.values():
            if not index["unique"]:
                continue
            keys = [key for key, _ in index["keys"]]
            if any(all(d.get(k) == document.get(k) for k in keys) for d in self.documents):
                raise DuplicateKeyError("E11000 duplicate key error", code=11000)
        self.documents.append(deepcopy(document))
        return InsertResult(inserted_id=document["_id"])

    async def update_one(self, query, update) -> UpdateResult:
        self._touch()
        for document in self.documents:
            if self._matches(document, query):
                document.update(deepcopy(update["$set"]))
                return UpdateResult(matched_count=1)
        return UpdateResult(matched_count=0)

    async def delete_one(self, query) -> DeleteResult:
        self._touch()
        for index, document in enumerate(self.documents):
            if self._matches(document, query):
                del self.documents[index]
                return DeleteResult(deleted_count=1)
        return DeleteResult(deleted_count=0)

    async def delete_many(self, query) -> DeleteResult:
        self._touch()
        kept = [d for d in self.documents if not self._matches(d, query)]
        removed = len(self.documents) - len(kept)
        self.documents = kept
        return DeleteResult(deleted_count=removed)

    async def create_index(self, keys, unique: bool = False, name: str | None = None) -> str:
        self._touch()
        name = name or "_".join(f"{key}_{direction}" for key, direction in keys)
        self.indexes[name] = {"keys": list(keys), "unique": unique}
        return name


class FakeDatabase:
    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}
        self.operations = 0
        self.fail = False

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, self)
        return self.collections[name]

    async def command(self, name: str) -> dict[str, Any]:
        self.operations += 1
        if self.fail:
            raise ServerSelectionTimeoutError("No servers available")
        return {"ok": 1.0}


@pytest.fixture
async def db() -> FakeDatabase:
    database = FakeDatabase()
    await ensure_indexes(database)
    database.operations = 0
    return database


@pytest.fixture
async def client(db: FakeDatabase):
    app.dependency_overrides[get_db] = lambda: db
    limiter.enabled = False
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
async def posted_job(client: AsyncClient) -> str:
    """A job owned by owner@example.com; returns its id."""
    response = await client.post(
        "/jobs",
        json={"title": "Fix bug", "userEmail": "owner@example.com", "budget": 150},
    )
    assert response.status_code == 200
    return response.json()["insertedId"]
