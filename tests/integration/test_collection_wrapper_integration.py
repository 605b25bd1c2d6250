"""
Integration tests for CollectionWrapper with real MongoDB.

Covers the round trip between typed documents and stored data, the lookup
join and the documented query scenarios.
"""

from datetime import datetime

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from motor_mongoose import (
    CollectionWrapper,
    Document,
    DocumentNotFoundError,
    DocumentUpdateError,
    IndexManager,
    Populate,
    now,
)


class User(Document):
    name: str
    role: str
    created_at: datetime | None = None


class Quiz(Document):
    title: str


class Campaign(Document):
    title: str
    quiz_ids: list[ObjectId] = []
    quizzes: list[Quiz] = []


@pytest.mark.integration
@pytest.mark.asyncio
class TestCollectionWrapperIntegration:
    """Integration tests for the collection helpers."""

    async def test_king_and_queen_queries(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        king_id = await users.new(User(name="Arthur", role="King"))
        await users.new(User(name="Guinevere", role="Queen"))

        king = await users.find_one({"role": "King"})
        kings = await users.find_many({"role": "King"})
        everyone = await users.find_many({})

        assert king.id == king_id
        assert [u.id for u in kings] == [king_id]
        assert {u.role for u in everyone} == {"King", "Queen"}
        assert len(everyone) == 2

    async def test_new_then_find_by_id_round_trips(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        user = User(name="Lancelot", role="Knight", created_at=now())

        inserted_id = await users.new(user)
        fetched = await users.find_one_by_id(str(inserted_id))

        assert fetched == user

    async def test_find_many_without_matches_is_empty(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        assert await users.find_many({"role": "Jester"}) == []

    async def test_find_one_missing_raises(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        with pytest.raises(DocumentNotFoundError):
            await users.find_one_by_id(str(ObjectId()))
        with pytest.raises(DocumentNotFoundError):
            await users.find_one_by_id("malformed")

    async def test_find_by_id_and_update_returns_new_version(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        user_id = await users.new(User(name="Arthur", role="King"))

        updated = await users.find_by_id_and_update(str(user_id), {"$set": {"name": "Queen"}})

        assert updated.id == user_id
        assert updated.name == "Queen"
        assert (await users.find_one_by_id(str(user_id))).name == "Queen"

    async def test_update_without_match_raises(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        with pytest.raises(DocumentUpdateError):
            await users.find_by_id_and_update(str(ObjectId()), {"$set": {"name": "x"}})

    async def test_find_many_populate_attaches_foreign_documents(self, real_connection):
        quizzes = CollectionWrapper(real_connection, "quizzes", Quiz)
        campaigns = CollectionWrapper(real_connection, "campaigns", Campaign)
        first = await quizzes.new(Quiz(title="Q1"))
        second = await quizzes.new(Quiz(title="Q2"))
        await quizzes.new(Quiz(title="unreferenced"))
        await campaigns.new(Campaign(title="Spring", quiz_ids=[first, second]))
        await campaigns.new(Campaign(title="Summer", quiz_ids=[ObjectId()]))

        populate = Populate(local_field="quiz_ids", foreign_model="quizzes", as_field="quizzes")
        spring = await campaigns.find_many_populate({"title": "Spring"}, populate)
        summer = await campaigns.find_many_populate({"title": "Summer"}, populate)

        assert len(spring) == 1
        assert sorted(q.title for q in spring[0].quizzes) == ["Q1", "Q2"]
        assert summer[0].quizzes == []


@pytest.mark.integration
@pytest.mark.asyncio
class TestIndexManagerIntegration:
    """Integration tests for single-field index creation."""

    async def test_unique_index_rejects_duplicates(self, real_connection):
        assert await IndexManager(real_connection).create_index("users", "name", unique=True)

        users = CollectionWrapper(real_connection, "users", User)
        await users.new(User(name="Arthur", role="King"))
        with pytest.raises(DuplicateKeyError):
            await users.new(User(name="Arthur", role="Pretender"))

        indexes = await real_connection.get_collection("users").index_information()
        assert indexes["name_1"]["unique"] is True
        assert indexes["name_1"]["key"] == [("name", 1)]

    async def test_unique_index_over_duplicates_fails_softly(self, real_connection):
        users = CollectionWrapper(real_connection, "users", User)
        await users.new(User(name="Arthur", role="King"))
        await users.new(User(name="Arthur", role="Pretender"))

        created = await IndexManager(real_connection).create_index("users", "name", unique=True)
        assert created is False
