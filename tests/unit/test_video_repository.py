"""
Unit tests for VideoRepository against the in-memory MongoDB mock.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from src.infrastructure.mongodb.client import (
    MockMongoPool,
    MongoConfig,
    MongoConnectionError,
    MongoConnectionPool,
    create_mongo_pool,
)
from src.infrastructure.mongodb.repositories.videos import (
    InvalidIdentifierError,
    VideoNotFoundError,
    VideoRepository,
    VideoRepositoryError,
    parse_object_id,
)

COURSE_ID = ObjectId("65f1c0ffee0000000000abcd")
OTHER_COURSE_ID = ObjectId("65f1c0ffee0000000000dcba")
T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def video_doc(course_id: ObjectId, title: str, created_at: datetime) -> dict:
    return {
        "_id": ObjectId(),
        "courseId": course_id,
        "title": title,
        "url": f"videos/{course_id}/{title}.mp4",
        "transcription": f"Transcript of {title}.",
        "duration": 120,
        "createdAt": created_at,
        "updatedAt": created_at,
    }


class UnreachablePool:
    """Pool whose every acquire fails, and which counts attempts."""

    def __init__(self) -> None:
        self.acquire_calls = 0

    @asynccontextmanager
    async def acquire(self):
        self.acquire_calls += 1
        raise MongoConnectionError("no server")
        yield  # pragma: no cover


class BrokenCollectionPool(MockMongoPool):
    """Pool whose database raises a driver error on find."""

    @asynccontextmanager
    async def acquire(self):
        class _Collection:
            def find(self, filter_):
                raise ServerSelectionTimeoutError("timed out")

            async def find_one(self, filter_):
                raise ServerSelectionTimeoutError("timed out")

        class _Database:
            def __getitem__(self, name):
                return _Collection()

        yield _Database()


@pytest.fixture
def pool():
    pool = MockMongoPool()
    videos = pool.database["videos"]
    asyncio.run(videos.insert_many([
        video_doc(COURSE_ID, "third", T0 + timedelta(hours=2)),
        video_doc(COURSE_ID, "first", T0),
        video_doc(OTHER_COURSE_ID, "elsewhere", T0 + timedelta(minutes=5)),
        video_doc(COURSE_ID, "second", T0 + timedelta(hours=1)),
    ]))
    return pool


# ---------------------------------------------------------------------------
# Identifier Tests
# ---------------------------------------------------------------------------

class TestParseObjectId:

    def test_valid_hex_id(self):
        assert parse_object_id("65f1c0ffee0000000000abcd") == COURSE_ID

    @pytest.mark.parametrize("value", ["", "abc", "not-an-object-id-at-all!", "z" * 24, "65f1c0ffee0000000000abcd0"])
    def test_malformed_ids_are_rejected(self, value):
        with pytest.raises(InvalidIdentifierError):
            parse_object_id(value)


# ---------------------------------------------------------------------------
# Listing Tests
# ---------------------------------------------------------------------------

class TestListForCourse:

    def test_returns_only_course_videos_oldest_first(self, pool):
        videos = asyncio.run(VideoRepository(pool).list_for_course(str(COURSE_ID)))

        assert [v.title for v in videos] == ["first", "second", "third"]
        assert all(v.course_id == str(COURSE_ID) for v in videos)
        assert videos[0].created_at == T0
        assert videos[0].duration_seconds == 120.0

    def test_unknown_course_has_no_videos(self, pool):
        videos = asyncio.run(VideoRepository(pool).list_for_course("000000000000000000000000"))
        assert videos == []

    def test_malformed_id_never_touches_the_database(self):
        """Validation happens before a connection is acquired."""
        unreachable = UnreachablePool()

        with pytest.raises(InvalidIdentifierError):
            asyncio.run(VideoRepository(unreachable).list_for_course("bogus"))

        assert unreachable.acquire_calls == 0

    def test_connection_failure_becomes_repository_error(self):
        unreachable = UnreachablePool()

        with pytest.raises(VideoRepositoryError):
            asyncio.run(VideoRepository(unreachable).list_for_course(str(COURSE_ID)))

        assert unreachable.acquire_calls == 1

    def test_driver_error_becomes_repository_error(self):
        with pytest.raises(VideoRepositoryError):
            asyncio.run(VideoRepository(BrokenCollectionPool()).list_for_course(str(COURSE_ID)))


class TestIncompleteDocuments:
    """Odd or missing fields never fail the listing."""

    def test_document_without_timestamps_is_listed_first(self, pool):
        asyncio.run(pool.database["videos"].insert_one(
            {"_id": ObjectId(), "courseId": COURSE_ID, "title": "draft"}
        ))

        videos = asyncio.run(VideoRepository(pool).list_for_course(str(COURSE_ID)))

        assert [v.title for v in videos] == ["draft", "first", "second", "third"]
        assert videos[0].created_at is None
        assert videos[0].updated_at is None
        assert videos[0].url is None

    @pytest.mark.parametrize("duration", ["ten minutes", float("nan"), [], True])
    def test_malformed_duration_becomes_none(self, duration):
        pool = MockMongoPool()
        asyncio.run(pool.database["videos"].insert_one({
            "_id": ObjectId(),
            "courseId": COURSE_ID,
            "duration": duration,
            "createdAt": "not a date",
        }))

        [video] = asyncio.run(VideoRepository(pool).list_for_course(str(COURSE_ID)))

        assert video.duration_seconds is None
        assert video.created_at is None

    def test_iso_string_timestamps_are_parsed(self):
        pool = MockMongoPool()
        asyncio.run(pool.database["videos"].insert_one({
            "_id": ObjectId(),
            "courseId": COURSE_ID,
            "createdAt": "2025-03-01T09:00:00+00:00",
            "duration": "90",
        }))

        [video] = asyncio.run(VideoRepository(pool).list_for_course(str(COURSE_ID)))

        assert video.created_at == T0
        assert video.duration_seconds == 90.0


# ---------------------------------------------------------------------------
# Single Video Tests
# ---------------------------------------------------------------------------

class TestGetVideo:

    def test_loads_existing_video(self, pool):
        stored = asyncio.run(pool.database["videos"].find_one({"title": "second"}))

        video = asyncio.run(VideoRepository(pool).get_video(str(stored["_id"])))

        assert video.id == str(stored["_id"])
        assert video.title == "second"
        assert video.url == f"videos/{COURSE_ID}/second.mp4"

    def test_carries_every_stored_field(self, pool):
        stored = asyncio.run(pool.database["videos"].find_one({"title": "first"}))

        video = asyncio.run(VideoRepository(pool).get_video(str(stored["_id"])))

        assert video.course_id == str(COURSE_ID)
        assert video.transcription == "Transcript of first."
        assert video.created_at == T0
        assert video.updated_at == T0

    def test_missing_video_raises_not_found(self, pool):
        with pytest.raises(VideoNotFoundError):
            asyncio.run(VideoRepository(pool).get_video(str(ObjectId())))

    def test_malformed_id_is_rejected(self, pool):
        with pytest.raises(InvalidIdentifierError):
            asyncio.run(VideoRepository(pool).get_video("12"))


# ---------------------------------------------------------------------------
# Pool Tests
# ---------------------------------------------------------------------------

class TestMockMongoPool:

    def test_lifecycle(self):
        pool = create_mongo_pool(mock_mode=True)
        assert not pool.is_connected

        asyncio.run(pool.connect())
        assert pool.is_connected

        asyncio.run(pool.close())
        assert not pool.is_connected

    def test_factory_requires_config_outside_mock_mode(self):
        with pytest.raises(ValueError, match="config is required"):
            create_mongo_pool()


class FakeMotorClient:
    """Stands in for AsyncIOMotorClient; pings succeed only when reachable."""

    reachable = True
    instances: list["FakeMotorClient"] = []

    def __init__(self, uri, **kwargs) -> None:
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.admin = self
        FakeMotorClient.instances.append(self)

    async def command(self, name):
        if not FakeMotorClient.reachable:
            raise ServerSelectionTimeoutError("No servers found yet")
        return {"ok": 1.0}

    def __getitem__(self, name):
        return {"database": name}

    def close(self) -> None:
        self.closed = True


class TestMongoConnectionPool:

    @pytest.fixture(autouse=True)
    def fake_motor(self, monkeypatch):
        FakeMotorClient.reachable = True
        FakeMotorClient.instances = []
        monkeypatch.setattr("motor.motor_asyncio.AsyncIOMotorClient", FakeMotorClient)

    @pytest.fixture
    def pool(self):
        return MongoConnectionPool(MongoConfig(uri="mongodb://db:27017", database="eduverse"))

    def test_connect_pings_and_selects_database(self, pool):
        asyncio.run(pool.connect())

        assert pool.is_connected
        client = FakeMotorClient.instances[0]
        assert client.uri == "mongodb://db:27017"
        assert client.kwargs["serverSelectionTimeoutMS"] == 5000

    def test_failed_ping_closes_the_client(self, pool):
        FakeMotorClient.reachable = False

        with pytest.raises(MongoConnectionError):
            asyncio.run(pool.connect())

        assert not pool.is_connected
        assert FakeMotorClient.instances[0].closed

    def test_acquire_reconnects_after_outage(self, pool):
        FakeMotorClient.reachable = False
        with pytest.raises(MongoConnectionError):
            asyncio.run(pool.connect())

        FakeMotorClient.reachable = True

        async def use_pool():
            async with pool.acquire() as db:
                return db

        assert asyncio.run(use_pool()) == {"database": "eduverse"}
        assert pool.is_connected
        assert len(FakeMotorClient.instances) == 2

    def test_close_releases_the_client(self, pool):
        asyncio.run(pool.connect())
        asyncio.run(pool.close())

        assert not pool.is_connected
        assert FakeMotorClient.instances[0].closed
