"""
MongoDB repository for course videos.

The repository:
1. Validates identifiers before any database call
2. Encapsulates the queries against the "videos" collection
3. Translates documents into Video domain objects

Route handlers never build Mongo filters themselves.
"""

import logging
import math
from datetime import datetime
from typing import Any, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from src.core.courses.models import Video

from ..client import MongoConnectionError, MongoPool

logger = logging.getLogger(__name__)

VIDEOS_COLLECTION = "videos"


class InvalidIdentifierError(ValueError):
    """Raised when a path id isn't a valid ObjectId."""
    pass


class VideoNotFoundError(Exception):
    """Raised when a requested video doesn't exist."""
    pass


class VideoRepositoryError(Exception):
    """Raised when the database query itself fails."""
    pass


def parse_object_id(value: str) -> ObjectId:
    """
    Turn a 24-hex-digit string into an ObjectId.

    Raises InvalidIdentifierError for anything else.
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(f"Not a valid identifier: {value!r}")


class VideoRepository:
    """
    Read access to the videos collection.

    The repository is handed the pool, not a connection: identifiers are
    validated first and a database handle is acquired only for queries
    that can actually run. Works with the motor pool or the in-memory mock.
    """

    def __init__(self, pool: MongoPool) -> None:
        self._pool = pool

    async def list_for_course(self, course_id: str) -> list[Video]:
        """
        All videos of a course, oldest first.

        An unknown course simply has no videos; that is not an error.
        """
        course_oid = parse_object_id(course_id)

        try:
            async with self._pool.acquire() as db:
                cursor = db[VIDEOS_COLLECTION].find({"courseId": course_oid}).sort("createdAt", ASCENDING)
                documents = await cursor.to_list(length=None)
        except (PyMongoError, MongoConnectionError) as e:
            logger.error(
                "Failed to list videos",
                extra={"course_id": course_id, "error": str(e)}
            )
            raise VideoRepositoryError(f"Video query failed: {e}")

        logger.debug(
            "Listed course videos",
            extra={"course_id": course_id, "count": len(documents)}
        )

        return [self._build_video(doc) for doc in documents]

    async def get_video(self, video_id: str) -> Video:
        """Load a single video by id."""
        video_oid = parse_object_id(video_id)

        try:
            async with self._pool.acquire() as db:
                document = await db[VIDEOS_COLLECTION].find_one({"_id": video_oid})
        except (PyMongoError, MongoConnectionError) as e:
            logger.error(
                "Failed to load video",
                extra={"video_id": video_id, "error": str(e)}
            )
            raise VideoRepositoryError(f"Video query failed: {e}")

        if document is None:
            raise VideoNotFoundError(f"Video {video_id} not found")

        return self._build_video(document)

    def _build_video(self, document: Mapping[str, Any]) -> Video:
        """
        Build a Video from a stored document.

        Documents are written by the course editor as
        {courseId, title, description, url, transcription, duration,
        createdAt, updatedAt}. A missing or malformed field becomes None
        rather than failing the whole listing.
        """
        course_id = document.get("courseId")

        return Video(
            id=str(document["_id"]),
            course_id=str(course_id) if course_id is not None else None,
            title=_as_text(document.get("title")) or "",
            description=_as_text(document.get("description")) or "",
            url=_as_text(document.get("url")),
            transcription=_as_text(document.get("transcription")),
            duration_seconds=_as_seconds(document.get("duration")),
            created_at=_as_datetime(document.get("createdAt")),
            updated_at=_as_datetime(document.get("updatedAt")),
        )


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _as_seconds(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        seconds = None

    if seconds is None or not math.isfinite(seconds):
        logger.warning("Ignoring malformed video duration", extra={"duration": repr(value)})
        return None
    return seconds


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    logger.warning("Ignoring malformed video timestamp", extra={"timestamp": repr(value)})
    return None
