"""
Course video endpoints.

Read-only access to lecture videos stored in MongoDB. Ids in the path are
validated before the database is touched, so a malformed id is a 400 and
only genuine backend failures are 500s.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.courses.models import Video
from ...infrastructure.mongodb.repositories.videos import (
    InvalidIdentifierError,
    VideoNotFoundError,
    VideoRepositoryError,
)
from ..dependencies import VideoRepositoryDep
from ..errors import ErrorResponse, error_response

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class VideoItem(BaseModel):
    """
    A video as returned to clients.

    Field aliases keep the document-style keys the course editor writes, so
    clients see the same shape that is stored.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", description="Video identifier")
    course_id: Optional[str] = Field(None, alias="courseId", description="Owning course")
    title: str = Field("", description="Video title")
    description: str = Field("", description="Video description")
    url: Optional[str] = Field(None, description="Storage reference or playback URL")
    transcription: Optional[str] = Field(None, description="Generated transcript")
    duration: Optional[float] = Field(None, description="Length in seconds")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Upload time")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt", description="Last change")

    @classmethod
    def from_video(cls, video: Video) -> "VideoItem":
        return cls(
            id=video.id,
            course_id=video.course_id,
            title=video.title,
            description=video.description,
            url=video.url,
            transcription=video.transcription,
            duration=video.duration_seconds,
            created_at=video.created_at,
            updated_at=video.updated_at,
        )


ERROR_RESPONSES = {
    400: {"description": "Malformed identifier", "model": ErrorResponse},
    500: {"description": "Backend failure", "model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/courses/{course_id}/videos",
    response_model=list[VideoItem],
    status_code=status.HTTP_200_OK,
    summary="List course videos",
    description="All videos of a course, oldest first. Unknown courses return an empty list.",
    responses=ERROR_RESPONSES,
)
async def list_course_videos(
    course_id: str,
    repository: VideoRepositoryDep,
):
    try:
        videos = await repository.list_for_course(course_id)
    except InvalidIdentifierError:
        logger.info("Rejected malformed course id", extra={"course_id": course_id})
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid course id")
    except VideoRepositoryError as e:
        logger.error(
            "Error fetching videos",
            extra={"course_id": course_id, "error": str(e)}
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return [VideoItem.from_video(video) for video in videos]


@router.get(
    "/videos/{video_id}",
    response_model=VideoItem,
    status_code=status.HTTP_200_OK,
    summary="Get a video",
    responses={
        **ERROR_RESPONSES,
        404: {"description": "Video not found", "model": ErrorResponse},
    },
)
async def get_video(
    video_id: str,
    repository: VideoRepositoryDep,
):
    try:
        video = await repository.get_video(video_id)
    except InvalidIdentifierError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid video id")
    except VideoNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, "Video not found")
    except VideoRepositoryError as e:
        logger.error(
            "Error fetching video",
            extra={"video_id": video_id, "error": str(e)}
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return VideoItem.from_video(video)
