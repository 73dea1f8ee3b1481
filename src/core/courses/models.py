"""
Course domain models.

Videos are owned by the document database; this service only reads them.
Identifiers are kept as strings here so the domain doesn't depend on the
database driver's id type.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Video:
    """
    A lecture video belonging to a course.

    Only the id is guaranteed. Older documents can lack any other field,
    so everything else is optional.
    """
    id: str
    course_id: Optional[str] = None
    title: str = ""
    description: str = ""
    url: Optional[str] = None  # storage reference, see media.urls
    transcription: Optional[str] = None
    duration_seconds: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
