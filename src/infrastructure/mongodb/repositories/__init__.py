"""
Repository pattern implementations for MongoDB.

Repositories translate between domain models and stored documents.
"""

from .videos import (
    InvalidIdentifierError,
    VideoNotFoundError,
    VideoRepository,
    VideoRepositoryError,
)

__all__ = [
    "InvalidIdentifierError",
    "VideoNotFoundError",
    "VideoRepository",
    "VideoRepositoryError",
]
