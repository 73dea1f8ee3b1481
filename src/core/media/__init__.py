"""
Media helpers: storage URL resolution and avatar rendering.
"""

from .avatar import AvatarRenderer, AvatarSize, AvatarView, ImageState, initials_for
from .urls import PLACEHOLDER_PATH, resolve_storage_url

__all__ = [
    "AvatarRenderer",
    "AvatarSize",
    "AvatarView",
    "ImageState",
    "initials_for",
    "PLACEHOLDER_PATH",
    "resolve_storage_url",
]
