"""
Course content models.
"""

from .models import Video

__all__ = ["Video"]
