"""
Storage URL resolution.

Profile pictures, course thumbnails and videos are stored in Supabase
storage buckets. The database keeps either a full URL, a local asset path,
or a bucket-relative path such as "avatars/3f2a.png". This module turns any
of those into something an <img> or <video> tag can load.
"""

from typing import Optional

PLACEHOLDER_PATH = "/placeholder.svg"

# Buckets whose objects are publicly readable
PUBLIC_BUCKET_PREFIXES = ("avatars/", "courses/", "videos/")

PUBLIC_OBJECT_PATH = "/storage/v1/object/public/"


def resolve_storage_url(ref: Optional[str], base_url: Optional[str]) -> str:
    """
    Map a stored reference to a displayable URL.

    Rules, checked in order:
    1. Missing or empty reference -> placeholder image
    2. Absolute http(s) URL -> unchanged
    3. Root-relative path -> unchanged (local asset)
    4. Bucket-prefixed path -> public object URL under base_url, or the
       reference unchanged when no base_url is configured
    5. Anything else -> unchanged

    Never raises and never returns an empty string.
    """
    if not ref:
        return PLACEHOLDER_PATH

    if ref.startswith("http://") or ref.startswith("https://"):
        return ref

    if ref.startswith("/"):
        return ref

    if ref.startswith(PUBLIC_BUCKET_PREFIXES):
        if not base_url:
            return ref
        return f"{base_url.rstrip('/')}{PUBLIC_OBJECT_PATH}{ref}"

    return ref
