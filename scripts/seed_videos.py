#!/usr/bin/env python3
"""
Insert sample lecture videos for a course into MongoDB.

Useful for trying the video endpoints locally without the course editor.

Usage:
    python scripts/seed_videos.py --course-id 65f1c0ffee0000000000abcd --count 5

Requires:
    - .env file (or environment) with MONGODB_URI / MONGODB_DATABASE
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from bson import ObjectId
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.config.settings import get_settings  # noqa: E402
from src.infrastructure.mongodb.client import (  # noqa: E402
    MongoConfig,
    MongoConnectionError,
    create_mongo_pool,
)
from src.infrastructure.mongodb.repositories.videos import (  # noqa: E402
    VIDEOS_COLLECTION,
    InvalidIdentifierError,
    parse_object_id,
)


def build_sample_videos(course_id: ObjectId, count: int) -> list[dict]:
    """
    Build video documents one hour apart, oldest first.

    Storage references use the videos/ bucket prefix so they resolve
    against SUPABASE_URL like real uploads.
    """
    start = datetime.now(timezone.utc) - timedelta(hours=count)

    return [
        {
            "_id": ObjectId(),
            "courseId": course_id,
            "title": f"Lecture {number}",
            "description": f"Sample lecture {number}",
            "url": f"videos/{course_id}/lecture-{number}.mp4",
            "transcription": f"Transcript of sample lecture {number}.",
            "duration": 600.0,
            "createdAt": start + timedelta(hours=number),
            "updatedAt": start + timedelta(hours=number),
        }
        for number in range(1, count + 1)
    ]


async def seed(course_id: str, count: int, dry_run: bool = False) -> bool:
    try:
        course_oid = parse_object_id(course_id)
    except InvalidIdentifierError as e:
        print(f"ERROR: {e}")
        return False

    documents = build_sample_videos(course_oid, count)

    if dry_run:
        for doc in documents:
            print(f"[DRY RUN] {doc['title']} -> {doc['url']}")
        return True

    settings = get_settings()
    pool = create_mongo_pool(
        MongoConfig(uri=settings.mongodb_uri, database=settings.mongodb_database)
    )

    try:
        async with pool.acquire() as db:
            await db[VIDEOS_COLLECTION].insert_many(documents)
    except MongoConnectionError as e:
        print(f"ERROR connecting to MongoDB: {e}")
        return False
    finally:
        await pool.close()

    print(f"Inserted {len(documents)} videos for course {course_id}")
    return True


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Seed sample course videos into MongoDB')
    parser.add_argument('--course-id', required=True, help='24-hex-digit course id')
    parser.add_argument('--count', type=int, default=3, help='Number of videos to insert')
    parser.add_argument('--dry-run', action='store_true', help='Print only, don\'t insert')
    args = parser.parse_args()

    if args.count < 1:
        print("ERROR: --count must be at least 1")
        sys.exit(1)

    success = asyncio.run(seed(args.course_id, args.count, dry_run=args.dry_run))

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
