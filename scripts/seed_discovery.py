#!/usr/bin/env python
"""Seed a small published catalog for local development.

Usage:
    python scripts/seed_discovery.py

Creates one category, six published podcasts with two episodes each, and
features the first three. Skips seeding when published podcasts already exist.
"""

import asyncio
import sys
from datetime import timedelta

from dotenv import load_dotenv
from sqlalchemy import func, select

load_dotenv()

COVER_URL = "https://images.unsplash.com/photo-1478737270239-2f02b77fc618?w=400&q=80"
AUDIO_URL = "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3"
SEED_OWNER_ID = 1

# Initial podcasts to seed
PODCASTS = [
    {"title": "Tech Talks Daily", "description": "Latest in technology and innovation.", "tags": ["tech", "innovation"]},
    {"title": "Mind & Body", "description": "Wellness, fitness and mental health.", "tags": ["health", "wellness"]},
    {"title": "True Crime Stories", "description": "Real crime investigations and mysteries.", "tags": ["crime", "mystery"]},
    {"title": "Business Insider Pod", "description": "Startup culture, finance and leadership.", "tags": ["business", "finance"]},
    {"title": "History Unveiled", "description": "Deep dives into historical events.", "tags": ["history", "education"]},
    {"title": "Comedy Central Hour", "description": "Stand-up highlights and improv comedy.", "tags": ["comedy", "entertainment"]},
]

EPISODE_TITLES = [
    "The Future of AI",
    "Morning Routines That Work",
    "The Cold Case Files",
    "Building a Startup from Scratch",
    "The Fall of Rome",
    "Why We Laugh",
    "Quantum Computing Explained",
    "Sleep Science Deep Dive",
    "The Zodiac Killer Revisited",
    "Venture Capital 101",
    "Ancient Egypt Uncovered",
    "The Art of Stand-Up",
]

FEATURED_COUNT = 3


async def seed_catalog() -> None:
    """Seed categories, podcasts, episodes and the featured list."""
    from app.models.fields import EpisodeStatus, PodcastStatus
    from app.schemas.base import utcnow
    from app.schemas.categories import Category
    from app.schemas.episodes import Episode
    from app.schemas.featured_podcasts import FeaturedPodcast
    from app.schemas.podcasts import Podcast
    from app.utils.db_async import SessionLocal, dispose_engine, init_db

    await init_db()

    async with SessionLocal() as session:
        published = await session.execute(
            select(func.count())
            .select_from(Podcast)
            .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
        )
        existing = published.scalar() or 0
        if existing >= len(PODCASTS):
            print(f"  SKIP: {existing} published podcasts already exist")
            await dispose_engine()
            return

        result = await session.execute(select(Category).where(Category.slug == "general"))
        category = result.scalar_one_or_none()
        if category is None:
            category = Category(slug="general", name="General")
            session.add(category)
            await session.flush()
            print(f"  ADD: category {category.slug}")

        now = utcnow()
        episode_index = 0
        podcasts: list[Podcast] = []
        for data in PODCASTS:
            podcast = Podcast(
                owner_id=SEED_OWNER_ID,
                title=data["title"],
                description=data["description"],
                category_ids=[category.id],
                tags=data["tags"],
                cover_url=COVER_URL,
                status=PodcastStatus.published,
                created_at=now,
                updated_at=now,
            )
            session.add(podcast)
            await session.flush()
            podcasts.append(podcast)

            for number in range(1, 3):
                session.add(
                    Episode(
                        podcast_id=podcast.id,
                        title=EPISODE_TITLES[episode_index % len(EPISODE_TITLES)],
                        description=f"Episode {number} of {podcast.title}",
                        duration_seconds=900 + (number - 1) * 300,
                        season_number=1,
                        episode_number=number,
                        audio_url=AUDIO_URL,
                        cover_url=COVER_URL,
                        status=EpisodeStatus.published,
                        published_at=now - timedelta(days=number - 1),
                        created_at=now,
                    )
                )
                episode_index += 1
            print(f"  ADD: {podcast.title}")

        for order, podcast in enumerate(podcasts[:FEATURED_COUNT], start=1):
            session.add(FeaturedPodcast(podcast_id=podcast.id, order=order))

        await session.commit()
        print(f"\nSeeding complete: {len(podcasts)} podcasts, {episode_index} episodes")

    await dispose_engine()


if __name__ == "__main__":
    print("Seeding discovery catalog...")
    try:
        asyncio.run(seed_catalog())
    except Exception as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
