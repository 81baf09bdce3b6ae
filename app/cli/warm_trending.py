"""Standalone cron runner that refreshes the cached trending lists.

Request traffic already repopulates the cache on a miss; running this on a
schedule shorter than the cache TTL keeps the first request after expiry
from paying for the play-event aggregation.

Usage:
    python -m app.cli.warm_trending --limits 10 20 50

Exit codes:
    0 - Success
    1 - Failure (check logs for details)
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

from app.config import settings
from app.services.cache_service import build_cache_store
from app.services.context import build_sql_context
from app.services.trending_service import compute_trending, trending_cache_key
from app.utils.db_async import SessionLocal, dispose_engine
from app.utils.pagination import DEFAULT_TRENDING_LIMIT, MAX_TRENDING_LIMIT, clamp_limit

# Configure logging for cron context
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("warm_trending")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh cached trending podcast lists.")
    parser.add_argument(
        "--limits",
        type=int,
        nargs="+",
        default=[DEFAULT_TRENDING_LIMIT, 20],
        help="List sizes to refresh (each is cached under its own key)",
    )
    return parser.parse_args(argv)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Refresh every requested trending list.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)
    if not settings.cache_enabled:
        logger.warning("REDIS_URL is not configured; nothing to warm")
        return 0

    limits = sorted({clamp_limit(n, maximum=MAX_TRENDING_LIMIT) for n in args.limits})
    start_time = datetime.now(timezone.utc)
    cache_store = build_cache_store(settings.redis_url)
    ctx = build_sql_context(SessionLocal, cache_store)

    try:
        failed_limits = []
        for limit in limits:
            items = await compute_trending(ctx, limit)
            if not items:
                logger.info(f"No ranked podcasts for limit={limit}; nothing cached")
                continue

            written = await ctx.cache.put_ids(
                trending_cache_key(limit),
                [podcast.id for podcast in items],  # type: ignore[misc]
                settings.trending_cache_ttl_seconds,
            )
            if not written:
                failed_limits.append(limit)
                continue
            logger.info(f"Trending list for limit={limit} refreshed with {len(items)} podcasts")

        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        if failed_limits:
            logger.error(
                f"Trending warm-up could not write limits {failed_limits} to the cache "
                f"after {elapsed:.1f}s"
            )
            return 1

        logger.info(f"Trending warm-up complete in {elapsed:.1f}s")
        return 0

    except Exception as e:
        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.error(f"Trending warm-up failed after {elapsed:.1f}s: {e}", exc_info=True)
        return 1

    finally:
        await cache_store.close()
        await dispose_engine()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
