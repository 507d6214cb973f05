#!/usr/bin/env python3
"""
Maintenance commands for the collection cache and game night events.

Usage:
    python manage.py sync <username>   # Sync a collection through the cache
    python manage.py sweep             # Run cache and event sweeps once
    python manage.py stats             # Cache and event statistics
    python manage.py clear             # Drop every cache entry
"""

import asyncio
import sys

from app.container import container
from bgg_client import CatalogError
from settings import LOG_LEVEL, MAX_CACHE_SIZE
from settings.logging import setup_logging
from settings.units import format_size

logger = setup_logging(level=LOG_LEVEL, to_file=True)


async def run_sync(username: str) -> bool:
    try:
        result = await container.collections.refresh(username)
    except CatalogError as e:
        logger.error("Sync failed for {}: {}", username, e.message)
        return False

    print(f"\nCollection {username}: {result.total_games} games")
    print(f"  New: {result.new_games_count}")
    print(f"  Removed: {result.removed_games_count}")
    for game in result.new_games:
        print(f"  + {game.get('name')} ({game.get('id')})")
    return True


async def run_sweep() -> bool:
    cache_result = await container.cache_sweeper.run_once()
    events_deleted = await container.event_sweeper.run_once()
    if cache_result is not None:
        print(f"\nCache: deleted {cache_result.deleted_count} ({format_size(cache_result.deleted_size)})")
    print(f"Events: deleted {events_deleted or 0}")
    return True


async def run_stats() -> bool:
    cache_stats = await container.cache.stats()
    event_stats = await container.event_store.stats()
    print("\n" + "=" * 40)
    print(f"Cache backend: {container.cache.backend}")
    print(f"Cache entries: {cache_stats.count:,}")
    print(f"Cache size:    {format_size(cache_stats.total_size)} / {format_size(MAX_CACHE_SIZE)}")
    print(f"Events:        {event_stats['eventCount']:,}")
    print("=" * 40 + "\n")
    return True


async def run_clear() -> bool:
    count = await container.cache.clear()
    print(f"\nCleared {count} cache entries")
    return True


async def _main(command: str, args: list[str]) -> bool:
    container.init()
    try:
        if command == "sync":
            return await run_sync(args[0])
        if command == "sweep":
            return await run_sweep()
        if command == "stats":
            return await run_stats()
        return await run_clear()
    finally:
        await container.stop()


def main():
    args = sys.argv[1:]
    commands = {"sync": 1, "sweep": 0, "stats": 0, "clear": 0}

    if not args or args[0] not in commands or len(args) - 1 < commands[args[0]]:
        print(__doc__)
        sys.exit(1)

    ok = asyncio.run(_main(args[0], args[1:]))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
