"""
Seed command: fill a collection with the curated homonym groups.

Writes straight to a store (the server's store by default, the local one with
--local), looking up every definition and pronunciation along the way.
--refresh and --repair maintain an already seeded collection instead.
"""

import asyncio
import sys

import httpx

from homonyms.core.config import Settings
from homonyms.core.dictionary import build_sources
from homonyms.core.errors import EntityNotFoundError
from homonyms.core.lookup import LookupCache
from homonyms.core.seed import Seeder
from homonyms.core.store import open_store


def add_subparser(subparsers):
    parser = subparsers.add_parser("seed", help="Populate a collection with common homonyms")
    parser.add_argument("--name", help="Collection name (default: HOMONYMS_DEFAULT_COLLECTION)")
    parser.add_argument("--reset", action="store_true", help="Delete existing groups first")
    parser.add_argument("--backend", choices=["sqlite", "redis"], help="Store to write to")
    parser.add_argument("--delay", type=float, default=0.2, help="Seconds between lookups")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--refresh", action="store_true", help="Re-look up every saved definition")
    mode.add_argument("--repair", action="store_true", help="Add curated words missing from saved groups")
    parser.set_defaults(func=seed)


async def run_seed(settings: Settings, store, name: str, reset: bool, delay: float, mode: str = "seed"):
    async with httpx.AsyncClient(timeout=settings.lookup_timeout) as http:
        lookup = LookupCache(build_sources(settings, http), timeout=settings.lookup_timeout)
        seeder = Seeder(lookup, store, delay=delay)
        if mode == "refresh":
            collection = next((c for c in store.list_collections() if c.name == name), None)
            if collection is None:
                raise EntityNotFoundError(f"Collection not found: {name}")
            return await seeder.refresh_definitions(collection.id)
        if mode == "repair":
            return await seeder.repair_collection(name)
        return await seeder.seed_collection(name, reset=reset)


def seed(args):
    settings = Settings.from_env()
    backend = args.backend or (settings.local_backend if args.local else settings.backend)
    name = args.name or settings.default_collection
    mode = "refresh" if args.refresh else "repair" if args.repair else "seed"

    try:
        store = open_store(settings, backend)
        try:
            report = asyncio.run(run_seed(settings, store, name, args.reset, args.delay, mode))
        finally:
            store.close()
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)

    if mode == "refresh":
        print(f"✓ Refreshed {name} ({report.collection_id})")
        print(f"  checked: {report.checked}")
        print(f"  updated: {report.updated_words} words in {report.updated_groups} groups")
    elif mode == "repair":
        print(f"✓ Repaired {name} ({report.collection_id})")
        print(f"  fixed groups: {report.fixed_groups}")
        print(f"  added words: {report.added_words}")
        print(f"  added groups: {report.created_groups}")
    else:
        print(f"✓ Seeded {name} ({report.collection_id})")
        print(f"  added: {report.added}")
        print(f"  skipped: {report.skipped}")
    for failure in report.failures:
        print(f"  - {failure}")
