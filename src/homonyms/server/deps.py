"""
Shared dependencies for routes.

Everything is built once in the app lifespan and kept on app.state; tests swap
these out with app.dependency_overrides.
"""

from fastapi import Depends, Request

from homonyms.core.lookup import LookupCache
from homonyms.core.store import CollectionStore
from homonyms.core.suggestions import SuggestionAssembler


def get_store(request: Request) -> CollectionStore:
    return request.app.state.store


def get_lookup(request: Request) -> LookupCache:
    return request.app.state.lookup


def get_assembler(lookup: LookupCache = Depends(get_lookup)) -> SuggestionAssembler:
    return SuggestionAssembler(lookup)
