"""
Word lookup routes: /api/words
"""

from fastapi import APIRouter, Depends, HTTPException

from homonyms.core.errors import LookupFailure
from homonyms.core.lookup import LookupCache
from homonyms.core.suggestions import SuggestionAssembler, sort_suggestions, suggestion_notice
from homonyms.server.deps import get_assembler, get_lookup


router = APIRouter(prefix="/api/words", tags=["words"])


@router.get("/cache")
async def cache_stats(lookup: LookupCache = Depends(get_lookup)):
    return lookup.stats()


@router.delete("/cache")
async def clear_cache(lookup: LookupCache = Depends(get_lookup)):
    """Drop every memoized lookup."""
    lookup.clear_cache()
    return {"cleared": True}


@router.get("/{word}/definition")
async def get_definition(word: str, lookup: LookupCache = Depends(get_lookup)):
    try:
        definition = await lookup.get_definition(word)
    except LookupFailure as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"word": word.strip().lower(), "definition": definition}


@router.get("/{word}/pronunciation")
async def get_pronunciation(word: str, lookup: LookupCache = Depends(get_lookup)):
    pronunciation = await lookup.get_pronunciation(word)
    return {"word": word.strip().lower(), "pronunciation": pronunciation}


@router.get("/{word}/suggestions")
async def get_suggestions(
    word: str, sort: bool = False, assembler: SuggestionAssembler = Depends(get_assembler)
):
    """Original word plus homophones with definitions."""
    suggestions = await assembler.find_suggestions(word)
    if sort:
        suggestions = sort_suggestions(suggestions)
    return {
        "word": word.strip().lower(),
        "suggestions": [s.to_dict() for s in suggestions],
        "notice": suggestion_notice(suggestions),
    }
