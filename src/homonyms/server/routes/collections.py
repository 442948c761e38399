"""
Collection routes: /api/collections
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from homonyms.core.errors import EntityNotFoundError, ValidationError
from homonyms.core.models import WordInput
from homonyms.core.store import CollectionStore
from homonyms.server.deps import get_store


router = APIRouter(prefix="/api/collections", tags=["collections"])


class CollectionRequest(BaseModel):
    name: str = ""


class WordRequest(BaseModel):
    word: str = ""
    definition: str = ""


class CreateGroupRequest(BaseModel):
    pronunciation: str = ""
    words: list[WordRequest] = Field(default_factory=list)


# === Collection CRUD ===

@router.get("")
async def list_collections(store: CollectionStore = Depends(get_store)):
    """List all collections, newest first."""
    return {"collections": [c.to_dict() for c in store.list_collections()]}


@router.post("", status_code=201)
async def create_collection(req: CollectionRequest, store: CollectionStore = Depends(get_store)):
    """Create a new collection."""
    try:
        collection = store.create_collection(req.name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return collection.to_dict()


@router.get("/{collection_id}")
async def get_collection(collection_id: str, store: CollectionStore = Depends(get_store)):
    """Get a collection with its group and word counts."""
    collection = store.get_collection(collection_id)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return {**collection.to_dict(), "stats": store.collection_stats(collection_id)}


@router.put("/{collection_id}")
async def rename_collection(
    collection_id: str, req: CollectionRequest, store: CollectionStore = Depends(get_store)
):
    """Rename a collection."""
    try:
        collection = store.rename_collection(collection_id, req.name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection.to_dict()


@router.delete("/{collection_id}")
async def delete_collection(collection_id: str, store: CollectionStore = Depends(get_store)):
    """Delete a collection with all of its homonym groups."""
    if not store.delete_collection(collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"deleted": collection_id}


# === Homonym groups within a collection ===

@router.get("/{collection_id}/homonyms")
async def list_homonyms(collection_id: str, store: CollectionStore = Depends(get_store)):
    """List homonym groups in creation order."""
    if not store.get_collection(collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"homonyms": [g.to_dict() for g in store.list_homonym_groups(collection_id)]}


@router.get("/{collection_id}/homonyms/search")
async def search_homonyms(collection_id: str, q: str = "", store: CollectionStore = Depends(get_store)):
    """Groups where any word's spelling or definition contains q."""
    if not store.get_collection(collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    groups = store.search_homonym_groups(collection_id, q)
    return {"query": q, "homonyms": [g.to_dict() for g in groups]}


@router.post("/{collection_id}/homonyms", status_code=201)
async def create_homonym_group(
    collection_id: str, req: CreateGroupRequest, store: CollectionStore = Depends(get_store)
):
    """Save a homonym group with its words."""
    words = [WordInput(word=w.word, definition=w.definition) for w in req.words]
    try:
        group = store.create_homonym_group(collection_id, req.pronunciation, words)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return group.to_dict()
