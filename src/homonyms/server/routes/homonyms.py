"""
Homonym group routes: /api/homonyms
"""

from fastapi import APIRouter, Depends, HTTPException

from homonyms.core.errors import ValidationError
from homonyms.core.models import WordInput
from homonyms.core.store import CollectionStore
from homonyms.server.deps import get_store
from homonyms.server.routes.collections import CreateGroupRequest


router = APIRouter(prefix="/api/homonyms", tags=["homonyms"])


@router.get("/{group_id}")
async def get_homonym_group(group_id: str, store: CollectionStore = Depends(get_store)):
    group = store.get_homonym_group(group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Homonym group not found")
    return group.to_dict()


@router.put("/{group_id}")
async def update_homonym_group(
    group_id: str, req: CreateGroupRequest, store: CollectionStore = Depends(get_store)
):
    """Replace a group's pronunciation and words."""
    words = [WordInput(word=w.word, definition=w.definition) for w in req.words]
    try:
        group = store.update_homonym_group(group_id, req.pronunciation, words)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not group:
        raise HTTPException(status_code=404, detail="Homonym group not found")
    return group.to_dict()


@router.delete("/{group_id}")
async def delete_homonym_group(group_id: str, store: CollectionStore = Depends(get_store)):
    """Delete a homonym group and its words."""
    if not store.delete_homonym_group(group_id):
        raise HTTPException(status_code=404, detail="Homonym group not found")
    return {"deleted": group_id}
