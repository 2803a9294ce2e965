"""Saved content history for the signed-in user."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from studio_api.deps import get_history_store, require_user
from studio_core.history.store import HistoryStore
from studio_core.models.content import GeneratedContent
from studio_core.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter(tags=["history"])


def _item_to_dict(item) -> dict:
    d = item.to_json_dict()
    d["isClamped"] = item.is_clamped
    return d


@router.get("/history")
async def list_history(
    user: User = Depends(require_user),
    store: HistoryStore = Depends(get_history_store),
) -> dict:
    items = await store.get_history(user.id)
    return {"items": [_item_to_dict(i) for i in items], "total": len(items)}


@router.post("/history", status_code=201)
async def save_history(
    content: GeneratedContent,
    user: User = Depends(require_user),
    store: HistoryStore = Depends(get_history_store),
) -> dict:
    saved = await store.save_content(user.id, content)
    return _item_to_dict(saved)


@router.get("/history/{item_id}")
async def get_history_item(
    item_id: str,
    user: User = Depends(require_user),
    store: HistoryStore = Depends(get_history_store),
) -> dict:
    item = await store.get_content(user.id, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Saved content not found")
    return _item_to_dict(item)


@router.delete("/history/{item_id}")
async def delete_history_item(
    item_id: str,
    user: User = Depends(require_user),
    store: HistoryStore = Depends(get_history_store),
) -> dict:
    if not await store.delete_content(user.id, item_id):
        raise HTTPException(status_code=404, detail="Saved content not found")
    return {"status": "deleted", "id": item_id}
