from fastapi import APIRouter, Depends

from llmrelay.core.store import COLLECTIONS, RecordStore
from llmrelay.dependencies import get_store

router = APIRouter()


@router.get("/health")
async def health_check(store: RecordStore = Depends(get_store)) -> dict:
    """Store reachability and record counts. No auth."""
    return {
        "status": "ok",
        "collections": {name: len(store.load(name)) for name in COLLECTIONS},
    }
