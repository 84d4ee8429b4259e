"""Health check endpoint"""

import asyncio
from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from api_server.dependencies import get_store
from coach_debate import SQLiteTurnStore, StorageError

router = APIRouter()

VERSION = "1.0.0"


@router.get("/health")
async def health_check(store: SQLiteTurnStore = Depends(get_store)):
    """Health check endpoint

    Returns:
        Health status, stored turn count, timestamp and version
    """
    try:
        turns = await asyncio.to_thread(store.count)
        status = "healthy"
    except StorageError:
        turns = None
        status = "degraded"
    return {
        "status": status,
        "turns": turns,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "version": VERSION,
    }
