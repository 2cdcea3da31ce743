from fastapi import APIRouter
from datetime import datetime
import time

import config
from database import ensure_beanie, ping_database

router = APIRouter()

STARTED_AT = time.monotonic()


@router.get("/health")
async def health_check():
    connected = await ping_database() and await ensure_beanie()
    return {
        "status": "healthy" if connected else "degraded",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": config.ENVIRONMENT,
        "database": "connected" if connected else "disconnected",
    }
