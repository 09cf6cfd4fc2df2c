"""Health and root endpoints."""

import time
from typing import Any, Dict

from fastapi import APIRouter

from .. import __version__

router = APIRouter(tags=["health"])


@router.get("/api/v1/health")
async def health() -> Dict[str, Any]:
    return {"status": "healthy", "timestamp": int(time.time()), "version": __version__}


@router.get("/")
async def root() -> Dict[str, Any]:
    return {"message": "LLM Tools API", "version": __version__, "docs": "/api/v1/health"}
