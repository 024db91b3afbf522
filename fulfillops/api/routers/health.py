# fulfillops/api/routers/health.py
from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["ops"])


@router.get("/ping")
async def ping():
    return {"status": "ok"}


@router.get("/healthz")
async def healthz():
    return {"status": "ok"}
