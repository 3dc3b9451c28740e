"""Health check endpoints."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/liveness-check", response_class=PlainTextResponse)
async def liveness_check() -> str:
    return "live\n"


@router.get("/readiness-check", response_class=PlainTextResponse)
async def readiness_check() -> str:
    return "ready\n"
