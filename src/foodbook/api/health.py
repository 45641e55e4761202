from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from foodbook.db.deps import get_async_session

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check(session: AsyncSession = Depends(get_async_session)):
    """
    Простейший health-check: приложение живо и база отвечает.
    """
    await session.execute(text("SELECT 1"))
    return {
        "status": "ok",
        "timestamp": datetime.now(),
    }
