import logging

from fastapi import APIRouter, Depends
from sqlalchemy import literal
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.websockets import ConnectionManager, get_broadcaster
from ..db.engine import get_session

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", tags=["System"])
async def get_system_health(
    session: AsyncSession = Depends(get_session),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
):
    """
    Returns the system health status including:
    - Database reachability
    - Number of live dashboard connections
    """
    try:
        await session.exec(select(literal(1)))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {e}")
        database = "unavailable"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "connections": len(broadcaster.active_connections),
    }
