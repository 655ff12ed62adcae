from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from app.core import redis as redis_store
from app.core.db_services import CounterService
from app.core.logging import get_logger
from app.apis.deps import get_counter_service
from .schemas import ProbeResponse


router = APIRouter()

logger = get_logger(__name__)


@router.get(
    "/api/redis-check",
    response_model=ProbeResponse,
    response_model_exclude_none=True,
    tags=["health"],
)
async def redis_check():
    """Write a fixed key to Redis to confirm the cache is reachable."""
    try:
        await redis_store.probe()
    except (RedisError, OSError) as e:
        logger.error(f"Redis connection failed: {e}")
        return JSONResponse(
            status_code=500,
            content=ProbeResponse(success=False, error=str(e) or "Unknown error").model_dump(
                exclude_none=True
            ),
        )
    return ProbeResponse(success=True, message=redis_store.PROBE_VALUE)


@router.get(
    "/api/db-check",
    response_model=ProbeResponse,
    response_model_exclude_none=True,
    tags=["health"],
)
async def db_check(counter: CounterService = Depends(get_counter_service)):
    """Insert the fixed diagnostic comment to confirm the database is writable."""
    if await counter.insert_diagnostic_comment():
        return ProbeResponse(success=True, message="Database is working!")
    return JSONResponse(
        status_code=500,
        content=ProbeResponse(success=False, error="Database write failed").model_dump(
            exclude_none=True
        ),
    )
