from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.db_services import CounterService
from app.apis.deps import get_counter_service
from .schemas import CounterResponse


router = APIRouter()


@router.get(
    f"/{settings.app.version}/counter",
    response_model=CounterResponse,
    tags=["counter"],
)
async def get_counter(
    counter: CounterService = Depends(get_counter_service),
) -> CounterResponse:
    """Read the global flashcards-created counter without changing it."""
    return CounterResponse(count=await counter.get_count())
