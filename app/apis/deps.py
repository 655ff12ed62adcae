from __future__ import annotations

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.base import get_session
from app.core.db_services import CounterService
from app.modules.flashcards.client import AnkiXClient
from app.modules.workspace import Workspace, workspace_manager


async def get_workspace(workspace_id: str) -> Workspace:
    """Resolve the workspace from the path, refreshing its idle timer."""
    ws = workspace_manager.get(workspace_id)
    if ws is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Workspace not found"
        )
    return ws


def get_ankix_client() -> AnkiXClient:
    return AnkiXClient()


async def get_counter_service(
    session: AsyncSession = Depends(get_session),
) -> CounterService:
    return CounterService(session)
