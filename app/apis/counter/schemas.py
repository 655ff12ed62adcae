from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CounterResponse(BaseModel):
    count: Optional[int] = Field(
        default=None, description="Flashcards created so far; null when unknown"
    )
