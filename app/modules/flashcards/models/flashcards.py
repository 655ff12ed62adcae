"""Pydantic models for flashcards returned by the remote generation service.

Note: ``back`` is left optional for every card type. Cloze cards carry their
hidden span inside ``front`` and conventionally have no ``back``, but nothing
enforces that; the collection stores whatever the service or the user sends.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CardType(str, Enum):
    BASIC = "basic"
    CLOZE = "cloze"


class Flashcard(BaseModel):
    """A single front/back (or cloze) learning unit."""

    front: str
    back: Optional[str] = None
    type: CardType = CardType.BASIC


class FlashcardPage(BaseModel):
    """Cards extracted from one source page, in order."""

    flashcards: list[Flashcard] = Field(default_factory=list)
