"""Flashcards module exports."""

from .models.flashcards import CardType, Flashcard, FlashcardPage
from .collection import FlashcardCollection, Paginator, PAGES_PER_GROUP
from .client import AnkiXClient, AnkiXServiceError, ImportArtifact, UploadPart

__all__ = [
    "CardType",
    "Flashcard",
    "FlashcardPage",
    "FlashcardCollection",
    "Paginator",
    "PAGES_PER_GROUP",
    "AnkiXClient",
    "AnkiXServiceError",
    "ImportArtifact",
    "UploadPart",
]
