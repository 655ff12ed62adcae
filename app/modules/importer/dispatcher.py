"""Turns the current (possibly edited) collection into a downloadable file."""

from __future__ import annotations

from typing import Optional

from app.core.logging import get_logger
from app.modules.flashcards.client import AnkiXClient, AnkiXServiceError, ImportArtifact
from app.modules.flashcards.collection import FlashcardCollection
from app.modules.flashcards.models import CardType


logger = get_logger(__name__)

IMPORT_ERROR = "An error occurred while generating the import file. Please try again."


class ExportInProgressError(Exception):
    pass


class ImportDispatcher:
    def __init__(self) -> None:
        self.artifact: Optional[ImportArtifact] = None
        self.error: Optional[str] = None
        self.busy: bool = False

    def reset(self) -> None:
        self.artifact = None
        self.error = None

    async def dispatch(
        self,
        client: AnkiXClient,
        collection: FlashcardCollection,
        card_type: CardType,
    ) -> Optional[ImportArtifact]:
        """One attempt; on failure the previous artifact is kept and ``error`` set."""
        if self.busy:
            raise ExportInProgressError()
        self.busy = True
        self.error = None
        try:
            artifact = await client.generate_import_file(
                collection.to_jsonable(), card_type
            )
        except AnkiXServiceError as e:
            logger.error(f"Import file generation failed: {e}")
            self.error = IMPORT_ERROR
            return None
        finally:
            self.busy = False
        logger.info(f"Import file ready: {artifact.filename} ({artifact.size} bytes)")
        self.artifact = artifact
        return artifact
