"""In-memory workspaces, one per browser session.

A workspace bundles everything a user builds up between page loads: the file
selection, the generated collection and its pagination, the last import file
and the feedback form. Workspaces live in-process only and are swept after a
period of inactivity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from app.core.config import settings
from app.core.db_services import CounterService
from app.core.logging import get_logger
from app.modules.feedback import FeedbackDispatcher
from app.modules.flashcards.client import AnkiXClient, ImportArtifact
from app.modules.flashcards.collection import FlashcardCollection, Paginator
from app.modules.importer import ImportDispatcher
from app.modules.upload import SelectedFile, UploadController


logger = get_logger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _short_id() -> str:
    return uuid4().hex[:12]


@dataclass
class GenerationOutcome:
    ok: bool
    pages: int = 0
    cards_created: int = 0
    # Counter value before this generation; None when the database is unavailable.
    counter_before: Optional[int] = None
    error: Optional[str] = None


@dataclass
class Workspace:
    id: str
    created_at: datetime = field(default_factory=_now_utc)
    last_activity: datetime = field(default_factory=_now_utc)
    upload: UploadController = field(default_factory=UploadController)
    collection: FlashcardCollection = field(default_factory=FlashcardCollection)
    importer: ImportDispatcher = field(default_factory=ImportDispatcher)
    feedback: FeedbackDispatcher = field(default_factory=FeedbackDispatcher)
    paginator: Paginator = field(init=False)

    def __post_init__(self) -> None:
        self.paginator = Paginator(self.collection)

    def touch(self) -> None:
        self.last_activity = _now_utc()

    @property
    def artifact(self) -> Optional[ImportArtifact]:
        return self.importer.artifact

    def select_pdf(self, file: Optional[SelectedFile]) -> bool:
        ok = self.upload.select_pdf(file)
        if ok:
            self.importer.reset()
        return ok

    def select_images(self, files: list[SelectedFile]) -> bool:
        ok = self.upload.select_images(files)
        if ok:
            self.importer.reset()
        return ok

    async def generate(
        self, client: AnkiXClient, counter: Optional[CounterService] = None
    ) -> GenerationOutcome:
        pages = await self.upload.generate(client)
        if pages is None:
            return GenerationOutcome(ok=False, error=self.upload.error)

        self.collection.replace(pages)
        self.paginator.reset()
        self.importer.reset()
        cards = self.collection.total_cards
        logger.info(
            f"Generated {cards} flashcards over {len(pages)} pages",
            extra={"workspace": self.id},
        )

        counter_before = None
        if counter is not None:
            counter_before = await counter.get_and_increment(cards)
        return GenerationOutcome(
            ok=True,
            pages=len(pages),
            cards_created=cards,
            counter_before=counter_before,
        )

    async def export(self, client: AnkiXClient) -> Optional[ImportArtifact]:
        return await self.importer.dispatch(
            client, self.collection, self.upload.card_type
        )


class WorkspaceManager:
    def __init__(self, *, idle_seconds: Optional[int] = None) -> None:
        self.workspaces: dict[str, Workspace] = {}
        self._idle_seconds = (
            idle_seconds
            if idle_seconds is not None
            else settings.app.workspace_idle_seconds
        )

    def create(self) -> Workspace:
        self.sweep()
        ws = Workspace(id=_short_id())
        self.workspaces[ws.id] = ws
        logger.info("Workspace created", extra={"workspace": ws.id})
        return ws

    def get(self, workspace_id: str) -> Optional[Workspace]:
        ws = self.workspaces.get(workspace_id)
        if ws is not None:
            ws.touch()
        return ws

    def discard(self, workspace_id: str) -> bool:
        return self.workspaces.pop(workspace_id, None) is not None

    def sweep(self) -> int:
        """Drop idle workspaces that are not waiting on the remote service."""
        cutoff = _now_utc() - timedelta(seconds=self._idle_seconds)
        stale = [
            ws_id
            for ws_id, ws in self.workspaces.items()
            if ws.last_activity < cutoff and not ws.upload.busy and not ws.importer.busy
        ]
        for ws_id in stale:
            self.workspaces.pop(ws_id, None)
        if stale:
            logger.info(f"Swept {len(stale)} idle workspace(s)")
        return len(stale)


workspace_manager = WorkspaceManager()
