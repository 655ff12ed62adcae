from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.modules.feedback import FeedbackStatus
from app.modules.flashcards.models import CardType


class FlashcardRead(BaseModel):
    index: int
    front: str
    back: Optional[str] = None
    type: CardType


class PageRead(BaseModel):
    index: int
    flashcards: list[FlashcardRead] = Field(default_factory=list)


class PaginationRead(BaseModel):
    current_page: int
    current_group: int
    total_pages: int
    total_groups: int
    pages_per_group: int
    has_next_group: bool
    has_prev_group: bool
    has_next_page: bool
    has_prev_page: bool


class FlashcardsView(BaseModel):
    total_cards: int
    pages: list[PageRead] = Field(default_factory=list)
    pagination: PaginationRead


class SelectedFileRead(BaseModel):
    filename: str
    size: int
    content_type: Optional[str] = None
    preview_url: Optional[str] = None


class UploadStateRead(BaseModel):
    pdf: Optional[SelectedFileRead] = None
    images: list[SelectedFileRead] = Field(default_factory=list)
    card_type: CardType
    system_prompt: Optional[str] = None
    user_prompt: Optional[str] = None
    error: Optional[str] = None
    busy: bool = False


class ExportStateRead(BaseModel):
    ready: bool
    download_url: Optional[str] = None
    filename: Optional[str] = None
    size: Optional[int] = None
    error: Optional[str] = None
    busy: bool = False


class FeedbackStateRead(BaseModel):
    status: FeedbackStatus
    sending: bool = False
    feedback: str = ""


class WorkspaceState(BaseModel):
    id: str
    created_at: str
    upload: UploadStateRead
    flashcards: FlashcardsView
    export: ExportStateRead
    feedback: FeedbackStateRead


class SelectionResponse(BaseModel):
    accepted: bool
    upload: UploadStateRead


class OptionsUpdate(BaseModel):
    card_type: Optional[CardType] = None
    system_prompt: Optional[str] = None
    user_prompt: Optional[str] = None


class GenerateResponse(BaseModel):
    pages: int
    cards_created: int
    counter_before: Optional[int] = None
    flashcards: FlashcardsView


class NavigationRequest(BaseModel):
    action: Literal["next_group", "prev_group", "next_page", "prev_page", "go_to_page"]
    page: Optional[int] = Field(default=None, description="Target page for go_to_page")


class CardUpdate(BaseModel):
    field: Literal["front", "back", "type"]
    value: Optional[str] = None


class FeedbackRequest(BaseModel):
    message: str = Field(..., min_length=1, description="Free-text feedback")
