"""File selection state and the generation request built from it.

A workspace holds either one PDF or a growing list of JPEG images, never
both. Invalid selections surface a single user-facing error string which the
next valid selection clears.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.core.logging import get_logger
from app.modules.flashcards.client import AnkiXClient, AnkiXServiceError, UploadPart
from app.modules.flashcards.models import CardType, FlashcardPage


logger = get_logger(__name__)

PDF_TYPES = frozenset({"application/pdf"})
IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg"})

INVALID_PDF_ERROR = "Please select a valid PDF file"
INVALID_IMAGES_ERROR = "Please select valid JPEG images"
GENERATION_ERROR = "An error occurred while processing your file. Please try again."


class NothingSelectedError(Exception):
    pass


class GenerationInProgressError(Exception):
    pass


@dataclass
class SelectedFile:
    filename: str
    content: bytes
    content_type: Optional[str]

    @property
    def size(self) -> int:
        return len(self.content)


class UploadController:
    def __init__(self) -> None:
        self.pdf: Optional[SelectedFile] = None
        self.images: list[SelectedFile] = []
        self.card_type: CardType = CardType.BASIC
        self.system_prompt: Optional[str] = None
        self.user_prompt: Optional[str] = None
        self.error: Optional[str] = None
        self.busy: bool = False

    @property
    def has_selection(self) -> bool:
        return self.pdf is not None or bool(self.images)

    # Selection ----------------------------------------------------------
    def select_pdf(self, file: Optional[SelectedFile]) -> bool:
        if file is None or file.content_type not in PDF_TYPES:
            self.pdf = None
            self.error = INVALID_PDF_ERROR
            return False
        self.pdf = file
        self.images = []
        self.error = None
        return True

    def select_images(self, files: list[SelectedFile]) -> bool:
        if not files or any(f.content_type not in IMAGE_TYPES for f in files):
            self.error = INVALID_IMAGES_ERROR
            return False
        self.pdf = None
        self.images.extend(files)
        self.error = None
        return True

    def remove_image(self, index: int) -> SelectedFile:
        if not 0 <= index < len(self.images):
            raise IndexError(f"image {index} out of range")
        return self.images.pop(index)

    def clear(self) -> None:
        self.pdf = None
        self.images = []
        self.error = None

    # Options ------------------------------------------------------------
    def set_options(
        self,
        *,
        card_type: Optional[CardType] = None,
        system_prompt: Optional[str] = None,
        user_prompt: Optional[str] = None,
    ) -> None:
        if card_type is not None:
            self.card_type = CardType(card_type)
        if system_prompt is not None:
            self.system_prompt = system_prompt
        if user_prompt is not None:
            self.user_prompt = user_prompt

    # Request ------------------------------------------------------------
    def build_payload(self) -> tuple[list[UploadPart], dict[str, str]]:
        if self.pdf is not None:
            parts = [
                UploadPart(
                    "pdf", self.pdf.filename, self.pdf.content, "application/pdf"
                )
            ]
        else:
            parts = [
                UploadPart("images", f.filename, f.content, f.content_type or "image/jpeg")
                for f in self.images
            ]
        data = {"cardType": self.card_type.value}
        if self.system_prompt:
            data["systemPrompt"] = self.system_prompt
        if self.user_prompt:
            data["userPrompt"] = self.user_prompt
        return parts, data

    async def generate(self, client: AnkiXClient) -> Optional[list[FlashcardPage]]:
        """Send the selection for processing.

        Returns the new pages, or ``None`` on failure with ``error`` set and
        everything else left as it was.
        """
        if self.busy:
            raise GenerationInProgressError()
        if not self.has_selection:
            raise NothingSelectedError()

        self.busy = True
        self.error = None
        try:
            parts, data = self.build_payload()
            logger.info(
                f"Uploading {len(parts)} file(s) as {parts[0].field} "
                f"(cardType={data['cardType']})"
            )
            return await client.process(parts, data)
        except AnkiXServiceError as e:
            logger.error(f"Upload failed: {e}")
            self.error = GENERATION_ERROR
            return None
        finally:
            self.busy = False
