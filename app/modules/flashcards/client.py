"""HTTP client for the remote flashcard generation service.

The service does all the heavy lifting: it parses the uploaded PDF or
images, generates flashcards, and renders the import file. This module only
shapes requests and validates responses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.flashcards.models import CardType, FlashcardPage


logger = get_logger(__name__)

_PAGES = TypeAdapter(list[FlashcardPage])
_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class AnkiXServiceError(Exception):
    """Raised when the remote service is unreachable or answers with garbage."""

    pass


@dataclass
class UploadPart:
    """One file of a multipart upload."""

    field: str
    filename: str
    content: bytes
    content_type: str

    def as_httpx(self) -> tuple[str, tuple[str, bytes, str]]:
        return self.field, (self.filename, self.content, self.content_type)


@dataclass
class ImportArtifact:
    """Opaque import file returned by the service, kept for download."""

    content: bytes
    media_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.content)


class AnkiXClient:
    def __init__(
        self,
        *,
        process_url: Optional[str] = None,
        import_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.process_url = process_url or str(settings.ankix.process_url)
        self.import_url = import_url or str(settings.ankix.import_url)
        self.timeout = timeout if timeout is not None else settings.ankix.timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def process(
        self, parts: list[UploadPart], data: dict[str, str]
    ) -> list[FlashcardPage]:
        """Upload document(s) and return one FlashcardPage per source page."""
        try:
            async with self._client() as client:
                response = await client.post(
                    self.process_url,
                    files=[p.as_httpx() for p in parts],
                    data=data,
                )
                response.raise_for_status()
                return _PAGES.validate_python(response.json())
        except httpx.HTTPError as e:
            raise AnkiXServiceError(f"HTTP error calling flashcard service: {e}") from e
        except (ValueError, ValidationError) as e:
            raise AnkiXServiceError(f"Invalid flashcard service response: {e}") from e

    async def generate_import_file(
        self, pages: list[dict[str, Any]], card_type: CardType
    ) -> ImportArtifact:
        """Request an import file for the given (possibly edited) pages."""
        payload = {"flashcardPages": pages, "cardType": card_type.value}
        try:
            async with self._client() as client:
                response = await client.post(self.import_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise AnkiXServiceError(f"HTTP error calling flashcard service: {e}") from e

        return ImportArtifact(
            content=response.content,
            media_type=response.headers.get(
                "content-type", "application/octet-stream"
            ),
            filename=_filename_from(response) or settings.ankix.import_filename,
        )


def _filename_from(response: httpx.Response) -> Optional[str]:
    disposition = response.headers.get("content-disposition")
    if not disposition:
        return None
    m = _FILENAME_RE.search(disposition)
    return m.group(1).strip() if m else None
