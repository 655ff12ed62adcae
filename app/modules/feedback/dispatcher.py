"""Free-text feedback sent through the EmailJS REST API.

The dispatcher has three states. ``success`` and ``error`` fall back to
``idle`` once ``reset_after`` seconds have passed since the last submission.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

import httpx

from app.core.config import settings
from app.core.logging import get_logger


logger = get_logger(__name__)


class FeedbackStatus(str, Enum):
    IDLE = "idle"
    SUCCESS = "success"
    ERROR = "error"


class FeedbackDispatcher:
    def __init__(
        self,
        *,
        reset_after: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.reset_after = (
            reset_after
            if reset_after is not None
            else settings.emailjs.status_reset_seconds
        )
        self.feedback: str = ""
        self.sending: bool = False
        self._clock = clock
        self._transport = transport
        self._status = FeedbackStatus.IDLE
        self._status_at: float = 0.0

    @property
    def status(self) -> FeedbackStatus:
        if (
            self._status is not FeedbackStatus.IDLE
            and self._clock() - self._status_at >= self.reset_after
        ):
            self._status = FeedbackStatus.IDLE
        return self._status

    def _set_status(self, status: FeedbackStatus) -> None:
        self._status = status
        self._status_at = self._clock()

    def _payload(self, message: str) -> dict:
        cfg = settings.emailjs
        payload = {
            "service_id": cfg.service_id,
            "template_id": cfg.template_id,
            "user_id": cfg.public_key,
            "template_params": {"message": message},
        }
        if cfg.private_key:
            payload["accessToken"] = cfg.private_key
        return payload

    async def submit(self, message: str) -> FeedbackStatus:
        """Send ``message`` once; success clears the stored feedback."""
        self.feedback = message
        self.sending = True
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.post(
                    settings.emailjs.api_url, json=self._payload(message)
                )
            if response.status_code != 200:
                raise httpx.HTTPStatusError(
                    f"Failed to send email: {response.status_code} {response.text}",
                    request=response.request,
                    response=response,
                )
        except httpx.HTTPError as e:
            logger.error(f"Email send failed: {e}")
            self._set_status(FeedbackStatus.ERROR)
        else:
            self.feedback = ""
            self._set_status(FeedbackStatus.SUCCESS)
        finally:
            self.sending = False
        return self._status
