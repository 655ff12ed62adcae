"""Database service classes for the flashcard counter and diagnostics."""

from __future__ import annotations

import asyncio
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from app.core.db.schemas.counter import FlashcardsCreated, Comment
from app.core.logging import get_logger


logger = get_logger(__name__)

DIAGNOSTIC_POST_ID = 2
DIAGNOSTIC_USER_ID = 3
DIAGNOSTIC_COMMENT = "This is another sample comment."

# Driver-level connect failures (refused, DNS, timeouts) surface unwrapped.
DB_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class CounterService:
    """Reads and bumps the global flashcards-created counter.

    Failures never propagate: every method logs and returns ``None`` (or
    ``False``) so callers can render "unknown" instead of a wrong number.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except DB_ERRORS as e:
            logger.error(f"Rollback failed: {e}")

    async def get_count(self) -> Optional[int]:
        """Return the current counter value without modifying it."""
        try:
            result = await self.session.execute(
                select(FlashcardsCreated.counter).limit(1)
            )
            value = result.scalar_one_or_none()
        except DB_ERRORS as e:
            await self._rollback()
            logger.error(f"Database error: {e}")
            return None
        if value is None:
            logger.error("Database error: flashcardscreated has no counter row")
            return None
        return int(value)

    async def get_and_increment(self, cards_created: int) -> Optional[int]:
        """Add ``cards_created`` to the counter and return the value before it.

        The increment happens in a single UPDATE so concurrent callers cannot
        lose each other's writes.
        """
        try:
            result = await self.session.execute(
                update(FlashcardsCreated)
                .values(counter=FlashcardsCreated.counter + cards_created)
                .returning(FlashcardsCreated.counter)
                .execution_options(synchronize_session=False)
            )
            new_count = result.scalars().first()
            if new_count is None:
                await self._rollback()
                logger.error("Database error: flashcardscreated has no counter row")
                return None
            await self.session.commit()
        except DB_ERRORS as e:
            await self._rollback()
            logger.error(f"Database error: {e}")
            return None
        return int(new_count) - cards_created

    async def insert_diagnostic_comment(self) -> bool:
        """Write the fixed diagnostic comment row; True when the database accepted it."""
        try:
            self.session.add(
                Comment(
                    post_id=DIAGNOSTIC_POST_ID,
                    user_id=DIAGNOSTIC_USER_ID,
                    comment_text=DIAGNOSTIC_COMMENT,
                )
            )
            await self.session.commit()
        except DB_ERRORS as e:
            await self._rollback()
            logger.error(f"Database error: {e}")
            return False
        return True
