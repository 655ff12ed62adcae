"""Editable, paginated in-memory collection of generated flashcards.

The collection is replaced wholesale by each successful generation and
mutated in place by per-card edits. Indexes are never cached: every view is
re-derived from the current list of pages, so a delete simply shifts the
following cards of that page down by one.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from app.modules.flashcards.models import CardType, Flashcard, FlashcardPage


PAGES_PER_GROUP = 3

EDITABLE_FIELDS = ("front", "back", "type")


class FlashcardCollection:
    def __init__(self, pages: Optional[Iterable[FlashcardPage]] = None) -> None:
        self.pages: list[FlashcardPage] = list(pages or [])

    def replace(self, pages: Iterable[FlashcardPage]) -> None:
        self.pages = list(pages)

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def total_cards(self) -> int:
        return sum(len(p.flashcards) for p in self.pages)

    def page(self, page_index: int) -> FlashcardPage:
        if not 0 <= page_index < len(self.pages):
            raise IndexError(f"page {page_index} out of range")
        return self.pages[page_index]

    def card(self, page_index: int, card_index: int) -> Flashcard:
        cards = self.page(page_index).flashcards
        if not 0 <= card_index < len(cards):
            raise IndexError(f"card {card_index} out of range on page {page_index}")
        return cards[card_index]

    def edit_field(
        self, page_index: int, card_index: int, field: str, value: Optional[str]
    ) -> Flashcard:
        """Overwrite one field of one card. Only ``back`` may be cleared to None."""
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"unknown flashcard field: {field}")
        card = self.card(page_index, card_index)
        if value is None and field != "back":
            raise ValueError(f"flashcard field {field} cannot be null")
        if field == "type":
            card.type = CardType(value)
        else:
            setattr(card, field, value)
        return card

    def delete_card(self, page_index: int, card_index: int) -> Flashcard:
        self.card(page_index, card_index)
        return self.page(page_index).flashcards.pop(card_index)

    def to_jsonable(self) -> list[dict]:
        return [p.model_dump(mode="json") for p in self.pages]


class Paginator:
    """Groups pages into fixed-size groups; every move clamps, none wraps."""

    def __init__(
        self, collection: FlashcardCollection, *, group_size: int = PAGES_PER_GROUP
    ) -> None:
        self.collection = collection
        self.group_size = max(1, int(group_size))
        self._page = 0

    @property
    def current_page(self) -> int:
        # The collection may shrink or be replaced underneath us.
        last = max(0, self.collection.total_pages - 1)
        self._page = min(max(self._page, 0), last)
        return self._page

    @property
    def total_groups(self) -> int:
        return math.ceil(self.collection.total_pages / self.group_size)

    @property
    def current_group(self) -> int:
        return self.current_page // self.group_size

    @property
    def has_next_group(self) -> bool:
        return self.current_group < self.total_groups - 1

    @property
    def has_prev_group(self) -> bool:
        return self.current_group > 0

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.collection.total_pages - 1

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 0

    def reset(self) -> None:
        self._page = 0

    def go_to_page(self, page_index: int) -> int:
        self._page = page_index
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def prev_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    def go_to_group(self, group_index: int) -> int:
        last = max(0, self.total_groups - 1)
        group_index = min(max(group_index, 0), last)
        self.go_to_page(group_index * self.group_size)
        return self.current_group

    def next_group(self) -> int:
        return self.go_to_group(self.current_group + 1)

    def prev_group(self) -> int:
        return self.go_to_group(self.current_group - 1)

    def visible_pages(self) -> list[tuple[int, FlashcardPage]]:
        """(page_index, page) pairs of the current group."""
        start = self.current_group * self.group_size
        end = min(start + self.group_size, self.collection.total_pages)
        return [(i, self.collection.pages[i]) for i in range(start, end)]
