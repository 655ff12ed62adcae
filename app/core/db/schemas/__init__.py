# Import models so Base metadata is aware of them
from .counter import FlashcardsCreated, Comment  # noqa: F401
