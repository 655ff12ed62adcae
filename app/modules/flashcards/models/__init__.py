from .flashcards import CardType, Flashcard, FlashcardPage

__all__ = [
    "CardType",
    "Flashcard",
    "FlashcardPage",
]
