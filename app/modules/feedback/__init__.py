from .dispatcher import FeedbackDispatcher, FeedbackStatus

__all__ = ["FeedbackDispatcher", "FeedbackStatus"]
