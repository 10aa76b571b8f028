from enum import Enum
from typing import Protocol


class FeedbackEvent(str, Enum):
    HARVEST_SOUND = "harvestSound"
    PURCHASE_SOUND = "purchaseSound"
    SALE_SOUND = "saleSound"


class Feedback(Protocol):
    def emit(self, event: FeedbackEvent) -> None:  # pragma: no cover
        ...


class NullFeedback:
    def emit(self, event: FeedbackEvent) -> None:
        pass


class RecordingFeedback:
    """按顺序记录收到的事件"""

    def __init__(self):
        self.events = []

    def emit(self, event: FeedbackEvent) -> None:
        self.events.append(event)
