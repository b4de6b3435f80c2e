# meal_recommender/models/feedback.py
"""
Feedback events that drive bandit updates.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any

from meal_recommender.errors import InvalidRequestError


class FeedbackSignal(Enum):
    """Kind of feedback a user gave on a meal."""
    LIKE = "like"
    DISLIKE = "dislike"
    SAVED = "saved"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> 'FeedbackSignal':
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise InvalidRequestError(
            f"Unknown feedback signal: {value!r}. "
            f"Valid: {[m.value for m in cls]}"
        )


@dataclass(frozen=True)
class FeedbackEvent:
    """
    One piece of user feedback on a meal.

    Strength must be positive; it scales every arm increment.
    """
    user_id: str
    meal_id: str
    signal: FeedbackSignal
    strength: float = 1.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(self, "signal", FeedbackSignal.parse(self.signal))
        if float(self.strength) <= 0:
            raise InvalidRequestError(
                f"Feedback strength must be positive, got {self.strength}"
            )
        object.__setattr__(self, "strength", float(self.strength))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedbackEvent':
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        elif timestamp is None:
            timestamp = datetime.now(timezone.utc)

        return cls(
            user_id=data.get("userId"),
            meal_id=data.get("mealId"),
            signal=data.get("signal"),
            strength=data.get("strength", 1.0),
            timestamp=timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "mealId": self.meal_id,
            "signal": self.signal.value,
            "strength": self.strength,
            "timestamp": self.timestamp.isoformat(),
        }
