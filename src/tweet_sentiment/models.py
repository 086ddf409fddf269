"""Data models for tweet sentiment training and classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Sentiment(str, Enum):
    """Sentiment classes, declared in tie-break priority order."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @classmethod
    def from_input(cls, value: str) -> Optional["Sentiment"]:
        """Map a human label (``"1"``, ``"2"`` or ``"3"``) to a class.

        A trailing line terminator is ignored. Anything else, including
        surrounding spaces, means "no label" and returns ``None``.
        """
        return _INPUT_LABELS.get(value.rstrip("\r\n"))

    @property
    def input_key(self) -> str:
        """The human input that selects this class."""
        return {v: k for k, v in _INPUT_LABELS.items()}[self]


_INPUT_LABELS: dict[str, Sentiment] = {
    "1": Sentiment.POSITIVE,
    "2": Sentiment.NEUTRAL,
    "3": Sentiment.NEGATIVE,
}


class Subset(str, Enum):
    """Partition a labeled post belongs to during a training pass."""

    TRAINING = "training"
    TESTING = "testing"

    def namespace(self, topic: str) -> str:
        """Storage namespace for ``topic`` within this subset."""
        return f"{topic}_{self.value}"


class TotalScope(str, Enum):
    """Which per-class aggregate a ClassTotals document tracks."""

    WORD = "wordTotal"
    TWEET = "tweetTotal"


@dataclass(frozen=True)
class Post:
    """A single social-media post as supplied by a post source."""

    text: str
    is_retweet: bool = False
    retweeted_text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Post":
        """Build a post from a flat record or a feed-style status object.

        Feed-style records nest the reshared post under
        ``retweeted_status``; flat records use ``is_retweet`` and
        ``retweeted_text``.

        Raises:
            ValueError: If the record carries no text.
        """
        text = data.get("full_text", data.get("text"))
        if text is None:
            raise ValueError(f"Post record has no text: {data!r}")

        original = data.get("retweeted_status")
        if isinstance(original, dict):
            retweeted_text = original.get("full_text", original.get("text", ""))
            return cls(text=text, is_retweet=True, retweeted_text=retweeted_text)

        is_retweet = bool(data.get("is_retweet", False))
        retweeted_text = data.get("retweeted_text")
        if is_retweet and retweeted_text is None:
            retweeted_text = text
        return cls(text=text, is_retweet=is_retweet, retweeted_text=retweeted_text)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "is_retweet": self.is_retweet,
            "retweeted_text": self.retweeted_text,
        }
