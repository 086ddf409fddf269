"""Running counters for a training pass or a classification batch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Sentiment


@dataclass
class AccuracyDashboard:
    """Accumulates evaluation outcomes and verdict tallies.

    Counters only grow. A dashboard belongs to one training run or one
    batch and is never persisted.
    """

    tweets_checked: int = 0
    tweets_guessed_correctly: int = 0
    positive_count: int = 0
    neutral_count: int = 0
    negative_count: int = 0

    def increment_tweets_checked(self) -> None:
        self.tweets_checked += 1

    def increment_tweets_guessed_correctly(self) -> None:
        self.tweets_guessed_correctly += 1

    def increment_positive(self) -> None:
        self.positive_count += 1

    def increment_neutral(self) -> None:
        self.neutral_count += 1

    def increment_negative(self) -> None:
        self.negative_count += 1

    def record_evaluation(self, predicted: Sentiment, expected: Optional[Sentiment]) -> bool:
        """Score one prediction against the human label.

        A missing label still counts the item as checked but can never be
        guessed correctly.

        Returns:
            Whether the prediction was correct.
        """
        self.increment_tweets_checked()
        correct = expected is not None and predicted is expected
        if correct:
            self.increment_tweets_guessed_correctly()
        return correct

    def record_verdict(self, sentiment: Sentiment) -> None:
        """Tally one batch classification verdict."""
        self.increment_tweets_checked()
        {
            Sentiment.POSITIVE: self.increment_positive,
            Sentiment.NEUTRAL: self.increment_neutral,
            Sentiment.NEGATIVE: self.increment_negative,
        }[sentiment]()

    def count(self, sentiment: Sentiment) -> int:
        return {
            Sentiment.POSITIVE: self.positive_count,
            Sentiment.NEUTRAL: self.neutral_count,
            Sentiment.NEGATIVE: self.negative_count,
        }[sentiment]

    @property
    def accuracy(self) -> float:
        """Fraction of checked posts guessed correctly (0.0 when none)."""
        if self.tweets_checked == 0:
            return 0.0
        return self.tweets_guessed_correctly / self.tweets_checked

    def format_accuracy(self) -> str:
        return f"{self.accuracy:.0%}"

    def share(self, sentiment: Sentiment) -> float:
        """Fraction of tallied verdicts that fell in ``sentiment``."""
        total = self.positive_count + self.neutral_count + self.negative_count
        return self.count(sentiment) / total if total else 0.0

    def accuracy_line(self) -> str:
        return (
            f"Accuracy: {self.format_accuracy()} "
            f"({self.tweets_guessed_correctly}/{self.tweets_checked} guessed correctly)"
        )

    def summary(self) -> str:
        """Human-readable summary of verdict tallies."""
        lines = [f"Tweets classified: {self.tweets_checked}"]
        for cls in Sentiment:
            lines.append(f"{cls.value.title():<10} {self.count(cls):>6} {self.share(cls):>8.1%}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "tweets_checked": self.tweets_checked,
            "tweets_guessed_correctly": self.tweets_guessed_correctly,
            "accuracy": round(self.accuracy, 4),
            "positive": self.positive_count,
            "neutral": self.neutral_count,
            "negative": self.negative_count,
        }
