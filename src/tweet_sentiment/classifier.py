"""Multinomial Naive Bayes sentiment classification.

Scores a cleaned token sequence against the counts stored for a topic:

- Class prior with add-one smoothing over the three classes:
  ``(posts[c] + 1) / (total_posts + 3)``
- Per-token likelihood with Laplace smoothing:
  ``(count[t][c] + 1) / (words[c] + |V|)``

Scores are summed in log space. The classifier holds no learned state of
its own; every call reads a fresh evidence snapshot, so training and
inference can interleave freely.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from .models import Sentiment
from .store import Evidence, EvidenceProvider

logger = logging.getLogger(__name__)

NUM_CLASSES = len(Sentiment)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def score(evidence: Evidence, tokens: Sequence[str]) -> dict[Sentiment, float]:
    """Compute unnormalized log posterior scores for each class.

    With an empty vocabulary every token is equally unknown to every
    class, so only the priors are compared.
    """
    total_tweets = evidence.total_tweets
    vocab_size = evidence.vocabulary_size

    scores: dict[Sentiment, float] = {}
    for cls in Sentiment:
        prior = (evidence.tweet_totals.get(cls, 0) + 1) / (total_tweets + NUM_CLASSES)
        log_score = math.log(prior)

        if vocab_size > 0:
            denominator = evidence.word_totals.get(cls, 0) + vocab_size
            for token in tokens:
                log_score += math.log((evidence.count(token, cls) + 1) / denominator)

        scores[cls] = log_score
    return scores


def select(scores: dict[Sentiment, float]) -> Sentiment:
    """Pick the highest-scoring class.

    Ties go to the class declared first: positive, then neutral, then
    negative.
    """
    best = Sentiment.POSITIVE
    for cls in Sentiment:
        if scores[cls] > scores[best]:
            best = cls
    return best


def probabilities(scores: dict[Sentiment, float]) -> dict[Sentiment, float]:
    """Normalize log scores into probabilities using log-sum-exp."""
    max_score = max(scores.values())
    exp_scores = {cls: math.exp(s - max_score) for cls, s in scores.items()}
    total = sum(exp_scores.values())
    return {cls: value / total for cls, value in exp_scores.items()}


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


@dataclass
class ClassificationResult:
    """Result of classifying a single token sequence."""

    predicted_class: Sentiment
    confidence: float
    probabilities: dict[Sentiment, float]
    scores: dict[Sentiment, float]

    def to_dict(self) -> dict:
        return {
            "predicted_class": self.predicted_class.value,
            "confidence": round(self.confidence, 4),
            "probabilities": {
                cls.value: round(p, 4)
                for cls, p in sorted(
                    self.probabilities.items(),
                    key=lambda x: x[1],
                    reverse=True,
                )
            },
        }


class NaiveBayesClassifier:
    """Naive Bayes classifier reading its evidence from a provider.

    Example::

        classifier = NaiveBayesClassifier(FrequencyStore(backend))
        classifier.classify("economie_training", ["markt", "groeit"])
        # Sentiment.POSITIVE

    Args:
        provider: Source of evidence snapshots, usually a FrequencyStore.
    """

    def __init__(self, provider: EvidenceProvider) -> None:
        self._provider = provider

    def classify(self, topic: str, tokens: Sequence[str]) -> Sentiment:
        """Return the most likely class for ``tokens`` under ``topic``."""
        return self.predict(topic, tokens).predicted_class

    def predict(self, topic: str, tokens: Sequence[str]) -> ClassificationResult:
        """Classify ``tokens`` and report per-class probabilities."""
        evidence = self._provider.evidence(topic, tokens)
        log_scores = score(evidence, tokens)
        predicted = select(log_scores)
        proba = probabilities(log_scores)
        logger.debug("Classified %d tokens under %s as %s", len(tokens), topic, predicted.value)
        return ClassificationResult(
            predicted_class=predicted,
            confidence=proba[predicted],
            probabilities=proba,
            scores=log_scores,
        )
