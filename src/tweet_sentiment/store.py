"""Persistent per-topic word and post frequency counters.

Layout per namespace (``<topic>_training`` or ``<topic>_testing``):

- collection ``<namespace>``: one document per token (``_id`` = token)
  with integer fields ``positive``, ``neutral`` and ``negative``
- collection ``<namespace>_totals``: documents ``wordTotal`` and
  ``tweetTotal`` holding the same three fields

Counters only ever grow. Every token increment is paired with exactly one
``wordTotal`` increment, and every labeled post adds one to
``tweetTotal``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .backends import StorageBackend
from .models import Sentiment, TotalScope

logger = logging.getLogger(__name__)

TOTALS_SUFFIX = "_totals"

_ZERO_TOTALS: dict[str, int] = {s.value: 0 for s in Sentiment}


# ---------------------------------------------------------------------------
# Evidence snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Evidence:
    """Counts needed to score one token sequence against one topic.

    Attributes:
        tweet_totals: Labeled posts per class.
        word_totals: Token occurrences per class.
        vocabulary_size: Distinct tokens ever seen for the topic.
        token_counts: Per-class counts for the tokens being scored.
    """

    tweet_totals: dict[Sentiment, int] = field(default_factory=dict)
    word_totals: dict[Sentiment, int] = field(default_factory=dict)
    vocabulary_size: int = 0
    token_counts: dict[str, dict[Sentiment, int]] = field(default_factory=dict)

    @property
    def total_tweets(self) -> int:
        return sum(self.tweet_totals.get(s, 0) for s in Sentiment)

    def count(self, token: str, sentiment: Sentiment) -> int:
        """Occurrences of ``token`` under ``sentiment`` (0 if unseen)."""
        return self.token_counts.get(token, {}).get(sentiment, 0)


class EvidenceProvider(Protocol):
    """Anything that can produce an evidence snapshot for a topic."""

    def evidence(self, topic: str, tokens: Sequence[str]) -> Evidence: ...


# ---------------------------------------------------------------------------
# Frequency store
# ---------------------------------------------------------------------------


def _field(sentiment: Sentiment) -> str:
    if not isinstance(sentiment, Sentiment):
        raise TypeError(f"Expected a Sentiment, got {sentiment!r}")
    return sentiment.value


def _by_sentiment(doc: dict[str, int] | None) -> dict[Sentiment, int]:
    doc = doc or {}
    return {s: int(doc.get(s.value, 0)) for s in Sentiment}


class FrequencyStore:
    """Word and post counters for every topic, on top of a storage backend.

    Example::

        store = FrequencyStore(MemoryBackend())
        store.increment_words("economie_training", ["markt", "groeit"], Sentiment.POSITIVE)
        store.increment_tweet("economie_training", Sentiment.POSITIVE)

        store.word_count("economie_training", "markt", Sentiment.POSITIVE)  # 1

    Args:
        backend: Storage backend holding the documents.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def increment_word(self, topic: str, token: str, sentiment: Sentiment) -> int:
        """Count one occurrence of ``token`` under ``sentiment``.

        Returns:
            The token's new count for that class.
        """
        name = _field(sentiment)
        value = self._backend.increment(topic, token, name)
        self._increment_total(topic, TotalScope.WORD, name)
        return value

    def increment_words(self, topic: str, tokens: Iterable[str], sentiment: Sentiment) -> None:
        """Count every token of a labeled post."""
        for token in tokens:
            self.increment_word(topic, token, sentiment)

    def increment_tweet(self, topic: str, sentiment: Sentiment) -> int:
        """Count one labeled post under ``sentiment``."""
        return self._increment_total(topic, TotalScope.TWEET, _field(sentiment))

    def _increment_total(self, topic: str, scope: TotalScope, name: str) -> int:
        collection = topic + TOTALS_SUFFIX
        self._backend.ensure_document(collection, scope.value, _ZERO_TOTALS)
        return self._backend.increment(collection, scope.value, name)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def word_count(self, topic: str, token: str, sentiment: Sentiment) -> int:
        """Occurrences of ``token`` under ``sentiment``; 0 when absent."""
        doc = self._backend.get_document(topic, token)
        return _by_sentiment(doc)[sentiment]

    def class_totals(self, topic: str, scope: TotalScope) -> dict[Sentiment, int]:
        """All three class totals for a scope; 0 for anything absent."""
        doc = self._backend.get_document(topic + TOTALS_SUFFIX, scope.value)
        return _by_sentiment(doc)

    def class_total(self, topic: str, scope: TotalScope, sentiment: Sentiment) -> int:
        """One class total for a scope; 0 when absent."""
        return self.class_totals(topic, scope)[sentiment]

    def scope_total(self, topic: str, scope: TotalScope) -> int:
        """Sum of the three class totals for a scope."""
        return sum(self.class_totals(topic, scope).values())

    def vocabulary_size(self, topic: str) -> int:
        """Number of distinct tokens recorded for the topic."""
        return self._backend.count_documents(topic)

    def topic_has_training_data(self, topic: str) -> bool:
        """Whether ``<topic>_training`` has any recorded totals."""
        return self._backend.has_documents(f"{topic}_training{TOTALS_SUFFIX}")

    def evidence(self, topic: str, tokens: Sequence[str]) -> Evidence:
        """Pull every count needed to score ``tokens`` in one pass."""
        docs = self._backend.get_documents(topic, dict.fromkeys(tokens))
        evidence = Evidence(
            tweet_totals=self.class_totals(topic, TotalScope.TWEET),
            word_totals=self.class_totals(topic, TotalScope.WORD),
            vocabulary_size=self.vocabulary_size(topic),
            token_counts={token: _by_sentiment(doc) for token, doc in docs.items()},
        )
        logger.debug(
            "Evidence for %s: %d posts, vocabulary %d, %d/%d tokens known",
            topic,
            evidence.total_tweets,
            evidence.vocabulary_size,
            len(docs),
            len(set(tokens)),
        )
        return evidence
