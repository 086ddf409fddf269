"""Shared test fixtures for tweet-sentiment tests."""

from __future__ import annotations

import pytest

from tweet_sentiment.backends import MemoryBackend
from tweet_sentiment.classifier import NaiveBayesClassifier
from tweet_sentiment.models import Post
from tweet_sentiment.store import FrequencyStore
from tweet_sentiment.trainer import SentimentTrainer


@pytest.fixture
def backend() -> MemoryBackend:
    """Empty in-memory storage backend."""
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> FrequencyStore:
    """Frequency store over an empty in-memory backend."""
    return FrequencyStore(backend)


@pytest.fixture
def classifier(store: FrequencyStore) -> NaiveBayesClassifier:
    return NaiveBayesClassifier(store)


@pytest.fixture
def echoed() -> list[str]:
    """Collects every progress line a trainer emits."""
    return []


@pytest.fixture
def trainer(store: FrequencyStore, echoed: list[str]) -> SentimentTrainer:
    """Trainer writing its progress lines into ``echoed``."""
    return SentimentTrainer(store, echo=echoed.append)


@pytest.fixture
def economy_posts() -> list[Post]:
    """The two labeled posts of the economie example."""
    return [
        Post(text="De markt groeit hard!"),
        Post(text="Dit is een ramp voor de economie"),
    ]


@pytest.fixture
def five_posts() -> list[Post]:
    """Five posts; the fifth is the only test item."""
    return [
        Post(text="Banen erbij in de bouw"),
        Post(text="Inflatie daalt weer"),
        Post(text="Rente blijft gelijk"),
        Post(text="Beurs zakt flink"),
        Post(text="Kabinet presenteert begroting"),
    ]
