"""Supervised training pass and batch classification.

A training pass walks posts in their original order and asks a human for
a label per post (``1`` positive, ``2`` neutral, ``3`` negative, anything
else skips). Every fifth post is held out as a test item: it is recorded
under the topic's ``_testing`` namespace and, before moving on, classified
against the ``_training`` namespace so that the running accuracy can be
reported while the model grows. Skipping a test item still counts it as
checked, which lowers the reported accuracy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Optional

import click

from .classifier import NaiveBayesClassifier
from .config import DEFAULT_TOPIC
from .dashboard import AccuracyDashboard
from .models import Post, Sentiment, Subset
from .preprocessing import TweetCleaner, get_text
from .store import FrequencyStore

logger = logging.getLogger(__name__)

TEST_INTERVAL = 5


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------


def is_test_index(index: int) -> bool:
    """Whether the 1-based ``index`` falls in the test subset."""
    return index % TEST_INTERVAL == 0


def partition(count: int) -> list[Subset]:
    """Assign ``count`` posts to subsets, in order (every fifth is testing)."""
    return [
        Subset.TESTING if is_test_index(i) else Subset.TRAINING for i in range(1, count + 1)
    ]


def split_training_data(posts: Sequence[Post]) -> tuple[list[Post], list[Post]]:
    """Split posts 80/20 into training and testing lists.

    Returns:
        ``(training, testing)``, each in original order.
    """
    training: list[Post] = []
    testing: list[Post] = []
    for post, subset in zip(posts, partition(len(posts))):
        (testing if subset is Subset.TESTING else training).append(post)
    return training, testing


# ---------------------------------------------------------------------------
# Trainer
# ---------------------------------------------------------------------------


class SentimentTrainer:
    """Drives training passes and batch classification for topics.

    Example::

        store = FrequencyStore(JsonFileBackend("model.json"))
        trainer = SentimentTrainer(store)

        dashboard = trainer.train("economie", posts, labels=sys.stdin)
        print(dashboard.format_accuracy())

        verdicts = trainer.current_sentiment("economie", recent_posts)

    Args:
        store: Frequency store shared by training and classification.
        classifier: Classifier reading from ``store`` (built if omitted).
        cleaner: Token cleaner (default stopword list if omitted).
        echo: Callable receiving each progress line (``click.echo`` if omitted).
        default_topic: Topic used when a requested topic has no training data.
    """

    def __init__(
        self,
        store: FrequencyStore,
        classifier: Optional[NaiveBayesClassifier] = None,
        cleaner: Optional[TweetCleaner] = None,
        echo: Optional[Callable[[str], None]] = None,
        default_topic: str = DEFAULT_TOPIC,
    ) -> None:
        self._store = store
        self._classifier = classifier or NaiveBayesClassifier(store)
        self._cleaner = cleaner or TweetCleaner()
        self._echo = echo or click.echo
        self.default_topic = default_topic

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(
        self,
        topic: str,
        posts: Sequence[Post],
        labels: Iterable[str],
    ) -> AccuracyDashboard:
        """Run one supervised training pass over ``posts``.

        Args:
            topic: Topic whose ``_training``/``_testing`` namespaces are updated.
            posts: Posts in temporal order.
            labels: One human input line per post, consumed lazily. The
                pass stops between posts when the input runs out.

        Returns:
            Dashboard with the accuracy measured on test items.
        """
        dashboard = AccuracyDashboard()
        subsets = partition(len(posts))
        total = len(posts)
        label_iter = iter(labels)

        logger.info("Training topic %s on %d posts", topic, total)

        for index, (post, subset) in enumerate(zip(posts, subsets), 1):
            text = get_text(post)
            self._echo(f"{index}/{total} - {text}")
            tokens = self._cleaner.clean(text)

            try:
                raw = next(label_iter)
            except StopIteration:
                logger.info("Label input ended after %d of %d posts", index - 1, total)
                break

            sentiment = Sentiment.from_input(raw)
            if sentiment is None:
                logger.debug("Skipped post %d/%d", index, total)
            else:
                self.record(subset.namespace(topic), tokens, sentiment)

            # Test items are always checked; a skipped label earns no credit.
            if subset is Subset.TESTING:
                predicted = self._classifier.classify(Subset.TRAINING.namespace(topic), tokens)
                dashboard.record_evaluation(predicted, sentiment)
                self._echo(dashboard.accuracy_line())

        return dashboard

    def record(self, namespace: str, tokens: Sequence[str], sentiment: Sentiment) -> None:
        """Store one labeled post's tokens and count the post."""
        self._store.increment_words(namespace, tokens, sentiment)
        self._store.increment_tweet(namespace, sentiment)

    # ------------------------------------------------------------------
    # Batch classification
    # ------------------------------------------------------------------

    def resolve_topic(self, topic: str) -> str:
        """Return ``topic``, or the default topic if it has no training data."""
        if self._store.topic_has_training_data(topic):
            return topic
        logger.info("Topic %s has no training data, using %s", topic, self.default_topic)
        return self.default_topic

    def current_sentiment(self, topic: str, posts: Sequence[Post]) -> AccuracyDashboard:
        """Classify every post against ``topic`` or the default topic.

        Returns:
            Dashboard with one verdict per post.
        """
        return self.classify_posts(self.resolve_topic(topic), posts)

    def classify_posts(self, topic: str, posts: Sequence[Post]) -> AccuracyDashboard:
        """Classify every post against an already resolved ``topic``."""
        dashboard = AccuracyDashboard()
        namespace = Subset.TRAINING.namespace(topic)
        total = len(posts)

        for index, post in enumerate(posts, 1):
            text = get_text(post)
            self._echo(f"classifying tweet {index}/{total} - {text}")

            verdict = self._classifier.classify(namespace, self._cleaner.clean(text))
            dashboard.record_verdict(verdict)

            self._echo(f"Verdict: {verdict.value}\n")

        return dashboard
