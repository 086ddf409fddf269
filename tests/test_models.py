"""Tests for data models."""

from __future__ import annotations

import pytest

from tweet_sentiment.models import Post, Sentiment, Subset, TotalScope


class TestSentiment:
    def test_priority_order(self) -> None:
        assert list(Sentiment) == [Sentiment.POSITIVE, Sentiment.NEUTRAL, Sentiment.NEGATIVE]

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1", Sentiment.POSITIVE),
            ("2", Sentiment.NEUTRAL),
            ("3", Sentiment.NEGATIVE),
            ("3\n", Sentiment.NEGATIVE),
            ("2\r\n", Sentiment.NEUTRAL),
        ],
    )
    def test_from_input(self, value: str, expected: Sentiment) -> None:
        assert Sentiment.from_input(value) is expected

    @pytest.mark.parametrize("value", ["", "0", "4", "positive", "12", "skip", " 1 ", "\t3", "1 "])
    def test_unrecognized_input(self, value: str) -> None:
        assert Sentiment.from_input(value) is None

    def test_input_key(self) -> None:
        assert Sentiment.NEUTRAL.input_key == "2"

    def test_values(self) -> None:
        assert Sentiment.POSITIVE.value == "positive"
        assert Sentiment("negative") is Sentiment.NEGATIVE


class TestSubset:
    def test_namespace(self) -> None:
        assert Subset.TRAINING.namespace("economie") == "economie_training"
        assert Subset.TESTING.namespace("economie") == "economie_testing"


class TestTotalScope:
    def test_document_ids(self) -> None:
        assert TotalScope.WORD.value == "wordTotal"
        assert TotalScope.TWEET.value == "tweetTotal"


class TestPost:
    def test_flat_record(self) -> None:
        post = Post.from_dict({"text": "Goed nieuws"})
        assert post == Post(text="Goed nieuws")
        assert not post.is_retweet

    def test_full_text_preferred(self) -> None:
        post = Post.from_dict({"text": "Goed…", "full_text": "Goed nieuws vandaag"})
        assert post.text == "Goed nieuws vandaag"

    def test_feed_retweet(self) -> None:
        post = Post.from_dict({
            "text": "RT @nos: Goed nieuws",
            "retweeted_status": {"text": "Goed nieuws"},
        })
        assert post.is_retweet
        assert post.retweeted_text == "Goed nieuws"

    def test_flat_retweet(self) -> None:
        post = Post.from_dict({"text": "RT x", "is_retweet": True, "retweeted_text": "x"})
        assert post.is_retweet
        assert post.retweeted_text == "x"

    def test_flat_retweet_without_original_falls_back_to_text(self) -> None:
        post = Post.from_dict({"text": "Goed nieuws", "is_retweet": True})
        assert post.retweeted_text == "Goed nieuws"

    def test_missing_text(self) -> None:
        with pytest.raises(ValueError, match="no text"):
            Post.from_dict({"id": 1})

    def test_immutable(self) -> None:
        post = Post(text="x")
        with pytest.raises(AttributeError):
            post.text = "y"  # type: ignore[misc]

    def test_to_dict(self) -> None:
        assert Post(text="x").to_dict() == {
            "text": "x",
            "is_retweet": False,
            "retweeted_text": None,
        }
