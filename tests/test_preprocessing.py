"""Tests for post tokenization and cleaning."""

from __future__ import annotations

import re

import pytest

from tweet_sentiment.models import Post
from tweet_sentiment.preprocessing import (
    STOP_SYMBOLS,
    STOP_WORDS,
    TweetCleaner,
    clean,
    get_text,
    tokenize,
)


# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_splits_on_whitespace_runs(self) -> None:
        assert tokenize("De  markt\tgroeit\nhard") == ["De", "markt", "groeit", "hard"]

    def test_ignores_leading_and_trailing_whitespace(self) -> None:
        assert tokenize("   markt   ") == ["markt"]

    def test_empty_text(self) -> None:
        assert tokenize("") == []
        assert tokenize("  \n\t ") == []


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------


class TestClean:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert clean("De markt groeit hard!") == ["markt", "groeit", "hard"]

    def test_removes_stopwords(self) -> None:
        assert clean("Dit is een ramp voor de economie") == ["een", "ramp", "economie"]

    def test_preserves_order(self) -> None:
        assert clean("zeer slecht kwartaal maar goed jaar") == [
            "zeer",
            "slecht",
            "kwartaal",
            "goed",
            "jaar",
        ]

    def test_strips_mentions_and_hashtags(self) -> None:
        assert clean("@Jan #Economie: super!!") == ["jan", "economie", "super"]

    def test_strips_quotes(self) -> None:
        assert clean("'crisis' \"voorbij\"") == ["crisis", "voorbij"]

    def test_drops_urls(self) -> None:
        assert clean("Lees meer https://t.co/AbC123") == ["lees", "meer"]

    def test_drops_any_token_containing_https(self) -> None:
        assert clean("httpsnieuws") == []

    def test_drops_punctuation_only_tokens(self) -> None:
        assert clean("?! ... ,,, markt") == ["markt"]

    def test_drops_non_ascii_tokens(self) -> None:
        assert clean("café groei") == ["groei"]

    def test_drops_tokens_with_other_symbols(self) -> None:
        assert clean("5% €10 koers") == ["koers"]

    def test_keeps_digits(self) -> None:
        assert clean("AEX 2024 record") == ["aex", "2024", "record"]

    def test_retweet_marker_is_removed(self) -> None:
        assert clean("RETWEET goed nieuws") == ["goed", "nieuws"]

    def test_accented_stopword_is_removed(self) -> None:
        assert clean("nóg hoger") == ["hoger"]

    def test_stopword_prefix_is_not_erased(self) -> None:
        # "de" is a stopword but "dementie" is not a whole-word match
        assert clean("dementie") == ["dementie"]

    def test_stopword_inside_compound_token_is_erased(self) -> None:
        cleaner = TweetCleaner()
        # "de" is erased between word boundaries, leaving a non-alphanumeric rest
        assert cleaner.clean_token("de-markt") == ""

    def test_empty_text(self) -> None:
        assert clean("") == []

    @pytest.mark.parametrize(
        "text",
        [
            "De markt groeit hard! https://t.co/x #economie",
            "RT @nos: Kabinet valt?! 'Onzeker' voor de beurs...",
            "van de het tussen over ook is of met",
            "Ça va très bien, dank je wel :)",
            "1234 ABC def-ghi jkl_mno",
        ],
    )
    def test_token_shape(self, text: str) -> None:
        for token in clean(text):
            assert token
            assert re.fullmatch(r"[a-z0-9]+", token)
            assert "https" not in token
            assert token not in STOP_WORDS

    def test_deterministic(self) -> None:
        text = "Dit is een ramp voor de economie"
        assert clean(text) == clean(text)


class TestTweetCleaner:
    def test_custom_stopwords(self) -> None:
        cleaner = TweetCleaner(stop_words=frozenset({"markt"}))
        assert cleaner.clean("De markt groeit") == ["de", "groeit"]

    def test_clean_tokens_skips_dropped(self) -> None:
        cleaner = TweetCleaner()
        assert cleaner.clean_tokens(["Goed", "!!", "de", "Nieuws"]) == ["goed", "nieuws"]

    def test_stop_symbols_cover_expected_set(self) -> None:
        assert set(STOP_SYMBOLS) == set(".,:;#@!?'\"")


# ---------------------------------------------------------------------------
# Post text
# ---------------------------------------------------------------------------


class TestGetText:
    def test_original_post(self) -> None:
        assert get_text(Post(text="Goed nieuws")) == "Goed nieuws"

    def test_retweet_uses_original_text_with_marker(self) -> None:
        post = Post(text="RT @nos: Goed nieuws", is_retweet=True, retweeted_text="Goed nieuws")
        assert get_text(post) == "RETWEET Goed nieuws"

    def test_retweet_marker_does_not_become_a_token(self) -> None:
        post = Post(text="RT", is_retweet=True, retweeted_text="Goed nieuws")
        assert clean(get_text(post)) == ["goed", "nieuws"]
