"""Tokenization and cleaning of short social-media posts.

Turns raw post text into an ordered sequence of lowercase alphanumeric
tokens that serve as Naive Bayes evidence. Processing is pure
regex-based Python:

- Whitespace tokenization
- Removal of a fixed set of punctuation symbols
- Whole-word erasure of a fixed Dutch stopword list
- Rejection of URL fragments and non-alphanumeric leftovers

Reshared posts are marked with a ``RETWEET`` prefix before cleaning so
that reshared content is not counted identically to original content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .models import Post

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RETWEET_MARKER = "RETWEET"

STOP_SYMBOLS: tuple[str, ...] = (".", ",", ":", ";", "#", "@", "!", "?", "'", '"')

STOP_WORDS: frozenset[str] = frozenset(
    {
        "van",
        "de",
        "het",
        "tussen",
        "over",
        "ook",
        "is",
        "of",
        "met",
        "doen",
        "heeft",
        "onze",
        "maar",
        "hun",
        "terwijl",
        "deze",
        "nou",
        "mee",
        "die",
        "nog",
        "nóg",
        "en",
        "we",
        "wij",
        "gewoon",
        "er",
        "zich",
        "wat",
        "dit",
        "als",
        "naar",
        "te",
        "voor",
        "uit",
        "in",
        "dat",
        "es",
        "ons",
        "retweet",
        "op",
        "al",
    }
)

_WHITESPACE_RE = re.compile(r"\s+")
_SYMBOLS_RE = re.compile("[" + re.escape("".join(STOP_SYMBOLS)) + "]")
_ALNUM_RE = re.compile(r"[a-zA-Z0-9]+")
_URL_FRAGMENT = "https"


def tokenize(text: str) -> list[str]:
    """Split text on runs of whitespace."""
    return [t for t in _WHITESPACE_RE.split(text) if t]


def get_text(post: Post) -> str:
    """Return the text to train on or classify for a post.

    Reshares yield ``"RETWEET "`` followed by the original post's text.
    """
    if post.is_retweet:
        return f"{RETWEET_MARKER} {post.retweeted_text or ''}"
    return post.text


# ---------------------------------------------------------------------------
# Cleaner
# ---------------------------------------------------------------------------


@dataclass
class TweetCleaner:
    """Configurable token cleaning pipeline.

    Stopwords are erased wherever they occur as a whole word inside a
    token (``\\b`` boundaries), so a token that still contains other
    characters survives with the stopword cut out and is then subject to
    the alphanumeric check.

    Args:
        stop_words: Words erased from every token.
    """

    stop_words: frozenset[str] = STOP_WORDS

    _stop_patterns: list[re.Pattern[str]] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._stop_patterns = [
            re.compile(rf"\b{re.escape(word)}\b") for word in sorted(self.stop_words)
        ]

    def clean(self, text: str) -> list[str]:
        """Clean raw text into an ordered list of tokens."""
        return self.clean_tokens(tokenize(text))

    def clean_tokens(self, raw_tokens: list[str]) -> list[str]:
        """Clean already-split tokens, preserving their order."""
        cleaned: list[str] = []
        for raw in raw_tokens:
            token = self.clean_token(raw)
            if token:
                cleaned.append(token)
        return cleaned

    def clean_token(self, raw: str) -> str:
        """Clean one raw token; returns ``""`` when it should be dropped."""
        word = _SYMBOLS_RE.sub("", raw.lower())
        for pattern in self._stop_patterns:
            word = pattern.sub("", word)

        if not word or _URL_FRAGMENT in word:
            return ""
        if not _ALNUM_RE.fullmatch(word):
            return ""
        return word


_DEFAULT_CLEANER = TweetCleaner()


def clean(text: str) -> list[str]:
    """Clean text with the default stopword list."""
    return _DEFAULT_CLEANER.clean(text)
