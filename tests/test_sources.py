"""Tests for reading posts from files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tweet_sentiment.models import Post
from tweet_sentiment.sources import (
    JsonLinesPostSource,
    JsonPostSource,
    TextPostSource,
    get_source,
    load_posts,
)


class TestGetSource:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("posts.json", JsonPostSource),
            ("posts.JSONL", JsonLinesPostSource),
            ("posts.ndjson", JsonLinesPostSource),
            ("posts.txt", TextPostSource),
        ],
    )
    def test_by_extension(self, name: str, expected: type) -> None:
        assert isinstance(get_source(Path(name)), expected)

    def test_unsupported(self) -> None:
        with pytest.raises(ValueError, match="No post source available"):
            get_source(Path("posts.csv"))


class TestLoadPosts:
    def test_json_array(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.json"
        path.write_text(
            json.dumps([
                {"text": "Goed nieuws"},
                {"text": "RT @nos: Slecht", "retweeted_status": {"text": "Slecht"}},
                "Gewoon tekst",
            ]),
            encoding="utf-8",
        )
        assert load_posts(path) == [
            Post(text="Goed nieuws"),
            Post(text="RT @nos: Slecht", is_retweet=True, retweeted_text="Slecht"),
            Post(text="Gewoon tekst"),
        ]

    def test_json_search_response(self, tmp_path: Path) -> None:
        path = tmp_path / "search.json"
        path.write_text(json.dumps({"statuses": [{"full_text": "Beurs stijgt"}]}), encoding="utf-8")
        assert load_posts(path) == [Post(text="Beurs stijgt")]

    def test_json_not_a_list(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.json"
        path.write_text(json.dumps({"data": 1}), encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a list"):
            load_posts(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_posts(path)

    def test_json_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.jsonl"
        path.write_text('{"text": "een"}\n\n{"text": "twee"}\n', encoding="utf-8")
        assert [p.text for p in load_posts(path)] == ["een", "twee"]

    def test_json_lines_reports_line(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.jsonl"
        path.write_text('{"text": "een"}\nkapot\n', encoding="utf-8")
        with pytest.raises(ValueError, match="line 2"):
            load_posts(path)

    def test_text_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.txt"
        path.write_text("De markt groeit\n\n  Wat een ramp  \n", encoding="utf-8")
        assert load_posts(path) == [Post(text="De markt groeit"), Post(text="Wat een ramp")]

    def test_unsupported_record(self, tmp_path: Path) -> None:
        path = tmp_path / "posts.json"
        path.write_text(json.dumps([42]), encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported post record"):
            load_posts(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_posts(tmp_path / "missing.json")
