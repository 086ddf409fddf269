"""Post sources for training and batch classification.

Posts are read from local files exported from a feed: JSON arrays,
JSON Lines, or plain text with one post per line. Live fetching is left
to whatever produced the export.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from .models import Post

logger = logging.getLogger(__name__)


class PostSource(ABC):
    """Abstract base class for post file readers.

    All sources implement ``read`` which takes a file path and returns the
    posts in their original order.
    """

    supported_extensions: tuple[str, ...] = ()

    def can_handle(self, path: Path) -> bool:
        """Check if this source can read the given file."""
        return path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def read(self, path: Path) -> list[Post]:
        """Read posts from a file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is malformed.
        """
        ...

    def _validate_path(self, path: Path) -> None:
        """Validate that the file exists and has a supported extension."""
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not self.can_handle(path):
            raise ValueError(
                f"Unsupported file extension '{path.suffix}' for {self.__class__.__name__}. "
                f"Supported: {self.supported_extensions}"
            )


class JsonPostSource(PostSource):
    """Reads a JSON array of post records.

    A top-level object wrapping the array under ``posts`` or ``statuses``
    (the shape of a search API response) is accepted as well.
    """

    supported_extensions = (".json",)

    def read(self, path: Path) -> list[Post]:
        self._validate_path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("posts", data.get("statuses"))
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of posts in {path}")

        return [_to_post(record, path) for record in data]


class JsonLinesPostSource(PostSource):
    """Reads one JSON post record per line."""

    supported_extensions = (".jsonl", ".ndjson")

    def read(self, path: Path) -> list[Post]:
        self._validate_path(path)
        posts = []
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise ValueError(f"Invalid JSON on line {line_no} of {path}: {exc}") from exc
                posts.append(_to_post(record, path))
        return posts


class TextPostSource(PostSource):
    """Reads plain text, one post per non-empty line."""

    supported_extensions = (".txt", ".text")

    def read(self, path: Path) -> list[Post]:
        self._validate_path(path)
        text = path.read_text(encoding="utf-8", errors="replace")
        return [Post(text=line.strip()) for line in text.splitlines() if line.strip()]


def _to_post(record: object, path: Path) -> Post:
    if isinstance(record, str):
        return Post(text=record)
    if not isinstance(record, dict):
        raise ValueError(f"Unsupported post record in {path}: {record!r}")
    return Post.from_dict(record)


def get_source(path: Path) -> PostSource:
    """Get the appropriate post source for a file based on its extension.

    Raises:
        ValueError: If no source supports the file extension.
    """
    sources: list[PostSource] = [
        JsonPostSource(),
        JsonLinesPostSource(),
        TextPostSource(),
    ]
    for source in sources:
        if source.can_handle(path):
            return source

    supported = set()
    for s in sources:
        supported.update(s.supported_extensions)

    raise ValueError(
        f"No post source available for '{path.suffix}'. "
        f"Supported formats: {', '.join(sorted(supported))}"
    )


def load_posts(path: str | Path) -> list[Post]:
    """Load posts from a file in their original order."""
    path = Path(path)
    posts = get_source(path).read(path)
    logger.info("Loaded %d posts from %s", len(posts), path)
    return posts
