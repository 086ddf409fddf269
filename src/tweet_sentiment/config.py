"""Runtime settings read from the environment.

Values come from ``TWEET_SENTIMENT_*`` environment variables; the CLI
loads a ``.env`` file first so they can live next to the project.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

ENV_PREFIX = "TWEET_SENTIMENT_"

DEFAULT_TOPIC = "economie"


@dataclass(frozen=True)
class Settings:
    """Storage and classification settings.

    Attributes:
        backend: Storage backend name (``memory``, ``json`` or ``redis``).
        data_path: JSON file used by the ``json`` backend.
        redis_url: Connection URL used by the ``redis`` backend.
        key_prefix: Redis key prefix (the database name).
        default_topic: Topic used when a requested topic has no training data.
    """

    backend: str = "json"
    data_path: str = "sentiment_model.json"
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "IPASS"
    default_topic: str = DEFAULT_TOPIC

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            backend=env.get(f"{ENV_PREFIX}BACKEND", defaults.backend),
            data_path=env.get(f"{ENV_PREFIX}DATA_PATH", defaults.data_path),
            redis_url=env.get(f"{ENV_PREFIX}REDIS_URL", defaults.redis_url),
            key_prefix=env.get(f"{ENV_PREFIX}KEY_PREFIX", defaults.key_prefix),
            default_topic=env.get(f"{ENV_PREFIX}DEFAULT_TOPIC", defaults.default_topic),
        )

    def override(self, **changes: str | None) -> "Settings":
        """Return a copy with every non-``None`` change applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
