"""Command-line interface for tweet-sentiment.

Provides ``train``, ``classify``, ``stats`` and ``clean`` commands with
rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    tweet-sentiment train economie tweets.jsonl
    tweet-sentiment classify economie recent.jsonl --output json
    tweet-sentiment --backend redis stats economie
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TextIO

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from tenacity import retry, stop_after_attempt, wait_exponential

from .backends import RedisBackend, StorageBackend, create_backend
from .config import Settings
from .dashboard import AccuracyDashboard
from .models import Sentiment, Subset, TotalScope
from .preprocessing import clean as clean_text
from .sources import load_posts
from .store import FrequencyStore
from .trainer import SentimentTrainer

console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=10), reraise=True)
def _wait_for_redis(backend: RedisBackend) -> None:
    """Ping Redis, retrying with exponential backoff."""
    backend.ping()


def _open_backend(settings: Settings) -> StorageBackend:
    backend = create_backend(settings)
    if isinstance(backend, RedisBackend):
        _wait_for_redis(backend)
    logger.debug("Using %s backend", backend.name)
    return backend


@click.group()
@click.version_option(package_name="tweet-sentiment")
@click.option("--backend", "-b", type=click.Choice(["json", "memory", "redis"]), default=None,
              help="Storage backend (default: $TWEET_SENTIMENT_BACKEND or json).")
@click.option("--data-path", type=click.Path(path_type=Path), default=None,
              help="Model file for the json backend.")
@click.option("--redis-url", default=None, help="Connection URL for the redis backend.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(
    ctx: click.Context,
    backend: str | None,
    data_path: Path | None,
    redis_url: str | None,
    verbose: bool,
) -> None:
    """💬 Tweet Sentiment — train and apply a Naive Bayes sentiment model.

    Label posts by hand to grow a per-topic model, then classify new posts
    against it.
    """
    load_dotenv()
    _configure_logging(verbose)
    ctx.obj = Settings.from_env().override(
        backend=backend,
        data_path=str(data_path) if data_path else None,
        redis_url=redis_url,
    )


@main.command()
@click.argument("topic")
@click.argument("posts_file", type=click.Path(exists=True, path_type=Path))
@click.option("--labels", "-l", type=click.File("r"), default="-",
              help="File with one label per line (default: stdin).")
@click.pass_obj
def train(settings: Settings, topic: str, posts_file: Path, labels: TextIO) -> None:
    """Label posts by hand and train the TOPIC model.

    Enter 1 (positive), 2 (neutral) or 3 (negative) after each post; any
    other input skips it. Every fifth post is held out to measure accuracy.

    Example: tweet-sentiment train economie tweets.jsonl
    """
    try:
        posts = load_posts(posts_file)
        with _open_backend(settings) as backend:
            trainer = SentimentTrainer(FrequencyStore(backend), default_topic=settings.default_topic)
            console.print("[dim]1 = positive, 2 = neutral, 3 = negative, anything else skips[/]")
            dashboard = trainer.train(topic, posts, labels)
    except Exception as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    console.print(Panel(
        f"Tweets checked: {dashboard.tweets_checked}\n"
        f"Guessed correctly: {dashboard.tweets_guessed_correctly}\n"
        f"Accuracy: [bold]{dashboard.format_accuracy()}[/]",
        title=f"🏋️ Training: {topic}",
        border_style="blue",
    ))


@main.command()
@click.argument("topic")
@click.argument("posts_file", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def classify(settings: Settings, topic: str, posts_file: Path, output: str) -> None:
    """Classify every post in POSTS_FILE against the TOPIC model.

    Falls back to the default topic when TOPIC has no training data.

    Example: tweet-sentiment classify economie recent.jsonl
    """
    echo = logger.debug if output == "json" else click.echo

    try:
        posts = load_posts(posts_file)
        with _open_backend(settings) as backend:
            trainer = SentimentTrainer(
                FrequencyStore(backend), echo=echo, default_topic=settings.default_topic
            )
            resolved = trainer.resolve_topic(topic)
            dashboard = trainer.classify_posts(resolved, posts)
    except Exception as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    if output == "json":
        click.echo(json.dumps({"topic": resolved, **dashboard.to_dict()}, indent=2))
    else:
        _render_verdicts(dashboard, resolved)


@main.command()
@click.argument("topic")
@click.pass_obj
def stats(settings: Settings, topic: str) -> None:
    """Show stored counts for the TOPIC model.

    Example: tweet-sentiment stats economie
    """
    try:
        with _open_backend(settings) as backend:
            store = FrequencyStore(backend)
            table = Table(title=f"Model — {topic}", show_lines=False)
            table.add_column("Namespace", style="cyan", no_wrap=True)
            table.add_column("Scope", style="white")
            for cls in Sentiment:
                table.add_column(cls.value.title(), justify="right")
            table.add_column("Vocabulary", justify="right")

            for subset in Subset:
                namespace = subset.namespace(topic)
                vocab = str(store.vocabulary_size(namespace))
                for scope in TotalScope:
                    totals = store.class_totals(namespace, scope)
                    table.add_row(
                        namespace,
                        "posts" if scope is TotalScope.TWEET else "words",
                        *(str(totals[cls]) for cls in Sentiment),
                        vocab,
                    )
    except Exception as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    console.print(table)


@main.command()
@click.argument("text")
def clean(text: str) -> None:
    """Show the tokens TEXT is reduced to.

    Example: tweet-sentiment clean "De markt groeit hard!"
    """
    click.echo(" ".join(clean_text(text)))


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

_SENTIMENT_STYLE = {
    Sentiment.POSITIVE: "bold green",
    Sentiment.NEUTRAL: "bold yellow",
    Sentiment.NEGATIVE: "bold red",
}


def _render_verdicts(dashboard: AccuracyDashboard, topic: str) -> None:
    """Render batch verdict tallies as a rich table."""
    table = Table(title=f"Current sentiment — {topic}", show_lines=False)
    table.add_column("Sentiment", width=12)
    table.add_column("Tweets", justify="right", width=8)
    table.add_column("Share", justify="right", width=8)

    for cls in Sentiment:
        table.add_row(
            f"[{_SENTIMENT_STYLE[cls]}]{cls.value.title()}[/]",
            str(dashboard.count(cls)),
            f"{dashboard.share(cls):.0%}",
        )

    console.print(table)
    console.print(f"[dim]{dashboard.tweets_checked} tweets classified[/]")
    console.print()


if __name__ == "__main__":
    main()
