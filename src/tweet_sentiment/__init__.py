"""Tweet Sentiment -- incremental Naive Bayes sentiment training for social-media posts."""

__version__ = "0.1.0"

from .backends import JsonFileBackend, MemoryBackend, RedisBackend, StorageBackend, create_backend
from .classifier import ClassificationResult, NaiveBayesClassifier, probabilities, score, select
from .config import Settings
from .dashboard import AccuracyDashboard
from .models import Post, Sentiment, Subset, TotalScope
from .preprocessing import STOP_WORDS, TweetCleaner, clean, get_text, tokenize
from .sources import load_posts
from .store import Evidence, EvidenceProvider, FrequencyStore
from .trainer import SentimentTrainer, is_test_index, partition, split_training_data

__all__ = [
    # Models
    "Post",
    "Sentiment",
    "Subset",
    "TotalScope",
    # Preprocessing
    "TweetCleaner",
    "STOP_WORDS",
    "clean",
    "get_text",
    "tokenize",
    # Storage
    "StorageBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "RedisBackend",
    "create_backend",
    "FrequencyStore",
    "Evidence",
    "EvidenceProvider",
    # Classification
    "NaiveBayesClassifier",
    "ClassificationResult",
    "score",
    "select",
    "probabilities",
    # Training
    "SentimentTrainer",
    "AccuracyDashboard",
    "is_test_index",
    "partition",
    "split_training_data",
    # Configuration and sources
    "Settings",
    "load_posts",
]
