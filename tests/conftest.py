"""Shared test fixtures for bayes-classifier tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bayes_classifier import NaiveBayes

SENTIMENT_DOCS = [
    ("amazing, awesome movie!! Yeah!!", "positive"),
    ("Sweet, this is incredibly, amazing, perfect, great!!", "positive"),
    ("terrible, shitty thing. Damn. Sucks!!", "negative"),
    ("I dont really know what to make of this.", "neutral"),
]

TOPIC_DOCS = [
    ("Chinese Beijing Chinese", "chinese"),
    ("Chinese Chinese Shanghai", "chinese"),
    ("Chinese Macao", "chinese"),
    ("Tokyo Japan Chinese", "japanese"),
]


@pytest.fixture
def sentiment_classifier() -> NaiveBayes:
    """Classifier trained on a handful of positive/negative/neutral phrases."""
    classifier = NaiveBayes()
    for text, category in SENTIMENT_DOCS:
        classifier.learn(text, category)
    return classifier


@pytest.fixture
def topic_classifier() -> NaiveBayes:
    """The classic Chinese/Japanese textbook example."""
    classifier = NaiveBayes()
    for text, category in TOPIC_DOCS:
        classifier.learn(text, category)
    return classifier


@pytest.fixture
def sentiment_data_file(tmp_path: Path) -> Path:
    """JSON Lines training file with the sentiment phrases."""
    path = tmp_path / "sentiment.jsonl"
    lines = [json.dumps({"text": text, "category": category}) for text, category in SENTIMENT_DOCS]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
