"""Bayes Classifier -- incremental multinomial Naive Bayes for text."""

__version__ = "0.1.0"

from .classifier import CategoryScore, NaiveBayes
from .errors import (
    BayesClassifierError,
    IncompleteSnapshotError,
    InvalidOptionsError,
    MalformedSnapshotError,
)
from .evaluation import ClassificationMetrics, compute_metrics, evaluate
from .tokenizer import (
    CharacterTokenizer,
    FunctionTokenizer,
    Tokenizer,
    WordTokenizer,
    get_tokenizer,
    register_tokenizer,
)

__all__ = [
    # Core
    "NaiveBayes",
    "CategoryScore",
    # Tokenization
    "Tokenizer",
    "WordTokenizer",
    "CharacterTokenizer",
    "FunctionTokenizer",
    "get_tokenizer",
    "register_tokenizer",
    # Errors
    "BayesClassifierError",
    "InvalidOptionsError",
    "MalformedSnapshotError",
    "IncompleteSnapshotError",
    # Evaluation
    "ClassificationMetrics",
    "compute_metrics",
    "evaluate",
]
