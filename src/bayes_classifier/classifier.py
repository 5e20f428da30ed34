"""Multinomial Naive Bayes text classifier with Laplace smoothing.

The classifier learns incrementally, one labeled document at a time, and
keeps nothing but counts:

- how many documents were learned per category,
- how many token occurrences were attributed to each category,
- how often each token occurred under each category,
- the global vocabulary of every token ever seen.

Inference scores each category with the log prior plus the sum of
Laplace-smoothed log likelihoods of the query's tokens and picks the
highest. All state is plain dicts, sets and ints, so a trained model
round-trips through JSON exactly.

Example::

    classifier = NaiveBayes()
    classifier.learn("amazing, awesome movie!! Yeah!!", "positive")
    classifier.learn("terrible, shitty thing. Damn. Sucks!!", "negative")

    classifier.categorize("awesome, cool, amazing!! Yay.")  # "positive"

    snapshot = classifier.to_json()
    restored = NaiveBayes.from_json(snapshot)
    assert restored == classifier
"""

from __future__ import annotations

import json
import logging
import math
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .errors import (
    IncompleteSnapshotError,
    InvalidOptionsError,
    MalformedSnapshotError,
)
from .tokenizer import Tokenizer, resolve_tokenizer, tokenizer_name

logger = logging.getLogger(__name__)

OPTION_KEYS: frozenset[str] = frozenset({"tokenizer"})

# Snapshot keys, in the order they are written.
SNAPSHOT_FIELDS: tuple[str, ...] = (
    "options",
    "vocabulary",
    "vocabularySize",
    "totalDocuments",
    "categories",
    "docCount",
    "wordCount",
    "wordFrequencyCount",
)


@dataclass(frozen=True)
class CategoryScore:
    """Raw log-domain score of one category for a query text.

    ``value`` is the natural-log prior plus the summed token log
    likelihoods. It is not exponentiated or normalized, so it is only
    meaningful relative to the other categories' scores.
    """

    category: str
    value: float

    def to_dict(self) -> dict:
        return {"category": self.category, "value": self.value}


@dataclass
class NaiveBayes:
    """Incremental multinomial Naive Bayes classifier.

    Args:
        options: Optional mapping. The only recognised key is
            ``"tokenizer"``: a registered tokenizer name, a
            :class:`~bayes_classifier.tokenizer.Tokenizer`, or any callable
            mapping text to a list of tokens. Omitted or ``None`` selects
            the default word tokenizer.

    Raises:
        InvalidOptionsError: If ``options`` is not a mapping, contains
            unknown keys, or names an unusable tokenizer.
    """

    options: Optional[Mapping[str, Any]] = None

    # Learned state
    vocabulary: set[str] = field(default_factory=set, init=False, repr=False)
    vocabulary_size: int = field(default=0, init=False)
    total_documents: int = field(default=0, init=False)
    categories: list[str] = field(default_factory=list, init=False)
    doc_count: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    word_count: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    word_frequency_count: dict[str, dict[str, int]] = field(
        default_factory=dict, init=False, repr=False
    )

    tokenizer: Tokenizer = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        options = {} if self.options is None else self.options
        if not isinstance(options, Mapping):
            raise InvalidOptionsError(
                f"NaiveBayes got invalid `options`: {options!r}. Pass in a mapping."
            )
        unknown = sorted(str(key) for key in options if key not in OPTION_KEYS)
        if unknown:
            raise InvalidOptionsError(
                f"NaiveBayes got unknown option(s): {', '.join(unknown)}. "
                f"Known: {', '.join(sorted(OPTION_KEYS))}"
            )

        self.tokenizer = resolve_tokenizer(options.get("tokenizer"))

        # Keep only what can be written to a snapshot and recreated later.
        normalized: dict[str, Any] = {}
        name = tokenizer_name(self.tokenizer)
        if options.get("tokenizer") is not None and name is not None:
            normalized["tokenizer"] = name
        self.options = normalized

    @property
    def is_trained(self) -> bool:
        """Whether at least one document has been learned."""
        return self.total_documents > 0

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def learn(self, text: str, category: str) -> None:
        """Train on one document known to belong to ``category``.

        Empty text is allowed; it counts as a document but adds no tokens.

        Raises:
            TypeError: If ``category`` is not a string.
        """
        if not isinstance(category, str):
            raise TypeError(
                f"category must be a string, got {type(category).__name__}"
            )

        frequency_table = self._frequency_table(text)

        self._initialize_category(category)
        self.doc_count[category] += 1
        self.total_documents += 1

        frequencies = self.word_frequency_count[category]
        for token, frequency in frequency_table.items():
            if token not in self.vocabulary:
                self.vocabulary.add(token)
                self.vocabulary_size += 1
            frequencies[token] = frequencies.get(token, 0) + frequency
            self.word_count[category] += frequency

        logger.debug(
            "Learned document #%d for category %r (%d distinct tokens)",
            self.total_documents,
            category,
            len(frequency_table),
        )

    def _initialize_category(self, category: str) -> None:
        if category in self.doc_count:
            return
        self.doc_count[category] = 0
        self.word_count[category] = 0
        self.word_frequency_count[category] = {}
        self.categories.append(category)

    def _frequency_table(self, text: str) -> Counter[str]:
        """Occurrences of each distinct token of ``text``."""
        return Counter(self.tokenizer.tokenize(text))

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def categorize(self, text: str) -> Optional[str]:
        """Return the most likely category for ``text``.

        Returns ``None`` when no category has been learned. On equal
        scores the category learned first wins.
        """
        chosen: Optional[str] = None
        best_score = -math.inf
        for category, score in self._log_scores(text).items():
            if score > best_score:
                best_score = score
                chosen = category
        return chosen

    def probabilities(self, text: str) -> list[CategoryScore]:
        """Raw log-domain score of every known category, in learning order.

        The values are *not* a probability distribution: exponentiate and
        renormalize them yourself if you need one.
        """
        return [
            CategoryScore(category=category, value=score)
            for category, score in self._log_scores(text).items()
        ]

    def _log_scores(self, text: str) -> dict[str, float]:
        """Unnormalized log posterior for each category, in insertion order."""
        if not self.categories:
            return {}

        frequency_table = self._frequency_table(text)
        if self.vocabulary_size == 0 and frequency_table:
            # (0 + 1) / (0 + 0): every token term is +inf for every category,
            # so all scores tie and the first category wins.
            return {category: math.inf for category in self.categories}

        scores: dict[str, float] = {}
        for category in self.categories:
            score = math.log(self.doc_count[category] / self.total_documents)
            for token, frequency in frequency_table.items():
                score += frequency * math.log(self._token_probability(token, category))
            scores[category] = score
        return scores

    def _token_probability(self, token: str, category: str) -> float:
        """Laplace-smoothed P(token | category) over the global vocabulary."""
        occurrences = self.word_frequency_count[category].get(token, 0)
        return (occurrences + 1) / (self.word_count[category] + self.vocabulary_size)

    def most_informative_tokens(
        self,
        category: str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Tokens that most strongly point towards ``category``.

        Each vocabulary token is scored by its smoothed log likelihood under
        ``category`` minus the mean log likelihood under every other
        category. With a single category the raw log likelihood is used.

        Args:
            category: A learned category.
            top_n: Number of tokens to return.

        Returns:
            ``(token, score)`` tuples, highest score first; ties are broken
            alphabetically.

        Raises:
            ValueError: If ``category`` has not been learned.
        """
        if category not in self.doc_count:
            raise ValueError(f"Unknown category: {category!r}. Known: {self.categories}")

        others = [c for c in self.categories if c != category]
        ranked: list[tuple[str, float]] = []
        for token in self.vocabulary:
            target = math.log(self._token_probability(token, category))
            if others:
                baseline = sum(
                    math.log(self._token_probability(token, other)) for other in others
                ) / len(others)
                target -= baseline
            ranked.append((token, round(target, 4)))

        ranked.sort(key=lambda item: (-item[1], item[0]))
        return ranked[:top_n]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Snapshot of the complete learned state as JSON-compatible data."""
        if tokenizer_name(self.tokenizer) is None:
            logger.warning(
                "Serializing a classifier with unnamed tokenizer %r; pass it "
                "again as `tokenizer=` when restoring this snapshot",
                self.tokenizer,
            )
        return {
            "options": dict(self.options or {}),
            "vocabulary": sorted(self.vocabulary),
            "vocabularySize": self.vocabulary_size,
            "totalDocuments": self.total_documents,
            "categories": list(self.categories),
            "docCount": dict(self.doc_count),
            "wordCount": dict(self.word_count),
            "wordFrequencyCount": {
                category: dict(frequencies)
                for category, frequencies in self.word_frequency_count.items()
            },
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize the classifier state as a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        tokenizer: object = None,
    ) -> "NaiveBayes":
        """Rebuild a classifier from :meth:`to_dict` output.

        Args:
            data: Snapshot mapping.
            tokenizer: Optional tokenizer overriding the one named in the
                snapshot's options. Required for snapshots of classifiers
                that used an unnamed custom function.

        Raises:
            IncompleteSnapshotError: If any field is absent or ``None``.
            MalformedSnapshotError: If the snapshot has unknown fields,
                wrongly typed values, or counts that contradict each other.
        """
        if not isinstance(data, Mapping):
            raise MalformedSnapshotError(
                f"Snapshot must be a JSON object, got {type(data).__name__}"
            )

        missing = tuple(key for key in SNAPSHOT_FIELDS if data.get(key) is None)
        if missing:
            raise IncompleteSnapshotError(missing)

        unknown = sorted(str(key) for key in data if key not in SNAPSHOT_FIELDS)
        if unknown:
            raise MalformedSnapshotError(f"Snapshot has unknown field(s): {', '.join(unknown)}")

        options = data["options"]
        if not isinstance(options, Mapping):
            raise MalformedSnapshotError("`options` must be an object")
        unknown = sorted(str(key) for key in options if key not in OPTION_KEYS)
        if unknown:
            raise MalformedSnapshotError(f"`options` has unknown key(s): {', '.join(unknown)}")
        if tokenizer is not None:
            options = {"tokenizer": tokenizer}
        elif not isinstance(options.get("tokenizer", ""), str):
            raise MalformedSnapshotError("`options.tokenizer` must be a tokenizer name")

        vocabulary = _string_list(data, "vocabulary")
        categories = _string_list(data, "categories")
        vocabulary_size = _count(data["vocabularySize"], "vocabularySize")
        total_documents = _count(data["totalDocuments"], "totalDocuments")
        doc_count = _count_map(data["docCount"], "docCount")
        word_count = _count_map(data["wordCount"], "wordCount")

        raw_frequencies = data["wordFrequencyCount"]
        if not isinstance(raw_frequencies, Mapping):
            raise MalformedSnapshotError("`wordFrequencyCount` must be an object")
        word_frequency_count = {
            category: _count_map(frequencies, f"wordFrequencyCount.{category}", minimum=1)
            for category, frequencies in raw_frequencies.items()
        }

        _check_consistency(
            vocabulary=vocabulary,
            vocabulary_size=vocabulary_size,
            total_documents=total_documents,
            categories=categories,
            doc_count=doc_count,
            word_count=word_count,
            word_frequency_count=word_frequency_count,
        )

        try:
            classifier = cls(options)
        except InvalidOptionsError as exc:
            if tokenizer is not None:
                raise
            raise MalformedSnapshotError(f"Snapshot has invalid options: {exc}") from exc

        classifier.vocabulary = set(vocabulary)
        classifier.vocabulary_size = vocabulary_size
        classifier.total_documents = total_documents
        classifier.categories = list(categories)
        classifier.doc_count = {c: doc_count[c] for c in categories}
        classifier.word_count = {c: word_count[c] for c in categories}
        classifier.word_frequency_count = {c: word_frequency_count[c] for c in categories}

        logger.debug(
            "Restored classifier: %d documents, %d categories, %d tokens",
            total_documents,
            len(categories),
            vocabulary_size,
        )
        return classifier

    @classmethod
    def from_json(cls, snapshot: str | bytes, tokenizer: object = None) -> "NaiveBayes":
        """Rebuild a classifier from a :meth:`to_json` string.

        Raises:
            MalformedSnapshotError: If ``snapshot`` is not valid JSON or
                does not describe a consistent classifier.
            IncompleteSnapshotError: If a required field is missing.
        """
        if not isinstance(snapshot, (str, bytes, bytearray)):
            raise MalformedSnapshotError(
                f"NaiveBayes.from_json expects a JSON string, got {type(snapshot).__name__}"
            )
        try:
            data = json.loads(snapshot)
        except ValueError as exc:
            raise MalformedSnapshotError(
                f"NaiveBayes.from_json expects a valid JSON string: {exc}"
            ) from exc
        return cls.from_dict(data, tokenizer=tokenizer)

    def save(self, path: str | Path) -> None:
        """Write the JSON snapshot to ``path``, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path, tokenizer: object = None) -> "NaiveBayes":
        """Read a snapshot written by :meth:`save`."""
        return cls.from_json(Path(path).read_text(encoding="utf-8"), tokenizer=tokenizer)


# ---------------------------------------------------------------------------
# Snapshot validation helpers
# ---------------------------------------------------------------------------

def _count(value: object, name: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise MalformedSnapshotError(f"`{name}` must be an integer >= {minimum}, got {value!r}")
    return value


def _count_map(value: object, name: str, minimum: int = 0) -> dict[str, int]:
    if not isinstance(value, Mapping):
        raise MalformedSnapshotError(f"`{name}` must be an object")
    return {
        str(key): _count(count, f"{name}.{key}", minimum=minimum)
        for key, count in value.items()
    }


def _string_list(data: Mapping[str, Any], name: str) -> list[str]:
    value = data[name]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedSnapshotError(f"`{name}` must be a list of strings")
    if len(set(value)) != len(value):
        raise MalformedSnapshotError(f"`{name}` contains duplicate entries")
    return value


def _check_consistency(
    *,
    vocabulary: list[str],
    vocabulary_size: int,
    total_documents: int,
    categories: list[str],
    doc_count: dict[str, int],
    word_count: dict[str, int],
    word_frequency_count: dict[str, dict[str, int]],
) -> None:
    """Reject snapshots whose counters could not come from ``learn``."""
    if vocabulary_size != len(vocabulary):
        raise MalformedSnapshotError(
            f"`vocabularySize` is {vocabulary_size} but `vocabulary` has "
            f"{len(vocabulary)} tokens"
        )

    expected = set(categories)
    for name, mapping in (
        ("docCount", doc_count),
        ("wordCount", word_count),
        ("wordFrequencyCount", word_frequency_count),
    ):
        if set(mapping) != expected:
            raise MalformedSnapshotError(f"`{name}` categories do not match `categories`")

    if any(doc_count[c] == 0 for c in categories):
        raise MalformedSnapshotError("`docCount` has a category with no documents")
    if sum(doc_count.values()) != total_documents:
        raise MalformedSnapshotError("`docCount` does not add up to `totalDocuments`")

    seen: set[str] = set()
    for category in categories:
        frequencies = word_frequency_count[category]
        if sum(frequencies.values()) != word_count[category]:
            raise MalformedSnapshotError(
                f"`wordFrequencyCount.{category}` does not add up to `wordCount.{category}`"
            )
        seen.update(frequencies)
    if seen != set(vocabulary):
        raise MalformedSnapshotError(
            "`vocabulary` does not match the tokens in `wordFrequencyCount`"
        )


__all__ = ["CategoryScore", "NaiveBayes", "OPTION_KEYS", "SNAPSHOT_FIELDS"]
