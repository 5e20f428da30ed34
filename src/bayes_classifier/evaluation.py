"""Accuracy, precision, recall and F1 for a trained classifier."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from .classifier import NaiveBayes

# Label used in the confusion matrix when the classifier had no opinion.
NO_PREDICTION = "<none>"


@dataclass
class ClassificationMetrics:
    """Evaluation metrics over a labeled set of documents.

    Attributes:
        accuracy: Fraction of documents assigned their true category.
        per_category: ``{category: {"precision", "recall", "f1"}}``.
        macro_f1: Unweighted mean F1 across categories.
        confusion_matrix: ``{true: {predicted: count}}``.
        support: Number of documents per true category.
    """

    accuracy: float = 0.0
    per_category: dict[str, dict[str, float]] = field(default_factory=dict)
    macro_f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "macro_f1": round(self.macro_f1, 4),
            "per_category": {
                category: {k: round(v, 4) for k, v in scores.items()}
                for category, scores in self.per_category.items()
            },
            "confusion_matrix": self.confusion_matrix,
            "support": self.support,
        }

    def summary(self) -> str:
        """Plain-text table of the metrics."""
        lines = [
            f"Accuracy: {self.accuracy:.2%}",
            f"Macro F1: {self.macro_f1:.4f}",
            "",
            f"{'Category':<20} {'Precision':>10} {'Recall':>10} {'F1':>10} {'Support':>10}",
            "-" * 62,
        ]
        for category, scores in self.per_category.items():
            lines.append(
                f"{category:<20} {scores['precision']:>10.4f} {scores['recall']:>10.4f} "
                f"{scores['f1']:>10.4f} {self.support.get(category, 0):>10}"
            )
        return "\n".join(lines)


def compute_metrics(
    y_true: Sequence[str],
    y_pred: Sequence[Optional[str]],
) -> ClassificationMetrics:
    """Compare true labels with predictions.

    A ``None`` prediction never matches; it is recorded in the confusion
    matrix under :data:`NO_PREDICTION`.

    Raises:
        ValueError: If the two sequences differ in length, or a label
            collides with :data:`NO_PREDICTION`.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")
    if NO_PREDICTION in y_true or NO_PREDICTION in y_pred:
        raise ValueError(f"{NO_PREDICTION!r} is reserved for missing predictions")

    predicted = [NO_PREDICTION if p is None else p for p in y_pred]
    categories = list(dict.fromkeys([*y_true, *(p for p in y_pred if p is not None)]))
    columns = categories + ([NO_PREDICTION] if NO_PREDICTION in predicted else [])

    matrix: dict[str, dict[str, int]] = {c: {p: 0 for p in columns} for c in categories}
    for true, pred in zip(y_true, predicted):
        matrix[true][pred] += 1

    total = len(y_true)
    correct = sum(matrix[c][c] for c in categories)

    per_category: dict[str, dict[str, float]] = {}
    for category in categories:
        tp = matrix[category][category]
        fp = sum(matrix[other][category] for other in categories if other != category)
        fn = sum(count for p, count in matrix[category].items() if p != category)

        precision = tp / (tp + fp) if tp + fp else 0.0
        recall = tp / (tp + fn) if tp + fn else 0.0
        f1 = 2 * precision * recall / (precision + recall) if precision + recall else 0.0
        per_category[category] = {"precision": precision, "recall": recall, "f1": f1}

    macro_f1 = (
        sum(scores["f1"] for scores in per_category.values()) / len(per_category)
        if per_category
        else 0.0
    )

    return ClassificationMetrics(
        accuracy=correct / total if total else 0.0,
        per_category=per_category,
        macro_f1=macro_f1,
        confusion_matrix=matrix,
        support=dict(Counter(y_true)),
    )


def evaluate(
    classifier: NaiveBayes,
    documents: Sequence[str],
    labels: Sequence[str],
) -> ClassificationMetrics:
    """Categorize every document and score the predictions against ``labels``."""
    if len(documents) != len(labels):
        raise ValueError(
            f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
        )
    predictions = [classifier.categorize(doc) for doc in documents]
    return compute_metrics(labels, predictions)


__all__ = ["NO_PREDICTION", "ClassificationMetrics", "compute_metrics", "evaluate"]
