"""Model evaluation: metrics, dataset splitting and cross-validation.

Metrics are always reported over the three scored classes. Labels are
normalized before comparison, so ``very_positive`` ground truth counts as a
hit for a ``positive`` prediction, and a class missing from a test split
still shows up with zero support. That keeps per-fold numbers comparable.
"""

from __future__ import annotations

import logging
import math
import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .classifier import NaiveBayesSentimentModel
from .config import ModelConfig
from .models import CLASSES, TrainingExample, normalize_label

logger = logging.getLogger(__name__)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def _mean(values: Sequence[float]) -> float:
    return _ratio(sum(values), len(values))


def _std(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = _mean(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

@dataclass
class ClassificationMetrics:
    """Scores of one evaluation run.

    Attributes:
        accuracy: Share of correct predictions.
        per_class: ``{class: {"precision", "recall", "f1"}}`` for every class
            in :data:`CLASSES`.
        macro_precision: Mean precision over the three classes.
        macro_recall: Mean recall over the three classes.
        macro_f1: Mean F1 over the three classes. A class with no support
            and no predictions contributes 0.
        weighted_f1: F1 weighted by support.
        confusion_matrix: ``{true: {predicted: count}}`` over :data:`CLASSES`.
        support: True examples per class (zero for absent classes).
    """

    accuracy: float = 0.0
    per_class: dict[str, dict[str, float]] = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    weighted_f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.support.values())

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "macro_precision": round(self.macro_precision, 4),
            "macro_recall": round(self.macro_recall, 4),
            "macro_f1": round(self.macro_f1, 4),
            "weighted_f1": round(self.weighted_f1, 4),
            "per_class": {
                label: {name: round(value, 4) for name, value in scores.items()}
                for label, scores in self.per_class.items()
            },
            "confusion_matrix": {label: dict(row) for label, row in self.confusion_matrix.items()},
            "support": dict(self.support),
        }

    def summary(self) -> str:
        """Plain-text report, one row per class in tie-break order."""
        lines = [
            f"Accuracy: {self.accuracy:.2%} on {self.total} examples",
            f"Macro F1: {self.macro_f1:.4f}  Weighted F1: {self.weighted_f1:.4f}",
            "",
            f"{'':<10}{'precision':>11}{'recall':>9}{'f1':>8}{'support':>9}",
        ]
        for label in CLASSES:
            scores = self.per_class.get(label, {})
            lines.append(
                f"{label:<10}{scores.get('precision', 0.0):>11.4f}"
                f"{scores.get('recall', 0.0):>9.4f}{scores.get('f1', 0.0):>8.4f}"
                f"{self.support.get(label, 0):>9}"
            )
        return "\n".join(lines)


def compute_metrics(
    y_true: Sequence[str],
    y_pred: Sequence[str],
) -> ClassificationMetrics:
    """Score predicted labels against true labels.

    Both sequences may use any training label; they are normalized onto
    :data:`CLASSES` first.

    Raises:
        ValueError: If the sequences differ in length.
    """
    if len(y_true) != len(y_pred):
        raise ValueError(
            f"y_true and y_pred must have the same length, got {len(y_true)} and {len(y_pred)}"
        )

    pairs = Counter(
        (normalize_label(truth), normalize_label(pred)) for truth, pred in zip(y_true, y_pred)
    )
    confusion = {truth: {pred: pairs[(truth, pred)] for pred in CLASSES} for truth in CLASSES}
    support = {label: sum(confusion[label].values()) for label in CLASSES}

    per_class: dict[str, dict[str, float]] = {}
    for label in CLASSES:
        hits = confusion[label][label]
        precision = _ratio(hits, sum(confusion[truth][label] for truth in CLASSES))
        recall = _ratio(hits, support[label])
        per_class[label] = {
            "precision": precision,
            "recall": recall,
            "f1": _ratio(2 * precision * recall, precision + recall),
        }

    n = len(y_true)
    return ClassificationMetrics(
        accuracy=_ratio(sum(confusion[label][label] for label in CLASSES), n),
        per_class=per_class,
        macro_precision=_mean([per_class[label]["precision"] for label in CLASSES]),
        macro_recall=_mean([per_class[label]["recall"] for label in CLASSES]),
        macro_f1=_mean([per_class[label]["f1"] for label in CLASSES]),
        weighted_f1=_ratio(sum(per_class[label]["f1"] * support[label] for label in CLASSES), n),
        confusion_matrix=confusion,
        support=support,
    )


def evaluate_model(model: NaiveBayesSentimentModel, examples: Sequence[TrainingExample]) -> ClassificationMetrics:
    """Score a trained model against labelled examples."""
    predictions = model.predict_batch(ex.text for ex in examples)
    return compute_metrics([ex.label for ex in examples], [result.label for result in predictions])


# ---------------------------------------------------------------------------
# Splitting
# ---------------------------------------------------------------------------

def train_test_split(
    examples: Sequence[TrainingExample],
    test_ratio: float = 0.2,
    seed: int = 42,
    stratify: bool = True,
) -> tuple[list[TrainingExample], list[TrainingExample]]:
    """Shuffle and split examples into train and test sets.

    With ``stratify`` the split is done per normalized class, so both sets
    keep roughly the class balance of the full dataset.

    Raises:
        ValueError: If ``test_ratio`` is not strictly between 0 and 1.
    """
    if not 0 < test_ratio < 1:
        raise ValueError(f"test_ratio must be between 0 and 1, got {test_ratio}")

    rng = random.Random(seed)
    groups: dict[str, list[int]] = defaultdict(list)
    for idx, example in enumerate(examples):
        key = normalize_label(example.label) if stratify else "all"
        groups[key].append(idx)

    train_idx: list[int] = []
    test_idx: list[int] = []
    for key in sorted(groups):
        indices = groups[key]
        rng.shuffle(indices)
        n_test = int(round(len(indices) * test_ratio))
        test_idx.extend(indices[:n_test])
        train_idx.extend(indices[n_test:])

    return [examples[i] for i in sorted(train_idx)], [examples[i] for i in sorted(test_idx)]


def stratified_k_fold(
    labels: Sequence[str],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split indices into ``k`` (train, test) pairs with balanced classes.

    Each class is shuffled and dealt round-robin onto the test folds. The
    deal continues where the previous class stopped, so fold sizes differ
    by at most one. Classes are dealt in sorted order for reproducibility.

    Raises:
        ValueError: If ``k`` is less than 2.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    rng = random.Random(seed)
    by_class: dict[str, list[int]] = defaultdict(list)
    for idx, label in enumerate(labels):
        by_class[label].append(idx)

    test_folds: list[list[int]] = [[] for _ in range(k)]
    dealt = 0
    for label in sorted(by_class):
        indices = by_class[label]
        rng.shuffle(indices)
        for idx in indices:
            test_folds[dealt % k].append(idx)
            dealt += 1

    splits: list[tuple[list[int], list[int]]] = []
    for test in test_folds:
        held_out = set(test)
        train = [i for i in range(len(labels)) if i not in held_out]
        splits.append((train, sorted(test)))
    return splits


# ---------------------------------------------------------------------------
# Cross-validation
# ---------------------------------------------------------------------------

@dataclass
class CrossValidationResult:
    """Per-fold metrics plus their aggregates."""

    folds: list[ClassificationMetrics] = field(default_factory=list)

    @property
    def accuracies(self) -> list[float]:
        return [m.accuracy for m in self.folds]

    @property
    def mean_accuracy(self) -> float:
        return _mean(self.accuracies)

    @property
    def std_accuracy(self) -> float:
        return _std(self.accuracies)

    @property
    def mean_macro_f1(self) -> float:
        return _mean([m.macro_f1 for m in self.folds])

    @property
    def std_macro_f1(self) -> float:
        return _std([m.macro_f1 for m in self.folds])

    def to_dict(self) -> dict:
        return {
            "mean_accuracy": round(self.mean_accuracy, 4),
            "std_accuracy": round(self.std_accuracy, 4),
            "mean_macro_f1": round(self.mean_macro_f1, 4),
            "std_macro_f1": round(self.std_macro_f1, 4),
            "folds": [m.to_dict() for m in self.folds],
        }


def cross_validate(
    examples: Sequence[TrainingExample],
    k: int = 5,
    config: Optional[ModelConfig] = None,
    seed: int = 42,
) -> CrossValidationResult:
    """Run stratified k-fold cross-validation.

    Trains a fresh model on each fold's training split and evaluates it on
    the held-out split. Folds with an empty split are skipped.
    """
    labels = [normalize_label(ex.label) for ex in examples]
    result = CrossValidationResult()

    for fold_no, (train_idx, test_idx) in enumerate(stratified_k_fold(labels, k=k, seed=seed), 1):
        if not test_idx or not train_idx:
            logger.warning("Skipping fold %d: empty split", fold_no)
            continue
        model = NaiveBayesSentimentModel(config)
        model.train([examples[i] for i in train_idx])
        metrics = evaluate_model(model, [examples[i] for i in test_idx])
        logger.info("Fold %d/%d accuracy=%.4f macro_f1=%.4f", fold_no, k, metrics.accuracy, metrics.macro_f1)
        result.folds.append(metrics)

    return result
