"""Data models for multilingual sentiment classification."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from .config import ModelConfig
from .errors import MalformedImportError

#: The three classes the model scores, in tie-break precedence order.
CLASSES: tuple[str, ...] = ("positive", "negative", "neutral")

EXPORT_FORMAT_VERSION = "1.0"

#: Config keys written by older checkpoints that no longer affect the model.
#: TF-IDF weighting was never applied at inference, so the flag is dropped.
LEGACY_CONFIG_KEYS = frozenset({"enableTfIdf", "enable_tf_idf"})


class SentimentLabel(str, Enum):
    """Labels accepted in training data."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    VERY_POSITIVE = "very_positive"
    VERY_NEGATIVE = "very_negative"


def normalize_label(label: str | SentimentLabel) -> str:
    """Collapse a training label onto one of the three scored classes.

    ``very_positive`` counts as positive and ``very_negative`` as negative;
    anything unrecognised is treated as neutral.
    """
    value = label.value if isinstance(label, SentimentLabel) else label
    if value in ("very_positive", "positive"):
        return "positive"
    if value in ("very_negative", "negative"):
        return "negative"
    return "neutral"


@dataclass(frozen=True)
class TrainingExample:
    """A single labelled training document."""

    text: str
    label: str
    language: Optional[str] = None

    @property
    def normalized_label(self) -> str:
        return normalize_label(self.label)

    def to_dict(self) -> dict:
        data = {"text": self.text, "label": self.label}
        if self.language is not None:
            data["language"] = self.language
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrainingExample":
        """Build an example from a record with ``label`` (or ``sentiment``).

        Raises:
            ValueError: If text or label is missing or not a string.
        """
        text = data.get("text")
        label = data.get("label", data.get("sentiment"))
        language = data.get("language")
        if not isinstance(text, str):
            raise ValueError(f"'text' must be a string, got {type(text).__name__}")
        if not isinstance(label, str) or not label:
            raise ValueError("'label' must be a non-empty string")
        if language is not None and not isinstance(language, str):
            raise ValueError(f"'language' must be a string, got {type(language).__name__}")
        return cls(text=text, label=label, language=language or None)


@dataclass(frozen=True)
class WordProbability:
    """Smoothed per-class conditional probabilities of one feature.

    ``count`` is the number of training documents (of any class) that
    contained the feature.
    """

    positive: float
    negative: float
    neutral: float
    count: int

    def get(self, label: str) -> float:
        return getattr(self, normalize_label(label))

    def to_dict(self) -> dict:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], strictly_positive: bool = False) -> "WordProbability":
        """Build from a ``{positive, negative, neutral, count}`` record.

        Args:
            data: Probability record.
            strictly_positive: Reject zero probabilities. Smoothed tables
                never contain them.

        Raises:
            ValueError: On a missing, non-numeric or out-of-range value.
        """
        if not isinstance(data, Mapping):
            raise ValueError("probabilities must be an object")
        probabilities = {label: _unit_interval(data, label) for label in CLASSES}
        if strictly_positive:
            for label, value in probabilities.items():
                if value == 0:
                    raise ValueError(f"'{label}' must be > 0 for a smoothed model")
        return cls(count=_non_negative_int(data, "count"), **probabilities)


@dataclass(frozen=True)
class ClassPriors:
    """Unconditional class probabilities estimated from document counts."""

    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0

    def get(self, label: str) -> float:
        return getattr(self, normalize_label(label))

    def to_dict(self) -> dict:
        return {"positive": self.positive, "negative": self.negative, "neutral": self.neutral}


@dataclass
class ModelState:
    """Everything a trained model needs for inference.

    Instances are built once per training run (or import) and never mutated
    afterwards; the classifier swaps whole states instead.
    """

    config: ModelConfig
    vocabulary: set[str] = field(default_factory=set)
    word_probabilities: dict[str, WordProbability] = field(default_factory=dict)
    class_priors: ClassPriors = field(default_factory=ClassPriors)
    document_counts: dict[str, int] = field(
        default_factory=lambda: {cls: 0 for cls in CLASSES}
    )
    total_documents: int = 0
    is_trained: bool = False
    # Vocabulary in frequency order, kept so exports are deterministic.
    vocabulary_order: list[str] = field(default_factory=list, repr=False)

    @classmethod
    def empty(cls, config: ModelConfig) -> "ModelState":
        return cls(config=config)

    # ------------------------------------------------------------------
    # Export schema
    # ------------------------------------------------------------------

    def to_export(self, export_date: str) -> dict:
        """Serialize to the checkpoint layout used by ``export_model``."""
        ordered = self.vocabulary_order or sorted(self.vocabulary)
        return {
            "formatVersion": EXPORT_FORMAT_VERSION,
            "config": self.config.to_dict(camel_case=True),
            "statistics": {
                "vocabulary": list(ordered),
                "wordProbabilities": [
                    [feature, self.word_probabilities[feature].to_dict()]
                    for feature in ordered
                    if feature in self.word_probabilities
                ],
                "classPriors": self.class_priors.to_dict(),
                "documentCounts": dict(self.document_counts),
                "totalDocuments": self.total_documents,
            },
            "isTrained": self.is_trained,
            "exportDate": export_date,
        }

    @classmethod
    def from_export(cls, blob: Any) -> "ModelState":
        """Validate a checkpoint blob and rebuild the state it describes.

        Statistics may be nested under ``statistics`` (the layout written by
        :meth:`to_export`) or sit at the top level of the blob.

        Raises:
            MalformedImportError: On any missing or ill-shaped field.
        """
        if not isinstance(blob, Mapping):
            raise MalformedImportError(f"expected an object, got {type(blob).__name__}")

        config_data = _require(blob, "config", Mapping)
        config_data = {k: v for k, v in config_data.items() if k not in LEGACY_CONFIG_KEYS}
        try:
            config = ModelConfig.from_dict(config_data)
        except (TypeError, ValueError) as e:
            raise MalformedImportError(str(e), field="config") from e

        if blob.get("isTrained") is not True:
            raise MalformedImportError("checkpoint is not a trained model", field="isTrained")

        stats = blob["statistics"] if "statistics" in blob else blob
        if not isinstance(stats, Mapping):
            raise MalformedImportError("expected an object", field="statistics")

        vocabulary_list = _require(stats, "vocabulary", list)
        seen: set[str] = set()
        for i, feature in enumerate(vocabulary_list):
            if not isinstance(feature, str):
                raise MalformedImportError("entries must be strings", field=f"vocabulary[{i}]")
            if feature in seen:
                raise MalformedImportError(f"duplicate feature {feature!r}", field=f"vocabulary[{i}]")
            seen.add(feature)

        word_probabilities: dict[str, WordProbability] = {}
        for i, pair in enumerate(_require(stats, "wordProbabilities", list)):
            where = f"wordProbabilities[{i}]"
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise MalformedImportError("expected a [feature, probabilities] pair", field=where)
            feature, probs = pair
            if not isinstance(feature, str):
                raise MalformedImportError("feature must be a string", field=where)
            if feature not in seen:
                raise MalformedImportError(f"feature {feature!r} is not in the vocabulary", field=where)
            if feature in word_probabilities:
                raise MalformedImportError(f"duplicate feature {feature!r}", field=where)
            try:
                word_probabilities[feature] = WordProbability.from_dict(
                    probs, strictly_positive=config.smoothing_factor > 0
                )
            except ValueError as e:
                raise MalformedImportError(str(e), field=where) from e

        priors_data = _require(stats, "classPriors", Mapping)
        priors = ClassPriors(
            **{cls_: _probability(priors_data, cls_, "classPriors") for cls_ in CLASSES}
        )
        if not math.isclose(sum(priors.to_dict().values()), 1.0, abs_tol=1e-6):
            raise MalformedImportError("priors must sum to 1", field="classPriors")

        counts_data = _require(stats, "documentCounts", Mapping)
        document_counts = {cls_: _count(counts_data, cls_, "documentCounts") for cls_ in CLASSES}

        total = _count(stats, "totalDocuments", "totalDocuments")
        if total < 1:
            raise MalformedImportError("must be at least 1", field="totalDocuments")
        if total != sum(document_counts.values()):
            raise MalformedImportError(
                f"{total} does not match the sum of documentCounts", field="totalDocuments"
            )

        return cls(
            config=config,
            vocabulary=set(vocabulary_list),
            word_probabilities=word_probabilities,
            class_priors=priors,
            document_counts=document_counts,
            total_documents=total,
            is_trained=True,
            vocabulary_order=list(vocabulary_list),
        )


def _require(data: Mapping[str, Any], key: str, kind: type) -> Any:
    if key not in data:
        raise MalformedImportError("missing field", field=key)
    value = data[key]
    if not isinstance(value, kind):
        raise MalformedImportError(
            f"expected {kind.__name__}, got {type(value).__name__}", field=key
        )
    return value


def _unit_interval(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number")
    if math.isnan(value) or value < 0 or value > 1:
        raise ValueError(f"'{key}' must be within [0, 1], got {value}")
    return float(value)


def _non_negative_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"'{key}' must be a non-negative integer")
    return value


def _probability(data: Mapping[str, Any], key: str, where: str) -> float:
    try:
        return _unit_interval(data, key)
    except ValueError as e:
        raise MalformedImportError(str(e), field=where) from e


def _count(data: Mapping[str, Any], key: str, where: str) -> int:
    try:
        return _non_negative_int(data, key)
    except ValueError as e:
        raise MalformedImportError(str(e), field=where) from e


# ---------------------------------------------------------------------------
# Prediction output
# ---------------------------------------------------------------------------


@dataclass
class Emotions:
    """Fixed-ratio emotion vector derived from label and confidence."""

    joy: float = 0.0
    sadness: float = 0.0
    anger: float = 0.0
    fear: float = 0.0
    surprise: float = 0.0
    disgust: float = 0.0

    @classmethod
    def from_prediction(cls, label: str, confidence: float) -> "Emotions":
        if label == "positive":
            return cls(joy=confidence)
        if label == "negative":
            return cls(
                sadness=confidence,
                anger=confidence * 0.7,
                fear=confidence * 0.5,
                disgust=confidence * 0.6,
            )
        return cls(surprise=confidence * 0.6)

    def to_dict(self) -> dict:
        return {
            "joy": self.joy,
            "sadness": self.sadness,
            "anger": self.anger,
            "fear": self.fear,
            "surprise": self.surprise,
            "disgust": self.disgust,
        }


@dataclass
class SentimentResult:
    """Output of a single prediction.

    Attributes:
        score: ``P(positive) - P(negative)``, in ``[-1, 1]``.
        magnitude: ``abs(score)``.
        label: Winning class.
        confidence: Margin heuristic clamped to ``[0.1, 0.95]``. Not a
            calibrated probability.
        emotions: Emotion vector derived from ``label`` and ``confidence``.
        probabilities: Soft-max over the three class log scores.
    """

    score: float
    magnitude: float
    label: str
    confidence: float
    emotions: Emotions
    probabilities: dict[str, float] = field(default_factory=dict)

    @property
    def is_positive(self) -> bool:
        return self.label == "positive"

    @property
    def is_negative(self) -> bool:
        return self.label == "negative"

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 4),
            "magnitude": round(self.magnitude, 4),
            "label": self.label,
            "confidence": round(self.confidence, 4),
            "emotions": {k: round(v, 4) for k, v in self.emotions.to_dict().items()},
            "probabilities": {k: round(v, 4) for k, v in self.probabilities.items()},
        }
