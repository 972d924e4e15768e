"""Multinomial-style Naive Bayes sentiment classifier.

Provides the train/predict pipeline for classifying short texts as positive,
negative or neutral, in pure Python with no numpy or sklearn.

Training runs two sequential passes over the corpus:

1. :func:`~multilingual_sentiment.vocabulary.build_vocabulary` counts
   feature occurrences, prunes rare features and tallies class documents.
2. :func:`~multilingual_sentiment.estimator.estimate_probabilities`
   counts document frequencies per class and applies Laplace smoothing.

Inference sums log probabilities, picks the best class (ties go to
positive, then negative, then neutral) and converts the log scores to a
probability triple with a numerically stable soft-max.

A model is an ordinary object: build one, train it, hand it to whoever needs
predictions. Training builds a brand-new state and swaps it in under a
lock, so concurrent ``predict()`` calls keep reading a consistent snapshot.
"""

from __future__ import annotations

import functools
import json
import logging
import math
import threading
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from .config import ModelConfig
from .errors import MalformedImportError, UntrainedModelError
from .estimator import estimate_priors, estimate_probabilities
from .features import FeatureExtractor
from .models import (
    CLASSES,
    Emotions,
    ModelState,
    SentimentLabel,
    SentimentResult,
    TrainingExample,
    normalize_label,
)
from .vocabulary import build_vocabulary

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95

ExampleLike = Union[TrainingExample, Mapping[str, Any]]


def _safe_log(value: float) -> float:
    return math.log(value) if value > 0 else -math.inf


def select_best_class(log_scores: Mapping[str, float]) -> str:
    """Pick the highest-scoring class; ties resolve positive > negative > neutral."""
    positive = log_scores["positive"]
    negative = log_scores["negative"]
    neutral = log_scores["neutral"]
    if positive >= negative and positive >= neutral:
        return "positive"
    if negative >= neutral:
        return "negative"
    return "neutral"


def softmax(log_scores: Mapping[str, float]) -> dict[str, float]:
    """Normalize log scores to probabilities, subtracting the max first."""
    max_score = max(log_scores.values())
    if max_score == -math.inf:
        # Every class was ruled out by a zero probability (no smoothing).
        return {cls: 1.0 / len(CLASSES) for cls in CLASSES}
    exp_scores = {cls: math.exp(log_scores[cls] - max_score) for cls in CLASSES}
    total = sum(exp_scores.values())
    return {cls: score / total for cls, score in exp_scores.items()}


def margin_confidence(probabilities: Mapping[str, float]) -> float:
    """``best - second_best + 0.5``, clamped to ``[0.1, 0.95]``."""
    ranked = sorted(probabilities.values(), reverse=True)
    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, ranked[0] - ranked[1] + 0.5))


def _coerce_examples(examples: Iterable[ExampleLike]) -> list[TrainingExample]:
    coerced: list[TrainingExample] = []
    for i, example in enumerate(examples):
        if isinstance(example, TrainingExample):
            coerced.append(example)
        elif isinstance(example, Mapping):
            try:
                coerced.append(TrainingExample.from_dict(example))
            except ValueError as e:
                raise ValueError(f"Invalid training example at index {i}: {e}") from e
        else:
            raise TypeError(
                f"Training example at index {i} must be a TrainingExample or mapping, "
                f"got {type(example).__name__}"
            )
    return coerced


class NaiveBayesSentimentModel:
    """Naive Bayes sentiment classifier with multilingual feature engineering.

    Example::

        model = NaiveBayesSentimentModel(min_word_frequency=1)
        model.train([
            TrainingExample("I love it", "positive"),
            TrainingExample("I hate it", "negative"),
            TrainingExample("It is ok", "neutral"),
        ])

        result = model.predict("I love it")
        print(result.label)       # "positive"
        print(result.confidence)  # 0.1 .. 0.95

        model.save("model.json")
        loaded = NaiveBayesSentimentModel.load("model.json")

    Args:
        config: Model configuration. Defaults to :class:`ModelConfig()`.
        **overrides: Individual config fields to override.
    """

    def __init__(self, config: Optional[ModelConfig] = None, **overrides: Any) -> None:
        config = config or ModelConfig()
        if overrides:
            config = config.replace(**overrides)
        self._state = ModelState.empty(config)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> ModelConfig:
        return self._state.config

    @property
    def state(self) -> ModelState:
        """Current state snapshot. Treat as read-only."""
        return self._state

    @property
    def is_trained(self) -> bool:
        return self._state.is_trained

    @property
    def vocabulary_size(self) -> int:
        return len(self._state.vocabulary)

    def __repr__(self) -> str:
        state = self._state
        return (
            f"NaiveBayesSentimentModel(trained={state.is_trained}, "
            f"vocabulary_size={len(state.vocabulary)}, documents={state.total_documents})"
        )

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, examples: Iterable[ExampleLike]) -> "NaiveBayesSentimentModel":
        """Train from scratch on ``examples``, replacing any previous state.

        Args:
            examples: Training examples, or mappings with ``text`` and
                ``label`` (or ``sentiment``) keys.

        Returns:
            Self (for method chaining).

        Raises:
            EmptyDatasetError: If ``examples`` is empty. The previous state,
                trained or not, is left untouched.
        """
        corpus = _coerce_examples(examples)
        config = self._state.config
        extractor = FeatureExtractor(config)

        vocab = build_vocabulary(corpus, extractor, config)
        vocabulary = set(vocab.vocabulary)
        word_probabilities = estimate_probabilities(
            corpus,
            vocabulary,
            vocab.document_counts,
            extractor,
            config.smoothing_factor,
        )
        state = ModelState(
            config=config,
            vocabulary=vocabulary,
            word_probabilities=word_probabilities,
            class_priors=estimate_priors(vocab.document_counts, vocab.total_documents),
            document_counts=vocab.document_counts,
            total_documents=vocab.total_documents,
            is_trained=True,
            vocabulary_order=vocab.vocabulary,
        )

        with self._lock:
            self._state = state

        logger.info(
            "Trained on %d examples: vocabulary=%d positive=%d negative=%d neutral=%d",
            state.total_documents,
            len(state.vocabulary),
            state.document_counts["positive"],
            state.document_counts["negative"],
            state.document_counts["neutral"],
        )
        return self

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def _trained_state(self) -> ModelState:
        state = self._state
        if not state.is_trained:
            raise UntrainedModelError()
        return state

    @staticmethod
    def _log_scores(state: ModelState, features: Iterable[str]) -> dict[str, float]:
        scores = {cls: _safe_log(state.class_priors.get(cls)) for cls in CLASSES}

        alpha = state.config.smoothing_factor
        unseen: Optional[float] = None
        if alpha > 0:
            unseen = math.log(alpha / (state.total_documents + alpha * len(state.vocabulary)))

        for feature in features:
            probs = state.word_probabilities.get(feature)
            if probs is not None:
                scores["positive"] += _safe_log(probs.positive)
                scores["negative"] += _safe_log(probs.negative)
                scores["neutral"] += _safe_log(probs.neutral)
            elif unseen is not None:
                # Same term for every class: shifts all scores, never reorders them.
                for cls in CLASSES:
                    scores[cls] += unseen
        return scores

    def log_scores(self, text: Optional[str]) -> dict[str, float]:
        """Unnormalized per-class log scores for ``text``."""
        state = self._trained_state()
        features = FeatureExtractor(state.config).extract_set(text)
        return self._log_scores(state, features)

    def predict(self, text: Optional[str]) -> SentimentResult:
        """Classify a single text.

        Args:
            text: Raw text. Empty or ``None`` text is scored on priors alone.

        Returns:
            SentimentResult with label, confidence, score and emotions.

        Raises:
            UntrainedModelError: If the model has not been trained.
        """
        return self._predict_with(self._trained_state(), text)

    @classmethod
    def _predict_with(cls, state: ModelState, text: Optional[str]) -> SentimentResult:
        features = FeatureExtractor(state.config).extract_set(text)
        log_scores = cls._log_scores(state, features)

        label = select_best_class(log_scores)
        probabilities = softmax(log_scores)
        confidence = margin_confidence(probabilities)
        score = probabilities["positive"] - probabilities["negative"]

        return SentimentResult(
            score=score,
            magnitude=abs(score),
            label=label,
            confidence=confidence,
            emotions=Emotions.from_prediction(label, confidence),
            probabilities=probabilities,
        )

    def predict_batch(
        self,
        texts: Iterable[Optional[str]],
        max_workers: Optional[int] = None,
    ) -> list[SentimentResult]:
        """Classify several texts, preserving input order.

        Args:
            texts: Raw texts.
            max_workers: Run on a thread pool of this size when greater than 1.

        Raises:
            UntrainedModelError: If the model has not been trained.
        """
        # One snapshot for the whole batch, even if train() swaps state meanwhile.
        state = self._trained_state()
        predict = functools.partial(self._predict_with, state)
        texts = list(texts)
        if max_workers is not None and max_workers > 1 and len(texts) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                return list(pool.map(predict, texts))
        return [predict(text) for text in texts]

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def most_informative_features(
        self,
        label: str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Features most indicative of ``label``.

        Ranks by the log ratio between ``P(feature | label)`` and the mean
        log probability under the other two classes.

        Args:
            label: Target class (``very_*`` labels are normalized).
            top_n: Number of features to return.

        Returns:
            List of (feature, log_ratio) tuples, most indicative first.
        """
        state = self._trained_state()
        if label not in {lbl.value for lbl in SentimentLabel}:
            raise ValueError(f"Unknown class: {label}. Known: {list(CLASSES)}")
        target = normalize_label(label)
        others = [cls for cls in CLASSES if cls != target]

        ratios: list[tuple[str, float]] = []
        for feature, probs in state.word_probabilities.items():
            target_lp = _safe_log(probs.get(target))
            other_lp = sum(_safe_log(probs.get(cls)) for cls in others) / len(others)
            ratio = target_lp - other_lp
            if math.isfinite(ratio):
                ratios.append((feature, round(ratio, 4)))

        ratios.sort(key=lambda item: item[1], reverse=True)
        return ratios[:top_n]

    def get_statistics(self) -> dict:
        """Summary of the current model state."""
        state = self._state
        return {
            "is_trained": state.is_trained,
            "vocabulary_size": len(state.vocabulary),
            "probability_table_size": len(state.word_probabilities),
            "total_documents": state.total_documents,
            "document_counts": dict(state.document_counts),
            "class_priors": state.class_priors.to_dict(),
            "config": state.config.to_dict(),
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def export_model(self) -> dict:
        """Serialize the trained state to a JSON-compatible dict.

        Raises:
            UntrainedModelError: If the model has not been trained.
        """
        state = self._state
        if not state.is_trained:
            raise UntrainedModelError("Cannot export untrained model")
        return state.to_export(datetime.now(timezone.utc).isoformat())

    def import_model(self, blob: Any) -> "NaiveBayesSentimentModel":
        """Replace the current state with one restored from ``blob``.

        The imported config replaces the model's own, so predictions use the
        exact configuration the checkpoint was trained with.

        Raises:
            MalformedImportError: If ``blob`` does not match the export schema.
                The current state is left untouched.
        """
        state = ModelState.from_export(blob)
        with self._lock:
            self._state = state
        logger.info(
            "Imported model: vocabulary=%d documents=%d",
            len(state.vocabulary),
            state.total_documents,
        )
        return self

    @classmethod
    def from_export(cls, blob: Any) -> "NaiveBayesSentimentModel":
        """Build a new model from an exported dict."""
        return cls().import_model(blob)

    def save(self, path: str | Path) -> None:
        """Save the trained model to a JSON file.

        Raises:
            UntrainedModelError: If the model has not been trained.
        """
        model_data = self.export_model()

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(model_data, f, indent=2, ensure_ascii=False)
        logger.info("Saved model to %s", path)

    @classmethod
    def load(cls, path: str | Path) -> "NaiveBayesSentimentModel":
        """Load a trained model from a JSON file.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            MalformedImportError: If the file is not valid JSON or does not
                match the export schema.
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise MalformedImportError(f"invalid JSON in {path}: {e}") from e

        model = cls.from_export(data)
        logger.info("Loaded model from %s", path)
        return model
