"""Multilingual Sentiment -- Naive Bayes sentiment classification for short texts."""

__version__ = "0.1.0"

from .classifier import NaiveBayesSentimentModel
from .config import ModelConfig
from .datasets import dataset_statistics, load_examples, save_examples
from .errors import (
    EmptyDatasetError,
    MalformedImportError,
    SentimentModelError,
    UntrainedModelError,
)
from .evaluation import (
    ClassificationMetrics,
    CrossValidationResult,
    compute_metrics,
    cross_validate,
    evaluate_model,
    stratified_k_fold,
    train_test_split,
)
from .features import FeatureExtractor, clean_text, extract_features
from .models import (
    CLASSES,
    ClassPriors,
    Emotions,
    ModelState,
    SentimentLabel,
    SentimentResult,
    TrainingExample,
    WordProbability,
    normalize_label,
)

__all__ = [
    # Core
    "NaiveBayesSentimentModel",
    "ModelConfig",
    "ModelState",
    # Data models
    "CLASSES",
    "SentimentLabel",
    "TrainingExample",
    "WordProbability",
    "ClassPriors",
    "SentimentResult",
    "Emotions",
    "normalize_label",
    # Features
    "FeatureExtractor",
    "extract_features",
    "clean_text",
    # Errors
    "SentimentModelError",
    "EmptyDatasetError",
    "UntrainedModelError",
    "MalformedImportError",
    # Datasets
    "load_examples",
    "save_examples",
    "dataset_statistics",
    # Evaluation
    "ClassificationMetrics",
    "CrossValidationResult",
    "compute_metrics",
    "cross_validate",
    "evaluate_model",
    "stratified_k_fold",
    "train_test_split",
]
