"""Shared test fixtures for multilingual-sentiment tests."""

from __future__ import annotations

import pytest

from multilingual_sentiment.classifier import NaiveBayesSentimentModel
from multilingual_sentiment.config import ModelConfig
from multilingual_sentiment.models import TrainingExample

BASIC_TRIPLET = [
    ("I love it", "positive"),
    ("I hate it", "negative"),
    ("It is ok", "neutral"),
]

POSITIVE_TEXTS = [
    "I love this phone, the camera is excellent",
    "Great service and friendly staff, really happy",
    "Me encanta este producto, es excelente",
    "Das Essen war wunderbar und sehr lecker",
    "Un film magnifique, vraiment excellent",
    "Wonderful experience, I am very happy with it",
    "Excelente servicio, muy feliz con la compra",
    "Fantastic quality, love it, excellent value",
]

NEGATIVE_TEXTS = [
    "I hate this phone, the battery is terrible",
    "Awful service and rude staff, really angry",
    "Odio este producto, es horrible",
    "Das Essen war schrecklich und kalt",
    "Un film horrible, vraiment nul",
    "Terrible experience, I am very angry about it",
    "Servicio horrible, muy enfadado con la compra",
    "Broken on arrival, terrible quality, awful value",
]

NEUTRAL_TEXTS = [
    "The package arrived on Tuesday afternoon",
    "The store opens at nine in the morning",
    "El paquete llegó el martes por la tarde",
    "Der Laden öffnet um neun Uhr morgens",
    "Le magasin ouvre à neuf heures du matin",
    "The meeting is scheduled for next Tuesday morning",
    "La tienda abre a las nueve de la mañana",
    "The report lists the store hours for Tuesday",
]


@pytest.fixture
def basic_examples() -> list[TrainingExample]:
    """The love/hate/ok corpus, repeated five times."""
    return [TrainingExample(text, label) for text, label in BASIC_TRIPLET] * 5


@pytest.fixture
def multilingual_examples() -> list[TrainingExample]:
    """Small mixed-language corpus with all three classes."""
    return (
        [TrainingExample(t, "positive") for t in POSITIVE_TEXTS]
        + [TrainingExample(t, "negative") for t in NEGATIVE_TEXTS]
        + [TrainingExample(t, "neutral") for t in NEUTRAL_TEXTS]
    )


@pytest.fixture
def default_config() -> ModelConfig:
    return ModelConfig()


@pytest.fixture
def trained_model(basic_examples: list[TrainingExample]) -> NaiveBayesSentimentModel:
    """Model trained on the love/hate/ok corpus with default settings."""
    return NaiveBayesSentimentModel().train(basic_examples)


@pytest.fixture
def multilingual_model(multilingual_examples: list[TrainingExample]) -> NaiveBayesSentimentModel:
    return NaiveBayesSentimentModel(min_word_frequency=1).train(multilingual_examples)


@pytest.fixture
def probe_texts() -> list[str]:
    return [
        "I love it",
        "I hate it",
        "It is ok",
        "",
        "completely unknown words here",
        "not good at all",
        "Me encanta, excelente",
        "Das war schrecklich",
        "very very happy",
    ]
