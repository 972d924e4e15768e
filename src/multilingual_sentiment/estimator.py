"""Training pass 2: conditional probability estimation.

For each vocabulary feature and class ``c``::

    P(feature | c) = (docs_in_c_containing_feature + alpha) /
                     (docs_in_c + alpha * |vocabulary|)

Counts are document frequencies: a feature repeated inside one document is
counted once for that document.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence

from .features import FeatureExtractor
from .models import CLASSES, ClassPriors, TrainingExample, WordProbability

logger = logging.getLogger(__name__)


def _smoothed(count: int, class_documents: int, smoothing: float, vocabulary_size: int) -> float:
    denominator = class_documents + smoothing * vocabulary_size
    if denominator == 0:
        # Only reachable without smoothing for a class with no documents.
        return 0.0
    return (count + smoothing) / denominator


def estimate_probabilities(
    examples: Sequence[TrainingExample],
    vocabulary: Collection[str],
    document_counts: Mapping[str, int],
    extractor: FeatureExtractor,
    smoothing: float,
) -> dict[str, WordProbability]:
    """Compute the smoothed probability table for the vocabulary.

    Args:
        examples: Training examples (same corpus as the vocabulary pass).
        vocabulary: Features allowed into the table.
        document_counts: Documents per normalized class.
        extractor: Feature extractor configured like the model.
        smoothing: Additive smoothing constant ``alpha``.

    Returns:
        Mapping of feature to :class:`WordProbability`, covering every
        vocabulary feature seen in at least one document.
    """
    vocab = vocabulary if isinstance(vocabulary, (set, frozenset)) else set(vocabulary)
    class_counts: dict[str, dict[str, int]] = {}

    for example in examples:
        label = example.normalized_label
        for feature in extractor.extract_set(example.text):
            if feature not in vocab:
                continue
            counts = class_counts.get(feature)
            if counts is None:
                counts = class_counts[feature] = {cls: 0 for cls in CLASSES}
            counts[label] += 1

    vocabulary_size = len(vocab)
    probabilities: dict[str, WordProbability] = {}
    for feature, counts in class_counts.items():
        probabilities[feature] = WordProbability(
            positive=_smoothed(counts["positive"], document_counts["positive"], smoothing, vocabulary_size),
            negative=_smoothed(counts["negative"], document_counts["negative"], smoothing, vocabulary_size),
            neutral=_smoothed(counts["neutral"], document_counts["neutral"], smoothing, vocabulary_size),
            count=sum(counts.values()),
        )

    logger.debug("Estimated probabilities for %d features", len(probabilities))
    return probabilities


def estimate_priors(document_counts: Mapping[str, int], total_documents: int) -> ClassPriors:
    """Class priors as each class's share of the training documents."""
    if total_documents <= 0:
        raise ValueError(f"total_documents must be positive, got {total_documents}")
    return ClassPriors(
        positive=document_counts["positive"] / total_documents,
        negative=document_counts["negative"] / total_documents,
        neutral=document_counts["neutral"] / total_documents,
    )
