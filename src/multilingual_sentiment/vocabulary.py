"""Training pass 1: vocabulary construction.

Counts every feature occurrence across the corpus, prunes rare features
and keeps the most frequent ones. The same pass tallies documents per
class, which the estimator and the priors depend on.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from .config import ModelConfig
from .errors import EmptyDatasetError
from .features import FeatureExtractor
from .models import CLASSES, TrainingExample

logger = logging.getLogger(__name__)


@dataclass
class VocabularyResult:
    """Output of the vocabulary pass.

    Attributes:
        vocabulary: Kept features, most frequent first. Ties keep the order
            in which features were first seen in the corpus.
        frequencies: Corpus-wide occurrence count of every extracted feature,
            before pruning.
        document_counts: Number of documents per normalized class.
        total_documents: Number of documents scanned.
    """

    vocabulary: list[str] = field(default_factory=list)
    frequencies: Counter = field(default_factory=Counter)
    document_counts: dict[str, int] = field(default_factory=dict)
    total_documents: int = 0


def build_vocabulary(
    examples: Sequence[TrainingExample],
    extractor: FeatureExtractor,
    config: ModelConfig,
) -> VocabularyResult:
    """Scan the corpus once and select the vocabulary.

    Args:
        examples: Training examples.
        extractor: Feature extractor configured like the model.
        config: Supplies ``min_word_frequency`` and ``max_vocabulary_size``.

    Returns:
        VocabularyResult with the pruned vocabulary and document counts.

    Raises:
        EmptyDatasetError: If ``examples`` is empty.
    """
    if not examples:
        raise EmptyDatasetError()

    frequencies: Counter[str] = Counter()
    document_counts = {cls: 0 for cls in CLASSES}

    for example in examples:
        document_counts[example.normalized_label] += 1
        frequencies.update(extractor.extract(example.text))

    # Counter preserves first-seen order and sorted() is stable, so ties
    # come out in corpus order.
    frequent = [
        (feature, freq)
        for feature, freq in frequencies.items()
        if freq >= config.min_word_frequency
    ]
    frequent.sort(key=lambda item: item[1], reverse=True)
    vocabulary = [feature for feature, _ in frequent[: config.max_vocabulary_size]]

    logger.debug(
        "Vocabulary pass: %d distinct features, %d above min frequency %d, %d kept (max %d)",
        len(frequencies),
        len(frequent),
        config.min_word_frequency,
        len(vocabulary),
        config.max_vocabulary_size,
    )

    return VocabularyResult(
        vocabulary=vocabulary,
        frequencies=frequencies,
        document_counts=document_counts,
        total_documents=len(examples),
    )
