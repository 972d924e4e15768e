"""Feature extraction for sentiment classification.

Turns raw text into an ordered list of feature strings. Besides plain
tokens, the extractor can emit several kinds of engineered features:

- ``NOT_<token>`` for a token directly preceded by a negation word
- ``<a>_<b>`` bigrams over adjacent features
- ``INTENSE_<feature>`` for a feature directly preceded by an intensifier
- ``PREFIX_<abc>`` / ``SUFFIX_<xyz>`` affixes of longer plain features

Features are never deduplicated here; the vocabulary builder counts every
occurrence while the estimator and the inference engine reduce to sets.
"""

from __future__ import annotations

import re
from typing import Optional

from .config import ModelConfig
from .lexicons import INTENSIFIERS, NEGATION_WORDS, STOP_WORDS

NEGATION_PREFIX = "NOT_"
INTENSIFIER_PREFIX = "INTENSE_"
AFFIX_PREFIX = "PREFIX_"
AFFIX_SUFFIX = "SUFFIX_"

# ASCII word characters plus the Spanish accented letters survive cleaning.
_STRIP_RE = re.compile(r"[^\w\sáéíóúüñ]", re.ASCII)
_SPACE_RE = re.compile(r"\s+")
_NUMERIC_RE = re.compile(r"\d+", re.ASCII)

_AFFIX_MIN_LENGTH = 4
_AFFIX_SIZE = 3


def clean_text(text: Optional[str]) -> str:
    """Lowercase, replace unsupported characters with spaces, collapse whitespace."""
    if not text:
        return ""
    cleaned = _STRIP_RE.sub(" ", text.lower())
    return _SPACE_RE.sub(" ", cleaned).strip()


def tokenize(text: Optional[str]) -> list[str]:
    """Split cleaned text into raw tokens (no filtering)."""
    cleaned = clean_text(text)
    return cleaned.split(" ") if cleaned else []


def _keep(token: str, min_length: int) -> bool:
    return (
        len(token) >= min_length
        and token not in STOP_WORDS
        and not _NUMERIC_RE.fullmatch(token)
    )


def extract_features(text: Optional[str], config: ModelConfig) -> list[str]:
    """Extract the ordered feature sequence for ``text``.

    Args:
        text: Raw document text. ``None`` and empty strings yield ``[]``.
        config: Model configuration controlling the optional passes.

    Returns:
        List of feature strings, possibly with repeats.
    """
    words = tokenize(text)

    features: list[str] = []
    for i, word in enumerate(words):
        if not _keep(word, config.min_word_length):
            continue
        # The negation check looks at the raw previous token, so a
        # negation that is itself filtered out still applies.
        if config.enable_negation_handling and i > 0 and words[i - 1] in NEGATION_WORDS:
            features.append(f"{NEGATION_PREFIX}{word}")
        else:
            features.append(word)

    base = list(features)

    if config.enable_bigrams:
        features.extend(f"{a}_{b}" for a, b in zip(base, base[1:]))

    if config.enable_intensifier_handling:
        features.extend(
            f"{INTENSIFIER_PREFIX}{current}"
            for previous, current in zip(base, base[1:])
            if previous in INTENSIFIERS
        )

    if config.use_subword_features:
        affixes: list[str] = []
        for feature in features:
            if len(feature) >= _AFFIX_MIN_LENGTH and "_" not in feature:
                affixes.append(f"{AFFIX_PREFIX}{feature[:_AFFIX_SIZE]}")
                affixes.append(f"{AFFIX_SUFFIX}{feature[-_AFFIX_SIZE:]}")
        features.extend(affixes)

    return features


class FeatureExtractor:
    """Feature extractor bound to a fixed :class:`ModelConfig`.

    Example::

        extractor = FeatureExtractor(ModelConfig())
        extractor.extract("This is not good")   # ['this', 'not', 'NOT_good']
    """

    def __init__(self, config: Optional[ModelConfig] = None) -> None:
        self.config = config or ModelConfig()

    def extract(self, text: Optional[str]) -> list[str]:
        return extract_features(text, self.config)

    def extract_set(self, text: Optional[str]) -> set[str]:
        """Distinct features of ``text`` (document-frequency view)."""
        return set(extract_features(text, self.config))

    def __repr__(self) -> str:
        return f"FeatureExtractor(config={self.config!r})"
