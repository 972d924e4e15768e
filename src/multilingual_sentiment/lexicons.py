"""Static multilingual word lists used during feature extraction.

Covers English, Spanish, German and French. The per-language tables are
kept separate for inspection, but feature extraction only ever consults the
merged sets: the model is language-agnostic and a document may mix languages.

Some entries (``don't``, ``très``, ``völlig``) contain characters that
:func:`multilingual_sentiment.features.clean_text` replaces with spaces, so
they can never match a cleaned token. They are kept so the tables stay
identical to the ones trained checkpoints were built with.
"""

from __future__ import annotations

SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "es", "de", "fr")

# ---------------------------------------------------------------------------
# Stop words
# ---------------------------------------------------------------------------

STOP_WORDS_BY_LANGUAGE: dict[str, frozenset[str]] = {
    "en": frozenset({
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "have",
        "has", "had", "do", "does", "did", "will", "would", "could", "should",
        "may", "might", "must",
    }),
    "es": frozenset({
        "el", "la", "los", "las", "un", "una", "y", "o", "pero", "en", "de",
        "del", "al", "por", "para", "con", "sin", "es", "son", "fue",
        "fueron", "ser", "estar", "estoy", "está", "están", "he", "has", "ha",
        "han", "que", "se", "le", "lo", "me", "te", "nos",
    }),
    "de": frozenset({
        "der", "die", "das", "den", "dem", "des", "ein", "eine", "einen",
        "einem", "einer", "und", "oder", "aber", "in", "an", "auf", "zu",
        "von", "mit", "für", "ist", "sind", "war", "waren", "sein", "haben",
        "hat", "hatte", "hatten",
    }),
    "fr": frozenset({
        "le", "la", "les", "un", "une", "des", "et", "ou", "mais", "dans",
        "de", "du", "au", "aux", "pour", "avec", "sans", "est", "sont",
        "était", "étaient", "être", "avoir", "a", "ai", "as", "avons", "avez",
        "ont", "que", "qui", "se", "me", "te", "nous", "vous",
    }),
}

# ---------------------------------------------------------------------------
# Negations
# ---------------------------------------------------------------------------

NEGATION_WORDS_BY_LANGUAGE: dict[str, frozenset[str]] = {
    "en": frozenset({
        "not", "no", "never", "none", "nothing", "nobody", "nowhere", "don't",
        "won't", "can't", "shouldn't", "wouldn't", "couldn't", "mustn't",
        "needn't", "haven't", "hasn't", "hadn't", "isn't", "aren't",
        "wasn't", "weren't", "doesn't", "didn't", "ain't",
    }),
    "es": frozenset({
        "no", "nunca", "jamás", "nada", "nadie", "ningún", "ninguna",
        "ninguno", "ningunos", "sin", "tampoco", "apenas", "ni",
    }),
    "de": frozenset({
        "nicht", "nein", "nie", "niemals", "nichts", "niemand", "nirgendwo",
        "kein", "keine",
    }),
    "fr": frozenset({
        "ne", "pas", "non", "jamais", "rien", "personne", "nulle", "aucun",
        "aucune",
    }),
}

# ---------------------------------------------------------------------------
# Intensifiers
# ---------------------------------------------------------------------------

INTENSIFIERS_BY_LANGUAGE: dict[str, frozenset[str]] = {
    "en": frozenset({
        "very", "extremely", "incredibly", "absolutely", "totally",
        "completely", "really", "quite", "rather", "fairly", "pretty",
        "somewhat", "super", "ultra", "mega", "highly", "strongly",
        "intensely", "severely", "seriously", "critically",
    }),
    "es": frozenset({
        "muy", "súper", "ultra", "mega", "extremadamente", "increíblemente",
        "totalmente", "completamente", "absolutamente", "realmente",
        "bastante", "demasiado",
    }),
    "de": frozenset({
        "sehr", "extrem", "unglaublich", "absolut", "völlig", "komplett",
        "wirklich", "ziemlich", "eher", "recht", "ganz", "super", "ultra",
        "mega",
    }),
    "fr": frozenset({
        "très", "extrêmement", "incroyablement", "absolument", "totalement",
        "complètement", "vraiment", "assez", "plutôt", "super", "ultra",
        "méga",
    }),
}


def _merge(tables: dict[str, frozenset[str]]) -> frozenset[str]:
    merged: set[str] = set()
    for words in tables.values():
        merged.update(words)
    return frozenset(merged)


STOP_WORDS: frozenset[str] = _merge(STOP_WORDS_BY_LANGUAGE)
NEGATION_WORDS: frozenset[str] = _merge(NEGATION_WORDS_BY_LANGUAGE)
INTENSIFIERS: frozenset[str] = _merge(INTENSIFIERS_BY_LANGUAGE)


def is_stop_word(word: str) -> bool:
    return word in STOP_WORDS


def is_negation(word: str) -> bool:
    return word in NEGATION_WORDS


def is_intensifier(word: str) -> bool:
    return word in INTENSIFIERS
