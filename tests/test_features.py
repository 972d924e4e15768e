"""Tests for text cleaning and feature extraction."""

from __future__ import annotations

import pytest

from multilingual_sentiment.config import ModelConfig
from multilingual_sentiment.features import (
    FeatureExtractor,
    clean_text,
    extract_features,
    tokenize,
)
from multilingual_sentiment.lexicons import (
    INTENSIFIERS,
    NEGATION_WORDS,
    STOP_WORDS,
    STOP_WORDS_BY_LANGUAGE,
    SUPPORTED_LANGUAGES,
    is_intensifier,
    is_negation,
    is_stop_word,
)

PLAIN = ModelConfig(
    enable_negation_handling=False,
    enable_intensifier_handling=False,
)


# ---------------------------------------------------------------------------
# Lexicons
# ---------------------------------------------------------------------------


class TestLexicons:
    def test_all_languages_present(self) -> None:
        assert set(STOP_WORDS_BY_LANGUAGE) == set(SUPPORTED_LANGUAGES)

    def test_merged_sets_cover_each_language(self) -> None:
        assert {"the", "el", "der", "le"} <= STOP_WORDS
        assert {"not", "nunca", "nicht", "jamais"} <= NEGATION_WORDS
        assert {"very", "muy", "sehr", "vraiment"} <= INTENSIFIERS

    def test_helpers(self) -> None:
        assert is_stop_word("the")
        assert not is_stop_word("love")
        assert is_negation("never")
        assert is_intensifier("extremely")

    def test_sin_is_both_stop_word_and_negation(self) -> None:
        assert is_stop_word("sin")
        assert is_negation("sin")


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------


class TestCleanText:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert clean_text("Hello, World!!") == "hello world"

    def test_collapses_whitespace(self) -> None:
        assert clean_text("  a \t\n  b  ") == "a b"

    def test_keeps_spanish_accents(self) -> None:
        assert clean_text("¡Qué BUENO, señor!") == "qué bueno señor"

    def test_other_non_ascii_letters_become_spaces(self) -> None:
        assert clean_text("Größe") == "gr e"

    def test_apostrophe_splits_token(self) -> None:
        assert tokenize("don't") == ["don", "t"]

    def test_empty_and_none(self) -> None:
        assert clean_text("") == ""
        assert clean_text(None) == ""
        assert tokenize("   ") == []


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


class TestFiltering:
    def test_drops_stop_words(self) -> None:
        assert extract_features("the movie is great", PLAIN) == ["movie", "great"]

    def test_drops_short_tokens(self) -> None:
        assert extract_features("I a go", PLAIN) == ["go"]

    def test_min_word_length_configurable(self) -> None:
        config = PLAIN.replace(min_word_length=4)
        assert extract_features("good bad fine", config) == ["good", "fine"]

    def test_drops_numeric_tokens(self) -> None:
        assert extract_features("2024 great 42", PLAIN) == ["great"]

    def test_keeps_alphanumeric_tokens(self) -> None:
        assert extract_features("abc123 great", PLAIN) == ["abc123", "great"]

    def test_no_deduplication(self) -> None:
        assert extract_features("good good good", PLAIN) == ["good", "good", "good"]

    def test_empty_text(self, default_config: ModelConfig) -> None:
        assert extract_features("", default_config) == []
        assert extract_features(None, default_config) == []


# ---------------------------------------------------------------------------
# Negation
# ---------------------------------------------------------------------------


class TestNegation:
    def test_not_good(self, default_config: ModelConfig) -> None:
        features = extract_features("not good", default_config)
        assert "NOT_good" in features
        assert "good" not in features

    def test_negation_word_itself_kept_when_it_passes_filters(self, default_config: ModelConfig) -> None:
        assert extract_features("This is not good", default_config) == ["this", "not", "NOT_good"]

    def test_only_next_token_is_negated(self, default_config: ModelConfig) -> None:
        features = extract_features("never good movie", default_config)
        assert features == ["never", "NOT_good", "movie"]

    def test_filtered_negation_still_applies(self, default_config: ModelConfig) -> None:
        # "sin" is a stop word, so it is dropped, but it still negates "problemas".
        assert extract_features("sin problemas", default_config) == ["NOT_problemas"]

    def test_negated_token_must_pass_filters(self, default_config: ModelConfig) -> None:
        assert extract_features("not the", default_config) == ["not"]

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("nunca bueno", "NOT_bueno"),
            ("nicht gut", "NOT_gut"),
            ("jamais content", "NOT_content"),
        ],
    )
    def test_multilingual_negations(self, default_config: ModelConfig, text: str, expected: str) -> None:
        assert expected in extract_features(text, default_config)

    def test_disabled(self) -> None:
        assert extract_features("not good", PLAIN) == ["not", "good"]


# ---------------------------------------------------------------------------
# Bigrams, intensifiers, affixes
# ---------------------------------------------------------------------------


class TestBigrams:
    def test_adjacent_pairs_appended(self) -> None:
        config = PLAIN.replace(enable_bigrams=True)
        assert extract_features("good movie night", config) == [
            "good", "movie", "night", "good_movie", "movie_night",
        ]

    def test_bigrams_can_contain_negated_features(self) -> None:
        config = ModelConfig(enable_bigrams=True, enable_intensifier_handling=False)
        features = extract_features("not good movie", config)
        assert "NOT_good_movie" in features
        assert "not_NOT_good" in features

    def test_single_feature_has_no_bigram(self) -> None:
        config = PLAIN.replace(enable_bigrams=True)
        assert extract_features("good", config) == ["good"]


class TestIntensifiers:
    def test_intense_feature_appended(self, default_config: ModelConfig) -> None:
        assert extract_features("very good movie", default_config) == [
            "very", "good", "movie", "INTENSE_good",
        ]

    def test_scans_pre_bigram_features_only(self) -> None:
        config = ModelConfig(enable_bigrams=True, enable_negation_handling=False)
        features = extract_features("really nice day", config)
        assert features == [
            "really", "nice", "day", "really_nice", "nice_day", "INTENSE_nice",
        ]

    def test_spanish_intensifier(self, default_config: ModelConfig) -> None:
        assert "INTENSE_bueno" in extract_features("muy bueno", default_config)


class TestSubwords:
    def test_prefix_and_suffix(self) -> None:
        config = PLAIN.replace(use_subword_features=True)
        assert extract_features("wonderful day", config) == [
            "wonderful", "day", "PREFIX_won", "SUFFIX_ful",
        ]

    def test_skips_features_with_underscore(self) -> None:
        config = ModelConfig(use_subword_features=True, enable_intensifier_handling=False)
        assert extract_features("not wonderful", config) == ["not", "NOT_wonderful"]

    def test_skips_bigrams(self) -> None:
        config = PLAIN.replace(use_subword_features=True, enable_bigrams=True)
        features = extract_features("good movie", config)
        assert "good_movie" in features
        assert not any(f.startswith("PREFIX_good_") for f in features)
        assert features.count("PREFIX_goo") == 1
        assert features.count("PREFIX_mov") == 1


# ---------------------------------------------------------------------------
# FeatureExtractor
# ---------------------------------------------------------------------------


class TestFeatureExtractor:
    def test_default_config(self) -> None:
        assert FeatureExtractor().config == ModelConfig()

    def test_extract_matches_function(self, default_config: ModelConfig) -> None:
        text = "Not very good, but the staff was extremely friendly"
        assert FeatureExtractor(default_config).extract(text) == extract_features(text, default_config)

    def test_extract_set_deduplicates(self) -> None:
        assert FeatureExtractor(PLAIN).extract_set("good good bad") == {"good", "bad"}
