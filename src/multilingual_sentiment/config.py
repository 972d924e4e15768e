"""Model configuration.

A :class:`ModelConfig` is immutable once built and must be identical at
training and prediction time, which is why it travels inside exported
checkpoints. Configs can be built from keyword arguments, from a dict
(snake_case or camelCase keys) or from environment variables, optionally
loaded from a ``.env`` file.
"""

from __future__ import annotations

import dataclasses
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

ENV_PREFIX = "SENTIMENT_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _parse_bool(value: str, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


@dataclass(frozen=True)
class ModelConfig:
    """Hyper-parameters of the Naive Bayes sentiment model.

    Args:
        smoothing_factor: Additive (Laplace) smoothing constant. ``0`` disables
            smoothing, which allows zero probabilities.
        min_word_length: Shortest token kept as a feature.
        max_vocabulary_size: Upper bound on the number of vocabulary features.
        enable_bigrams: Emit ``a_b`` features for adjacent feature pairs.
        enable_negation_handling: Emit ``NOT_x`` when ``x`` follows a negation.
        enable_intensifier_handling: Emit ``INTENSE_x`` when ``x`` follows an
            intensifier.
        min_word_frequency: Minimum corpus-wide occurrence count for a feature
            to enter the vocabulary.
        use_subword_features: Emit ``PREFIX_``/``SUFFIX_`` affix features.
    """

    smoothing_factor: float = 1.0
    min_word_length: int = 2
    max_vocabulary_size: int = 10000
    enable_bigrams: bool = False
    enable_negation_handling: bool = True
    enable_intensifier_handling: bool = True
    min_word_frequency: int = 2
    use_subword_features: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.smoothing_factor, bool) or not isinstance(self.smoothing_factor, (int, float)):
            raise ValueError(f"smoothing_factor must be a number, got {self.smoothing_factor!r}")
        if self.smoothing_factor < 0:
            raise ValueError(f"smoothing_factor must be >= 0, got {self.smoothing_factor}")
        for name, minimum in (
            ("min_word_length", 1),
            ("max_vocabulary_size", 1),
            ("min_word_frequency", 1),
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < minimum:
                raise ValueError(f"{name} must be >= {minimum}, got {value}")
        for name in (
            "enable_bigrams",
            "enable_negation_handling",
            "enable_intensifier_handling",
            "use_subword_features",
        ):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a boolean, got {value!r}")
        # Normalise ints (e.g. 1 from JSON) so equality and export are stable.
        object.__setattr__(self, "smoothing_factor", float(self.smoothing_factor))

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self, camel_case: bool = False) -> dict[str, Any]:
        """Serialize to a plain dict, optionally with camelCase keys."""
        data = dataclasses.asdict(self)
        if camel_case:
            return {_to_camel(k): v for k, v in data.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelConfig":
        """Build a config from snake_case or camelCase keys.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = set(cls.field_names())
        kwargs: dict[str, Any] = {}
        unknown: list[str] = []
        for key, value in data.items():
            name = _to_snake(key)
            if name in known:
                kwargs[name] = value
            else:
                unknown.append(key)
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        env_file: Optional[str | Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ModelConfig":
        """Build a config from ``<PREFIX><FIELD_NAME>`` environment variables.

        Example: ``SENTIMENT_SMOOTHING_FACTOR=0.5``, ``SENTIMENT_ENABLE_BIGRAMS=true``.

        Args:
            prefix: Variable name prefix.
            env_file: Optional ``.env`` file loaded first (existing variables win).
            environ: Mapping to read instead of ``os.environ`` (tests).
        """
        if environ is None:
            load_dotenv(dotenv_path=env_file)
            environ = os.environ

        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            raw = environ.get(f"{prefix}{f.name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            var = f"{prefix}{f.name.upper()}"
            if f.type in (bool, "bool"):
                kwargs[f.name] = _parse_bool(raw, var)
            elif f.type in (int, "int"):
                try:
                    kwargs[f.name] = int(raw)
                except ValueError:
                    raise ValueError(f"Invalid integer for {var}: {raw!r}") from None
            else:
                try:
                    kwargs[f.name] = float(raw)
                except ValueError:
                    raise ValueError(f"Invalid number for {var}: {raw!r}") from None
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "ModelConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
