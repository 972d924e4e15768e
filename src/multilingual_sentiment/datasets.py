"""Training data loaders.

Supports JSON (an array of records), JSON Lines and CSV files. Every record
needs a ``text`` and a ``label`` (``sentiment`` is accepted as an alias) and
may carry a ``language`` code.
"""

from __future__ import annotations

import csv
import json
import logging
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Sequence

from .models import TrainingExample, normalize_label

logger = logging.getLogger(__name__)


class DatasetLoader(ABC):
    """Abstract base class for training data loaders."""

    supported_extensions: tuple[str, ...] = ()

    def can_handle(self, path: Path) -> bool:
        """Check if this loader can handle the given file."""
        return path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def load(self, path: Path) -> list[TrainingExample]:
        """Load training examples from ``path``.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file or one of its records is malformed.
        """
        ...

    def _validate_path(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not self.can_handle(path):
            raise ValueError(
                f"Unsupported file extension '{path.suffix}' for {self.__class__.__name__}. "
                f"Supported: {self.supported_extensions}"
            )

    @staticmethod
    def _build(records: Iterable[Any], path: Path, what: str = "record") -> list[TrainingExample]:
        examples: list[TrainingExample] = []
        for position, record in records:
            if not isinstance(record, dict):
                raise ValueError(f"{path}: {what} {position} is not an object")
            try:
                examples.append(TrainingExample.from_dict(record))
            except ValueError as e:
                raise ValueError(f"{path}: {what} {position}: {e}") from e
        return examples


class JsonLoader(DatasetLoader):
    """Loader for a JSON array of records, or ``{"examples": [...]}``."""

    supported_extensions = (".json",)

    def load(self, path: Path) -> list[TrainingExample]:
        self._validate_path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"{path}: invalid JSON: {e}") from e

        if isinstance(data, dict) and "examples" in data:
            data = data["examples"]
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of records")
        return self._build(enumerate(data), path)


class JsonlLoader(DatasetLoader):
    """Loader for JSON Lines files (one record per line, blank lines ignored)."""

    supported_extensions = (".jsonl", ".ndjson")

    def load(self, path: Path) -> list[TrainingExample]:
        self._validate_path(path)
        records = []
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append((line_no, json.loads(line)))
                except json.JSONDecodeError as e:
                    raise ValueError(f"{path}: line {line_no}: invalid JSON: {e}") from e
        return self._build(records, path, what="line")


class CsvLoader(DatasetLoader):
    """Loader for CSV files with a header row."""

    supported_extensions = (".csv", ".tsv")

    def load(self, path: Path) -> list[TrainingExample]:
        self._validate_path(path)
        delimiter = "\t" if path.suffix.lower() == ".tsv" else ","
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            header = reader.fieldnames or []
            if "text" not in header or not ({"label", "sentiment"} & set(header)):
                raise ValueError(
                    f"{path}: header must contain 'text' and 'label' (or 'sentiment'), got {header}"
                )
            # Row numbers count the header as row 1.
            return self._build(
                ((row_no, row) for row_no, row in enumerate(reader, 2)), path, what="row"
            )


def get_loader(path: Path) -> DatasetLoader:
    """Get the loader matching the file extension.

    Raises:
        ValueError: If no loader supports the extension.
    """
    loaders: list[DatasetLoader] = [JsonLoader(), JsonlLoader(), CsvLoader()]
    for loader in loaders:
        if loader.can_handle(path):
            return loader

    supported = set()
    for loader in loaders:
        supported.update(loader.supported_extensions)

    raise ValueError(
        f"No loader available for '{path.suffix}'. "
        f"Supported formats: {', '.join(sorted(supported))}"
    )


def load_examples(path: str | Path) -> list[TrainingExample]:
    """Load training examples from a JSON, JSONL or CSV file."""
    path = Path(path)
    examples = get_loader(path).load(path)
    logger.info("Loaded %d examples from %s", len(examples), path)
    return examples


def save_examples(examples: Sequence[TrainingExample], path: str | Path) -> None:
    """Write examples as JSON Lines."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for example in examples:
            f.write(json.dumps(example.to_dict(), ensure_ascii=False) + "\n")


def dataset_statistics(examples: Sequence[TrainingExample]) -> dict:
    """Label and language distribution of a dataset."""
    labels = Counter(ex.label for ex in examples)
    classes = Counter(normalize_label(ex.label) for ex in examples)
    languages = Counter(ex.language or "unknown" for ex in examples)
    return {
        "total": len(examples),
        "labels": dict(labels),
        "classes": dict(classes),
        "languages": dict(languages),
        "avg_length": (
            sum(len(ex.text) for ex in examples) / len(examples) if examples else 0.0
        ),
    }
