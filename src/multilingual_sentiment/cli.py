"""Command-line interface for the multilingual sentiment classifier.

Provides ``train``, ``predict``, ``evaluate`` and ``inspect`` commands with
rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    multilingual-sentiment train data/reviews.jsonl --output model.json
    multilingual-sentiment predict model.json "I love it" "No me gusta nada"
    multilingual-sentiment evaluate data/reviews.csv --folds 5
    multilingual-sentiment inspect model.json --top 15
"""

from __future__ import annotations

import contextlib
import functools
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .classifier import NaiveBayesSentimentModel
from .config import ModelConfig
from .datasets import dataset_statistics, load_examples
from .errors import SentimentModelError
from .evaluation import cross_validate
from .models import SentimentResult

console = Console()
err_console = Console(stderr=True)

_HANDLED_ERRORS = (SentimentModelError, OSError, ValueError)


def _get_label_style(label: str) -> str:
    """Return a rich style string for a sentiment label."""
    return {
        "positive": "bold green",
        "negative": "bold red",
        "neutral": "bold yellow",
    }.get(label, "")


def _get_label_icon(label: str) -> str:
    return {
        "positive": "🟢",
        "negative": "🔴",
        "neutral": "🟡",
    }.get(label, "")


def _fail(error: Exception) -> None:
    err_console.print(f"[bold red]Error:[/] {error}")
    sys.exit(1)


def _config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach model-configuration flags; unset flags fall back to the environment."""
    options = [
        click.option("--smoothing", type=float, default=None, help="Laplace smoothing factor."),
        click.option("--min-word-length", type=int, default=None, help="Shortest token kept."),
        click.option("--max-vocab", type=int, default=None, help="Maximum vocabulary size."),
        click.option("--min-frequency", type=int, default=None,
                     help="Minimum corpus frequency for a feature."),
        click.option("--bigrams/--no-bigrams", default=None, help="Emit bigram features."),
        click.option("--negation/--no-negation", default=None, help="Emit NOT_ features."),
        click.option("--intensifiers/--no-intensifiers", default=None,
                     help="Emit INTENSE_ features."),
        click.option("--subwords/--no-subwords", default=None,
                     help="Emit PREFIX_/SUFFIX_ features."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(ctx: click.Context, **flags: Any) -> ModelConfig:
    config = ModelConfig.from_env(env_file=ctx.obj.get("env_file"))
    mapping = {
        "smoothing": "smoothing_factor",
        "min_word_length": "min_word_length",
        "max_vocab": "max_vocabulary_size",
        "min_frequency": "min_word_frequency",
        "bigrams": "enable_bigrams",
        "negation": "enable_negation_handling",
        "intensifiers": "enable_intensifier_handling",
        "subwords": "use_subword_features",
    }
    changes = {mapping[k]: v for k, v in flags.items() if k in mapping and v is not None}
    return config.replace(**changes) if changes else config


def _handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except _HANDLED_ERRORS as e:
            _fail(e)

    return wrapper


@click.group()
@click.version_option(package_name="multilingual-sentiment")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--env-file", type=click.Path(path_type=Path), default=None,
              help="Load SENTIMENT_* settings from this .env file.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, env_file: Optional[Path]) -> None:
    """💬 Multilingual sentiment classifier (Naive Bayes).

    Train, evaluate and run a sentiment model for English, Spanish,
    German and French text.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file


@main.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), required=True,
              help="Where to save the trained model (JSON).")
@_config_options
@click.pass_context
@_handle_errors
def train(ctx: click.Context, dataset: Path, output: Path, **flags: Any) -> None:
    """Train a model on DATASET and save it.

    Example: multilingual-sentiment train reviews.jsonl -o model.json
    """
    config = _build_config(ctx, **flags)
    examples = load_examples(dataset)

    model = NaiveBayesSentimentModel(config)
    with console.status("[bold blue]Training model...", spinner="dots"):
        model.train(examples)
    model.save(output)

    _render_statistics(model, dataset_statistics(examples))
    console.print(f"[dim]Model saved to {output}[/]")


@main.command()
@click.argument("model_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("texts", nargs=-1)
@click.option("--file", "-f", "text_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Read one text per line from this file.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--workers", type=int, default=None, help="Predict on a thread pool of this size.")
@_handle_errors
def predict(
    model_path: Path,
    texts: tuple[str, ...],
    text_file: Optional[Path],
    output: str,
    workers: Optional[int],
) -> None:
    """Classify TEXTS with a saved model.

    Example: multilingual-sentiment predict model.json "I love it"
    """
    inputs = list(texts)
    if text_file:
        inputs.extend(
            line.strip()
            for line in text_file.read_text(encoding="utf-8").splitlines()
            if line.strip()
        )
    if not inputs:
        raise click.UsageError("Provide at least one text or --file.")

    model = NaiveBayesSentimentModel.load(model_path)
    results = model.predict_batch(inputs, max_workers=workers)

    if output == "json":
        click.echo(json.dumps(
            [{"text": text, **result.to_dict()} for text, result in zip(inputs, results)],
            indent=2,
            ensure_ascii=False,
        ))
    else:
        _render_predictions(inputs, results)


@main.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folds", "-k", type=int, default=5, help="Number of cross-validation folds.")
@click.option("--seed", type=int, default=42, help="Random seed for fold assignment.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@_config_options
@click.pass_context
@_handle_errors
def evaluate(
    ctx: click.Context,
    dataset: Path,
    folds: int,
    seed: int,
    output: str,
    **flags: Any,
) -> None:
    """Cross-validate a model configuration on DATASET.

    Example: multilingual-sentiment evaluate reviews.csv --folds 5
    """
    config = _build_config(ctx, **flags)
    examples = load_examples(dataset)

    status = (
        contextlib.nullcontext()
        if output == "json"
        else console.status("[bold blue]Cross-validating...", spinner="dots")
    )
    with status:
        result = cross_validate(examples, k=folds, config=config, seed=seed)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(title=f"Cross-validation: {dataset.name}", show_lines=False)
    table.add_column("Fold", justify="right", width=5)
    table.add_column("Accuracy", justify="right")
    table.add_column("Macro F1", justify="right")
    table.add_column("Weighted F1", justify="right")
    for i, metrics in enumerate(result.folds, 1):
        table.add_row(
            str(i),
            f"{metrics.accuracy:.2%}",
            f"{metrics.macro_f1:.4f}",
            f"{metrics.weighted_f1:.4f}",
        )
    console.print(table)
    console.print(
        f"Mean accuracy: [bold]{result.mean_accuracy:.2%}[/] ± {result.std_accuracy:.2%}   "
        f"Mean macro F1: [bold]{result.mean_macro_f1:.4f}[/] ± {result.std_macro_f1:.4f}"
    )


@main.command()
@click.argument("model_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--top", "-n", type=int, default=10, help="Features to list per class.")
@_handle_errors
def inspect(model_path: Path, top: int) -> None:
    """Show statistics and the most informative features of a saved model."""
    model = NaiveBayesSentimentModel.load(model_path)
    _render_statistics(model)

    for label in ("positive", "negative", "neutral"):
        features = model.most_informative_features(label, top_n=top)
        table = Table(title=f"{_get_label_icon(label)} Most informative: {label}")
        table.add_column("Feature", style="cyan")
        table.add_column("Log ratio", justify="right")
        for feature, ratio in features:
            table.add_row(feature, f"{ratio:+.3f}")
        console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_statistics(model: NaiveBayesSentimentModel, data_stats: Optional[dict] = None) -> None:
    stats = model.get_statistics()
    counts = stats["document_counts"]
    priors = stats["class_priors"]

    lines = [
        f"Documents: {stats['total_documents']} | "
        f"Vocabulary: {stats['vocabulary_size']} | "
        f"Probability rows: {stats['probability_table_size']}",
    ]
    for label in ("positive", "negative", "neutral"):
        style = _get_label_style(label)
        lines.append(
            f"  [{style}]{label:<9}[/] {counts[label]:>6} docs  (prior {priors[label]:.1%})"
        )
    if data_stats and data_stats.get("languages"):
        langs = ", ".join(f"{k}={v}" for k, v in sorted(data_stats["languages"].items()))
        lines.append(f"Languages: {langs}")

    console.print(Panel("\n".join(lines), title="📊 Model", border_style="blue"))


def _render_predictions(texts: list[str], results: list[SentimentResult]) -> None:
    table = Table(title="Predictions", show_lines=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Text", style="white", max_width=60)
    table.add_column("Label", justify="center", width=10)
    table.add_column("Conf.", justify="center", width=6)
    table.add_column("Score", justify="right", width=7)

    for i, (text, result) in enumerate(zip(texts, results), 1):
        excerpt = text[:120].replace("\n", " ") + ("..." if len(text) > 120 else "")
        table.add_row(
            str(i),
            excerpt,
            Text(result.label.upper(), style=_get_label_style(result.label)),
            f"{result.confidence:.0%}",
            f"{result.score:+.3f}",
        )

    console.print(table)


if __name__ == "__main__":
    main()
