"""Command-line interface for the Naive Bayes text classifier.

Provides ``train``, ``classify``, ``inspect`` and ``evaluate`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Training and evaluation data are JSON Lines files with one
``{"text": ..., "category": ...}`` object per line.

Usage::

    bayes-classifier train reviews.jsonl -m model.json
    bayes-classifier classify model.json "awesome, cool, amazing!! Yay." --scores
    bayes-classifier inspect model.json --top 10
    bayes-classifier evaluate model.json holdout.jsonl
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .classifier import NaiveBayes
from .errors import BayesClassifierError
from .evaluation import evaluate as evaluate_classifier
from .tokenizer import available_tokenizers

console = Console()
error_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def _fail(message: object) -> None:
    error_console.print(f"[bold red]Error:[/] {escape(str(message))}", soft_wrap=True)
    sys.exit(1)


def _read_records(path: Path) -> tuple[list[str], list[str]]:
    """Load ``(texts, categories)`` from a JSON Lines file.

    Raises:
        ValueError: If a non-blank line is not an object with string
            ``text`` and ``category`` fields.
    """
    texts: list[str] = []
    categories: list[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except ValueError as exc:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({exc})") from exc
            if (
                not isinstance(record, dict)
                or not isinstance(record.get("text"), str)
                or not isinstance(record.get("category"), str)
            ):
                raise ValueError(
                    f"{path}:{lineno}: expected an object with string `text` and `category`"
                )
            texts.append(record["text"])
            categories.append(record["category"])
    return texts, categories


@click.group()
@click.version_option(package_name="bayes-classifier")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Naive Bayes text classifier.

    Learn categories from labeled text, then categorize new documents.
    """
    _configure_logging(verbose)


@main.command()
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--model", "-m", "model_path", required=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help="Model file to write. Training continues from it if it exists.")
@click.option("--tokenizer", "-t", type=click.Choice(available_tokenizers()), default=None,
              help="Tokenizer for a new model (ignored when resuming).")
def train(data: Path, model_path: Path, tokenizer: str | None) -> None:
    """Learn every labeled document in DATA and save the model.

    Example: bayes-classifier train reviews.jsonl -m model.json
    """
    try:
        texts, categories = _read_records(data)
        if model_path.exists():
            classifier = NaiveBayes.load(model_path)
        else:
            classifier = NaiveBayes({"tokenizer": tokenizer} if tokenizer else None)
        for text, category in zip(texts, categories):
            classifier.learn(text, category)
        classifier.save(model_path)
    except (OSError, ValueError, BayesClassifierError) as e:
        _fail(e)

    console.print(
        f"Learned [bold]{len(texts)}[/] documents; model now has "
        f"{classifier.total_documents} documents in {len(classifier.categories)} "
        f"categories. Saved to [cyan]{model_path}[/]"
    )


@main.command()
@click.argument("model_path", metavar="MODEL",
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("text")
@click.option("--scores", "-s", is_flag=True, help="Show the score of every category.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(model_path: Path, text: str, scores: bool, output: str) -> None:
    """Print the most likely category of TEXT.

    Example: bayes-classifier classify model.json "awesome, cool, amazing!!"
    """
    try:
        classifier = NaiveBayes.load(model_path)
    except (OSError, BayesClassifierError) as e:
        _fail(e)

    category = classifier.categorize(text)
    results = classifier.probabilities(text) if scores else []

    if output == "json":
        payload: dict = {"category": category}
        if scores:
            payload["scores"] = [r.to_dict() for r in results]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if category is None:
        console.print("[yellow]The model has not learned any categories yet.[/]")
        return

    console.print(f"Category: [bold green]{escape(category)}[/]")
    if scores:
        table = Table(title="Log-domain scores", show_lines=False)
        table.add_column("Category", style="cyan")
        table.add_column("Score", justify="right")
        for result in results:
            style = "bold" if result.category == category else None
            table.add_row(escape(result.category), f"{result.value:.4f}", style=style)
        console.print(table)


@main.command()
@click.argument("model_path", metavar="MODEL",
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--top", "-n", type=int, default=0,
              help="Also list the N most informative tokens per category.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def inspect(model_path: Path, top: int, output: str) -> None:
    """Summarize what a saved model has learned.

    Example: bayes-classifier inspect model.json --top 10
    """
    try:
        classifier = NaiveBayes.load(model_path)
    except (OSError, BayesClassifierError) as e:
        _fail(e)

    informative = {
        category: classifier.most_informative_tokens(category, top_n=top)
        for category in classifier.categories
    } if top > 0 else {}

    if output == "json":
        click.echo(json.dumps({
            "options": classifier.options,
            "total_documents": classifier.total_documents,
            "vocabulary_size": classifier.vocabulary_size,
            "categories": {
                category: {
                    "documents": classifier.doc_count[category],
                    "tokens": classifier.word_count[category],
                    "distinct_tokens": len(classifier.word_frequency_count[category]),
                }
                for category in classifier.categories
            },
            "most_informative_tokens": informative,
        }, indent=2, ensure_ascii=False))
        return

    console.print(Panel(
        f"Documents: {classifier.total_documents} | "
        f"Categories: {len(classifier.categories)} | "
        f"Vocabulary: {classifier.vocabulary_size}",
        title=str(model_path.name),
        border_style="blue",
    ))

    table = Table(title="Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Documents", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Distinct", justify="right")
    for category in classifier.categories:
        table.add_row(
            escape(category),
            str(classifier.doc_count[category]),
            str(classifier.word_count[category]),
            str(len(classifier.word_frequency_count[category])),
        )
    console.print(table)

    for category, tokens in informative.items():
        joined = ", ".join(token for token, _ in tokens)
        console.print(f"[bold]{escape(category)}[/]: {escape(joined)}")


@main.command()
@click.argument("model_path", metavar="MODEL",
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def evaluate(model_path: Path, data: Path, output: str) -> None:
    """Measure accuracy of MODEL on the labeled documents in DATA.

    Example: bayes-classifier evaluate model.json holdout.jsonl
    """
    try:
        classifier = NaiveBayes.load(model_path)
        texts, labels = _read_records(data)
        metrics = evaluate_classifier(classifier, texts, labels)
    except (OSError, ValueError, BayesClassifierError) as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(metrics.to_dict(), indent=2, ensure_ascii=False))
        return

    table = Table(title=f"Accuracy {metrics.accuracy:.2%} | Macro F1 {metrics.macro_f1:.4f}")
    table.add_column("Category", style="cyan")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F1", justify="right")
    table.add_column("Support", justify="right")
    for category, scores in metrics.per_category.items():
        table.add_row(
            escape(category),
            f"{scores['precision']:.4f}",
            f"{scores['recall']:.4f}",
            f"{scores['f1']:.4f}",
            str(metrics.support.get(category, 0)),
        )
    console.print(table)


if __name__ == "__main__":
    main()
