"""Command-line interface for document classification.

Provides ``train``, ``classify``, ``evaluate`` and ``top-words`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    doc-classification train data/train data/test news -f stemming -c naive-bayes
    doc-classification classify news --text "Fotbalisté Sparty vyhráli derby."
    doc-classification evaluate news data/test
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .classifier import ClassifierKind, NaiveBayesClassifier, create_classifier
from .config import Settings
from .evaluator import Evaluator
from .exceptions import ClassificationError
from .logging_config import configure_logging
from .model import TrainedModel
from .models import EvaluationReport
from .preprocessing import FeatureSet, WordCounter
from .sources import ClassDescriptions, DocumentSource
from .trainer import ModelTrainer

console = Console()


def _fail(exc: Exception) -> None:
    console.print(f"[bold red]Error:[/] {escape(str(exc))}", soft_wrap=True)
    sys.exit(1)


def _descriptions(settings: Settings, source: DocumentSource) -> ClassDescriptions:
    return source.load_class_descriptions(
        settings.class_descriptions_path,
        settings.description_separator,
        optional=True,
    )


@click.group()
@click.version_option(package_name="document-classification")
@click.option("--verbose", "-v", is_flag=True, help="Log every document (DEBUG level).")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """📚 Document Classification: train and apply text classifiers.

    Training documents are named ``<id>_<class>.<ext>``; the class keyword
    is the second segment of the file name.
    """
    load_dotenv()
    settings = Settings.from_env()
    configure_logging("DEBUG" if verbose else settings.log_level, json=settings.log_json)
    ctx.obj = settings


@main.command()
@click.argument("training_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("test_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("model", type=click.Path(path_type=Path))
@click.option("--features", "-f", type=click.Choice([f.value for f in FeatureSet]),
              default=FeatureSet.ONLY_COUNTING.value, show_default=True,
              help="Parameterisation algorithm.")
@click.option("--classifier", "-c", "classifier_kind",
              type=click.Choice([k.value for k in ClassifierKind]),
              default=ClassifierKind.NAIVE_BAYES.value, show_default=True,
              help="Classification algorithm.")
@click.option("--neighbors", "-k", type=click.IntRange(min=1), default=None,
              help="Neighbour count for nearest-neighbor (default: number of classes).")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def train(
    settings: Settings,
    training_dir: Path,
    test_dir: Path,
    model: Path,
    features: str,
    classifier_kind: str,
    neighbors: Optional[int],
    output: str,
) -> None:
    """Train a model, evaluate it on TEST_DIR and save it as MODEL.

    Example: doc-classification train data/train data/test news -f stop-words
    """
    source = DocumentSource()
    model_path = settings.model_path(model)

    try:
        descriptions = _descriptions(settings, source)
        word_counter = WordCounter.create(
            features, source.load_reference_lists(settings, features)
        )
        trainer = ModelTrainer(
            word_counter,
            create_classifier(classifier_kind, neighbor_count=neighbors),
            source=source,
            separator=settings.class_separator,
            descriptions=descriptions,
        )
        with console.status("[bold blue]Training classifier...", spinner="dots"):
            outcome = trainer.create_model_from_directories(training_dir, test_dir)
        outcome.model.save(model_path)
    except ClassificationError as exc:
        _fail(exc)

    if output == "json":
        click.echo(json.dumps({
            "model": str(model_path),
            "feature_set": features,
            "classifier": classifier_kind,
            "documents": outcome.corpus.document_count,
            "classes": outcome.corpus.class_counts(),
            "words": len(outcome.corpus.vocabulary),
            "evaluation": outcome.report.to_dict() if outcome.report else None,
        }, indent=2, ensure_ascii=False))
        return

    corpus = outcome.corpus
    console.print(Panel(
        f"[bold]{escape(str(model_path))}[/]\n"
        f"Features: {features} | Classifier: {classifier_kind}\n"
        f"Documents: {corpus.document_count} | "
        f"Classes: {len(corpus.classes)} | "
        f"Words: {len(corpus.vocabulary)}",
        title="📚 Model Trained",
        border_style="blue",
    ))
    if outcome.report is not None:
        _render_report(outcome.report, descriptions)


@main.command()
@click.argument("model", type=click.Path(path_type=Path))
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=False)
@click.option("--text", "-t", default=None, help="Text to classify instead of FILE.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def classify(
    settings: Settings,
    model: Path,
    file: Optional[Path],
    text: Optional[str],
    output: str,
) -> None:
    """Classify FILE, --text, or standard input with a saved MODEL.

    Example: doc-classification classify news article.txt
    """
    source = DocumentSource()
    try:
        trained = TrainedModel.load(settings.model_path(model))
        descriptions = _descriptions(settings, source)
        if text is None:
            text = source.read(file).text if file is not None else click.get_text_stream("stdin").read()
        scores = trained.scores_for_text(text)
        label = trained.classify_text(text)
    except ClassificationError as exc:
        _fail(exc)

    if output == "json":
        click.echo(json.dumps({
            "class": label,
            "description": descriptions.describe(label),
            "scores": scores,
        }, indent=2, ensure_ascii=False))
        return

    console.print(Panel(
        f"[bold green]{descriptions.describe(label)}[/] ({label})",
        title="📄 Document Class",
        border_style="blue",
    ))


@main.command()
@click.argument("model", type=click.Path(path_type=Path))
@click.argument("test_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def evaluate(settings: Settings, model: Path, test_dir: Path, output: str) -> None:
    """Evaluate a saved MODEL on the documents in TEST_DIR.

    Example: doc-classification evaluate news data/test
    """
    source = DocumentSource()
    try:
        trained = TrainedModel.load(settings.model_path(model))
        descriptions = _descriptions(settings, source)
        evaluator = Evaluator(trained, source, settings.class_separator, descriptions)
        with console.status("[bold blue]Evaluating...", spinner="dots"):
            report = evaluator.evaluate_paths(source.list_files(test_dir))
    except ClassificationError as exc:
        _fail(exc)

    if output == "json":
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _render_report(report, descriptions)


@main.command("top-words")
@click.argument("model", type=click.Path(path_type=Path))
@click.argument("label")
@click.option("--count", "-n", type=click.IntRange(min=1), default=20, show_default=True)
@click.pass_obj
def top_words(settings: Settings, model: Path, label: str, count: int) -> None:
    """List the words most indicative of LABEL in a Naive Bayes MODEL."""
    try:
        trained = TrainedModel.load(settings.model_path(model))
    except ClassificationError as exc:
        _fail(exc)

    classifier = trained.classifier
    if not isinstance(classifier, NaiveBayesClassifier):
        _fail(ValueError(f"top-words needs a naive-bayes model, got {classifier.kind.value}"))
    try:
        words = classifier.most_informative_words(label, top_n=count)
    except ValueError as exc:
        _fail(exc)

    table = Table(title=f"Most indicative words: {label}")
    table.add_column("#", justify="right", width=4)
    table.add_column("Word", style="cyan")
    table.add_column("Score", justify="right")
    for i, (word, score) in enumerate(words, 1):
        table.add_row(str(i), word, f"{score:.4f}")
    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_report(report: EvaluationReport, descriptions: ClassDescriptions) -> None:
    """Render an EvaluationReport as a rich table plus summary."""
    table = Table(title="Test Documents", show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("Document", style="white")
    table.add_column("Predicted", style="cyan")
    table.add_column("Actual", style="cyan")
    table.add_column("Result", justify="center", width=8)

    for i, record in enumerate(report.records, 1):
        result = Text("OK", style="bold green") if record.correct else Text("FAIL", style="bold red")
        table.add_row(
            str(i),
            escape(record.name),
            descriptions.describe(record.predicted),
            descriptions.describe(record.actual),
            result,
        )
    console.print(table)

    accuracy = report.accuracy
    if accuracy >= 80:
        style = "bold green"
    elif accuracy >= 50:
        style = "bold yellow"
    else:
        style = "bold red"
    console.print(
        f"Correctly classified: {report.correct} of {report.total} documents | "
        f"Accuracy: [{style}]{accuracy:.2f} %[/]"
    )
    console.print()


if __name__ == "__main__":
    main()
