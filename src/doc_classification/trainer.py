"""Model creation: corpus construction, training and evaluation in one call.

``ModelTrainer`` is the main entry point for building a model from a
directory of named training documents.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from .classifier import Classifier
from .corpus import DEFAULT_CLASS_SEPARATOR, CorpusBuilder
from .evaluator import Evaluator
from .model import TrainedModel
from .models import Corpus, EvaluationReport
from .preprocessing import WordCounter
from .sources import ClassDescriptions, DocumentSource

logger = structlog.get_logger(__name__)


@dataclass
class TrainingOutcome:
    """Result of ``ModelTrainer.create_model``."""

    model: TrainedModel
    corpus: Corpus
    report: Optional[EvaluationReport] = None


class ModelTrainer:
    """Build, train and evaluate a classification model.

    Example::

        trainer = ModelTrainer(
            WordCounter.create(FeatureSet.ONLY_COUNTING),
            create_classifier("naive-bayes"),
        )
        outcome = trainer.create_model(train_paths, test_paths)
        print(f"Accuracy: {outcome.report.accuracy:.1f} %")
        outcome.model.save("news.model")

    Args:
        word_counter: Parameterisation of training and test documents.
        classifier: Classifier template. Every run trains a fresh copy, so
            models returned earlier are never retrained.
        source: Document reader (a fresh one by default).
        separator: Regex splitting document names into segments.
        descriptions: Class descriptions, used in log output only.
    """

    def __init__(
        self,
        word_counter: WordCounter,
        classifier: Classifier,
        source: Optional[DocumentSource] = None,
        separator: str = DEFAULT_CLASS_SEPARATOR,
        descriptions: Optional[ClassDescriptions] = None,
    ) -> None:
        self.word_counter = word_counter
        self.classifier = classifier
        self.source = source or DocumentSource()
        self.separator = separator
        self.descriptions = descriptions or ClassDescriptions()

    def build_corpus(self, training_paths: Iterable[str | Path]) -> Corpus:
        logger.info("corpus_loading_started")
        return CorpusBuilder.from_paths(
            training_paths,
            self.word_counter,
            source=self.source,
            separator=self.separator,
            descriptions=self.descriptions,
        )

    def create_model(
        self,
        training_paths: Iterable[str | Path],
        test_paths: Iterable[str | Path] = (),
    ) -> TrainingOutcome:
        """Build the corpus, train the classifier and evaluate on ``test_paths``.

        No report is produced when ``test_paths`` is empty.

        Raises:
            DataError: If a document name carries no class keyword or the
                corpus is empty.
            InputIOError: If a document cannot be read.
        """
        corpus = self.build_corpus(training_paths)
        classifier = copy.deepcopy(self.classifier).fit(corpus)
        model = TrainedModel(self.word_counter, classifier)

        test_paths = list(test_paths)
        report = None
        if test_paths:
            evaluator = Evaluator(model, self.source, self.separator, self.descriptions)
            report = evaluator.evaluate_paths(test_paths)

        return TrainingOutcome(model=model, corpus=corpus, report=report)

    def create_model_from_directories(
        self,
        training_dir: str | Path,
        test_dir: Optional[str | Path] = None,
    ) -> TrainingOutcome:
        """Same as ``create_model`` with every file below the given directories."""
        training_paths = self.source.list_files(training_dir)
        test_paths = self.source.list_files(test_dir) if test_dir is not None else []
        return self.create_model(training_paths, test_paths)
