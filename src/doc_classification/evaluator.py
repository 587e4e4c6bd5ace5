"""Held-out evaluation of a trained model."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import structlog

from .corpus import DEFAULT_CLASS_SEPARATOR, class_label_from_name
from .model import TrainedModel
from .models import Document, EvaluationRecord, EvaluationReport
from .sources import ClassDescriptions, DocumentSource

logger = structlog.get_logger(__name__)


class Evaluator:
    """Classify test documents and compare against the class in their names.

    The true class of a test document is derived exactly as during corpus
    construction. The model is only read, never modified.

    Args:
        model: The trained model to evaluate.
        source: Document reader.
        separator: Regex splitting document names into segments.
        descriptions: Class descriptions, used in log output only.
    """

    def __init__(
        self,
        model: TrainedModel,
        source: Optional[DocumentSource] = None,
        separator: str = DEFAULT_CLASS_SEPARATOR,
        descriptions: Optional[ClassDescriptions] = None,
    ) -> None:
        self.model = model
        self.source = source or DocumentSource()
        self.separator = re.compile(separator)
        self.descriptions = descriptions or ClassDescriptions()

    def evaluate_paths(self, paths: Iterable[str | Path]) -> EvaluationReport:
        """Load, classify and score every test document at ``paths``."""
        documents = []
        for path in paths:
            loaded = self.source.read(path)
            documents.append(self.model.document_from_text(loaded.text, name=loaded.name))
        return self.evaluate_documents(documents)

    def evaluate_documents(self, documents: Iterable[Document]) -> EvaluationReport:
        """Classify already parameterised, named test documents."""
        report = EvaluationReport()
        for document in documents:
            actual = class_label_from_name(document.name or "", self.separator)
            predicted = self.model.classify(document)
            record = EvaluationRecord(name=document.name or "", predicted=predicted, actual=actual)
            report.records.append(record)
            logger.info(
                "document_evaluated",
                document=record.name,
                predicted=self.descriptions.describe(predicted),
                actual=self.descriptions.describe(actual),
                result="OK" if record.correct else "FAIL",
            )

        logger.info(
            "evaluation_finished",
            correct=report.correct,
            total=report.total,
            accuracy=round(report.accuracy, 2),
        )
        return report
