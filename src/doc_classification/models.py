"""Data models for documents, corpora and evaluation results."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional


@dataclass(frozen=True)
class Document:
    """A parameterised document: an optional name and its word counts.

    ``total_word_count`` is derived from ``word_counts`` on construction;
    use ``with_word_counts`` to obtain a document with different counts.
    Manually entered text has no name.
    """

    name: Optional[str]
    word_counts: Mapping[str, int] = field(default_factory=dict)
    total_word_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        counts = MappingProxyType(dict(self.word_counts or {}))
        object.__setattr__(self, "word_counts", counts)
        object.__setattr__(self, "total_word_count", sum(counts.values()))

    def with_word_counts(self, word_counts: Mapping[str, int]) -> Document:
        return Document(self.name, word_counts)

    def fingerprint(self) -> str:
        """Stable digest of the word counts (independent of insertion order)."""
        payload = json.dumps(sorted(self.word_counts.items()), ensure_ascii=False)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def __repr__(self) -> str:
        return (
            f"Document(name={self.name!r}, words={len(self.word_counts)}, "
            f"total={self.total_word_count})"
        )


@dataclass(frozen=True)
class Corpus:
    """A frozen training corpus.

    Attributes:
        classes: Sorted class labels.
        vocabulary: Sorted distinct words of all training documents.
        documents: Training documents per class label, in load order.
    """

    classes: tuple[str, ...]
    vocabulary: tuple[str, ...]
    documents: Mapping[str, tuple[Document, ...]]

    def __post_init__(self) -> None:
        frozen = {label: tuple(docs) for label, docs in self.documents.items()}
        object.__setattr__(self, "documents", MappingProxyType(frozen))

    @property
    def document_count(self) -> int:
        return sum(len(docs) for docs in self.documents.values())

    def class_counts(self) -> dict[str, int]:
        return {label: len(self.documents.get(label, ())) for label in self.classes}

    def iter_documents(self) -> Iterator[tuple[str, Document]]:
        """Yield ``(label, document)`` pairs in sorted class order."""
        for label in self.classes:
            for document in self.documents.get(label, ()):
                yield label, document

    def content_hash(self) -> str:
        """SHA-256 digest of the labels and word counts of every document."""
        payload = json.dumps(
            [
                [label, [sorted(doc.word_counts.items()) for doc in self.documents.get(label, ())]]
                for label in self.classes
            ],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EvaluationRecord:
    """Outcome of classifying a single test document."""

    name: str
    predicted: str
    actual: str

    @property
    def correct(self) -> bool:
        return self.predicted == self.actual

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "predicted": self.predicted,
            "actual": self.actual,
            "correct": self.correct,
        }


@dataclass
class EvaluationReport:
    """Accuracy report over a test set.

    Attributes:
        records: Per-document results in evaluation order.
    """

    records: list[EvaluationRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def correct(self) -> int:
        return sum(1 for r in self.records if r.correct)

    @property
    def accuracy(self) -> float:
        """Percentage of correctly classified documents (0.0 for an empty report)."""
        if not self.records:
            return 0.0
        return self.correct / self.total * 100

    def per_class(self) -> dict[str, dict[str, float]]:
        """Precision, recall, F1 and support for every label seen in the report."""
        labels = sorted({r.actual for r in self.records} | {r.predicted for r in self.records})
        metrics: dict[str, dict[str, float]] = {}
        for label in labels:
            tp = sum(1 for r in self.records if r.predicted == label and r.actual == label)
            fp = sum(1 for r in self.records if r.predicted == label and r.actual != label)
            fn = sum(1 for r in self.records if r.predicted != label and r.actual == label)

            precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
            recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
            f1 = (
                2 * precision * recall / (precision + recall)
                if (precision + recall) > 0
                else 0.0
            )
            metrics[label] = {
                "precision": precision,
                "recall": recall,
                "f1": f1,
                "support": tp + fn,
            }
        return metrics

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "correct": self.correct,
            "accuracy": round(self.accuracy, 4),
            "per_class": {
                label: {k: round(v, 4) for k, v in m.items()}
                for label, m in self.per_class().items()
            },
            "records": [r.to_dict() for r in self.records],
        }
