"""Document classifiers: Naive Bayes, k-nearest-neighbour and a random baseline.

All classifiers share one contract:

1. ``set_lists(classes, vocabulary)`` installs the frozen, sorted class and
   vocabulary sequences produced by the corpus builder.
2. ``train(documents)`` consumes the per-class training documents and
   replaces any previously learned statistics.
3. ``classify(document)`` returns the label with the highest score. Ties go
   to the first label in sorted class order.

Classification never mutates a trained classifier, so one instance can
serve concurrent ``classify`` calls.

Every classifier serializes to a plain dict (``to_dict``) tagged with its
``ClassifierKind``; ``classifier_from_dict`` restores the right variant.
"""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Optional

import structlog

from .exceptions import ConfigurationError, DataError
from .models import Corpus, Document

logger = structlog.get_logger(__name__)


class ClassifierKind(str, Enum):
    """Supported classification algorithms."""

    NAIVE_BAYES = "naive-bayes"
    NEAREST_NEIGHBOR = "nearest-neighbor"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: str | ClassifierKind) -> ClassifierKind:
        """Parse a classifier value or name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"Unknown classifier '{value}'. Choose one of: {choices}")


def _check_sorted(what: str, values: tuple[str, ...]) -> None:
    for previous, current in zip(values, values[1:]):
        if not previous < current:
            raise ConfigurationError(
                f"{what} list must be strictly sorted; found {previous!r} before {current!r}"
            )


# ---------------------------------------------------------------------------
# Classifier contract
# ---------------------------------------------------------------------------


class Classifier(ABC):
    """Base class implementing the list handling and arg-max selection."""

    kind: ClassVar[ClassifierKind]

    def __init__(self) -> None:
        self.classes: tuple[str, ...] = ()
        self.vocabulary: tuple[str, ...] = ()
        self._word_index: dict[str, int] = {}
        self._lists_set = False
        self._trained = False

    @property
    def is_trained(self) -> bool:
        return self._trained

    def set_lists(self, classes: Iterable[str], vocabulary: Iterable[str]) -> None:
        """Install the sorted class labels and vocabulary.

        Raises:
            ConfigurationError: If either sequence is not strictly sorted.
            DataError: If there are no classes.
        """
        classes = tuple(classes)
        vocabulary = tuple(vocabulary)
        if not classes:
            raise DataError("Class list is empty")
        _check_sorted("Class", classes)
        _check_sorted("Vocabulary", vocabulary)

        self.classes = classes
        self.vocabulary = vocabulary
        self._word_index = {word: i for i, word in enumerate(vocabulary)}
        self._lists_set = True
        self._trained = False

    def train(self, documents: Mapping[str, Sequence[Document]]) -> None:
        """Learn statistics from training documents grouped by class label.

        Raises:
            ConfigurationError: If ``set_lists`` has not been called.
            DataError: If the corpus or vocabulary is empty, or documents are
                filed under labels missing from the class list.
        """
        if not self._lists_set:
            raise ConfigurationError("Class and vocabulary lists must be set before training")
        unknown = sorted(set(documents) - set(self.classes))
        if unknown:
            raise DataError(f"Documents filed under unknown classes: {', '.join(unknown)}")
        total = sum(len(documents.get(label, ())) for label in self.classes)
        if total == 0:
            raise DataError("Training corpus is empty")
        if not self.vocabulary:
            raise DataError("Training corpus vocabulary is empty")

        logger.info(
            "classifier_training_started",
            classifier=self.kind.value,
            documents=total,
            classes=len(self.classes),
            words=len(self.vocabulary),
        )
        self._trained = False
        self._train(documents)
        self._trained = True
        logger.info("classifier_training_finished", classifier=self.kind.value)

    def fit(self, corpus: Corpus) -> Classifier:
        """Install the corpus lists and train on it (for method chaining)."""
        self.set_lists(corpus.classes, corpus.vocabulary)
        self.train(corpus.documents)
        return self

    def scores(self, document: Document) -> dict[str, float]:
        """Per-class scores for ``document``; higher means more likely."""
        if not self._trained:
            raise ConfigurationError("Classifier has not been trained. Call train() first.")
        return self._scores(document)

    def classify(self, document: Document) -> str:
        """Return the class label with the highest score."""
        return self._select_best(self.scores(document))

    def _select_best(self, scores: Mapping[str, float]) -> str:
        best_label = self.classes[0]
        best_score = scores[best_label]
        for label in self.classes[1:]:
            if scores[label] > best_score:
                best_label = label
                best_score = scores[label]
        return best_label

    def _word_position(self, word: str, document: Document) -> int:
        try:
            return self._word_index[word]
        except KeyError:
            raise DataError(
                f"Word {word!r} is missing from the vocabulary", document=document.name
            ) from None

    @abstractmethod
    def _train(self, documents: Mapping[str, Sequence[Document]]) -> None: ...

    @abstractmethod
    def _scores(self, document: Document) -> dict[str, float]: ...

    # -- serialization -----------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize the trained classifier state."""
        if not self._trained:
            raise ConfigurationError("Cannot serialize an untrained classifier.")
        return {
            "kind": self.kind.value,
            "classes": list(self.classes),
            "vocabulary": list(self.vocabulary),
            **self._state_to_dict(),
        }

    @abstractmethod
    def _state_to_dict(self) -> dict: ...

    @abstractmethod
    def _state_from_dict(self, data: dict) -> None: ...


# ---------------------------------------------------------------------------
# Naive Bayes
# ---------------------------------------------------------------------------


class NaiveBayesClassifier(Classifier):
    """Multinomial Naive Bayes with add-one smoothing.

    Training stores, per class position ``c`` and vocabulary position ``w``:

    - ``class_frequencies[c]``: documents in ``c`` / all training documents
    - ``word_frequencies[c][w]``: ``(1 + count of w in c)`` divided by the
      sum of ``(1 + count)`` over the whole vocabulary

    A document is scored in log space, ``ln P(c) + sum(n * ln P(w|c))``, so
    long documents do not underflow. Words outside the vocabulary are ignored.
    """

    kind = ClassifierKind.NAIVE_BAYES

    def __init__(self) -> None:
        super().__init__()
        self.class_frequencies: list[float] = []
        self.word_frequencies: list[list[float]] = []

    def _train(self, documents: Mapping[str, Sequence[Document]]) -> None:
        total = sum(len(documents.get(label, ())) for label in self.classes)
        self.class_frequencies = [
            len(documents.get(label, ())) / total for label in self.classes
        ]
        self.word_frequencies = [
            self._relative_word_frequencies(documents.get(label, ()))
            for label in self.classes
        ]

    def _relative_word_frequencies(self, documents: Sequence[Document]) -> list[float]:
        counts = [1] * len(self.vocabulary)
        for document in documents:
            for word, count in document.word_counts.items():
                counts[self._word_position(word, document)] += count

        total = sum(counts)
        return [count / total for count in counts]

    def _scores(self, document: Document) -> dict[str, float]:
        observed = [
            (self._word_index[word], count)
            for word, count in document.word_counts.items()
            if word in self._word_index and count > 0
        ]

        scores: dict[str, float] = {}
        for position, label in enumerate(self.classes):
            prior = self.class_frequencies[position]
            # A class without training documents can never win.
            score = math.log(prior) if prior > 0 else -math.inf
            frequencies = self.word_frequencies[position]
            for index, count in observed:
                score += count * math.log(frequencies[index])
            scores[label] = score
        return scores

    def most_informative_words(self, label: str, top_n: int = 20) -> list[tuple[str, float]]:
        """Words most indicative of ``label``.

        The score of a word is its log frequency in ``label`` minus the mean
        log frequency in all other classes.

        Raises:
            ConfigurationError: If the classifier is untrained.
            ValueError: If ``label`` is not a known class.
        """
        if not self._trained:
            raise ConfigurationError("Classifier has not been trained. Call train() first.")
        if label not in self.classes:
            raise ValueError(f"Unknown class: {label}. Known: {list(self.classes)}")

        position = self.classes.index(label)
        target = self.word_frequencies[position]
        others = [f for i, f in enumerate(self.word_frequencies) if i != position]

        ratios: list[tuple[str, float]] = []
        for index, word in enumerate(self.vocabulary):
            target_lp = math.log(target[index])
            if others:
                other_lp = sum(math.log(f[index]) for f in others) / len(others)
            else:
                other_lp = 0.0
            ratios.append((word, round(target_lp - other_lp, 4)))

        ratios.sort(key=lambda item: item[1], reverse=True)
        return ratios[:top_n]

    def _state_to_dict(self) -> dict:
        return {
            "class_frequencies": self.class_frequencies,
            "word_frequencies": self.word_frequencies,
        }

    def _state_from_dict(self, data: dict) -> None:
        class_frequencies = [float(v) for v in data["class_frequencies"]]
        word_frequencies = [[float(v) for v in row] for row in data["word_frequencies"]]
        if len(class_frequencies) != len(self.classes) or len(word_frequencies) != len(self.classes):
            raise DataError("Naive Bayes statistics do not match the class list")
        if any(len(row) != len(self.vocabulary) for row in word_frequencies):
            raise DataError("Naive Bayes word statistics do not match the vocabulary")
        self.class_frequencies = class_frequencies
        self.word_frequencies = word_frequencies


# ---------------------------------------------------------------------------
# k-Nearest-Neighbour
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WeightedDocument:
    """A document with TF-IDF weights ``count * log2(N / df)`` per word.

    Words without a document frequency (unseen in training) get no weight.
    """

    label: Optional[str]
    word_counts: Mapping[str, int]
    weights: Mapping[str, float]
    norm: float

    @classmethod
    def build(
        cls,
        label: Optional[str],
        word_counts: Mapping[str, int],
        document_frequencies: Mapping[str, int],
        document_total: int,
    ) -> WeightedDocument:
        weights: dict[str, float] = {}
        for word, count in word_counts.items():
            df = document_frequencies.get(word, 0)
            if df <= 0:
                continue
            weights[word] = count * math.log2(document_total / df)
        norm = math.sqrt(sum(w * w for w in weights.values()))
        return cls(label, MappingProxyType(dict(word_counts)), MappingProxyType(weights), norm)


def cosine_similarity(a: WeightedDocument, b: WeightedDocument) -> float:
    """Cosine similarity of two weighted documents; 0.0 if either has zero norm.

    Shared words are visited in sorted order so the result is exactly
    symmetric.
    """
    if a.norm == 0 or b.norm == 0:
        return 0.0
    dot = 0.0
    for word in sorted(a.weights.keys() & b.weights.keys()):
        dot += a.weights[word] * b.weights[word]
    value = dot / (a.norm * b.norm)
    return value if math.isfinite(value) else 0.0


class NearestNeighborClassifier(Classifier):
    """k-nearest-neighbour classifier over TF-IDF weighted cosine similarity.

    The candidate is compared with every training document. Among the ``k``
    most similar ones, the similarity mass of each class divided by the
    total mass is that class's confidence. If the total mass is zero (no
    shared vocabulary), every confidence is 0.0 and the first label in
    sorted order wins.

    Args:
        neighbor_count: ``k``. Defaults to the number of classes; values
            larger than the training set are clamped to its size.
    """

    kind = ClassifierKind.NEAREST_NEIGHBOR

    def __init__(self, neighbor_count: Optional[int] = None) -> None:
        super().__init__()
        if neighbor_count is not None and neighbor_count < 1:
            raise ConfigurationError(f"Neighbor count must be at least 1, got {neighbor_count}")
        self.neighbor_count = neighbor_count
        self.training_documents: list[WeightedDocument] = []
        self.document_frequencies: dict[str, int] = {}

    @property
    def k(self) -> int:
        """Effective number of neighbours consulted."""
        k = self.neighbor_count if self.neighbor_count is not None else len(self.classes)
        return min(k, len(self.training_documents))

    def _train(self, documents: Mapping[str, Sequence[Document]]) -> None:
        labelled = [
            (label, document)
            for label in self.classes
            for document in documents.get(label, ())
        ]

        frequencies = {word: 0 for word in self.vocabulary}
        for _, document in labelled:
            for word in document.word_counts:
                if word not in frequencies:
                    self._word_position(word, document)
                frequencies[word] += 1

        self._install(frequencies, [(label, doc.word_counts) for label, doc in labelled])

    def _install(
        self,
        document_frequencies: dict[str, int],
        labelled_counts: list[tuple[str, Mapping[str, int]]],
    ) -> None:
        total = len(labelled_counts)
        self.document_frequencies = document_frequencies
        self.training_documents = [
            WeightedDocument.build(label, counts, document_frequencies, total)
            for label, counts in labelled_counts
        ]

    def weigh(self, document: Document) -> WeightedDocument:
        """Weight a candidate document with the training document frequencies."""
        return WeightedDocument.build(
            None,
            document.word_counts,
            self.document_frequencies,
            len(self.training_documents),
        )

    def nearest_neighbors(self, document: Document) -> list[tuple[str, float]]:
        """``(label, similarity)`` of all training documents, most similar first."""
        if not self._trained:
            raise ConfigurationError("Classifier has not been trained. Call train() first.")
        candidate = self.weigh(document)
        ranked = [
            (training.label, cosine_similarity(candidate, training))
            for training in self.training_documents
        ]
        ranked.sort(key=lambda item: item[1], reverse=True)
        return ranked

    def _scores(self, document: Document) -> dict[str, float]:
        top = self.nearest_neighbors(document)[: self.k]
        total = sum(value for _, value in top if math.isfinite(value))

        if total <= 0:
            return {label: 0.0 for label in self.classes}

        confidences = {label: 0.0 for label in self.classes}
        for label, value in top:
            if math.isfinite(value):
                confidences[label] += value
        return {label: mass / total for label, mass in confidences.items()}

    def _state_to_dict(self) -> dict:
        return {
            "neighbor_count": self.neighbor_count,
            "document_frequencies": dict(self.document_frequencies),
            "documents": [
                {"label": d.label, "word_counts": dict(d.word_counts)}
                for d in self.training_documents
            ],
        }

    def _state_from_dict(self, data: dict) -> None:
        neighbor_count = data.get("neighbor_count")
        if neighbor_count is not None and int(neighbor_count) < 1:
            raise DataError(f"Invalid neighbor count {neighbor_count}")
        self.neighbor_count = int(neighbor_count) if neighbor_count is not None else None

        labelled = []
        for entry in data["documents"]:
            if entry["label"] not in self.classes:
                raise DataError(f"Training document has unknown class {entry['label']!r}")
            labelled.append((entry["label"], {w: int(c) for w, c in entry["word_counts"].items()}))
        frequencies = {w: int(c) for w, c in data["document_frequencies"].items()}
        self._install(frequencies, labelled)


# ---------------------------------------------------------------------------
# Random baseline
# ---------------------------------------------------------------------------


class RandomSelectionClassifier(Classifier):
    """Baseline that picks a class uniformly at random.

    The seed is derived from the corpus content, and each document draws
    from a generator seeded with that seed and the document's word counts.
    The same corpus and document therefore always give the same label.
    """

    kind = ClassifierKind.RANDOM

    def __init__(self) -> None:
        super().__init__()
        self.seed: Optional[int] = None

    def _train(self, documents: Mapping[str, Sequence[Document]]) -> None:
        corpus = Corpus(
            classes=self.classes,
            vocabulary=self.vocabulary,
            documents={label: tuple(documents.get(label, ())) for label in self.classes},
        )
        self.seed = int(corpus.content_hash()[:16], 16)

    def _scores(self, document: Document) -> dict[str, float]:
        rng = random.Random(f"{self.seed}:{document.fingerprint()}")
        chosen = rng.choice(self.classes)
        return {label: 1.0 if label == chosen else 0.0 for label in self.classes}

    def _state_to_dict(self) -> dict:
        return {"seed": self.seed}

    def _state_from_dict(self, data: dict) -> None:
        self.seed = int(data["seed"])


# ---------------------------------------------------------------------------
# Factory and deserialization
# ---------------------------------------------------------------------------

_CLASSIFIERS: dict[ClassifierKind, type[Classifier]] = {
    ClassifierKind.NAIVE_BAYES: NaiveBayesClassifier,
    ClassifierKind.NEAREST_NEIGHBOR: NearestNeighborClassifier,
    ClassifierKind.RANDOM: RandomSelectionClassifier,
}


def create_classifier(
    kind: ClassifierKind | str,
    neighbor_count: Optional[int] = None,
) -> Classifier:
    """Create an untrained classifier of the given kind.

    ``neighbor_count`` only applies to the nearest-neighbour classifier.
    """
    kind = ClassifierKind.parse(kind)
    if kind is ClassifierKind.NEAREST_NEIGHBOR:
        return NearestNeighborClassifier(neighbor_count=neighbor_count)
    return _CLASSIFIERS[kind]()


def classifier_from_dict(data: dict) -> Classifier:
    """Restore a trained classifier serialized with ``Classifier.to_dict``.

    Raises:
        ConfigurationError: If the classifier kind is unknown.
        DataError: If the payload is malformed.
    """
    kind = ClassifierKind.parse(data.get("kind", ""))
    for key in ("classes", "vocabulary"):
        if not isinstance(data.get(key), list):
            raise DataError(f"Malformed {kind.value} classifier payload: '{key}' must be a list")
    classifier = _CLASSIFIERS[kind]()
    try:
        classifier.set_lists(data["classes"], data["vocabulary"])
        classifier._state_from_dict(data)
    except (ConfigurationError, KeyError, TypeError, ValueError) as exc:
        raise DataError(f"Malformed {kind.value} classifier payload: {exc}") from exc
    classifier._trained = True
    return classifier
