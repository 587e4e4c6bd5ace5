"""Trained model container and its persistence format.

A ``TrainedModel`` pairs the ``WordCounter`` used to parameterise the
training documents with the classifier trained on them. The vocabulary and
statistics of the classifier are only meaningful together with that exact
counter, so the two are always saved, loaded and used as one unit.

Models are stored as UTF-8 JSON::

    {
      "format": "doc-classification-model",
      "version": 1,
      "word_counter": {...},
      "classifier": {"kind": "naive-bayes", ...}
    }

The format tag and version are checked before the payload is read.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from .classifier import Classifier, classifier_from_dict
from .exceptions import ConfigurationError, DataError, InputIOError
from .models import Document
from .preprocessing import WordCounter

logger = structlog.get_logger(__name__)

MODEL_FORMAT = "doc-classification-model"
MODEL_VERSION = 1


@dataclass(frozen=True)
class TrainedModel:
    """A word counter and the classifier trained with it.

    Example::

        model = TrainedModel(word_counter, classifier.fit(corpus))
        model.classify_text("Fotbalisté Sparty vyhráli...")  # "sport"

        model.save("news.model")
        loaded = TrainedModel.load("news.model")
    """

    word_counter: WordCounter
    classifier: Classifier

    def __post_init__(self) -> None:
        if not self.classifier.is_trained:
            raise ConfigurationError("A trained model requires a trained classifier")

    @property
    def classes(self) -> tuple[str, ...]:
        return self.classifier.classes

    def document_from_text(self, text: str, name: Optional[str] = None) -> Document:
        """Parameterise ``text`` with the model's word counter."""
        return Document(name, self.word_counter.count_words(text))

    def classify(self, document: Document) -> str:
        return self.classifier.classify(document)

    def classify_text(self, text: str) -> str:
        return self.classify(self.document_from_text(text))

    def scores_for_text(self, text: str) -> dict[str, float]:
        return self.classifier.scores(self.document_from_text(text))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "format": MODEL_FORMAT,
            "version": MODEL_VERSION,
            "word_counter": self.word_counter.to_dict(),
            "classifier": self.classifier.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> TrainedModel:
        """Restore a model from ``to_dict`` output.

        Raises:
            DataError: If the format tag, version or payload is invalid.
            ConfigurationError: If the feature set or classifier kind is unknown.
        """
        if not isinstance(data, dict) or data.get("format") != MODEL_FORMAT:
            raise DataError("Not a document classification model")
        version = data.get("version")
        if version != MODEL_VERSION:
            raise DataError(
                f"Unsupported model version {version!r} (expected {MODEL_VERSION})"
            )
        for key in ("word_counter", "classifier"):
            if not isinstance(data.get(key), dict):
                raise DataError(f"Model payload is missing '{key}'")

        try:
            word_counter = WordCounter.from_dict(data["word_counter"])
        except (KeyError, TypeError) as exc:
            raise DataError(f"Malformed word counter payload: {exc}") from exc
        classifier = classifier_from_dict(data["classifier"])
        return cls(word_counter, classifier)

    def save(self, path: str | Path) -> Path:
        """Write the model to ``path`` as JSON and return the path."""
        path = Path(path)
        payload = json.dumps(self.to_dict(), ensure_ascii=False)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise InputIOError(path, f"cannot write model: {exc}") from exc
        logger.info("model_saved", path=str(path), classifier=self.classifier.kind.value,
                    feature_set=self.word_counter.feature_set.value)
        return path

    @classmethod
    def load(cls, path: str | Path) -> TrainedModel:
        """Load a model saved with ``save``.

        Raises:
            InputIOError: If the file cannot be read.
            DataError: If the file is not a valid model.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputIOError(path, f"cannot read model: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DataError(f"Model file is not valid JSON: {exc}", document=str(path)) from exc

        model = cls.from_dict(data)
        logger.info("model_loaded", path=str(path), classifier=model.classifier.kind.value,
                    feature_set=model.word_counter.feature_set.value)
        return model
