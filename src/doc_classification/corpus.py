"""Training corpus construction.

Each training document is parameterised with a ``WordCounter`` and filed
under the class keyword taken from its name: the name is split on the class
separator and the second segment is the label (``0042_sport.txt`` ->
``sport``). The vocabulary is the union of all document words. Once every
document is added, ``build`` freezes classes and vocabulary into sorted
tuples.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import structlog

from .exceptions import DataError
from .models import Corpus, Document
from .preprocessing import WordCounter
from .sources import ClassDescriptions, DocumentSource

logger = structlog.get_logger(__name__)

DEFAULT_CLASS_SEPARATOR = r"[_.]"


def class_label_from_name(name: str, separator: str | re.Pattern = DEFAULT_CLASS_SEPARATOR) -> str:
    """Return the class keyword encoded in a document name.

    Raises:
        DataError: If the name has no second segment, or it is empty.
    """
    pattern = re.compile(separator) if isinstance(separator, str) else separator
    parts = pattern.split(name)
    if len(parts) < 2 or not parts[1]:
        raise DataError(
            f"Document name does not carry a class keyword after separator "
            f"'{pattern.pattern}'",
            document=name,
        )
    return parts[1]


class CorpusBuilder:
    """Accumulate training documents into a ``Corpus``.

    The builder owns its in-progress state exclusively; ``build`` returns an
    immutable corpus and leaves the builder untouched, so it can be called
    again after more documents are added.

    Args:
        word_counter: Parameterisation used for every document.
        source: Document reader.
        separator: Regex splitting document names into segments.
        descriptions: Class descriptions, used in log output only.
    """

    def __init__(
        self,
        word_counter: WordCounter,
        source: Optional[DocumentSource] = None,
        separator: str = DEFAULT_CLASS_SEPARATOR,
        descriptions: Optional[ClassDescriptions] = None,
    ) -> None:
        self.word_counter = word_counter
        self.source = source or DocumentSource()
        self.separator = re.compile(separator)
        self.descriptions = descriptions or ClassDescriptions()
        self._classes: set[str] = set()
        self._vocabulary: set[str] = set()
        self._documents: dict[str, list[Document]] = {}

    @property
    def document_count(self) -> int:
        return sum(len(docs) for docs in self._documents.values())

    def add_path(self, path: str | Path) -> Document:
        """Load, parameterise and file the document at ``path``."""
        loaded = self.source.read(path)
        return self.add_text(loaded.name, loaded.text)

    def add_text(self, name: str, text: str) -> Document:
        """Parameterise ``text`` and file it under the class derived from ``name``."""
        label = class_label_from_name(name, self.separator)
        document = Document(name, self.word_counter.count_words(text))
        self.add_document(label, document)
        return document

    def add_document(self, label: str, document: Document) -> None:
        """File an already parameterised document under ``label``."""
        self._classes.add(label)
        self._vocabulary.update(document.word_counts)
        self._documents.setdefault(label, []).append(document)
        logger.debug("document_loaded", document=document.name, label=label,
                     words=len(document.word_counts))

    def add_paths(self, paths: Iterable[str | Path]) -> None:
        for path in paths:
            self.add_path(path)

    def build(self) -> Corpus:
        """Freeze the accumulated documents into a ``Corpus``.

        Raises:
            DataError: If no document was added or the vocabulary is empty.
        """
        if not self._documents:
            raise DataError("Training corpus is empty")
        if not self._vocabulary:
            raise DataError("Training corpus vocabulary is empty")

        corpus = Corpus(
            classes=tuple(sorted(self._classes)),
            vocabulary=tuple(sorted(self._vocabulary)),
            documents={label: tuple(docs) for label, docs in self._documents.items()},
        )

        for label, count in corpus.class_counts().items():
            logger.info("class_documents", label=label,
                        description=self.descriptions.describe(label), documents=count)
        logger.info(
            "corpus_built",
            documents=corpus.document_count,
            classes=len(corpus.classes),
            words=len(corpus.vocabulary),
        )
        return corpus

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str | Path],
        word_counter: WordCounter,
        source: Optional[DocumentSource] = None,
        separator: str = DEFAULT_CLASS_SEPARATOR,
        descriptions: Optional[ClassDescriptions] = None,
    ) -> Corpus:
        """Build a corpus from document paths in one call."""
        builder = cls(word_counter, source, separator, descriptions)
        builder.add_paths(paths)
        return builder.build()
