"""Shared test fixtures for document-classification tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import structlog

from doc_classification.models import Corpus, Document
from doc_classification.preprocessing import FeatureSet, ReferenceLists, WordCounter

# ---------------------------------------------------------------------------
# Synthetic news snippets; the file name carries the class keyword
# ---------------------------------------------------------------------------

TRAINING_TEXTS = {
    "0001_sport.txt": "Fotbalisté Sparty vyhráli derby. Gól dal útočník v poslední minutě zápasu.",
    "0002_sport.txt": "Hokejisté porazili Finsko. Brankář chytil nájezd a trenér chválil tým.",
    "0003_sport.txt": "Tenistka vyhrála turnaj. Finálový zápas trval tři sety.",
    "0004_pol.txt": "Vláda schválila rozpočet. Poslanci budou o zákonu hlasovat ve sněmovně.",
    "0005_pol.txt": "Premiér jednal s prezidentem o vládě. Opozice kritizuje ministra.",
    "0006_pol.txt": "Sněmovna projedná zákon o volbách. Ministr hájí rozpočet vlády.",
}

TEST_TEXTS = {
    "0101_sport.txt": "Útočník Sparty dal gól v zápasu.",
    "0102_pol.txt": "Ministr vlády předložil rozpočet sněmovně.",
}


def write_documents(directory: Path, texts: dict[str, str]) -> Path:
    """Write ``{file name: text}`` into ``directory`` and return it."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in texts.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def training_dir(tmp_path: Path) -> Path:
    return write_documents(tmp_path / "train", TRAINING_TEXTS)


@pytest.fixture
def test_dir(tmp_path: Path) -> Path:
    return write_documents(tmp_path / "test", TEST_TEXTS)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Reference lists in the layout expected by ``Settings``."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "stop_words.csv").write_text("a\nv\nve\no\ns\n", encoding="utf-8")
    (directory / "word_prefixes.csv").write_text("pře\npro\n", encoding="utf-8")
    (directory / "word_suffixes.csv").write_text("ník\nost\n", encoding="utf-8")
    (directory / "word_endings.csv").write_text("a\ny\nu\n", encoding="utf-8")
    (directory / "document_classes.csv").write_text("sport:Sport\npol:Politika\n", encoding="utf-8")
    return directory


@pytest.fixture
def counter() -> WordCounter:
    return WordCounter.create(FeatureSet.ONLY_COUNTING)


@pytest.fixture
def stemming_counter() -> WordCounter:
    return WordCounter.create(
        FeatureSet.STEMMING,
        ReferenceLists(
            stop_words=("a", "v"),
            prefixes=("pře",),
            suffixes=("ník",),
            endings=("a", "y"),
        ),
    )


@pytest.fixture
def animal_corpus() -> Corpus:
    """Two ``A`` documents about cats and dogs, one ``B`` document about fish."""
    return Corpus(
        classes=("A", "B"),
        vocabulary=("cat", "dog", "fish"),
        documents={
            "A": (
                Document("1_A", {"cat": 2, "dog": 1}),
                Document("2_A", {"cat": 1}),
            ),
            "B": (Document("3_B", {"fish": 3}),),
        },
    )


@pytest.fixture
def single_class_corpus() -> Corpus:
    return Corpus(
        classes=("only",),
        vocabulary=("alpha", "beta"),
        documents={
            "only": (
                Document("1_only", {"alpha": 2}),
                Document("2_only", {"beta": 1}),
            ),
        },
    )


@pytest.fixture
def make_documents(tmp_path: Path):
    """Factory writing ``{file name: text}`` into a named directory under tmp_path."""

    def _make(dirname: str, texts: dict[str, str]) -> Path:
        return write_documents(tmp_path / dirname, texts)

    return _make


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo logging configuration done by the CLI or logging tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
