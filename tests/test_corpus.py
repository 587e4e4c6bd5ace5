"""Tests for class label derivation and corpus construction."""

from __future__ import annotations

import pytest

from doc_classification.corpus import CorpusBuilder, class_label_from_name
from doc_classification.exceptions import DataError, InputIOError
from doc_classification.models import Document


class TestClassLabelFromName:
    """Tests for reading the class keyword out of a document name."""

    @pytest.mark.parametrize("name, expected", [
        ("0042_sport.txt", "sport"),
        ("0042.sport.txt", "sport"),
        ("0042_pol_ekonomika.txt", "pol"),
        ("x_y", "y"),
    ])
    def test_second_segment(self, name, expected):
        assert class_label_from_name(name) == expected

    def test_custom_separator(self):
        assert class_label_from_name("a-b-c", "-") == "b"

    @pytest.mark.parametrize("name", ["readme", "0042__sport.txt", ""])
    def test_missing_keyword_raises(self, name):
        with pytest.raises(DataError, match="class keyword"):
            class_label_from_name(name)

    def test_error_names_document(self):
        with pytest.raises(DataError) as exc_info:
            class_label_from_name("readme")
        assert exc_info.value.document == "readme"
        assert str(exc_info.value).startswith("[readme]")


class TestCorpusBuilder:
    """Tests for accumulating and freezing training documents."""

    def test_build_from_directory(self, training_dir, counter):
        paths = sorted(training_dir.iterdir())
        corpus = CorpusBuilder.from_paths(paths, counter)
        assert corpus.classes == ("pol", "sport")
        assert corpus.class_counts() == {"pol": 3, "sport": 3}
        assert "sparty" in corpus.vocabulary
        assert list(corpus.vocabulary) == sorted(corpus.vocabulary)
        assert len(set(corpus.vocabulary)) == len(corpus.vocabulary)

    def test_vocabulary_is_union_of_document_words(self, counter):
        builder = CorpusBuilder(counter)
        builder.add_text("1_a", "pes kočka")
        builder.add_text("2_b", "ryba pes")
        corpus = builder.build()
        assert corpus.vocabulary == ("kočka", "pes", "ryba")
        assert corpus.classes == ("a", "b")

    def test_documents_keep_load_order(self, counter):
        builder = CorpusBuilder(counter)
        builder.add_text("2_a", "dva")
        builder.add_text("1_a", "jedna")
        corpus = builder.build()
        assert [d.name for d in corpus.documents["a"]] == ["2_a", "1_a"]

    def test_add_document(self, counter):
        builder = CorpusBuilder(counter)
        builder.add_document("x", Document("1_x", {"w": 1}))
        assert builder.document_count == 1
        assert builder.build().vocabulary == ("w",)

    def test_build_can_be_repeated(self, counter):
        builder = CorpusBuilder(counter)
        builder.add_text("1_a", "pes")
        first = builder.build()
        builder.add_text("2_b", "ryba")
        second = builder.build()
        assert first.classes == ("a",)
        assert second.classes == ("a", "b")

    def test_empty_corpus_raises(self, counter):
        with pytest.raises(DataError, match="empty"):
            CorpusBuilder(counter).build()

    def test_empty_vocabulary_raises(self, counter):
        builder = CorpusBuilder(counter)
        builder.add_text("1_a", "... !!!")
        with pytest.raises(DataError, match="vocabulary is empty"):
            builder.build()

    def test_bad_document_name_raises(self, make_documents, counter):
        directory = make_documents("bad", {"readme": "text"})
        with pytest.raises(DataError):
            CorpusBuilder.from_paths([directory / "readme"], counter)

    def test_missing_file_raises(self, tmp_path, counter):
        with pytest.raises(InputIOError) as exc_info:
            CorpusBuilder.from_paths([tmp_path / "1_a.txt"], counter)
        assert exc_info.value.path == tmp_path / "1_a.txt"
