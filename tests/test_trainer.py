"""Tests for end-to-end model creation."""

from __future__ import annotations

import pytest

from doc_classification.classifier import create_classifier
from doc_classification.exceptions import DataError, InputIOError
from doc_classification.model import TrainedModel
from doc_classification.preprocessing import FeatureSet, ReferenceLists, WordCounter
from doc_classification.trainer import ModelTrainer


class TestModelTrainer:
    """Tests for building, training and evaluating in one call."""

    @pytest.mark.parametrize("kind", ["naive-bayes", "nearest-neighbor"])
    def test_create_model_from_directories(self, training_dir, test_dir, counter, kind):
        trainer = ModelTrainer(counter, create_classifier(kind))
        outcome = trainer.create_model_from_directories(training_dir, test_dir)

        assert isinstance(outcome.model, TrainedModel)
        assert outcome.corpus.classes == ("pol", "sport")
        assert outcome.corpus.document_count == 6
        assert outcome.report is not None
        assert outcome.report.total == 2
        assert outcome.report.accuracy == pytest.approx(100.0)

    def test_without_test_set_there_is_no_report(self, training_dir, counter):
        outcome = ModelTrainer(counter, create_classifier("random")).create_model_from_directories(
            training_dir
        )
        assert outcome.report is None
        assert outcome.model.classifier.is_trained

    def test_stop_words_feature_set(self, training_dir, test_dir):
        counter = WordCounter.create(FeatureSet.STOP_WORDS, ReferenceLists(stop_words=("a", "v", "o")))
        outcome = ModelTrainer(counter, create_classifier("naive-bayes")).create_model_from_directories(
            training_dir, test_dir
        )
        assert "o" not in outcome.corpus.vocabulary
        assert outcome.model.word_counter is counter

    def test_create_model_from_paths(self, training_dir, counter):
        paths = sorted(training_dir.iterdir())
        outcome = ModelTrainer(counter, create_classifier("naive-bayes")).create_model(
            paths[:4], paths[4:]
        )
        assert outcome.corpus.class_counts() == {"pol": 1, "sport": 3}
        assert outcome.report.total == 2

    def test_bad_training_name_raises(self, make_documents, counter):
        directory = make_documents("bad", {"0001_sport.txt": "gól", "notes": "poznámky"})
        with pytest.raises(DataError):
            ModelTrainer(counter, create_classifier("naive-bayes")).create_model_from_directories(
                directory
            )

    def test_missing_directory_raises(self, tmp_path, counter):
        with pytest.raises(InputIOError):
            ModelTrainer(counter, create_classifier("naive-bayes")).create_model_from_directories(
                tmp_path / "missing"
            )

    def test_reused_trainer_leaves_earlier_models_unchanged(self, make_documents, counter):
        first_dir = make_documents("first", {"1_x.txt": "kočka pes", "2_y.txt": "ryba"})
        second_dir = make_documents("second", {"1_p.txt": "vlak", "2_q.txt": "kočka auto"})
        trainer = ModelTrainer(counter, create_classifier("naive-bayes"))

        first = trainer.create_model_from_directories(first_dir).model
        before = (first.classes, first.classifier.vocabulary, first.classify_text("kočka"))
        second = trainer.create_model_from_directories(second_dir).model

        assert (first.classes, first.classifier.vocabulary, first.classify_text("kočka")) == before
        assert before == (("x", "y"), ("kočka", "pes", "ryba"), "x")
        assert second.classes == ("p", "q")
        assert second.classifier is not first.classifier
        assert not trainer.classifier.is_trained
