"""Tests for held-out evaluation of trained models."""

from __future__ import annotations

import pytest

from doc_classification.classifier import NaiveBayesClassifier
from doc_classification.corpus import CorpusBuilder
from doc_classification.evaluator import Evaluator
from doc_classification.exceptions import DataError
from doc_classification.model import TrainedModel
from doc_classification.models import Corpus, Document


@pytest.fixture
def animal_model(animal_corpus, counter) -> TrainedModel:
    return TrainedModel(counter, NaiveBayesClassifier().fit(animal_corpus))


class TestEvaluator:
    """Tests for scoring test documents against the class in their names."""

    def test_seven_of_ten_correct(self, animal_model):
        # Every "cat" document is predicted A, every "fish" document B.
        documents = (
            [Document(f"{i}_A", {"cat": 1}) for i in range(5)]
            + [Document(f"{i}_B", {"fish": 1}) for i in range(5, 7)]
            + [Document(f"{i}_B", {"cat": 2}) for i in range(7, 10)]
        )
        report = Evaluator(animal_model).evaluate_documents(documents)
        assert report.total == 10
        assert report.correct == 7
        assert report.accuracy == pytest.approx(70.0)

    def test_records_keep_document_order(self, animal_model):
        documents = [Document("2_B", {"fish": 1}), Document("1_A", {"cat": 1})]
        report = Evaluator(animal_model).evaluate_documents(documents)
        assert [r.name for r in report.records] == ["2_B", "1_A"]
        assert [r.actual for r in report.records] == ["B", "A"]
        assert all(r.correct for r in report.records)

    def test_unknown_test_class_counts_as_miss(self, animal_model):
        report = Evaluator(animal_model).evaluate_documents([Document("1_C", {"cat": 1})])
        assert report.records[0].actual == "C"
        assert report.correct == 0

    def test_unnamed_document_raises(self, animal_model):
        with pytest.raises(DataError):
            Evaluator(animal_model).evaluate_documents([Document(None, {"cat": 1})])

    def test_empty_test_set(self, animal_model):
        report = Evaluator(animal_model).evaluate_documents([])
        assert report.total == 0
        assert report.accuracy == 0.0

    def test_evaluate_paths(self, training_dir, test_dir, counter):
        corpus = CorpusBuilder.from_paths(sorted(training_dir.iterdir()), counter)
        model = TrainedModel(counter, NaiveBayesClassifier().fit(corpus))
        report = Evaluator(model).evaluate_paths(sorted(test_dir.iterdir()))
        assert [r.name for r in report.records] == ["0101_sport.txt", "0102_pol.txt"]
        assert report.accuracy == pytest.approx(100.0)

    def test_does_not_modify_model(self, animal_model, animal_corpus):
        before = animal_model.to_dict()
        Evaluator(animal_model).evaluate_documents([Document("1_B", {"cat": 3})])
        assert animal_model.to_dict() == before

    def test_custom_separator(self, counter):
        corpus = Corpus(
            classes=("x",), vocabulary=("w",), documents={"x": (Document("1-x", {"w": 1}),)}
        )
        model = TrainedModel(counter, NaiveBayesClassifier().fit(corpus))
        report = Evaluator(model, separator="-").evaluate_documents([Document("2-x", {"w": 1})])
        assert report.accuracy == pytest.approx(100.0)
