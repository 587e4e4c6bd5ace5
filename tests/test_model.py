"""Tests for the trained model container and its JSON persistence."""

from __future__ import annotations

import json

import pytest

from doc_classification.classifier import NaiveBayesClassifier, create_classifier
from doc_classification.corpus import CorpusBuilder
from doc_classification.exceptions import ConfigurationError, DataError, InputIOError
from doc_classification.model import MODEL_FORMAT, MODEL_VERSION, TrainedModel


@pytest.fixture
def news_corpus(training_dir, stemming_counter):
    return CorpusBuilder.from_paths(sorted(training_dir.iterdir()), stemming_counter)


@pytest.fixture
def model(news_corpus, stemming_counter) -> TrainedModel:
    return TrainedModel(stemming_counter, NaiveBayesClassifier().fit(news_corpus))


class TestTrainedModel:
    """Tests for classifying text through a model."""

    def test_requires_trained_classifier(self, counter):
        with pytest.raises(ConfigurationError, match="trained classifier"):
            TrainedModel(counter, NaiveBayesClassifier())

    def test_classes(self, model):
        assert model.classes == ("pol", "sport")

    def test_classify_text(self, model):
        assert model.classify_text("Útočník dal gól v zápasu Sparty.") == "sport"
        assert model.classify_text("Ministr a vláda předložili rozpočet.") == "pol"

    def test_document_from_text_uses_word_counter(self, model):
        document = model.document_from_text("Hokejisty a hokejisty", name="x_sport")
        assert document.name == "x_sport"
        assert dict(document.word_counts) == {"hokejist": 2}

    def test_scores_for_text(self, model):
        scores = model.scores_for_text("gól")
        assert set(scores) == {"pol", "sport"}
        assert scores["sport"] > scores["pol"]


class TestPersistence:
    """Tests for saving and loading models."""

    @pytest.mark.parametrize("kind", ["naive-bayes", "nearest-neighbor", "random"])
    def test_save_load_roundtrip(self, tmp_path, kind, news_corpus, stemming_counter):
        model = TrainedModel(stemming_counter, create_classifier(kind).fit(news_corpus))
        path = model.save(tmp_path / "models" / "news.model")
        assert path.exists()

        loaded = TrainedModel.load(path)
        assert loaded.to_dict() == json.loads(path.read_text(encoding="utf-8"))
        assert loaded.word_counter.to_dict() == stemming_counter.to_dict()
        for text in ("Gól Sparty", "Vláda a rozpočet", "", "neznámé slovo"):
            assert loaded.classify_text(text) == model.classify_text(text)

    def test_file_is_tagged_and_versioned(self, tmp_path, model):
        data = json.loads(model.save(tmp_path / "m.model").read_text(encoding="utf-8"))
        assert data["format"] == MODEL_FORMAT
        assert data["version"] == MODEL_VERSION
        assert data["classifier"]["kind"] == "naive-bayes"
        assert data["word_counter"]["feature_set"] == "stemming"

    def test_non_ascii_words_are_kept_readable(self, tmp_path, model):
        text = model.save(tmp_path / "m.model").read_text(encoding="utf-8")
        assert "gól" in text

    def test_wrong_version_raises(self, model):
        data = model.to_dict()
        data["version"] = MODEL_VERSION + 1
        with pytest.raises(DataError, match="Unsupported model version"):
            TrainedModel.from_dict(data)

    def test_wrong_format_raises(self, model):
        data = model.to_dict()
        data["format"] = "something-else"
        with pytest.raises(DataError, match="Not a document classification model"):
            TrainedModel.from_dict(data)

    def test_missing_payload_raises(self, model):
        data = model.to_dict()
        del data["classifier"]
        with pytest.raises(DataError, match="missing 'classifier'"):
            TrainedModel.from_dict(data)

    def test_malformed_word_counter_raises(self, model):
        data = model.to_dict()
        del data["word_counter"]["feature_set"]
        with pytest.raises(DataError, match="word counter"):
            TrainedModel.from_dict(data)

    def test_load_missing_file_raises(self, tmp_path):
        with pytest.raises(InputIOError, match="cannot read model"):
            TrainedModel.load(tmp_path / "missing.model")

    def test_load_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.model"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataError, match="not valid JSON"):
            TrainedModel.load(path)
