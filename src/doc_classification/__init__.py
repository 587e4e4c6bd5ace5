"""Document Classification -- train and apply word-count based text classifiers."""

__version__ = "0.1.0"

from .classifier import (
    Classifier,
    ClassifierKind,
    NaiveBayesClassifier,
    NearestNeighborClassifier,
    RandomSelectionClassifier,
    classifier_from_dict,
    cosine_similarity,
    create_classifier,
)
from .config import Settings
from .corpus import CorpusBuilder, class_label_from_name
from .evaluator import Evaluator
from .exceptions import ClassificationError, ConfigurationError, DataError, InputIOError
from .model import TrainedModel
from .models import Corpus, Document, EvaluationRecord, EvaluationReport
from .preprocessing import (
    FeatureSet,
    ReferenceLists,
    Stemmer,
    StopWordFilter,
    WordCounter,
    WordExtractor,
)
from .sources import ClassDescriptions, DocumentSource
from .trainer import ModelTrainer, TrainingOutcome

__all__ = [
    # Data
    "Document",
    "Corpus",
    "EvaluationRecord",
    "EvaluationReport",
    # Parameterisation
    "WordExtractor",
    "StopWordFilter",
    "Stemmer",
    "FeatureSet",
    "ReferenceLists",
    "WordCounter",
    # Corpus and I/O
    "CorpusBuilder",
    "class_label_from_name",
    "DocumentSource",
    "ClassDescriptions",
    "Settings",
    # Classification
    "Classifier",
    "ClassifierKind",
    "NaiveBayesClassifier",
    "NearestNeighborClassifier",
    "RandomSelectionClassifier",
    "cosine_similarity",
    "create_classifier",
    "classifier_from_dict",
    # Models and evaluation
    "TrainedModel",
    "ModelTrainer",
    "TrainingOutcome",
    "Evaluator",
    # Errors
    "ClassificationError",
    "DataError",
    "ConfigurationError",
    "InputIOError",
]
