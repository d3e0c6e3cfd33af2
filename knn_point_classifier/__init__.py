"""
K-nearest-neighbor classification of coordinates with cross-validation.
"""

from .models import (
    LabeledSample,
    NeighborCandidate,
    KNNHyperparameters,
    TrainingSet,
    LabelMetrics,
    EvaluationOutcome
)
from .neighbor_search import NearestNeighborSearch, euclidean_distance
from .class_weights import ClassWeightTable
from .voting import Voter, MajorityVoter, WeightedDistanceVoter, create_voter
from .knn_classifier import KNNClassifier
from .cross_validation import CrossValidationEvaluator, FoldPlan
from .metrics import ConfusionMatrix
from .model_store import save_classifier, load_classifier
from .dataset_loader import ExcelPointLoader, DatasetLoadingError
from .exceptions import (
    ClassifierError,
    InvalidInputError,
    DimensionMismatchError,
    NotTrainedError,
    InsufficientDataError,
    ConfigurationError,
    ModelPersistenceError
)

__version__ = "0.1.0"
__all__ = [
    "LabeledSample",
    "NeighborCandidate",
    "KNNHyperparameters",
    "TrainingSet",
    "LabelMetrics",
    "EvaluationOutcome",
    "NearestNeighborSearch",
    "euclidean_distance",
    "ClassWeightTable",
    "Voter",
    "MajorityVoter",
    "WeightedDistanceVoter",
    "create_voter",
    "KNNClassifier",
    "CrossValidationEvaluator",
    "FoldPlan",
    "ConfusionMatrix",
    "save_classifier",
    "load_classifier",
    "ExcelPointLoader",
    "DatasetLoadingError",
    "ClassifierError",
    "InvalidInputError",
    "DimensionMismatchError",
    "NotTrainedError",
    "InsufficientDataError",
    "ConfigurationError",
    "ModelPersistenceError"
]
