"""
Test project structure and basic interfaces.
"""

import pytest
import knn_point_classifier
from knn_point_classifier import (
    LabeledSample,
    KNNHyperparameters,
    TrainingSet,
    KNNClassifier,
    CrossValidationEvaluator,
    ClassifierError,
    InvalidInputError,
    DimensionMismatchError,
    NotTrainedError,
    InsufficientDataError,
    ConfigurationError,
    ModelPersistenceError,
    DatasetLoadingError
)


def test_public_exports():
    """Test the package exposes everything listed in __all__."""
    for name in knn_point_classifier.__all__:
        assert hasattr(knn_point_classifier, name), name
    assert knn_point_classifier.__version__ == "0.1.0"


def test_exception_hierarchy():
    """Test every library error derives from ClassifierError."""
    for error in [
        InvalidInputError,
        NotTrainedError,
        InsufficientDataError,
        ConfigurationError,
        ModelPersistenceError,
        DatasetLoadingError
    ]:
        assert issubclass(error, ClassifierError)
    assert issubclass(DimensionMismatchError, InvalidInputError)


def test_end_to_end_interfaces():
    """Test training, prediction and evaluation through the public interfaces."""
    samples = [LabeledSample.from_point(float(i), float(i % 3), "A-1" if i < 6 else "B-2") for i in range(12)]

    classifier = KNNClassifier(hyperparameters=KNNHyperparameters(k=3))
    classifier.train(TrainingSet(samples))

    assert classifier.predict_point(0.5, 0.5) == "A-1"
    assert classifier.predict_point(11.0, 1.0) == "B-2"

    outcome = CrossValidationEvaluator(classifier.hyperparameters, seed=0).evaluate(samples, 3, 10)
    assert outcome.total_samples == 12


def test_untrained_classifier():
    """Test an untrained classifier refuses to predict."""
    with pytest.raises(NotTrainedError):
        KNNClassifier().predict_point(0.0, 0.0)
