"""
Tests for the core data models.
"""

import pytest
import numpy as np

from knn_point_classifier.models.data_models import (
    LabeledSample,
    KNNHyperparameters,
    TrainingSet,
    EvaluationOutcome,
    LabelMetrics,
    to_feature_vector
)
from knn_point_classifier.exceptions import InvalidInputError, DimensionMismatchError


class TestLabeledSample:
    """Test cases for LabeledSample."""

    def test_features_are_converted_to_float_tuple(self):
        """Test that list and numpy features become tuples of floats."""
        sample = LabeledSample(features=[1, 2], label="A-1")
        assert sample.features == (1.0, 2.0)
        assert isinstance(sample.features, tuple)

        from_numpy = LabeledSample(features=np.array([1.5, 2.5]), label="A-1")
        assert from_numpy.features == (1.5, 2.5)

    def test_sample_is_immutable(self):
        """Test that samples cannot be modified after creation."""
        sample = LabeledSample(features=(0.0, 0.0), label="A")
        with pytest.raises(AttributeError):
            sample.label = "B"

    def test_validation(self):
        """Test that invalid samples are rejected."""
        with pytest.raises(ValueError, match="Sample label cannot be empty"):
            LabeledSample(features=(0.0, 0.0), label="  ")

        with pytest.raises(ValueError, match="Feature vector cannot be empty"):
            LabeledSample(features=(), label="A")

        with pytest.raises(ValueError, match="finite"):
            LabeledSample(features=(float("nan"), 1.0), label="A")

        with pytest.raises(ValueError, match="only numbers"):
            LabeledSample(features=("x", 1.0), label="A")

    def test_from_point(self):
        """Test creating a sample from a 2-D coordinate."""
        sample = LabeledSample.from_point(22.3, 114.1, "KLN-01")
        assert sample.features == (22.3, 114.1)
        assert sample.dimension == 2

    def test_to_feature_vector(self):
        """Test the feature vector helper."""
        assert to_feature_vector([3, 4]) == (3.0, 4.0)


class TestKNNHyperparameters:
    """Test cases for KNNHyperparameters."""

    def test_defaults(self):
        """Test default hyperparameter values."""
        params = KNNHyperparameters()
        assert params.k == 10
        assert params.epsilon == 1e-5
        assert params.distance_weight_factor == 2.0
        assert params.use_class_weights is True
        assert params.max_class_weight == 50.0
        assert params.voting == "majority"

    def test_validation(self):
        """Test invalid hyperparameters raise ValueError."""
        with pytest.raises(ValueError, match="k must be a positive integer"):
            KNNHyperparameters(k=0)

        with pytest.raises(ValueError, match="epsilon must be a positive number"):
            KNNHyperparameters(epsilon=0)

        with pytest.raises(ValueError, match="max_class_weight must be a positive number"):
            KNNHyperparameters(max_class_weight=-1)

        with pytest.raises(ValueError, match="voting must be one of"):
            KNNHyperparameters(voting="plurality")

    def test_with_changes_returns_new_instance(self):
        """Test that with_changes builds a copy and leaves the original untouched."""
        params = KNNHyperparameters(k=3)
        changed = params.with_changes(k=7, voting="weighted_distance")

        assert params.k == 3
        assert params.voting == "majority"
        assert changed.k == 7
        assert changed.voting == "weighted_distance"
        assert changed is not params

    def test_with_changes_validates(self):
        """Test that with_changes validates the new values."""
        with pytest.raises(ValueError):
            KNNHyperparameters().with_changes(k=-2)


class TestTrainingSet:
    """Test cases for TrainingSet."""

    def setup_method(self):
        """Set up test fixtures."""
        self.samples = [
            LabeledSample((0.0, 0.0), "B"),
            LabeledSample((1.0, 1.0), "A"),
            LabeledSample((2.0, 2.0), "B"),
        ]

    def test_basic_properties(self):
        """Test size, dimension, labels and counts."""
        training_set = TrainingSet(self.samples)

        assert len(training_set) == 3
        assert training_set.dimension == 2
        assert training_set.labels == ["A", "B"]
        assert training_set.label_counts == {"A": 1, "B": 2}
        assert list(training_set) == self.samples

    def test_accepts_feature_label_pairs(self):
        """Test building from (features, label) pairs."""
        training_set = TrainingSet([((0, 0), "A"), ([1, 1], "B")])
        assert training_set[1] == LabeledSample((1.0, 1.0), "B")

    def test_label_index_is_derived_and_copied(self):
        """Test that the label index follows training order and returns copies."""
        training_set = TrainingSet(self.samples)

        index = training_set.label_index()
        assert index["B"] == [self.samples[0], self.samples[2]]

        index["B"].clear()
        index["C"] = []
        assert training_set.samples_for("B") == [self.samples[0], self.samples[2]]
        assert "C" not in training_set.labels

    def test_samples_for_unknown_label(self):
        """Test that an unknown label yields an empty list."""
        assert TrainingSet(self.samples).samples_for("Z") == []

    def test_empty_training_set(self):
        """Test that empty data is rejected."""
        with pytest.raises(InvalidInputError, match="Training data cannot be empty"):
            TrainingSet([])

        with pytest.raises(InvalidInputError, match="Training data cannot be empty"):
            TrainingSet(None)

    def test_mixed_dimensions(self):
        """Test that mixed dimensionality is rejected."""
        with pytest.raises(DimensionMismatchError, match="Inconsistent feature dimensions"):
            TrainingSet([((0.0, 0.0), "A"), ((1.0, 1.0, 1.0), "B")])

    def test_invalid_items(self):
        """Test that malformed items raise InvalidInputError."""
        with pytest.raises(InvalidInputError, match="Invalid training sample"):
            TrainingSet([((0.0, 0.0), "")])


class TestEvaluationOutcome:
    """Test cases for EvaluationOutcome."""

    def _make_outcome(self, matrix):
        return EvaluationOutcome(
            accuracy=0.5,
            precision=0.5,
            recall=0.5,
            f1_score=0.5,
            r2_score=0.0,
            class_counts={"A": 1, "B": 1},
            confusion_matrix=matrix,
            label_metrics={"A": LabelMetrics(1.0, 0.5, 2)},
            total_samples=2,
            correct_samples=1,
            folds=2,
            max_per_fold=10
        )

    def test_outcome_does_not_alias_inputs(self):
        """Test that mutating the source mappings does not affect the outcome."""
        matrix = {"A": {"A": 1, "B": 0}, "B": {"A": 1, "B": 0}}
        outcome = self._make_outcome(matrix)

        matrix["A"]["A"] = 99
        assert outcome.confusion_matrix["A"]["A"] == 1

    def test_outcome_is_read_only(self):
        """Test that the outcome and its mappings cannot be modified."""
        outcome = self._make_outcome({"A": {"A": 1}})

        with pytest.raises(AttributeError):
            outcome.accuracy = 1.0
        with pytest.raises(TypeError):
            outcome.class_counts["A"] = 5
        with pytest.raises(TypeError):
            outcome.confusion_matrix["A"]["A"] = 5

    def test_to_dict(self):
        """Test the response dictionary keys and copies."""
        outcome = self._make_outcome({"A": {"A": 1, "B": 0}, "B": {"A": 1, "B": 0}})
        result = outcome.to_dict()

        assert set(result) == {
            "accuracy", "precision", "recall", "f1Score", "r2Score", "classCounts", "confusionMatrix"
        }
        assert result["confusionMatrix"] == {"A": {"A": 1, "B": 0}, "B": {"A": 1, "B": 0}}

        result["confusionMatrix"]["A"]["A"] = 42
        assert outcome.confusion_matrix["A"]["A"] == 1

        assert "confusionMatrix" not in outcome.to_dict(include_confusion_matrix=False)

    def test_format_result(self):
        """Test the human-readable summary."""
        text = self._make_outcome({"A": {"A": 1}}).format_result()
        assert "Accuracy:  0.5000" in text
        assert "correlation proxy" in text
