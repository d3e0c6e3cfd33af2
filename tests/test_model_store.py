"""
Tests for saving and loading trained classifiers.
"""

import gzip
import pickle

import pytest

from knn_point_classifier import KNNClassifier
from knn_point_classifier.model_store import (
    MODEL_FORMAT_VERSION,
    classifier_from_state,
    classifier_to_state,
    load_classifier,
    save_classifier
)
from knn_point_classifier.exceptions import ModelPersistenceError, NotTrainedError


class TestModelStore:
    """Test cases for model persistence."""

    def test_save_and_load(self, tmp_path, zone_samples):
        classifier = KNNClassifier(k=4, voting="weighted_distance", max_class_weight=3.0)
        classifier.train(zone_samples)
        model_path = tmp_path / "models" / "knn_classifier.pkl.gz"

        classifier.save_model(str(model_path))
        assert model_path.exists()

        loaded = KNNClassifier.load_model(str(model_path))

        assert loaded.hyperparameters == classifier.hyperparameters
        assert loaded.training_data == classifier.training_data
        assert loaded.class_weights == classifier.class_weights
        for query in [(22.301, 114.171), (22.404, 114.104), (22.3, 114.2)]:
            assert loaded.predict(query) == classifier.predict(query)

    def test_file_is_gzip_pickle(self, tmp_path, two_cluster_samples):
        classifier = KNNClassifier(k=1)
        classifier.train(two_cluster_samples)
        model_path = tmp_path / "model.pkl.gz"
        save_classifier(classifier, str(model_path))

        with gzip.open(model_path, 'rb') as f:
            state = pickle.load(f)

        assert state["format_version"] == MODEL_FORMAT_VERSION
        assert state["hyperparameters"]["k"] == 1
        assert state["samples"][0] == {"features": [0.0, 0.0], "label": "A"}

    def test_save_untrained(self, tmp_path):
        with pytest.raises(NotTrainedError):
            KNNClassifier().save_model(str(tmp_path / "model.pkl.gz"))

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ModelPersistenceError, match="Model file not found"):
            load_classifier(str(tmp_path / "missing.pkl.gz"))

    def test_load_directory(self, tmp_path):
        with pytest.raises(ModelPersistenceError, match="not a file"):
            load_classifier(str(tmp_path))

    def test_load_corrupt_file(self, tmp_path):
        model_path = tmp_path / "corrupt.pkl.gz"
        model_path.write_bytes(b"not a gzip stream")

        with pytest.raises(ModelPersistenceError, match="Failed to load model"):
            load_classifier(str(model_path))

    def test_state_round_trip(self, two_cluster_samples):
        classifier = KNNClassifier(k=2)
        classifier.train(two_cluster_samples)

        restored = classifier_from_state(classifier_to_state(classifier))
        assert restored.k == 2
        assert restored.get_label_to_points_map() == classifier.get_label_to_points_map()

    def test_invalid_states(self):
        with pytest.raises(ModelPersistenceError, match="Invalid model file format"):
            classifier_from_state(["not", "a", "dict"])

        with pytest.raises(ModelPersistenceError, match="Unsupported model format version"):
            classifier_from_state({"format_version": 99, "hyperparameters": {}, "samples": []})

        with pytest.raises(ModelPersistenceError, match="Failed to restore classifier"):
            classifier_from_state({
                "format_version": MODEL_FORMAT_VERSION,
                "hyperparameters": {"k": 1},
                "samples": []
            })
