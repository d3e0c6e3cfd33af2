"""
Tests for environment-driven configuration.
"""

import pytest

from knn_point_classifier.config import (
    AppConfig,
    ClassifierDefaults,
    DataSourceConfig,
    EvaluationConfig,
    ModelStoreConfig
)
from knn_point_classifier.models.data_models import KNNHyperparameters
from knn_point_classifier.exceptions import ConfigurationError


class TestConfigFromEnv:
    """Test cases for reading configuration from environment variables."""

    def test_defaults(self, monkeypatch):
        for name in ["KNN_K", "KNN_VOTING", "EVAL_RANDOM_SEED", "CLASSIFIER_SHEET_NAMES", "CLASSIFIER_NEED_TRAIN"]:
            monkeypatch.delenv(name, raising=False)

        app_config = AppConfig.from_env()

        assert app_config.classifier.k == 10
        assert app_config.classifier.voting == "majority"
        assert app_config.evaluation.random_seed is None
        assert app_config.data_source.sheet_names == ["ESTATE", "STREET", "STREET_NUMBER"]
        assert app_config.model_store.need_train is True

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("KNN_K", "5")
        monkeypatch.setenv("KNN_VOTING", "weighted_distance")
        monkeypatch.setenv("KNN_USE_CLASS_WEIGHTS", "false")
        monkeypatch.setenv("EVAL_RANDOM_SEED", "42")
        monkeypatch.setenv("EVAL_MAX_WORKERS", "4")
        monkeypatch.setenv("CLASSIFIER_SHEET_NAMES", "ESTATE, STREET")
        monkeypatch.setenv("CLASSIFIER_NEED_TRAIN", "no")
        monkeypatch.setenv("CLASSIFIER_MODEL_PATH", "/tmp/model.pkl.gz")

        assert ClassifierDefaults.from_env().k == 5
        assert ClassifierDefaults.from_env().use_class_weights is False
        assert EvaluationConfig.from_env().random_seed == 42
        assert EvaluationConfig.from_env().max_workers == 4
        assert DataSourceConfig.from_env().sheet_names == ["ESTATE", "STREET"]
        assert ModelStoreConfig.from_env().need_train is False
        assert ModelStoreConfig.from_env().model_path == "/tmp/model.pkl.gz"

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("KNN_K", "ten")
        with pytest.raises(ConfigurationError, match="KNN_K must be an integer"):
            ClassifierDefaults.from_env()

        monkeypatch.setenv("CLASSIFIER_NEED_TRAIN", "maybe")
        with pytest.raises(ConfigurationError, match="must be a boolean"):
            ModelStoreConfig.from_env()

    @pytest.mark.parametrize("name", ["EVAL_MAX_WORKERS", "EVAL_PROGRESS_LOG_INTERVAL"])
    @pytest.mark.parametrize("value", ["0", "-2"])
    def test_non_positive_evaluation_settings(self, monkeypatch, name, value):
        """Test that worker and logging settings below 1 fail at configuration time."""
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigurationError, match=f"{name} must be positive"):
            EvaluationConfig.from_env()


class TestClassifierDefaults:
    """Test cases for building hyperparameters from configuration."""

    def test_to_hyperparameters(self):
        defaults = ClassifierDefaults(k=4, voting="weighted_distance")

        assert defaults.to_hyperparameters() == KNNHyperparameters(k=4, voting="weighted_distance")
        assert defaults.to_hyperparameters(k=9).k == 9

    def test_invalid_configuration(self):
        with pytest.raises(ConfigurationError, match="Invalid classifier configuration"):
            ClassifierDefaults(voting="plurality").to_hyperparameters()
