"""
Configuration for the k-nearest-neighbor point classifier.
Every section can be overridden through environment variables.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field

from .exceptions import ConfigurationError


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"Environment variable {name} must be an integer, got '{value}'") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"Environment variable {name} must be a number, got '{value}'") from e


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Environment variable {name} must be a boolean, got '{value}'")


def _env_positive_int(name: str, default: int) -> int:
    value = _env_int(name, default)
    if value < 1:
        raise ConfigurationError(f"Environment variable {name} must be positive, got '{value}'")
    return value


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return _env_int(name, 0)


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class ClassifierDefaults:
    """Default hyperparameters for newly created classifiers."""
    # k <= 0 means "derive from the training set size" at bootstrap
    k: int = 10
    epsilon: float = 1e-5
    distance_weight_factor: float = 2.0
    use_class_weights: bool = True
    max_class_weight: float = 50.0
    voting: str = "majority"

    @classmethod
    def from_env(cls) -> 'ClassifierDefaults':
        """Create classifier defaults from environment variables."""
        return cls(
            k=_env_int('KNN_K', cls.k),
            epsilon=_env_float('KNN_EPSILON', cls.epsilon),
            distance_weight_factor=_env_float('KNN_DISTANCE_WEIGHT_FACTOR', cls.distance_weight_factor),
            use_class_weights=_env_bool('KNN_USE_CLASS_WEIGHTS', cls.use_class_weights),
            max_class_weight=_env_float('KNN_MAX_CLASS_WEIGHT', cls.max_class_weight),
            voting=os.getenv('KNN_VOTING', cls.voting),
        )

    def to_hyperparameters(self, k: Optional[int] = None):
        """
        Build a validated hyperparameter object from these defaults.

        Args:
            k: Optional neighbor count overriding the configured one

        Returns:
            KNNHyperparameters instance

        Raises:
            ConfigurationError: If the configured values are invalid
        """
        from .models.data_models import KNNHyperparameters

        try:
            return KNNHyperparameters(
                k=self.k if k is None else k,
                epsilon=self.epsilon,
                distance_weight_factor=self.distance_weight_factor,
                use_class_weights=self.use_class_weights,
                max_class_weight=self.max_class_weight,
                voting=self.voting,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid classifier configuration: {e}") from e


@dataclass
class EvaluationConfig:
    """Configuration for cross-validation."""
    default_folds: int = 3
    default_max_per_fold: int = 100

    # Log progress every N test samples
    progress_log_interval: int = 1000

    random_seed: Optional[int] = None
    max_workers: int = 1

    @classmethod
    def from_env(cls) -> 'EvaluationConfig':
        """Create evaluation config from environment variables."""
        return cls(
            default_folds=_env_int('EVAL_DEFAULT_FOLDS', cls.default_folds),
            default_max_per_fold=_env_int('EVAL_DEFAULT_MAX_PER_FOLD', cls.default_max_per_fold),
            progress_log_interval=_env_positive_int('EVAL_PROGRESS_LOG_INTERVAL', cls.progress_log_interval),
            random_seed=_env_optional_int('EVAL_RANDOM_SEED'),
            max_workers=_env_positive_int('EVAL_MAX_WORKERS', cls.max_workers),
        )


@dataclass
class DataSourceConfig:
    """Configuration for spreadsheet ingestion."""
    xlsx_file_path: str = "data/addresses.xlsx"
    sheet_names: List[str] = field(default_factory=lambda: ["ESTATE", "STREET", "STREET_NUMBER"])
    latitude_column: str = "LATITUDE"
    longitude_column: str = "LONGITUDE"
    label_column: str = "DELIVERY ZONE CODE"

    # Number of loaded samples echoed to the log after ingestion
    preview_count: int = 5

    @classmethod
    def from_env(cls) -> 'DataSourceConfig':
        """Create data source config from environment variables."""
        defaults = cls()
        return cls(
            xlsx_file_path=os.getenv('CLASSIFIER_XLSX_FILE_PATH', defaults.xlsx_file_path),
            sheet_names=_env_list('CLASSIFIER_SHEET_NAMES', defaults.sheet_names),
            latitude_column=os.getenv('CLASSIFIER_LATITUDE_COLUMN', defaults.latitude_column),
            longitude_column=os.getenv('CLASSIFIER_LONGITUDE_COLUMN', defaults.longitude_column),
            label_column=os.getenv('CLASSIFIER_LABEL_COLUMN', defaults.label_column),
            preview_count=_env_int('CLASSIFIER_PREVIEW_COUNT', defaults.preview_count),
        )


@dataclass
class ModelStoreConfig:
    """Configuration for model persistence."""
    model_path: str = "knn_classifier.pkl.gz"
    need_train: bool = True

    @classmethod
    def from_env(cls) -> 'ModelStoreConfig':
        """Create model store config from environment variables."""
        return cls(
            model_path=os.getenv('CLASSIFIER_MODEL_PATH', cls.model_path),
            need_train=_env_bool('CLASSIFIER_NEED_TRAIN', cls.need_train),
        )


@dataclass
class APIConfig:
    """Configuration for the HTTP API."""
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> 'APIConfig':
        """Create API config from environment variables."""
        return cls(
            host=os.getenv('API_HOST', cls.host),
            port=_env_int('API_PORT', cls.port),
            log_level=os.getenv('API_LOG_LEVEL', cls.log_level),
        )


@dataclass
class AppConfig:
    """Configuration for the point classifier library and its API."""
    classifier: ClassifierDefaults
    evaluation: EvaluationConfig
    data_source: DataSourceConfig
    model_store: ModelStoreConfig
    api: APIConfig

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Create application config from environment variables."""
        return cls(
            classifier=ClassifierDefaults.from_env(),
            evaluation=EvaluationConfig.from_env(),
            data_source=DataSourceConfig.from_env(),
            model_store=ModelStoreConfig.from_env(),
            api=APIConfig.from_env(),
        )


# Global configuration instance
config = AppConfig.from_env()
