"""
Startup logic that provides the API with a trained classifier.
"""

import logging
import math
from pathlib import Path
from typing import Optional

from ..config import AppConfig
from ..dataset_loader import ExcelPointLoader
from ..knn_classifier import KNNClassifier
from ..exceptions import ModelPersistenceError


logger = logging.getLogger(__name__)


def resolve_k(configured_k: int, sample_count: int) -> int:
    """Use the configured k, or the square root of the sample count when k is not positive."""
    if configured_k > 0:
        return configured_k
    return max(1, int(math.sqrt(sample_count)))


def create_and_train(app_config: AppConfig) -> KNNClassifier:
    """
    Load the training workbook, train a new classifier and save it.

    Raises:
        DatasetLoadingError: If the workbook cannot be read
        InvalidInputError: If the workbook yields no usable samples
    """
    samples = ExcelPointLoader.from_config(app_config.data_source).load()

    preview = min(app_config.data_source.preview_count, len(samples))
    logger.info(f"Read {len(samples)} data points, first {preview}:")
    for sample in samples[:preview]:
        logger.info(str(sample))

    k = resolve_k(app_config.classifier.k, len(samples))
    logger.info(f"k = {k}")

    classifier = KNNClassifier(hyperparameters=app_config.classifier.to_hyperparameters(k=k))
    classifier.train(samples)

    try:
        classifier.save_model(app_config.model_store.model_path)
        logger.info("Trained and saved a new classifier")
    except ModelPersistenceError as e:
        logger.warning(f"Failed to save model: {e}")

    return classifier


def bootstrap_classifier(app_config: Optional[AppConfig] = None) -> KNNClassifier:
    """
    Provide a trained classifier for the API.

    Retrains when configured to, or when no usable saved model exists;
    otherwise loads the saved model.
    """
    if app_config is None:
        from ..config import config as app_config

    if app_config.model_store.need_train:
        return create_and_train(app_config)

    model_path = app_config.model_store.model_path
    if not Path(model_path).exists():
        logger.info("No trained model found, creating a new one")
        return create_and_train(app_config)

    try:
        classifier = KNNClassifier.load_model(model_path)
        logger.info("Loaded trained classifier")
        return classifier
    except ModelPersistenceError as e:
        logger.warning(f"Failed to load model, creating a new one: {e}")
        return create_and_train(app_config)
