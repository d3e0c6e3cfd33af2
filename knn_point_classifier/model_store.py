"""
Persistence of trained classifiers as gzip-compressed pickle files.

Only the sample list and the hyperparameters are stored. Derived state
(label index, class weights, search matrix) is rebuilt on load by training
again.
"""

import gzip
import logging
import pickle
from pathlib import Path
from typing import Any, Dict

from .knn_classifier import KNNClassifier
from .models.data_models import KNNHyperparameters, LabeledSample
from .exceptions import ClassifierError, ModelPersistenceError, NotTrainedError


logger = logging.getLogger(__name__)

MODEL_FORMAT_VERSION = 1


def classifier_to_state(classifier: KNNClassifier) -> Dict[str, Any]:
    """
    Convert a trained classifier to a plain, picklable dictionary.

    Raises:
        NotTrainedError: If the classifier has not been trained
    """
    if not classifier.is_trained():
        raise NotTrainedError("Cannot save an untrained classifier")

    return {
        "format_version": MODEL_FORMAT_VERSION,
        "hyperparameters": classifier.hyperparameters.to_dict(),
        "samples": [
            {"features": list(sample.features), "label": sample.label}
            for sample in classifier.training_data
        ]
    }


def classifier_from_state(state: Dict[str, Any]) -> KNNClassifier:
    """
    Rebuild a classifier from a dictionary produced by classifier_to_state().

    Raises:
        ModelPersistenceError: If the dictionary is not a valid model state
    """
    if not isinstance(state, dict) or "samples" not in state or "hyperparameters" not in state:
        raise ModelPersistenceError("Invalid model file format")

    version = state.get("format_version")
    if version != MODEL_FORMAT_VERSION:
        raise ModelPersistenceError(f"Unsupported model format version: {version}")

    try:
        hyperparameters = KNNHyperparameters(**state["hyperparameters"])
        samples = [
            LabeledSample(features=item["features"], label=item["label"])
            for item in state["samples"]
        ]
        classifier = KNNClassifier(hyperparameters=hyperparameters)
        classifier.train(samples)
    except (KeyError, TypeError, ValueError, ClassifierError) as e:
        raise ModelPersistenceError(f"Failed to restore classifier: {e}") from e

    return classifier


def save_classifier(classifier: KNNClassifier, filepath: str) -> None:
    """
    Save a trained classifier to a gzip-compressed pickle file.

    Args:
        classifier: Trained classifier
        filepath: Destination path (conventionally ending in .pkl.gz)

    Raises:
        NotTrainedError: If the classifier has not been trained
        ModelPersistenceError: If writing fails
    """
    state = classifier_to_state(classifier)

    try:
        path = Path(filepath)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        with gzip.open(filepath, 'wb') as f:
            pickle.dump(state, f, protocol=pickle.HIGHEST_PROTOCOL)
    except OSError as e:
        raise ModelPersistenceError(f"Failed to save model: {e}") from e

    logger.info(f"Model saved to: {filepath}")


def load_classifier(filepath: str) -> KNNClassifier:
    """
    Load a classifier from a gzip-compressed pickle file.

    Args:
        filepath: Path to a file written by save_classifier()

    Returns:
        Trained KNNClassifier

    Raises:
        ModelPersistenceError: If the file is missing or invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise ModelPersistenceError(f"Model file not found: {filepath}")

    if not path.is_file():
        raise ModelPersistenceError(f"Model path is not a file: {filepath}")

    try:
        with gzip.open(filepath, 'rb') as f:
            state = pickle.load(f)
    except (OSError, EOFError, pickle.UnpicklingError) as e:
        raise ModelPersistenceError(f"Failed to load model: {e}") from e

    classifier = classifier_from_state(state)
    logger.info(f"Loaded model from {filepath}, training data size: {classifier.training_data_size}")
    return classifier
