"""
Main KNNClassifier class for nearest-neighbor point classification.

This module provides the KNNClassifier class that integrates the training
set, brute-force neighbor search, class-imbalance weights and a voting
policy behind a train/predict/evaluate interface.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .class_weights import ClassWeightTable
from .neighbor_search import NearestNeighborSearch
from .voting import Voter, create_voter
from .models.data_models import (
    EvaluationOutcome,
    KNNHyperparameters,
    LabeledSample,
    SampleLike,
    TrainingSet
)
from .exceptions import InvalidInputError, NotTrainedError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _TrainedState:
    """Everything derived from one train() call, published as a single unit."""
    training_set: TrainingSet
    search: NearestNeighborSearch
    class_weights: ClassWeightTable


class KNNClassifier:
    """
    K-nearest-neighbor classifier over fixed-length feature vectors.

    Distances are Euclidean and every query scans the full training set.
    The voting policy is either a plain majority vote or a distance- and
    class-weighted vote, selected through the ``voting`` hyperparameter.
    """

    def __init__(
        self,
        k: Optional[int] = None,
        hyperparameters: Optional[KNNHyperparameters] = None,
        **overrides: Any
    ):
        """
        Initialize the classifier.

        Args:
            k: Optional neighbor count (shortcut for overrides["k"])
            hyperparameters: Optional base hyperparameters (defaults otherwise)
            **overrides: Individual hyperparameter fields to override

        Raises:
            InvalidInputError: If any hyperparameter is invalid
        """
        base = hyperparameters or KNNHyperparameters()
        if k is not None:
            overrides["k"] = k
        try:
            self._hyperparameters = base.with_changes(**overrides) if overrides else base
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid hyperparameters: {e}") from e

        self._voter: Voter = create_voter(self._hyperparameters)
        self._state: Optional[_TrainedState] = None
        self._last_evaluation: Optional[EvaluationOutcome] = None

    # Training

    def train(self, samples: Iterable[SampleLike]) -> None:
        """
        Train the classifier on labeled samples, replacing any previous data.

        Args:
            samples: LabeledSample instances or (features, label) pairs

        Raises:
            InvalidInputError: If samples is empty, invalid or of mixed dimensionality
        """
        training_set = samples if isinstance(samples, TrainingSet) else TrainingSet(samples)
        self._state = self._build_state(training_set, self._hyperparameters)

        logger.info(
            f"Training finished with {len(training_set)} samples in "
            f"{len(training_set.labels)} classes"
        )
        weights = self._state.class_weights
        for label, count in training_set.label_counts.items():
            logger.debug(f"Class '{label}': {count} samples, weight {weights.weight(label):.4f}")
            if count == 1 and self._hyperparameters.use_class_weights:
                logger.debug(f"Class '{label}' has a single sample and relies mostly on distance weighting")

    @staticmethod
    def _build_state(training_set: TrainingSet, hyperparameters: KNNHyperparameters) -> _TrainedState:
        return _TrainedState(
            training_set=training_set,
            search=NearestNeighborSearch(training_set),
            class_weights=ClassWeightTable.for_training_set(
                training_set,
                enabled=hyperparameters.use_class_weights,
                max_class_weight=hyperparameters.max_class_weight
            )
        )

    def _require_state(self) -> _TrainedState:
        state = self._state
        if state is None:
            raise NotTrainedError("Classifier has not been trained")
        return state

    def is_trained(self) -> bool:
        return self._state is not None

    @property
    def training_data_size(self) -> int:
        return len(self._state.training_set) if self._state is not None else 0

    # Prediction

    def predict(self, features: Sequence[float]) -> str:
        """
        Predict the label of a feature vector.

        Args:
            features: Query feature vector

        Returns:
            Predicted label (always one of the training labels)

        Raises:
            NotTrainedError: If the classifier has not been trained
            DimensionMismatchError: If the query length differs from the training dimensionality
            InvalidInputError: If the query holds non-numeric or non-finite values
        """
        state = self._require_state()
        neighbors = state.search.nearest(features, self._hyperparameters.k)
        return self._voter.vote(neighbors, state.class_weights)

    def predict_point(self, x: float, y: float) -> str:
        """Predict the label of a 2-D coordinate."""
        return self.predict((x, y))

    def predict_batch(self, vectors: Iterable[Sequence[float]]) -> List[str]:
        return [self.predict(features) for features in vectors]

    def vote_scores(self, features: Sequence[float]) -> Dict[str, float]:
        """
        Per-label scores the voter assigns to a query.

        Raises:
            NotTrainedError: If the classifier has not been trained
        """
        state = self._require_state()
        neighbors = state.search.nearest(features, self._hyperparameters.k)
        return self._voter.tally(neighbors, state.class_weights)

    # Read-only views

    @property
    def training_set(self) -> TrainingSet:
        return self._require_state().training_set

    @property
    def training_data(self) -> List[LabeledSample]:
        return list(self._require_state().training_set.samples)

    @property
    def labels(self) -> List[str]:
        return self._require_state().training_set.labels

    def get_points_by_label(self, label: str) -> List[LabeledSample]:
        """
        Get all training samples with the given label.

        Returns:
            Copy of the matching samples (empty list for an unknown label)

        Raises:
            NotTrainedError: If the classifier has not been trained
        """
        return self._require_state().training_set.samples_for(label)

    def get_label_to_points_map(self) -> Dict[str, List[LabeledSample]]:
        """
        Get a copy of the label -> samples mapping.

        Raises:
            NotTrainedError: If the classifier has not been trained
        """
        return self._require_state().training_set.label_index()

    @property
    def class_weights(self) -> Dict[str, float]:
        return self._require_state().class_weights.as_dict()

    # Hyperparameters

    @property
    def hyperparameters(self) -> KNNHyperparameters:
        return self._hyperparameters

    @hyperparameters.setter
    def hyperparameters(self, value: KNNHyperparameters) -> None:
        if not isinstance(value, KNNHyperparameters):
            raise InvalidInputError("hyperparameters must be a KNNHyperparameters instance")
        self._apply_hyperparameters(value)

    def _update(self, **changes: Any) -> None:
        try:
            updated = self._hyperparameters.with_changes(**changes)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid hyperparameters: {e}") from e
        self._apply_hyperparameters(updated)

    def _apply_hyperparameters(self, updated: KNNHyperparameters) -> None:
        previous = self._hyperparameters
        weights_changed = (
            updated.use_class_weights != previous.use_class_weights
            or updated.max_class_weight != previous.max_class_weight
        )

        state = self._state
        if state is not None and weights_changed:
            state = self._build_state(state.training_set, updated)

        self._hyperparameters = updated
        self._voter = create_voter(updated)
        self._state = state

    @property
    def k(self) -> int:
        return self._hyperparameters.k

    @k.setter
    def k(self, value: int) -> None:
        self._update(k=value)

    @property
    def epsilon(self) -> float:
        return self._hyperparameters.epsilon

    @epsilon.setter
    def epsilon(self, value: float) -> None:
        self._update(epsilon=value)

    @property
    def distance_weight_factor(self) -> float:
        return self._hyperparameters.distance_weight_factor

    @distance_weight_factor.setter
    def distance_weight_factor(self, value: float) -> None:
        self._update(distance_weight_factor=value)

    @property
    def use_class_weights(self) -> bool:
        return self._hyperparameters.use_class_weights

    @use_class_weights.setter
    def use_class_weights(self, value: bool) -> None:
        self._update(use_class_weights=value)

    @property
    def max_class_weight(self) -> float:
        return self._hyperparameters.max_class_weight

    @max_class_weight.setter
    def max_class_weight(self, value: float) -> None:
        self._update(max_class_weight=value)

    @property
    def voting(self) -> str:
        return self._hyperparameters.voting

    @voting.setter
    def voting(self, value: str) -> None:
        self._update(voting=value)

    # Evaluation

    def evaluate(
        self,
        folds: int,
        max_per_fold: int,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None
    ) -> EvaluationOutcome:
        """
        Cross-validate the current hyperparameters on the training data.

        Args:
            folds: Number of folds
            max_per_fold: Maximum number of test samples per fold
            seed: Optional seed for the shuffle and subsampling
            max_workers: Optional number of worker threads for fold execution

        Returns:
            Immutable EvaluationOutcome

        Raises:
            NotTrainedError: If the classifier has not been trained
            InsufficientDataError: If there are fewer samples than folds
        """
        from .cross_validation import CrossValidationEvaluator

        state = self._require_state()
        evaluator = CrossValidationEvaluator(
            self._hyperparameters,
            seed=seed,
            max_workers=max_workers
        )
        outcome = evaluator.evaluate(state.training_set, folds, max_per_fold)
        self._last_evaluation = outcome
        return outcome

    @property
    def last_evaluation(self) -> Optional[EvaluationOutcome]:
        return self._last_evaluation

    # Persistence

    def save_model(self, filepath: str) -> None:
        """
        Save the trained classifier to a gzip-compressed pickle file.

        Raises:
            NotTrainedError: If the classifier has not been trained
            ModelPersistenceError: If writing fails
        """
        from .model_store import save_classifier
        save_classifier(self, filepath)

    @classmethod
    def load_model(cls, filepath: str) -> 'KNNClassifier':
        """
        Load a classifier saved with save_model().

        Raises:
            ModelPersistenceError: If the file is missing or invalid
        """
        from .model_store import load_classifier
        return load_classifier(filepath)

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "isTrained": self.is_trained(),
            "k": self.k,
            "trainingDataSize": self.training_data_size,
            "voting": self.voting,
            "useClassWeights": self.use_class_weights,
        }

    def __repr__(self) -> str:
        return (
            f"KNNClassifier(k={self.k}, voting='{self.voting}', "
            f"trained={self.is_trained()}, samples={self.training_data_size})"
        )
