"""
K-fold cross-validation for the nearest-neighbor classifier.

This module shuffles a training set once, cuts it into contiguous folds,
retrains a fresh classifier for every fold and aggregates the predictions
into a confusion matrix and its derived metrics.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np

from .knn_classifier import KNNClassifier
from .metrics import ConfusionMatrix, CorrelationAccumulator, build_outcome
from .models.data_models import (
    EvaluationOutcome,
    KNNHyperparameters,
    LabeledSample,
    SampleLike,
    TrainingSet
)
from .exceptions import InsufficientDataError, InvalidInputError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoldPlan:
    """Train/test split of one fold, fixed before any fold runs."""
    index: int
    train: Tuple[LabeledSample, ...]
    test: Tuple[LabeledSample, ...]
    full_test_size: int

    @property
    def subsampled(self) -> bool:
        return len(self.test) < self.full_test_size


@dataclass
class FoldResult:
    """Partial result of one fold, merged after all folds finish."""
    index: int
    matrix: ConfusionMatrix
    predictions: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.predictions)

    @property
    def correct(self) -> int:
        return sum(1 for actual, predicted in self.predictions if actual == predicted)


def partition_indices(sample_count: int, folds: int) -> List[Tuple[int, int]]:
    """
    Contiguous [start, end) boundaries of each fold.

    Every fold holds floor(sample_count / folds) samples except the last,
    which also takes the remainder.
    """
    fold_size = sample_count // folds
    boundaries = []
    for i in range(folds):
        start = i * fold_size
        end = sample_count if i == folds - 1 else (i + 1) * fold_size
        boundaries.append((start, end))
    return boundaries


class CrossValidationEvaluator:
    """
    Evaluates classifier hyperparameters with k-fold cross-validation.

    Randomness comes from an injectable seed or numpy Generator. All random
    draws happen before the folds run, so the outcome for a given seed does
    not depend on the number of workers.
    """

    def __init__(
        self,
        hyperparameters: Optional[KNNHyperparameters] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        max_workers: Optional[int] = None,
        progress_log_interval: Optional[int] = None
    ):
        """
        Initialize the evaluator.

        Args:
            hyperparameters: Hyperparameters copied into every fold's classifier
            seed: Optional seed; each evaluate() call starts a new generator from it
            rng: Optional generator to draw from instead of a seed
            max_workers: Number of threads running folds (1 runs them inline)
            progress_log_interval: Log progress every N test samples of a fold
        """
        from .config import config

        self.hyperparameters = hyperparameters or KNNHyperparameters()
        self.seed = seed
        self._rng = rng
        self.max_workers = max_workers if max_workers is not None else config.evaluation.max_workers
        self.progress_log_interval = (
            progress_log_interval if progress_log_interval is not None
            else config.evaluation.progress_log_interval
        )

        if self.max_workers < 1:
            raise InvalidInputError("max_workers must be positive")
        if self.progress_log_interval < 1:
            raise InvalidInputError("progress_log_interval must be positive")

    def _generator(self) -> np.random.Generator:
        if self._rng is not None:
            return self._rng
        return np.random.default_rng(self.seed)

    @staticmethod
    def _validate(training_set: TrainingSet, folds: int, max_per_fold: int) -> None:
        if isinstance(folds, bool) or not isinstance(folds, (int, np.integer)) or folds < 2:
            raise InvalidInputError("folds must be an integer of at least 2")
        if isinstance(max_per_fold, bool) or not isinstance(max_per_fold, (int, np.integer)) or max_per_fold < 1:
            raise InvalidInputError("max_per_fold must be a positive integer")
        if len(training_set) < folds:
            raise InsufficientDataError(
                f"Not enough training data for {folds}-fold cross-validation: "
                f"{len(training_set)} samples"
            )

    def plan_folds(
        self,
        training_set: Union[TrainingSet, Iterable[SampleLike]],
        folds: int,
        max_per_fold: int,
        rng: Optional[np.random.Generator] = None
    ) -> List[FoldPlan]:
        """
        Shuffle the samples and split them into folds.

        Args:
            training_set: Samples to split
            folds: Number of folds
            max_per_fold: Maximum number of test samples kept per fold
            rng: Optional generator (defaults to the evaluator's source)

        Returns:
            One FoldPlan per fold, in fold order

        Raises:
            InvalidInputError: If folds < 2 or max_per_fold < 1
            InsufficientDataError: If there are fewer samples than folds
        """
        if not isinstance(training_set, TrainingSet):
            training_set = TrainingSet(training_set)
        self._validate(training_set, folds, max_per_fold)

        if rng is None:
            rng = self._generator()
        samples = training_set.samples

        logger.info("Shuffling data for cross-validation")
        permutation = rng.permutation(len(samples))
        shuffled = [samples[idx] for idx in permutation]

        plans = []
        for i, (start, end) in enumerate(partition_indices(len(shuffled), folds)):
            full_test = shuffled[start:end]
            train = shuffled[:start] + shuffled[end:]

            if len(full_test) > max_per_fold:
                picked = rng.permutation(len(full_test))[:max_per_fold]
                test = [full_test[idx] for idx in picked]
                logger.info(f"Reduced test fold {i} from {len(full_test)} to {len(test)} samples")
            else:
                test = full_test

            plans.append(FoldPlan(
                index=i,
                train=tuple(train),
                test=tuple(test),
                full_test_size=len(full_test)
            ))

        return plans

    def _run_fold(self, plan: FoldPlan, labels: List[str]) -> FoldResult:
        # Fresh classifier over its own hyperparameter copy
        classifier = KNNClassifier(hyperparameters=self.hyperparameters.with_changes())
        classifier.train(plan.train)

        result = FoldResult(index=plan.index, matrix=ConfusionMatrix(labels))
        for processed, sample in enumerate(plan.test, 1):
            if processed % self.progress_log_interval == 0:
                logger.info(f"Fold {plan.index}: processed {processed} test samples")

            predicted = classifier.predict(sample.features)
            result.matrix.record(sample.label, predicted)
            result.predictions.append((sample.label, predicted))

        logger.debug(f"Fold {plan.index}: {result.correct}/{result.total} correct")
        return result

    def _run_folds(self, plans: List[FoldPlan], labels: List[str]) -> List[FoldResult]:
        if self.max_workers == 1 or len(plans) == 1:
            return [self._run_fold(plan, labels) for plan in plans]

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map() yields results in fold order
            return list(executor.map(lambda plan: self._run_fold(plan, labels), plans))

    def evaluate(
        self,
        training_set: Union[TrainingSet, Iterable[SampleLike]],
        folds: int,
        max_per_fold: int
    ) -> EvaluationOutcome:
        """
        Run k-fold cross-validation.

        Args:
            training_set: Samples to evaluate on
            folds: Number of folds
            max_per_fold: Maximum number of test samples per fold

        Returns:
            Immutable EvaluationOutcome

        Raises:
            InvalidInputError: If folds < 2 or max_per_fold < 1
            InsufficientDataError: If there are fewer samples than folds
        """
        if not isinstance(training_set, TrainingSet):
            training_set = TrainingSet(training_set)

        logger.info(f"Preparing evaluation, training data size = {len(training_set)}")
        plans = self.plan_folds(training_set, folds, max_per_fold)

        labels = training_set.labels
        results = self._run_folds(plans, labels)

        matrix = ConfusionMatrix(labels)
        correlation = CorrelationAccumulator()
        predictions = []
        for result in results:
            matrix.merge(result.matrix)
            predictions.extend(result.predictions)
            for actual, predicted in result.predictions:
                correlation.add(actual, predicted)

        outcome = build_outcome(
            matrix,
            correlation,
            predictions,
            class_counts=training_set.label_counts,
            folds=folds,
            max_per_fold=max_per_fold
        )
        logger.info(
            f"Evaluation finished: accuracy={outcome.accuracy:.4f}, "
            f"f1={outcome.f1_score:.4f} over {outcome.total_samples} samples"
        )
        return outcome
