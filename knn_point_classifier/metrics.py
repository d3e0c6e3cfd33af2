"""
Confusion matrix accumulation and metric derivation for cross-validation.
"""

import math
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from sklearn.metrics import precision_recall_fscore_support

from .models.data_models import EvaluationOutcome, LabelMetrics


class ConfusionMatrix:
    """
    Counts of (actual, predicted) label pairs, dense over a fixed label set.

    Labels recorded outside the initial set are added as new rows and columns.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self._labels: List[str] = []
        self._counts: Dict[str, Dict[str, int]] = {}
        for label in labels:
            self._add_label(label)

    def _add_label(self, label: str) -> None:
        if label in self._counts:
            return
        self._labels.append(label)
        for row in self._counts.values():
            row[label] = 0
        self._counts[label] = {other: 0 for other in self._labels}

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def record(self, actual: str, predicted: str, count: int = 1) -> None:
        self._add_label(actual)
        self._add_label(predicted)
        self._counts[actual][predicted] += count

    def merge(self, other: 'ConfusionMatrix') -> None:
        """Add every count of another matrix into this one."""
        for actual, row in other._counts.items():
            for predicted, count in row.items():
                if count:
                    self.record(actual, predicted, count)
                else:
                    self._add_label(actual)
                    self._add_label(predicted)

    def count(self, actual: str, predicted: str) -> int:
        return self._counts.get(actual, {}).get(predicted, 0)

    @property
    def total(self) -> int:
        return sum(sum(row.values()) for row in self._counts.values())

    @property
    def correct(self) -> int:
        return sum(self._counts[label][label] for label in self._labels)

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {actual: dict(row) for actual, row in self._counts.items()}


class CorrelationAccumulator:
    """
    Running sums for the Pearson correlation between label ordinals.

    Each distinct label is numbered (0, 1, 2, ...) the first time it is seen,
    actual label before predicted label. Treating these nominal ordinals as
    numbers only yields a reproducibility proxy, not a true R².
    """

    def __init__(self):
        self.ordinals: Dict[str, int] = {}
        self.count = 0
        self.sum_actual = 0.0
        self.sum_predicted = 0.0
        self.sum_actual_squared = 0.0
        self.sum_predicted_squared = 0.0
        self.sum_actual_predicted = 0.0

    def ordinal(self, label: str) -> int:
        if label not in self.ordinals:
            self.ordinals[label] = len(self.ordinals)
        return self.ordinals[label]

    def add(self, actual: str, predicted: str) -> None:
        actual_value = self.ordinal(actual)
        predicted_value = self.ordinal(predicted)

        self.count += 1
        self.sum_actual += actual_value
        self.sum_predicted += predicted_value
        self.sum_actual_squared += actual_value * actual_value
        self.sum_predicted_squared += predicted_value * predicted_value
        self.sum_actual_predicted += actual_value * predicted_value

    def pearson_r(self) -> float:
        """Closed-form Pearson r from the running sums; 0 when either variance term is not positive."""
        n = self.count
        numerator = n * self.sum_actual_predicted - self.sum_actual * self.sum_predicted
        variance_actual = n * self.sum_actual_squared - self.sum_actual * self.sum_actual
        variance_predicted = n * self.sum_predicted_squared - self.sum_predicted * self.sum_predicted

        if variance_actual <= 0 or variance_predicted <= 0:
            return 0.0
        return numerator / math.sqrt(variance_actual * variance_predicted)

    def r_squared(self) -> float:
        r = self.pearson_r()
        return r * r


def safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def per_label_metrics(
    y_true: Sequence[str],
    y_pred: Sequence[str],
    labels: Sequence[str]
) -> Dict[str, LabelMetrics]:
    """
    Precision, recall and support for every label.

    Args:
        y_true: Actual labels of the evaluated samples
        y_pred: Predicted labels, aligned with y_true
        labels: Labels to report, in output order

    Returns:
        Mapping of label to LabelMetrics; a label with no predictions (or no
        samples) gets 0 for the undefined ratio
    """
    if not labels or not y_true:
        return {label: LabelMetrics(precision=0.0, recall=0.0, support=0) for label in labels}

    precision, recall, _, support = precision_recall_fscore_support(
        list(y_true),
        list(y_pred),
        labels=list(labels),
        average=None,
        zero_division=0
    )
    return {
        label: LabelMetrics(precision=float(p), recall=float(r), support=int(s))
        for label, p, r, s in zip(labels, precision, recall, support)
    }


def macro_average(metrics: Mapping[str, LabelMetrics]) -> Tuple[float, float, float]:
    """
    Macro precision, macro recall and their harmonic mean.

    Returns:
        Tuple of (precision, recall, f1)
    """
    if not metrics:
        return 0.0, 0.0, 0.0

    precision = sum(m.precision for m in metrics.values()) / len(metrics)
    recall = sum(m.recall for m in metrics.values()) / len(metrics)
    f1 = safe_ratio(2 * precision * recall, precision + recall)
    return precision, recall, f1


def build_outcome(
    matrix: ConfusionMatrix,
    correlation: CorrelationAccumulator,
    predictions: Sequence[Tuple[str, str]],
    class_counts: Mapping[str, int],
    folds: int,
    max_per_fold: int
) -> EvaluationOutcome:
    """
    Derive every metric of an evaluation from its accumulated state.

    Args:
        matrix: Confusion matrix over all evaluated samples
        correlation: Ordinal correlation sums over the same samples
        predictions: (actual, predicted) pairs of the same samples
        class_counts: Per-label sample counts of the evaluated training set
        folds: Number of folds used
        max_per_fold: Test-size cap used

    Returns:
        Immutable EvaluationOutcome
    """
    total = matrix.total
    correct = matrix.correct
    y_true = [actual for actual, _ in predictions]
    y_pred = [predicted for _, predicted in predictions]
    label_metrics = per_label_metrics(y_true, y_pred, matrix.labels)
    precision, recall, f1 = macro_average(label_metrics)

    return EvaluationOutcome(
        accuracy=safe_ratio(correct, total),
        precision=precision,
        recall=recall,
        f1_score=f1,
        r2_score=correlation.r_squared(),
        class_counts=class_counts,
        confusion_matrix=matrix.as_dict(),
        label_metrics=label_metrics,
        total_samples=total,
        correct_samples=correct,
        folds=folds,
        max_per_fold=max_per_fold
    )
