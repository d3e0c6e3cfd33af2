"""
Core data models for the k-nearest-neighbor point classifier.
"""

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple, Union

from ..exceptions import InvalidInputError, DimensionMismatchError


FeatureVector = Tuple[float, ...]

VOTING_MAJORITY = "majority"
VOTING_WEIGHTED_DISTANCE = "weighted_distance"
VOTING_STRATEGIES = (VOTING_MAJORITY, VOTING_WEIGHTED_DISTANCE)


def to_feature_vector(values: Iterable[float]) -> FeatureVector:
    """
    Convert a sequence of numbers into an immutable feature vector.

    Args:
        values: Sequence of real numbers (list, tuple or numpy array)

    Returns:
        Tuple of floats

    Raises:
        ValueError: If the sequence is empty or contains non-finite or non-numeric values
    """
    try:
        vector = tuple(float(v) for v in values)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Feature vector must contain only numbers: {e}")

    if not vector:
        raise ValueError("Feature vector cannot be empty")
    if not all(math.isfinite(v) for v in vector):
        raise ValueError("Feature vector must contain only finite numbers")
    return vector


@dataclass(frozen=True)
class LabeledSample:
    """A feature vector paired with its ground-truth category."""
    features: FeatureVector
    label: str

    def __post_init__(self):
        """Validate and normalize the sample after initialization."""
        object.__setattr__(self, "features", to_feature_vector(self.features))
        if not isinstance(self.label, str) or not self.label.strip():
            raise ValueError("Sample label cannot be empty")

    @property
    def dimension(self) -> int:
        return len(self.features)

    @classmethod
    def from_point(cls, x: float, y: float, label: str) -> 'LabeledSample':
        """Create a sample for a 2-D coordinate."""
        return cls(features=(x, y), label=label)


@dataclass(frozen=True)
class NeighborCandidate:
    """One training sample's distance to a query, produced during a search."""
    distance: float
    label: str
    index: int


@dataclass(frozen=True)
class KNNHyperparameters:
    """
    Immutable hyperparameters of a nearest-neighbor classifier.

    Instances are value objects: use with_changes() to derive a modified copy.
    Cross-validation hands each fold its own instance.
    """
    k: int = 10
    epsilon: float = 1e-5
    distance_weight_factor: float = 2.0
    use_class_weights: bool = True
    max_class_weight: float = 50.0
    voting: str = VOTING_MAJORITY

    def __post_init__(self):
        """Validate hyperparameters after initialization."""
        if isinstance(self.k, bool) or not isinstance(self.k, int) or self.k < 1:
            raise ValueError("k must be a positive integer")
        if not isinstance(self.epsilon, (int, float)) or not self.epsilon > 0:
            raise ValueError("epsilon must be a positive number")
        if not isinstance(self.distance_weight_factor, (int, float)) or not math.isfinite(self.distance_weight_factor):
            raise ValueError("distance_weight_factor must be a finite number")
        if not isinstance(self.use_class_weights, bool):
            raise ValueError("use_class_weights must be a boolean")
        if not isinstance(self.max_class_weight, (int, float)) or not self.max_class_weight > 0:
            raise ValueError("max_class_weight must be a positive number")
        if self.voting not in VOTING_STRATEGIES:
            raise ValueError(f"voting must be one of {VOTING_STRATEGIES}, got '{self.voting}'")

    def with_changes(self, **changes: Any) -> 'KNNHyperparameters':
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "k": self.k,
            "epsilon": self.epsilon,
            "distance_weight_factor": self.distance_weight_factor,
            "use_class_weights": self.use_class_weights,
            "max_class_weight": self.max_class_weight,
            "voting": self.voting,
        }


SampleLike = Union[LabeledSample, Tuple[Sequence[float], str]]


def to_labeled_sample(item: SampleLike) -> LabeledSample:
    """Accept a LabeledSample or a (features, label) pair."""
    if isinstance(item, LabeledSample):
        return item
    try:
        features, label = item
    except (TypeError, ValueError):
        raise ValueError(f"Expected LabeledSample or (features, label) pair, got {item!r}")
    return LabeledSample(features=features, label=label)


class TrainingSet:
    """
    Ordered, immutable collection of labeled samples sharing one dimensionality.

    The label -> samples index is derived from the sample list when the set is
    built and is never mutated on its own.
    """

    def __init__(self, samples: Iterable[SampleLike]):
        """
        Build a training set.

        Args:
            samples: LabeledSample instances or (features, label) pairs

        Raises:
            InvalidInputError: If samples is empty or contains invalid items
            DimensionMismatchError: If samples have different dimensionality
        """
        if samples is None:
            raise InvalidInputError("Training data cannot be empty")

        try:
            converted = tuple(to_labeled_sample(item) for item in samples)
        except ValueError as e:
            raise InvalidInputError(f"Invalid training sample: {e}") from e

        if not converted:
            raise InvalidInputError("Training data cannot be empty")

        dimension = converted[0].dimension
        for position, sample in enumerate(converted):
            if sample.dimension != dimension:
                raise DimensionMismatchError(
                    f"Inconsistent feature dimensions: expected {dimension}, "
                    f"got {sample.dimension} for sample {position}"
                )

        self._samples = converted
        self._dimension = dimension
        self._label_index = self._build_label_index(converted)

    @staticmethod
    def _build_label_index(samples: Tuple[LabeledSample, ...]) -> Dict[str, Tuple[LabeledSample, ...]]:
        grouped: Dict[str, List[LabeledSample]] = {}
        for sample in samples:
            grouped.setdefault(sample.label, []).append(sample)
        return {label: tuple(grouped[label]) for label in sorted(grouped)}

    @property
    def samples(self) -> Tuple[LabeledSample, ...]:
        return self._samples

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def labels(self) -> List[str]:
        """Distinct labels in lexicographic order."""
        return list(self._label_index)

    @property
    def label_counts(self) -> Dict[str, int]:
        return {label: len(points) for label, points in self._label_index.items()}

    def samples_for(self, label: str) -> List[LabeledSample]:
        """Samples carrying the given label, in training order (empty if unknown)."""
        return list(self._label_index.get(label, ()))

    def label_index(self) -> Dict[str, List[LabeledSample]]:
        """Copy of the label -> samples mapping."""
        return {label: list(points) for label, points in self._label_index.items()}

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[LabeledSample]:
        return iter(self._samples)

    def __getitem__(self, position: int) -> LabeledSample:
        return self._samples[position]

    def __repr__(self) -> str:
        return f"TrainingSet(samples={len(self._samples)}, labels={len(self._label_index)}, dimension={self._dimension})"


@dataclass(frozen=True)
class LabelMetrics:
    """Per-label metrics derived from a confusion matrix."""
    precision: float
    recall: float
    support: int


def _freeze_mapping(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class EvaluationOutcome:
    """
    Immutable snapshot of a cross-validation run.

    r2_score is the squared Pearson correlation between label ordinals
    (labels numbered in first-seen order). It is a proxy, not a coefficient of
    determination.
    """
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    r2_score: float
    class_counts: Mapping[str, int] = field(default_factory=dict)
    confusion_matrix: Mapping[str, Mapping[str, int]] = field(default_factory=dict)
    label_metrics: Mapping[str, LabelMetrics] = field(default_factory=dict)
    total_samples: int = 0
    correct_samples: int = 0
    folds: int = 0
    max_per_fold: int = 0

    def __post_init__(self):
        """Take private read-only copies of every mapping."""
        object.__setattr__(self, "class_counts", _freeze_mapping(self.class_counts))
        object.__setattr__(self, "label_metrics", _freeze_mapping(self.label_metrics))
        object.__setattr__(
            self,
            "confusion_matrix",
            MappingProxyType({
                actual: _freeze_mapping(row) for actual, row in self.confusion_matrix.items()
            }),
        )

    def to_dict(self, include_confusion_matrix: bool = True) -> Dict[str, Any]:
        """
        Convert the outcome to a plain dictionary for JSON responses.

        Args:
            include_confusion_matrix: Whether to include the confusion matrix

        Returns:
            Dictionary with camelCase metric keys
        """
        result = {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1Score": self.f1_score,
            "r2Score": self.r2_score,
            "classCounts": dict(self.class_counts),
        }
        if include_confusion_matrix:
            result["confusionMatrix"] = {
                actual: dict(row) for actual, row in self.confusion_matrix.items()
            }
        return result

    def format_result(self) -> str:
        """
        Format the evaluation outcome as a human-readable string.

        Returns:
            Formatted result string
        """
        lines = []

        lines.append("Cross-Validation Result")
        lines.append("=" * 50)
        lines.append(f"Folds: {self.folds} (max {self.max_per_fold} test samples per fold)")
        lines.append(f"Evaluated samples: {self.total_samples} ({self.correct_samples} correct)")
        lines.append(f"Accuracy:  {self.accuracy:.4f}")
        lines.append(f"Precision: {self.precision:.4f} (macro)")
        lines.append(f"Recall:    {self.recall:.4f} (macro)")
        lines.append(f"F1 Score:  {self.f1_score:.4f}")
        lines.append(f"R2 (label-ordinal correlation proxy): {self.r2_score:.4f}")

        if self.label_metrics:
            lines.append("\nPer-label metrics:")
            for label, metrics in self.label_metrics.items():
                lines.append(
                    f"   {label}: precision={metrics.precision:.4f} "
                    f"recall={metrics.recall:.4f} support={metrics.support}"
                )

        return "\n".join(lines)
