"""
Class-imbalance weights for weighted nearest neighbor voting.
"""

import logging
import math
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping

from .models.data_models import TrainingSet


logger = logging.getLogger(__name__)

DEFAULT_MAX_CLASS_WEIGHT = 50.0


class ClassWeightTable:
    """
    Per-label weight that boosts votes from under-represented classes.

    For a label with ``count`` samples, where the largest class has
    ``max_count`` samples, the weight is
    ``min(log10(max_count / count * 10), max_class_weight)``. The logarithm
    compresses extreme ratios, so a singleton class next to a class of
    thousands is boosted without dominating the vote. The largest class
    always gets 1.0.
    """

    def __init__(self, weights: Mapping[str, float]):
        for label, weight in weights.items():
            if not weight > 0:
                raise ValueError(f"Class weight for '{label}' must be positive, got {weight}")
        self._weights = MappingProxyType(dict(weights))

    @classmethod
    def from_training_set(
        cls,
        training_set: TrainingSet,
        max_class_weight: float = DEFAULT_MAX_CLASS_WEIGHT
    ) -> 'ClassWeightTable':
        """
        Compute imbalance weights from the label counts of a training set.

        Args:
            training_set: Training set to derive counts from
            max_class_weight: Upper bound for any weight

        Returns:
            ClassWeightTable covering every label in the training set
        """
        counts = training_set.label_counts
        max_count = max(counts.values())

        weights: Dict[str, float] = {}
        for label, count in counts.items():
            raw_weight = max_count / count
            weight = min(math.log10(raw_weight * 10), max_class_weight)
            weights[label] = weight
            logger.debug(f"Class '{label}' raw weight: {raw_weight:.4f}, smoothed weight: {weight:.4f}")

        return cls(weights)

    @classmethod
    def uniform(cls, labels: Iterable[str]) -> 'ClassWeightTable':
        """Weight 1.0 for every label (class weighting disabled)."""
        return cls({label: 1.0 for label in labels})

    @classmethod
    def for_training_set(
        cls,
        training_set: TrainingSet,
        enabled: bool,
        max_class_weight: float = DEFAULT_MAX_CLASS_WEIGHT
    ) -> 'ClassWeightTable':
        if enabled:
            return cls.from_training_set(training_set, max_class_weight)
        return cls.uniform(training_set.labels)

    def weight(self, label: str) -> float:
        """Weight for a label; 1.0 for labels the table does not know."""
        return self._weights.get(label, 1.0)

    @property
    def labels(self) -> List[str]:
        return sorted(self._weights)

    def is_uniform(self) -> bool:
        return all(weight == 1.0 for weight in self._weights.values())

    def as_dict(self) -> Dict[str, float]:
        return dict(self._weights)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClassWeightTable):
            return NotImplemented
        return dict(self._weights) == dict(other._weights)

    def __repr__(self) -> str:
        return f"ClassWeightTable({dict(self._weights)!r})"
