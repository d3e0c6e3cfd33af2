"""
Brute-force nearest neighbor search for point classification.

This module computes Euclidean distances from a query vector to every
training sample and ranks the samples by ascending distance.
"""

import math
import numpy as np
from typing import List, Sequence
from .models.data_models import TrainingSet, NeighborCandidate
from .exceptions import DimensionMismatchError, InvalidInputError


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Calculate the Euclidean distance between two feature vectors.

    Raises:
        DimensionMismatchError: If the vectors have different lengths
    """
    if len(a) != len(b):
        raise DimensionMismatchError(f"Feature dimension mismatch: {len(a)} vs {len(b)}")
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


class NearestNeighborSearch:
    """
    Scans every training sample for each query.

    Equal distances keep the original training-set order, so the ranking
    of a query is fully deterministic.
    """

    def __init__(self, training_set: TrainingSet):
        """
        Initialize the search with a training set.

        Args:
            training_set: Non-empty training set to search
        """
        self.training_set = training_set
        self._labels = [sample.label for sample in training_set]

        # Pre-compute feature matrix once, shape (num_samples, dimension)
        self._feature_matrix = np.array([sample.features for sample in training_set], dtype=float)

    @property
    def dimension(self) -> int:
        return self.training_set.dimension

    def _to_query(self, features: Sequence[float]) -> np.ndarray:
        try:
            query = np.asarray(features, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Query vector must contain only numbers: {e}") from e

        if query.ndim != 1:
            raise InvalidInputError("Query vector must be one-dimensional")
        if not np.all(np.isfinite(query)):
            raise InvalidInputError("Query vector must contain only finite numbers")

        if query.shape[0] != self._feature_matrix.shape[1]:
            raise DimensionMismatchError(
                f"Query dimension {query.shape[0]} doesn't match "
                f"training dimension {self._feature_matrix.shape[1]}"
            )
        return query

    def distances(self, features: Sequence[float]) -> np.ndarray:
        """
        Distances from the query to every training sample, in training order.

        Raises:
            DimensionMismatchError: If the query length differs from the training dimensionality
        """
        query = self._to_query(features)
        return np.sqrt(np.sum((self._feature_matrix - query) ** 2, axis=1))

    def query(self, features: Sequence[float]) -> List[NeighborCandidate]:
        """
        Rank all training samples by ascending distance to the query.

        Args:
            features: Query feature vector

        Returns:
            One NeighborCandidate per training sample, nearest first

        Raises:
            DimensionMismatchError: If the query length differs from the training dimensionality
        """
        distances = self.distances(features)

        # Stable sort keeps training order among equal distances
        order = np.argsort(distances, kind="stable")

        return [
            NeighborCandidate(distance=float(distances[idx]), label=self._labels[idx], index=int(idx))
            for idx in order
        ]

    def nearest(self, features: Sequence[float], k: int) -> List[NeighborCandidate]:
        """
        Return the k nearest training samples (all of them when k exceeds the sample count).

        Raises:
            InvalidInputError: If k is not positive
            DimensionMismatchError: If the query length differs from the training dimensionality
        """
        if k <= 0:
            raise InvalidInputError("k must be positive")

        k = min(k, len(self._labels))
        return self.query(features)[:k]

    def get_sample_count(self) -> int:
        return len(self._labels)
