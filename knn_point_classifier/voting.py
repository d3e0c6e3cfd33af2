"""
Voting policies that turn an ordered neighbor list into a predicted label.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .class_weights import ClassWeightTable
from .models.data_models import (
    KNNHyperparameters,
    NeighborCandidate,
    VOTING_MAJORITY,
    VOTING_WEIGHTED_DISTANCE
)
from .exceptions import InvalidInputError


def select_label(scores: Dict[str, float]) -> str:
    """
    Pick the label with the highest score.

    Equal scores resolve to the lexicographically smallest label.

    Raises:
        InvalidInputError: If there are no scores to choose from
    """
    if not scores:
        raise InvalidInputError("Cannot vote without neighbors")
    return min(scores, key=lambda label: (-scores[label], label))


def vote_weight(
    distance: float,
    epsilon: float,
    distance_weight_factor: float,
    class_weight: float = 1.0
) -> float:
    """Weighted vote of one neighbor: (1 / (distance + epsilon)) ** factor * class_weight."""
    return (1.0 / (distance + epsilon)) ** distance_weight_factor * class_weight


class Voter(ABC):
    """Interface for neighbor voting policies."""

    name: str = ""

    @abstractmethod
    def tally(
        self,
        neighbors: List[NeighborCandidate],
        class_weights: Optional[ClassWeightTable] = None
    ) -> Dict[str, float]:
        """
        Accumulate a score per label from the given neighbors.

        Args:
            neighbors: Nearest neighbors, nearest first (already cut to k)
            class_weights: Optional per-label imbalance weights

        Returns:
            Dictionary mapping labels to accumulated scores
        """
        pass

    def vote(
        self,
        neighbors: List[NeighborCandidate],
        class_weights: Optional[ClassWeightTable] = None
    ) -> str:
        """Return the winning label for the given neighbors."""
        return select_label(self.tally(neighbors, class_weights))


class MajorityVoter(Voter):
    """Each neighbor casts one vote for its label."""

    name = VOTING_MAJORITY

    def tally(
        self,
        neighbors: List[NeighborCandidate],
        class_weights: Optional[ClassWeightTable] = None
    ) -> Dict[str, float]:
        counts: Dict[str, float] = {}
        for neighbor in neighbors:
            counts[neighbor.label] = counts.get(neighbor.label, 0) + 1
        return counts


class WeightedDistanceVoter(Voter):
    """
    Each neighbor votes with (1 / (distance + epsilon)) ** distance_weight_factor,
    scaled by the class weight of its label.

    Raising distance_weight_factor sharpens the advantage of close neighbors.
    """

    name = VOTING_WEIGHTED_DISTANCE

    def __init__(self, epsilon: float = 1e-5, distance_weight_factor: float = 2.0):
        self.epsilon = epsilon
        self.distance_weight_factor = distance_weight_factor

    def tally(
        self,
        neighbors: List[NeighborCandidate],
        class_weights: Optional[ClassWeightTable] = None
    ) -> Dict[str, float]:
        votes: Dict[str, float] = {}
        for neighbor in neighbors:
            class_weight = class_weights.weight(neighbor.label) if class_weights is not None else 1.0
            weight = vote_weight(neighbor.distance, self.epsilon, self.distance_weight_factor, class_weight)
            votes[neighbor.label] = votes.get(neighbor.label, 0.0) + weight
        return votes


def create_voter(hyperparameters: KNNHyperparameters) -> Voter:
    """Build the voter selected by the hyperparameters."""
    if hyperparameters.voting == VOTING_WEIGHTED_DISTANCE:
        return WeightedDistanceVoter(
            epsilon=hyperparameters.epsilon,
            distance_weight_factor=hyperparameters.distance_weight_factor
        )
    return MajorityVoter()
