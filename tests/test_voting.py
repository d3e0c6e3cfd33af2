"""
Tests for the voting policies.
"""

import pytest

from knn_point_classifier.voting import (
    MajorityVoter,
    WeightedDistanceVoter,
    create_voter,
    select_label,
    vote_weight
)
from knn_point_classifier.class_weights import ClassWeightTable
from knn_point_classifier.models.data_models import KNNHyperparameters, NeighborCandidate
from knn_point_classifier.exceptions import InvalidInputError


def _neighbors(*pairs):
    return [
        NeighborCandidate(distance=distance, label=label, index=i)
        for i, (distance, label) in enumerate(pairs)
    ]


class TestSelectLabel:
    """Test cases for select_label."""

    def test_highest_score_wins(self):
        assert select_label({"A": 1.0, "B": 3.0, "C": 2.0}) == "B"

    def test_ties_resolve_to_smallest_label(self):
        assert select_label({"ZONE-9": 2.0, "ZONE-1": 2.0, "ZONE-5": 1.0}) == "ZONE-1"

    def test_empty_scores(self):
        with pytest.raises(InvalidInputError, match="Cannot vote without neighbors"):
            select_label({})


class TestVoteWeight:
    """Test cases for vote_weight."""

    def test_formula(self):
        assert vote_weight(1.0, 1e-9, 2.0) == pytest.approx(1.0)
        assert vote_weight(0.5, 1e-5, 2.0, class_weight=3.0) == pytest.approx(3.0 / (0.50001 ** 2))

    def test_zero_distance_is_finite(self):
        assert vote_weight(0.0, 1e-5, 2.0) == pytest.approx(1e10)

    def test_weight_decreases_with_distance(self):
        weights = [vote_weight(d, 1e-5, 2.0) for d in (0.1, 0.5, 1.0, 4.0)]
        assert weights == sorted(weights, reverse=True)


class TestMajorityVoter:
    """Test cases for MajorityVoter."""

    def test_counts_votes(self):
        voter = MajorityVoter()
        neighbors = _neighbors((0.1, "A"), (0.2, "B"), (0.3, "B"))

        assert voter.tally(neighbors) == {"A": 1, "B": 2}
        assert voter.vote(neighbors) == "B"

    def test_ignores_distance_and_class_weights(self):
        voter = MajorityVoter()
        neighbors = _neighbors((0.0, "A"), (9.0, "B"), (9.5, "B"))
        weights = ClassWeightTable({"A": 40.0, "B": 1.0})

        assert voter.vote(neighbors, weights) == "B"

    def test_tie_breaks_lexicographically(self):
        neighbors = _neighbors((0.1, "B"), (0.2, "A"))
        assert MajorityVoter().vote(neighbors) == "A"


class TestWeightedDistanceVoter:
    """Test cases for WeightedDistanceVoter."""

    def test_close_neighbor_outweighs_distant_majority(self):
        voter = WeightedDistanceVoter(epsilon=1e-5, distance_weight_factor=2.0)
        neighbors = _neighbors((0.1, "A"), (2.0, "B"), (2.5, "B"))

        assert voter.vote(neighbors) == "A"

    def test_class_weights_scale_votes(self):
        voter = WeightedDistanceVoter(epsilon=1e-5, distance_weight_factor=2.0)
        neighbors = _neighbors((1.0, "A"), (1.0, "B"))
        weights = ClassWeightTable({"A": 1.0, "B": 2.0})

        scores = voter.tally(neighbors, weights)
        assert scores["B"] == pytest.approx(2 * scores["A"])
        assert voter.vote(neighbors, weights) == "B"

    def test_equal_scores_tie_break(self):
        voter = WeightedDistanceVoter()
        neighbors = _neighbors((1.0, "B"), (1.0, "A"))
        assert voter.vote(neighbors) == "A"

    def test_factor_sharpens_preference(self):
        neighbors = _neighbors((1.0, "A"), (2.0, "B"), (2.0, "B"), (2.0, "B"))

        assert WeightedDistanceVoter(distance_weight_factor=1.0).vote(neighbors) == "B"
        assert WeightedDistanceVoter(distance_weight_factor=3.0).vote(neighbors) == "A"


class TestCreateVoter:
    """Test cases for create_voter."""

    def test_majority(self):
        voter = create_voter(KNNHyperparameters(voting="majority"))
        assert isinstance(voter, MajorityVoter)
        assert voter.name == "majority"

    def test_weighted_distance(self):
        voter = create_voter(KNNHyperparameters(
            voting="weighted_distance",
            epsilon=0.01,
            distance_weight_factor=3.0
        ))
        assert isinstance(voter, WeightedDistanceVoter)
        assert voter.epsilon == 0.01
        assert voter.distance_weight_factor == 3.0
