"""
Data models for the k-nearest-neighbor point classifier.
"""

from .data_models import (
    FeatureVector,
    LabeledSample,
    NeighborCandidate,
    KNNHyperparameters,
    TrainingSet,
    LabelMetrics,
    EvaluationOutcome,
    VOTING_MAJORITY,
    VOTING_WEIGHTED_DISTANCE,
    VOTING_STRATEGIES,
    to_feature_vector
)

__all__ = [
    "FeatureVector",
    "LabeledSample",
    "NeighborCandidate",
    "KNNHyperparameters",
    "TrainingSet",
    "LabelMetrics",
    "EvaluationOutcome",
    "VOTING_MAJORITY",
    "VOTING_WEIGHTED_DISTANCE",
    "VOTING_STRATEGIES",
    "to_feature_vector"
]
