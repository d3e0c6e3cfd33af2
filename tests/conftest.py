"""
Shared fixtures for the point classifier tests.
"""

import pytest

from knn_point_classifier.models.data_models import LabeledSample


@pytest.fixture
def two_cluster_samples():
    """Two well separated 2-D clusters."""
    return [
        LabeledSample((0.0, 0.0), "A"),
        LabeledSample((1.0, 1.0), "A"),
        LabeledSample((5.0, 5.0), "B"),
        LabeledSample((6.0, 6.0), "B"),
    ]


@pytest.fixture
def zone_samples():
    """Three delivery-zone style clusters of unequal size."""
    samples = []
    for i in range(12):
        samples.append(LabeledSample((22.30 + i * 0.001, 114.17 + i * 0.001), "KLN-01"))
    for i in range(8):
        samples.append(LabeledSample((22.40 + i * 0.001, 114.10 + i * 0.001), "NT-02"))
    for i in range(5):
        samples.append(LabeledSample((22.25 + i * 0.001, 114.20 + i * 0.001), "HK-03"))
    return samples
