"""
Evaluating hyperparameters with k-fold cross-validation.
"""

import sys
import os
import logging
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

import numpy as np

from knn_point_classifier import KNNClassifier, KNNHyperparameters, CrossValidationEvaluator, LabeledSample

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Three noisy clusters of unequal size
rng = np.random.default_rng(7)
centers = {"KLN-01": (22.32, 114.17), "NT-02": (22.40, 114.10), "HK-03": (22.28, 114.16)}
sizes = {"KLN-01": 120, "NT-02": 60, "HK-03": 15}

samples = []
for label, (lat, lng) in centers.items():
    for lat_offset, lng_offset in rng.normal(0.0, 0.02, size=(sizes[label], 2)):
        samples.append(LabeledSample.from_point(lat + lat_offset, lng + lng_offset, label))

classifier = KNNClassifier(k=5)
classifier.train(samples)

outcome = classifier.evaluate(folds=5, max_per_fold=30, seed=42)
print(outcome.format_result())

# Compare voting policies on the same folds
print("\nVoting policy comparison (seed=42):")
for voting in ["majority", "weighted_distance"]:
    for k in [1, 5, 15]:
        params = KNNHyperparameters(k=k, voting=voting)
        result = CrossValidationEvaluator(params, seed=42, max_workers=4).evaluate(samples, 5, 30)
        print(f"  {voting:<18} k={k:<3} accuracy={result.accuracy:.4f} f1={result.f1_score:.4f}")
