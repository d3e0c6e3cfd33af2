"""
Comparing majority voting with distance- and class-weighted voting.

A rare zone with a single address sits next to a large zone. Majority voting
lets the large zone win near the rare address; weighted voting favors the
closest neighbors and boosts the under-represented zone.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from knn_point_classifier import KNNClassifier, LabeledSample

training_points = [
    LabeledSample.from_point(22.3000 + i * 0.0004, 114.1700 + (i % 4) * 0.0004, "KLN-01")
    for i in range(20)
]
training_points.append(LabeledSample.from_point(22.3050, 114.1725, "KLN-99"))

query = (22.3051, 114.1726)

majority = KNNClassifier(k=5, voting="majority")
majority.train(training_points)

weighted = KNNClassifier(k=5, voting="weighted_distance", distance_weight_factor=2.0)
weighted.train(training_points)

print("Class weights:")
for label, weight in sorted(weighted.class_weights.items()):
    print(f"  {label}: {weight:.4f}")

print(f"\nQuery point: {query}")
print(f"  Majority vote:          {majority.predict(query)}  {majority.vote_scores(query)}")
print(f"  Weighted distance vote: {weighted.predict(query)}")
for label, score in sorted(weighted.vote_scores(query).items()):
    print(f"    {label}: {score:.2f}")

# Without class weights the boost disappears, distance weighting still applies
weighted.use_class_weights = False
print(f"  Weighted, no class weights: {weighted.predict(query)}")
