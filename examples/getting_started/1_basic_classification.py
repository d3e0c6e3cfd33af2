"""
Basic point classification example using a handful of labeled coordinates.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from knn_point_classifier import KNNClassifier, LabeledSample

# Two delivery zones a few blocks apart
training_points = [
    LabeledSample.from_point(22.3193, 114.1694, "KLN-01"),
    LabeledSample.from_point(22.3201, 114.1702, "KLN-01"),
    LabeledSample.from_point(22.3188, 114.1710, "KLN-01"),
    LabeledSample.from_point(22.3362, 114.1745, "KLN-02"),
    LabeledSample.from_point(22.3370, 114.1751, "KLN-02"),
    LabeledSample.from_point(22.3355, 114.1760, "KLN-02"),
]

classifier = KNNClassifier(k=3)
classifier.train(training_points)

print("Point Classification Results:")
print("=" * 50)
print(classifier)

queries = [
    (22.3195, 114.1700),
    (22.3365, 114.1750),
    (22.3280, 114.1725),
]

for i, (latitude, longitude) in enumerate(queries, 1):
    label = classifier.predict_point(latitude, longitude)
    print(f"\n{i}. Point: ({latitude}, {longitude})")
    print(f"   Predicted Zone: {label}")
    print(f"   Votes: {classifier.vote_scores((latitude, longitude))}")
