"""
Training from an Excel workbook, saving the model and loading it again.

The workbook needs LATITUDE, LONGITUDE and DELIVERY ZONE CODE columns on the
ESTATE, STREET or STREET_NUMBER sheets.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from knn_point_classifier import ExcelPointLoader, KNNClassifier, ClassifierError

workbook_path = "data/addresses.xlsx"
model_path = "output/knn_classifier.pkl.gz"

try:
    samples = ExcelPointLoader(workbook_path).load()
    print(f"Loaded {len(samples)} labeled points from {workbook_path}")

    classifier = KNNClassifier(k=10, voting="weighted_distance")
    classifier.train(samples)
    classifier.save_model(model_path)
    print(f"Saved model to {model_path}")

    restored = KNNClassifier.load_model(model_path)
    print(f"Restored: {restored}")

    latitude, longitude = samples[0].features
    print(f"First point ({latitude}, {longitude}) -> {restored.predict_point(latitude, longitude)}")
except ClassifierError as e:
    print(f"Error: {e}")
