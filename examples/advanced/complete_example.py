#!/usr/bin/env python3
"""
Complete Example: KNN Point Classifier from Workbook to Evaluation

This example demonstrates the full workflow of the point classifier:
1. Writing a synthetic address workbook
2. Loading labeled coordinates from Excel
3. Training and classifying points with both voting policies
4. Cross-validating several hyperparameter settings
5. Saving the model and loading it again

Usage:
    python examples/advanced/complete_example.py

Requirements:
    - Python 3.9+
    - All dependencies from pyproject.toml
"""

import sys
import os
import time
from pathlib import Path

# Add the parent directory to the path so we can import the classifier
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

import numpy as np
import pandas as pd

from knn_point_classifier import (
    ExcelPointLoader,
    KNNClassifier,
    KNNHyperparameters,
    CrossValidationEvaluator
)
from knn_point_classifier.exceptions import ClassifierError


ZONES = {
    "KLN-01": ((22.3193, 114.1694), 300),
    "KLN-02": ((22.3362, 114.1745), 150),
    "NT-05": ((22.3800, 114.1900), 80),
    "HK-09": ((22.2800, 114.1600), 12),
}


def write_workbook(path: Path, seed: int = 0) -> None:
    """Write a workbook with the ESTATE and STREET sheets the loader expects."""
    rng = np.random.default_rng(seed)
    rows = []
    for zone, ((lat, lng), count) in ZONES.items():
        for lat_offset, lng_offset in rng.normal(0.0, 0.004, size=(count, 2)):
            rows.append({
                "LATITUDE": round(lat + lat_offset, 6),
                "LONGITUDE": round(lng + lng_offset, 6),
                "DELIVERY ZONE CODE": zone,
            })

    frame = pd.DataFrame(rows).sample(frac=1.0, random_state=seed).reset_index(drop=True)
    half = len(frame) // 2

    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.iloc[:half].to_excel(writer, sheet_name="ESTATE", index=False)
        frame.iloc[half:].to_excel(writer, sheet_name="STREET", index=False)


def main():
    """
    Complete example demonstrating ingestion, classification, evaluation and persistence.
    """
    print("🚀 KNN Point Classifier - Complete Example")
    print("=" * 80)

    workbook_path = Path("output/addresses.xlsx")
    model_path = "output/knn_classifier.pkl.gz"

    print(f"📋 Configuration:")
    print(f"   Workbook: {workbook_path}")
    print(f"   Model path: {model_path}")

    try:
        # Step 1: Workbook
        print(f"\n📊 Step 1: Writing synthetic workbook")
        write_workbook(workbook_path)

        # Step 2: Ingestion
        print(f"\n📥 Step 2: Loading labeled coordinates")
        samples = ExcelPointLoader(str(workbook_path)).load()
        print(f"   Loaded {len(samples)} points")

        # Step 3: Classification
        print(f"\n🔍 Step 3: Classifying points")
        majority = KNNClassifier(k=15, voting="majority")
        majority.train(samples)
        weighted = KNNClassifier(hyperparameters=majority.hyperparameters.with_changes(voting="weighted_distance"))
        weighted.train(samples)

        print(f"   Class weights:")
        for label, weight in sorted(weighted.class_weights.items()):
            print(f"     {label}: {weight:.4f}")

        queries = [(22.3195, 114.1700), (22.2805, 114.1605), (22.3500, 114.1800)]
        for latitude, longitude in queries:
            print(
                f"   ({latitude}, {longitude}) -> majority: {majority.predict_point(latitude, longitude)}, "
                f"weighted: {weighted.predict_point(latitude, longitude)}"
            )

        # Step 4: Evaluation
        print(f"\n📈 Step 4: Cross-validation (5 folds, at most 50 test samples per fold)")
        for voting in ["majority", "weighted_distance"]:
            for k in [1, 5, 15, 30]:
                params = KNNHyperparameters(k=k, voting=voting)
                start_time = time.time()
                outcome = CrossValidationEvaluator(params, seed=42, max_workers=4).evaluate(samples, 5, 50)
                elapsed = time.time() - start_time
                print(
                    f"   {voting:<18} k={k:<3} accuracy={outcome.accuracy:.4f} "
                    f"macro-F1={outcome.f1_score:.4f} r2-proxy={outcome.r2_score:.4f} ({elapsed:.2f}s)"
                )

        outcome = weighted.evaluate(5, 50, seed=42)
        print(f"\n{outcome.format_result()}")

        # Step 5: Persistence
        print(f"\n💾 Step 5: Saving and loading the model")
        weighted.save_model(model_path)
        restored = KNNClassifier.load_model(model_path)
        print(f"   Restored: {restored}")
        assert restored.predict_point(*queries[0]) == weighted.predict_point(*queries[0])

        print(f"\n✅ Complete example finished")

    except ClassifierError as e:
        print(f"❌ Classifier error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
