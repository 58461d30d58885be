"""
Fire Risk Model Training
Retrains the classifier from a FIRMS corpus CSV and persists the artifact.

Usage:
    python scripts/train_model.py --corpus Data/firms.csv --model Data/fire_risk_model.joblib
"""

import argparse
import sys

from fireguard.config import settings
from fireguard.core.engine import read_corpus, train_classifier
from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.utils.logger import setup_logging, get_logger
from fireguard.utils.exceptions import FireGuardError

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train the FireGuard risk classifier")
    parser.add_argument("--corpus", default=settings.CORPUS_PATH, help="FIRMS detections CSV")
    parser.add_argument("--model", default=settings.MODEL_PATH, help="Output artifact path")
    parser.add_argument("--seed", type=int, default=settings.RANDOM_SEED, help="Random seed")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(settings.ENVIRONMENT, settings.LOG_DIR)

    detections = read_corpus(args.corpus)
    index = HotspotDensityIndex.from_detections(detections)

    try:
        classifier = train_classifier(detections, index, args.seed)
        path = classifier.save_to(args.model)
    except FireGuardError as e:
        logger.error("Training failed", error=str(e))
        return 1

    print(f"Model saved to {path}")
    print(f"Detections: {len(detections)}  Hotspot cells: {len(index)}")
    if classifier.metrics:
        print("Held-out metrics:")
        for name, value in classifier.metrics.items():
            print(f"  {name:<10} {value:.4f}")
    else:
        print("Held-out metrics unavailable (sample set too small)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
