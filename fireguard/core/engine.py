"""
Risk engine assembly.

Startup is two-phase: the hotspot index and classifier are built (or
loaded) once, then wrapped into a read-only RiskEngine that request
handlers share.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from fireguard.config import Settings
from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.core.prediction import PredictionService
from fireguard.ml.classifier import RiskClassifier, load_or_train
from fireguard.ml.corpus import load_corpus
from fireguard.ml.training_set import TrainingSetBuilder
from fireguard.models.fires import FireDetection
from fireguard.utils.logger import get_logger
from fireguard.utils.exceptions import CorpusError

logger = get_logger(__name__)


@dataclass(frozen=True)
class RiskEngine:
    index: HotspotDensityIndex
    classifier: RiskClassifier
    prediction_service: PredictionService
    trained: bool


def read_corpus(path: str) -> List[FireDetection]:
    """Corpus detections, or an empty list when the file is unusable."""
    try:
        return load_corpus(path)
    except CorpusError as e:
        logger.error("Training corpus unusable, continuing without it", path=path, error=str(e))
        return []


def train_classifier(
    detections: List[FireDetection],
    index: HotspotDensityIndex,
    seed: int,
) -> RiskClassifier:
    samples = TrainingSetBuilder(index, np.random.default_rng(seed)).build(detections)
    return RiskClassifier.fit(samples, seed=seed)


def build_engine(settings: Settings) -> RiskEngine:
    """
    Load or train the classifier and build its hotspot index.

    Blocking (file IO and model training); run it off the event loop.
    """
    built_index: Optional[HotspotDensityIndex] = None

    def trainer() -> RiskClassifier:
        nonlocal built_index
        detections = read_corpus(settings.CORPUS_PATH)
        built_index = HotspotDensityIndex.from_detections(detections)
        return train_classifier(detections, built_index, settings.RANDOM_SEED)

    classifier, trained = load_or_train(
        settings.MODEL_PATH,
        trainer,
        force_retrain=settings.FORCE_RETRAIN,
    )

    if built_index is not None:
        index = built_index
    elif settings.HOTSPOT_INDEX_ON_LOAD:
        index = HotspotDensityIndex.from_detections(read_corpus(settings.CORPUS_PATH))
    else:
        # Loaded model: density features read 0 unless the index is requested.
        index = HotspotDensityIndex.empty()

    logger.info(
        "Risk engine ready",
        trained=trained,
        hotspot_cells=len(index),
        model_path=settings.MODEL_PATH,
    )
    return RiskEngine(
        index=index,
        classifier=classifier,
        prediction_service=PredictionService(classifier, index),
        trained=trained,
    )
