"""
Fire risk binary classifier.

Min-max normalized features feeding a LightGBM gradient-boosted tree model,
wrapped in a scikit-learn Pipeline so the normalization parameters travel
with the artifact. Persistence uses joblib.
"""

import io
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

import joblib
import numpy as np
from lightgbm import LGBMClassifier
from sklearn.metrics import (
    accuracy_score,
    f1_score,
    log_loss,
    precision_score,
    recall_score,
    roc_auc_score,
)
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import MinMaxScaler

from fireguard.models.risk import FEATURE_NAMES, RiskSample
from fireguard.utils.exceptions import ModelArtifactError, ModelError
from fireguard.utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

NUM_LEAVES = 31
N_ESTIMATORS = 200
MIN_CHILD_SAMPLES = 20
LEARNING_RATE = 0.15
TEST_FRACTION = 0.2

# Below this many samples (or with fewer than 2 of either class) there is no
# held-out split; the model trains on everything and evaluation is skipped.
MIN_HOLDOUT_SAMPLES = 10


def build_pipeline(seed: int = 42) -> Pipeline:
    return Pipeline([
        ("scaler", MinMaxScaler()),
        ("model", LGBMClassifier(
            num_leaves=NUM_LEAVES,
            n_estimators=N_ESTIMATORS,
            min_child_samples=MIN_CHILD_SAMPLES,
            learning_rate=LEARNING_RATE,
            random_state=seed,
            verbose=-1,
        )),
    ])


def to_matrix(samples: Sequence[RiskSample]) -> np.ndarray:
    return np.array([s.to_vector() for s in samples], dtype=np.float64)


def to_labels(samples: Sequence[RiskSample]) -> np.ndarray:
    if any(s.label is None for s in samples):
        raise ModelError("Training samples must all carry a label")
    return np.array([1 if s.label else 0 for s in samples], dtype=np.int64)


def evaluate(pipeline: Pipeline, X: np.ndarray, y: np.ndarray) -> Dict[str, float]:
    """Held-out diagnostics at a 0.5 decision threshold."""
    proba = pipeline.predict_proba(X)[:, 1]
    predicted = (proba >= 0.5).astype(int)
    return {
        "accuracy": float(accuracy_score(y, predicted)),
        "auc": float(roc_auc_score(y, proba)),
        "f1": float(f1_score(y, predicted, zero_division=0)),
        "precision": float(precision_score(y, predicted, zero_division=0)),
        "recall": float(recall_score(y, predicted, zero_division=0)),
        "log_loss": float(log_loss(y, proba, labels=[0, 1])),
    }


class RiskClassifier:
    """Trained classifier mapping a RiskSample to P(fire)."""

    def __init__(self, pipeline: Pipeline, metrics: Optional[Dict[str, float]] = None):
        self.pipeline = pipeline
        self.metrics = metrics or {}

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    @classmethod
    def fit(cls, samples: Sequence[RiskSample], seed: int = 42) -> "RiskClassifier":
        if not samples:
            raise ModelError("Cannot train on an empty sample set")

        X = to_matrix(samples)
        y = to_labels(samples)
        positives = int(y.sum())
        negatives = len(y) - positives

        if positives == 0 or negatives == 0:
            raise ModelError(
                "Training samples must contain both classes",
                details={"positives": positives, "negatives": negatives},
            )

        pipeline = build_pipeline(seed)
        holdout = len(y) >= MIN_HOLDOUT_SAMPLES and min(positives, negatives) >= 2

        logger.info(
            "Training fire risk model",
            samples=len(y),
            fire_samples=positives,
            no_fire_samples=negatives,
            holdout=holdout,
        )

        metrics: Dict[str, float] = {}
        if holdout:
            X_train, X_test, y_train, y_test = train_test_split(
                X, y, test_size=TEST_FRACTION, random_state=seed, stratify=y
            )
            pipeline.fit(X_train, y_train)
            metrics = evaluate(pipeline, X_test, y_test)
            logger.info(
                "Model evaluation",
                test_samples=len(y_test),
                **{name: round(value, 4) for name, value in metrics.items()},
            )
        else:
            pipeline.fit(X, y)
            logger.warning("Sample set too small for a held-out split; evaluation skipped",
                           samples=len(y))

        classifier = cls(pipeline, metrics)
        classifier._log_feature_importance()
        return classifier

    def _log_feature_importance(self) -> None:
        model = self.pipeline.named_steps["model"]
        importances = getattr(model, "feature_importances_", None)
        if importances is None:
            return
        ranked = sorted(zip(FEATURE_NAMES, importances), key=lambda kv: kv[1], reverse=True)
        logger.debug("Feature importance", **{name: int(value) for name, value in ranked})

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def predict_many(self, samples: Sequence[RiskSample]) -> np.ndarray:
        if not samples:
            return np.empty(0)
        proba = self.pipeline.predict_proba(to_matrix(samples))[:, 1]
        return np.clip(proba, 0.0, 1.0)

    def predict(self, sample: RiskSample) -> float:
        return float(self.predict_many([sample])[0])

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bytes:
        buffer = io.BytesIO()
        joblib.dump(
            {
                "schema_version": SCHEMA_VERSION,
                "feature_names": list(FEATURE_NAMES),
                "pipeline": self.pipeline,
            },
            buffer,
        )
        return buffer.getvalue()

    @classmethod
    def load(cls, data: bytes) -> "RiskClassifier":
        try:
            payload = joblib.load(io.BytesIO(data))
        except Exception as e:
            raise ModelArtifactError(f"Corrupt model artifact: {e}") from e

        if not isinstance(payload, dict):
            raise ModelArtifactError("Model artifact has unexpected layout")
        if payload.get("schema_version") != SCHEMA_VERSION:
            raise ModelArtifactError(
                "Model artifact schema mismatch",
                details={"expected": SCHEMA_VERSION, "found": payload.get("schema_version")},
            )
        if tuple(payload.get("feature_names") or ()) != FEATURE_NAMES:
            raise ModelArtifactError(
                "Model artifact feature mismatch",
                details={"found": payload.get("feature_names")},
            )
        pipeline = payload.get("pipeline")
        if not hasattr(pipeline, "predict_proba"):
            raise ModelArtifactError("Model artifact holds no classifier")

        return cls(pipeline)

    def save_to(self, path: Union[str, Path]) -> Path:
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(self.save())
        except OSError as e:
            raise ModelArtifactError(f"Failed to write model artifact: {e}", path=str(target)) from e
        logger.info("Model saved", path=str(target))
        return target

    @classmethod
    def load_from(cls, path: Union[str, Path]) -> "RiskClassifier":
        source = Path(path)
        try:
            data = source.read_bytes()
        except OSError as e:
            raise ModelArtifactError(f"Model artifact unavailable: {e}", path=str(source)) from e
        classifier = cls.load(data)
        logger.info("Model loaded", path=str(source))
        return classifier


def load_or_train(
    model_path: Union[str, Path],
    trainer: Callable[[], RiskClassifier],
    force_retrain: bool = False,
) -> Tuple[RiskClassifier, bool]:
    """
    Load the persisted classifier, or train and persist a new one.

    Any load failure (missing file, corrupt artifact, schema mismatch) falls
    back to ``trainer``. A failure to persist the fresh model is logged and
    the in-memory model is still returned.

    Returns:
        (classifier, trained) where ``trained`` is True if ``trainer`` ran
    """
    if not force_retrain:
        try:
            return RiskClassifier.load_from(model_path), False
        except ModelArtifactError as e:
            logger.warning("Model load failed, retraining", path=str(model_path), error=str(e))
    else:
        logger.info("Forced retrain requested", path=str(model_path))

    classifier = trainer()
    try:
        classifier.save_to(model_path)
    except ModelArtifactError as e:
        logger.error("Model persist failed", path=str(model_path), error=str(e))
    return classifier, True
