"""
FireGuard - Engine Startup Tests
tests/test_engine.py

Two-phase startup: train on first boot, load afterwards, and the hotspot
index only accompanies a loaded model when requested.
"""

import tempfile
import unittest
from pathlib import Path

from fireguard.config import Settings
from fireguard.core.engine import build_engine
from tests.factories import corpus_csv_rows, summer_corpus


class TestBuildEngine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        root = Path(self.tmp.name)
        self.corpus_path = root / "firms.csv"
        self.corpus_path.write_text(corpus_csv_rows(summer_corpus(count=60)))
        self.model_path = root / "model" / "risk.joblib"

    def settings(self, **overrides):
        values = dict(
            CORPUS_PATH=str(self.corpus_path),
            MODEL_PATH=str(self.model_path),
            RANDOM_SEED=42,
            FORCE_RETRAIN=False,
            HOTSPOT_INDEX_ON_LOAD=False,
        )
        values.update(overrides)
        return Settings(**values)

    def test_01_first_boot_trains(self):
        engine = build_engine(self.settings())
        self.assertTrue(engine.trained)
        self.assertGreater(len(engine.index), 0)
        self.assertTrue(self.model_path.exists())
        self.assertIs(engine.prediction_service.index, engine.index)
        self.assertIs(engine.prediction_service.classifier, engine.classifier)

    def test_02_second_boot_loads_with_empty_index(self):
        build_engine(self.settings())
        engine = build_engine(self.settings())
        self.assertFalse(engine.trained)
        self.assertEqual(len(engine.index), 0)

    def test_03_index_on_load(self):
        build_engine(self.settings())
        engine = build_engine(self.settings(HOTSPOT_INDEX_ON_LOAD=True))
        self.assertFalse(engine.trained)
        self.assertGreater(len(engine.index), 0)

    def test_04_missing_corpus_trains_on_fallback(self):
        engine = build_engine(self.settings(CORPUS_PATH=str(Path(self.tmp.name) / "none.csv")))
        self.assertTrue(engine.trained)
        self.assertEqual(len(engine.index), 0)
        self.assertEqual(engine.classifier.metrics, {})

    def test_05_unreadable_corpus_trains_on_fallback(self):
        self.corpus_path.write_text("latitude,longitude\n50,-100\n")
        engine = build_engine(self.settings())
        self.assertTrue(engine.trained)
        self.assertEqual(len(engine.index), 0)


if __name__ == "__main__":
    unittest.main()
