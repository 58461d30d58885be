"""
FireGuard - Training Set Assembly Tests
tests/test_training_set.py
"""

import unittest

import numpy as np

from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.ml.training_set import (
    FALLBACK_SAMPLES,
    NEGATIVE_DENSITY_WEIGHT,
    TrainingSetBuilder,
)
from tests.factories import detection, summer_corpus


class ConstantIndex:
    def __init__(self, value):
        self.value = value

    def lookup(self, latitude, longitude):
        return self.value


class TestTrainingSetBuilder(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.fires = summer_corpus(count=50)
        cls.index = HotspotDensityIndex.from_detections(cls.fires)

    def build(self, fires, seed=42, index=None):
        builder = TrainingSetBuilder(index or self.index, np.random.default_rng(seed))
        return builder.build(fires)

    def test_01_balanced_labels(self):
        samples = self.build(self.fires)
        self.assertEqual(len(samples), 100)
        self.assertEqual(sum(1 for s in samples if s.label), 50)
        self.assertEqual(sum(1 for s in samples if s.label is False), 50)

    def test_02_same_seed_reproduces_sequence(self):
        self.assertEqual(self.build(self.fires, seed=3), self.build(self.fires, seed=3))

    def test_03_different_seed_differs(self):
        self.assertNotEqual(self.build(self.fires, seed=3), self.build(self.fires, seed=4))

    def test_04_positive_sample_ranges(self):
        for sample in (s for s in self.build(self.fires) if s.label):
            self.assertGreaterEqual(sample.temperature, -20)
            self.assertLessEqual(sample.temperature, 45)
            self.assertGreaterEqual(sample.wind_speed, 5)
            self.assertLessEqual(sample.wind_speed, 30)
            self.assertGreaterEqual(sample.humidity, 10)
            self.assertLessEqual(sample.humidity, 95)
            if 150 < sample.day_of_year < 250:
                self.assertLess(sample.precipitation, 3)

    def test_05_negative_sample_ranges(self):
        for sample in (s for s in self.build(self.fires) if s.label is False):
            self.assertGreaterEqual(sample.latitude, 41)
            self.assertLessEqual(sample.latitude, 83)
            self.assertGreaterEqual(sample.longitude, -141)
            self.assertLessEqual(sample.longitude, -52)
            self.assertGreaterEqual(sample.day_of_year, 1)
            self.assertLessEqual(sample.day_of_year, 365)
            self.assertGreaterEqual(sample.temperature, -30)
            self.assertLessEqual(sample.temperature, 35)
            self.assertGreaterEqual(sample.humidity, 60)
            self.assertLessEqual(sample.humidity, 90)
            self.assertLess(sample.precipitation, 15)

    def test_06_negative_density_is_half_weighted(self):
        samples = self.build(self.fires, index=ConstantIndex(0.8))
        for sample in samples:
            expected = 0.8 if sample.label else 0.8 * NEGATIVE_DENSITY_WEIGHT
            self.assertAlmostEqual(sample.historical_fire_density, expected)

    def test_07_positive_day_of_year_from_detection(self):
        fire = detection(56.7, -111.3)
        samples = self.build([fire])
        positive = next(s for s in samples if s.label)
        self.assertEqual(positive.day_of_year, fire.day_of_year)
        self.assertEqual((positive.latitude, positive.longitude), (56.7, -111.3))

    def test_08_empty_corpus_uses_fallback(self):
        samples = self.build([])
        self.assertEqual(samples, list(FALLBACK_SAMPLES))
        self.assertEqual(sum(1 for s in samples if s.label), 2)

    def test_09_detections_outside_region_use_fallback(self):
        samples = self.build([detection(30.0, -100.0), detection(10.0, 10.0)])
        self.assertEqual(samples, list(FALLBACK_SAMPLES))


if __name__ == "__main__":
    unittest.main()
