"""
FireGuard - Prediction Service Tests
tests/test_prediction.py
"""

import unittest

from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.core.prediction import PredictionService, classify
from fireguard.models.risk import RiskTier
from tests.factories import FixedClassifier, detection, weather


class TestTiering(unittest.TestCase):

    def test_01_boundaries_fall_to_lower_tier(self):
        self.assertEqual(classify(0.70), RiskTier.MEDIUM)
        self.assertEqual(classify(0.70001), RiskTier.HIGH)
        self.assertEqual(classify(0.40), RiskTier.LOW)
        self.assertEqual(classify(0.40001), RiskTier.MEDIUM)

    def test_02_extremes(self):
        self.assertEqual(classify(0.0), RiskTier.LOW)
        self.assertEqual(classify(1.0), RiskTier.HIGH)

    def test_03_interpretations(self):
        self.assertTrue(RiskTier.HIGH.interpretation.startswith("HIGH RISK"))
        self.assertTrue(RiskTier.MEDIUM.interpretation.startswith("MEDIUM RISK"))
        self.assertTrue(RiskTier.LOW.interpretation.startswith("LOW RISK"))
        self.assertEqual(RiskTier.HIGH.value, "High")


class TestPredictionService(unittest.TestCase):

    def setUp(self):
        self.index = HotspotDensityIndex.from_detections([detection(56.7, -111.3)])
        self.classifier = FixedClassifier(0.75)
        self.service = PredictionService(self.classifier, self.index)

    def test_01_build_sample_maps_weather(self):
        sample = self.service.build_sample(
            56.7, -111.3, weather(temperature=30.0, humidity=20.0, wind_speed=25.0, precipitation=1.0), 200
        )
        self.assertEqual(sample.temperature, 30.0)
        self.assertEqual(sample.humidity, 20.0)
        self.assertEqual(sample.wind_speed, 25.0)
        self.assertEqual(sample.precipitation, 1.0)
        self.assertEqual(sample.day_of_year, 200)
        self.assertEqual(sample.historical_fire_density, 1.0)

    def test_02_unseen_cell_density_zero(self):
        sample = self.service.build_sample(45.0, -75.0, weather(), 100)
        self.assertEqual(sample.historical_fire_density, 0.0)

    def test_03_assess(self):
        sample, prediction = self.service.assess(56.7, -111.3, weather(), 200)
        self.assertEqual(prediction.probability, 0.75)
        self.assertEqual(prediction.tier, RiskTier.HIGH)
        self.assertEqual(self.classifier.seen, [sample])


if __name__ == "__main__":
    unittest.main()
