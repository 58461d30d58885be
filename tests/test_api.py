"""
FireGuard - Risk API Tests
tests/test_api.py

Routes are exercised with FastAPI's TestClient against an app whose
lifespan is not run; stub collaborators are placed on app.state.
"""

import unittest
from datetime import date
from unittest import mock

from fastapi.testclient import TestClient

from fireguard.config import settings
from fireguard.core.engine import RiskEngine
from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.core.prediction import PredictionService
from fireguard.main import create_application
from fireguard.utils.exceptions import OpenMeteoAPIError
from tests.factories import FixedClassifier, detection, weather

PREFIX = settings.API_PREFIX


class RiskAPITestCase(unittest.TestCase):

    probability = 0.82

    def setUp(self):
        self.app = create_application()
        index = HotspotDensityIndex.from_detections([detection(56.7, -111.3)])
        classifier = FixedClassifier(self.probability)
        self.app.state.engine = RiskEngine(
            index=index,
            classifier=classifier,
            prediction_service=PredictionService(classifier, index),
            trained=True,
        )
        self.weather_service = mock.Mock()
        self.weather_service.fetch_current = mock.AsyncMock(return_value=weather(temperature=31.0))
        self.firms_service = mock.Mock()
        self.firms_service.fetch_active = mock.AsyncMock(return_value=[detection(56.7, -111.3)])
        self.app.state.weather_service = self.weather_service
        self.app.state.firms_service = self.firms_service
        self.client = TestClient(self.app)


class TestLocationRisk(RiskAPITestCase):

    def test_01_location_risk(self):
        response = self.client.get(f"{PREFIX}/risk/location", params={"lat": 56.7, "lon": -111.3})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["riskLevel"], "High")
        self.assertAlmostEqual(body["probability"], self.probability)
        self.assertEqual(body["weather"]["temperature_2m"], 31.0)
        self.assertIn("relative_humidity_2m", body["weather"])
        features = body["enhancedFeatures"]
        for key in ("dayOfYear", "ndvi", "droughtIndex", "elevation", "historicalFireDensity", "season"):
            self.assertIn(key, features)
        self.assertEqual(features["historicalFireDensity"], 1.0)
        self.weather_service.fetch_current.assert_awaited_once_with(56.7, -111.3)

    def test_02_outside_canada_rejected_without_weather_call(self):
        response = self.client.get(f"{PREFIX}/risk/location", params={"lat": 30.0, "lon": -100.0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "OutOfRegionError")
        self.weather_service.fetch_current.assert_not_awaited()

    def test_03_weather_failure(self):
        self.weather_service.fetch_current.side_effect = OpenMeteoAPIError("upstream down")
        response = self.client.get(f"{PREFIX}/risk/location", params={"lat": 56.7, "lon": -111.3})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "OpenMeteoAPIError")

    def test_04_missing_parameter(self):
        response = self.client.get(f"{PREFIX}/risk/location", params={"lat": 56.7})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_05_model_not_ready(self):
        self.app.state.engine = None
        response = self.client.get(f"{PREFIX}/risk/location", params={"lat": 56.7, "lon": -111.3})
        self.assertEqual(response.status_code, 503)
        self.weather_service.fetch_current.assert_not_awaited()

    def test_06_impossible_coordinates_are_out_of_region(self):
        for params in ({"lat": 100.0, "lon": -100.0}, {"lat": 56.7, "lon": -200.0}):
            with self.subTest(**params):
                response = self.client.get(f"{PREFIX}/risk/location", params=params)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["error"], "OutOfRegionError")
        self.weather_service.fetch_current.assert_not_awaited()

    def test_07_leap_year_new_years_eve(self):
        with mock.patch("fireguard.api.v1.risk.date") as fake_date:
            fake_date.today.return_value = date(2024, 12, 31)
            response = self.client.get(f"{PREFIX}/risk/location", params={"lat": 56.7, "lon": -111.3})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["enhancedFeatures"]["dayOfYear"], 365)


class TestGridRisk(RiskAPITestCase):

    def test_01_grid(self):
        with mock.patch.object(settings, "GRID_REQUEST_DELAY_SECONDS", 0):
            response = self.client.get(f"{PREFIX}/risk/grid", params={"gridSize": 5})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["gridSize"], 5)
        self.assertEqual(body["pointCount"], 36)
        self.assertEqual(len(body["points"]), 36)
        self.assertEqual(set(body["points"][0]), {"latitude", "longitude", "probability", "riskLevel"})

    def test_02_invalid_grid_size(self):
        for size in (4, 51):
            response = self.client.get(f"{PREFIX}/risk/grid", params={"gridSize": size})
            self.assertEqual(response.status_code, 400)
        self.weather_service.fetch_current.assert_not_awaited()

    def test_03_inverted_bbox(self):
        response = self.client.get(
            f"{PREFIX}/risk/grid",
            params={"latMin": 60, "latMax": 50, "lonMin": -120, "lonMax": -110, "gridSize": 5},
        )
        self.assertEqual(response.status_code, 400)
        self.weather_service.fetch_current.assert_not_awaited()


class TestCustomWeatherRisk(RiskAPITestCase):

    params = {
        "lat": 56.7, "lon": -111.3, "temperature": 35, "windSpeed": 30,
        "humidity": 15, "precipitation": 0, "dayOfYear": 200,
    }

    def test_01_custom_weather(self):
        response = self.client.get(f"{PREFIX}/risk/test", params=self.params)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["riskLevel"], "High")
        self.assertTrue(body["interpretation"].startswith("HIGH RISK"))
        self.assertEqual(
            body["inputWeather"],
            {"temperature": 35.0, "windSpeed": 30.0, "humidity": 15.0, "precipitation": 0.0},
        )
        self.assertEqual(body["enhancedFeatures"]["dayOfYear"], 200)
        self.assertEqual(body["enhancedFeatures"]["season"], "Summer")
        self.weather_service.fetch_current.assert_not_awaited()

    def test_02_outside_canada(self):
        response = self.client.get(f"{PREFIX}/risk/test", params={**self.params, "lat": 30.0, "lon": -100.0})
        self.assertEqual(response.status_code, 400)

    def test_03_impossible_latitude_is_out_of_region(self):
        response = self.client.get(f"{PREFIX}/risk/test", params={**self.params, "lat": 100.0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "OutOfRegionError")

    def test_04_day_366_folds_onto_365(self):
        response = self.client.get(f"{PREFIX}/risk/test", params={**self.params, "dayOfYear": 366})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["enhancedFeatures"]["dayOfYear"], 365)
        sample = self.app.state.engine.classifier.seen[-1]
        self.assertEqual(sample.day_of_year, 365)


class TestActiveFiresAndHealth(RiskAPITestCase):

    def test_01_active_fires(self):
        response = self.client.get(f"{PREFIX}/risk/active-fires")
        self.assertEqual(response.status_code, 200)
        fires = response.json()
        self.assertEqual(len(fires), 1)
        self.assertEqual(fires[0]["latitude"], 56.7)
        self.assertEqual(fires[0]["acq_date"], "2023-07-19")

    def test_02_risk_health(self):
        body = self.client.get(f"{PREFIX}/risk/health").json()
        self.assertEqual(body["status"], "healthy")
        self.assertTrue(body["modelLoaded"])
        self.assertIn(body["season"], {"Winter", "Spring", "Summer", "Fall"})
        self.assertIn("timestamp", body)

    def test_03_risk_health_while_loading(self):
        self.app.state.engine = None
        body = self.client.get(f"{PREFIX}/risk/health").json()
        self.assertFalse(body["modelLoaded"])

    def test_04_root_and_liveness(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
