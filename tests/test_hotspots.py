"""
FireGuard - Hotspot Density Index Tests
tests/test_hotspots.py
"""

import unittest

from fireguard.core.hotspots import HotspotDensityIndex, cell_key
from tests.factories import detection


class TestCellKey(unittest.TestCase):

    def test_01_half_degree_cells(self):
        self.assertEqual(cell_key(56.7, -111.3), (113, -223))
        self.assertEqual(cell_key(56.5, -111.5), (113, -223))
        self.assertEqual(cell_key(56.49, -111.51), (112, -224))

    def test_02_negative_longitudes_floor(self):
        # -0.2 must land in cell -1, not 0.
        self.assertEqual(cell_key(50.0, -0.2), (100, -1))


class TestHotspotDensityIndex(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.fires = (
            [detection(56.7, -111.3)] * 4
            + [detection(50.1, -100.1)] * 2
            + [detection(30.0, -100.0)] * 10  # outside Canada
        )
        cls.index = HotspotDensityIndex.from_detections(cls.fires)

    def test_01_densest_cell_is_one(self):
        self.assertEqual(self.index.lookup(56.7, -111.3), 1.0)
        self.assertEqual(self.index.max_cell(), cell_key(56.7, -111.3))

    def test_02_relative_density(self):
        self.assertAlmostEqual(self.index.lookup(50.1, -100.1), 0.5)

    def test_03_unseen_cell_is_zero(self):
        self.assertEqual(self.index.lookup(70.0, -60.0), 0.0)

    def test_04_outside_region_ignored(self):
        self.assertEqual(self.index.lookup(30.0, -100.0), 0.0)
        self.assertEqual(self.index.detection_count, 6)
        self.assertEqual(len(self.index), 2)

    def test_05_values_in_unit_interval(self):
        for value in self.index.cells.values():
            self.assertGreater(value, 0.0)
            self.assertLessEqual(value, 1.0)

    def test_06_read_only(self):
        with self.assertRaises(TypeError):
            self.index.cells[(0, 0)] = 1.0

    def test_07_empty(self):
        empty = HotspotDensityIndex.empty()
        self.assertEqual(len(empty), 0)
        self.assertIsNone(empty.max_cell())
        self.assertEqual(empty.lookup(56.7, -111.3), 0.0)
        self.assertEqual(len(HotspotDensityIndex.from_detections([])), 0)


if __name__ == "__main__":
    unittest.main()
