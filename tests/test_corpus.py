"""
FireGuard - Training Corpus Loader Tests
tests/test_corpus.py
"""

import tempfile
import unittest
from datetime import date
from pathlib import Path

from fireguard.ml.corpus import load_corpus
from fireguard.utils.exceptions import CorpusError
from tests.factories import CSV_HEADER


class TestLoadCorpus(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.reference = date(2024, 5, 1)

    def write(self, text, name="firms.csv"):
        path = Path(self.tmp.name) / name
        path.write_text(text)
        return path

    def test_01_viirs_rows(self):
        path = self.write(
            CSV_HEADER + "\n"
            "56.72,-111.38,330.1,0.39,0.36,2023-07-19,0842,N,VIIRS,n,2.0NRT,290.5,12.5,D\n"
            "60.10,-120.55,345.0,0.40,0.37,2023-08-02,2105,N,VIIRS,h,2.0NRT,295.0,40.0,N\n"
        )
        fires = load_corpus(path, reference_date=self.reference)
        self.assertEqual(len(fires), 2)
        self.assertEqual(fires[0].acq_date, date(2023, 7, 19))
        self.assertEqual(fires[0].bright_ti4, 330.1)
        self.assertEqual(fires[1].frp, 40.0)
        self.assertEqual(fires[1].confidence, "h")

    def test_02_bad_date_uses_reference(self):
        path = self.write(
            CSV_HEADER + "\n"
            "56.72,-111.38,330.1,0.39,0.36,19/07/2023,0842,N,VIIRS,n,2.0NRT,290.5,12.5,D\n"
        )
        fires = load_corpus(path, reference_date=self.reference)
        self.assertEqual(fires[0].acq_date, self.reference)

    def test_03_rows_missing_required_values_dropped(self):
        path = self.write(
            CSV_HEADER + "\n"
            "56.72,-111.38,330.1,0.39,0.36,2023-07-19,0842,N,VIIRS,n,2.0NRT,290.5,,D\n"
            "abc,-111.38,330.1,0.39,0.36,2023-07-19,0842,N,VIIRS,n,2.0NRT,290.5,5.0,D\n"
            "56.72,-111.38,330.1,0.39,0.36,2023-07-19,0842,N,VIIRS,n,2.0NRT,290.5,5.0,D\n"
        )
        fires = load_corpus(path, reference_date=self.reference)
        self.assertEqual(len(fires), 1)
        self.assertEqual(fires[0].frp, 5.0)

    def test_04_modis_brightness_column(self):
        path = self.write(
            "latitude,longitude,brightness,acq_date,frp\n"
            "50.5,-100.5,320.0,2022-06-30,9.5\n"
        )
        fires = load_corpus(path, reference_date=self.reference)
        self.assertEqual(fires[0].bright_ti4, 320.0)
        self.assertEqual(fires[0].day_of_year, date(2022, 6, 30).timetuple().tm_yday)

    def test_05_missing_file(self):
        self.assertEqual(load_corpus(Path(self.tmp.name) / "absent.csv"), [])

    def test_06_missing_required_column(self):
        path = self.write("latitude,longitude,acq_date\n50.5,-100.5,2022-06-30\n")
        with self.assertRaises(CorpusError):
            load_corpus(path)


if __name__ == "__main__":
    unittest.main()
