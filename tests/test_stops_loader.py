"""
Tests for stop ingestion, cleaning and exploration.
"""

import math
import shutil
import tempfile
import unittest
import sys
from pathlib import Path

import numpy as np
import pandas as pd

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config import STOP_COLUMNS, FEATURE_NAMES, LABEL_NAME
from data.example import Example, examples_to_arrays
from data.exploration import summarize_stops, citation_rate_by
from data.stops_loader import (
    StopDataError, load_stops, select_stop_columns, clean_stops,
    extract_speed_pair, build_examples, load_examples,
)


def raw_row(date, time, description, outcome):
    return {
        STOP_COLUMNS["date"]: date,
        STOP_COLUMNS["time"]: time,
        STOP_COLUMNS["description"]: description,
        STOP_COLUMNS["violation_type"]: outcome,
        "Location": "ignored",
    }


RAW_ROWS = [
    raw_row("03/15/2020", "14:30:00",
            "EXCEEDING POSTED MAXIMUM SPEED LIMIT: 85 MPH IN A POSTED 65 MPH ZONE", "Citation"),
    raw_row("07/04/2019", "23:05:10",
            "EXCEEDING THE POSTED SPEED LIMIT OF 30 MPH: 39 MPH", "Warning"),
    raw_row("01/02/2020", "08:00:00",
            "EXCEEDING POSTED MAXIMUM SPEED LIMIT: 50 MPH IN A POSTED 40 MPH ZONE", "ESERO"),
    raw_row("01/02/2020", "08:00:00", "DRIVER FAILURE TO OBEY PROPERLY PLACED TRAFFIC SIGN",
            "Citation"),
    raw_row("05/05/2020", "12:00:00",
            "EXCEEDING POSTED MAXIMUM SPEED LIMIT: 900 MPH IN A POSTED 35 MPH ZONE", "Citation"),
    raw_row("05/05/2020", "12:00:00",
            "EXCEEDING POSTED MAXIMUM SPEED LIMIT: 50 MPH IN A POSTED 0 MPH ZONE", "Warning"),
    raw_row("13/45/2020", "12:00:00",
            "EXCEEDING POSTED MAXIMUM SPEED LIMIT: 60 MPH IN A POSTED 45 MPH ZONE", "Citation"),
    raw_row("06/06/2020", "09:15:00",
            "EXCEEDING POSTED MAXIMUM SPEED LIMIT: 65 MPH IN A POSTED 65 MPH ZONE", "Warning"),
]


class TestExtractSpeedPair(unittest.TestCase):
    def test_larger_number_is_speed(self):
        self.assertEqual(extract_speed_pair("LIMIT: 85 MPH IN A POSTED 65 MPH ZONE"), (85.0, 65.0))
        self.assertEqual(extract_speed_pair("LIMIT OF 30 MPH: 39 MPH"), (39.0, 30.0))

    def test_not_exactly_two_distinct_numbers(self):
        for text in ["NO NUMBERS HERE", "65 MPH IN A 65 MPH ZONE", "1 2 3", None]:
            speed, limit = extract_speed_pair(text)
            self.assertTrue(math.isnan(speed))
            self.assertTrue(math.isnan(limit))


class TestCleanStops(unittest.TestCase):
    def setUp(self):
        self.raw = select_stop_columns(pd.DataFrame(RAW_ROWS))

    def test_only_valid_speeding_stops_survive(self):
        cleaned = clean_stops(self.raw)

        self.assertEqual(len(cleaned), 2)
        self.assertEqual(list(cleaned.columns), list(FEATURE_NAMES) + [LABEL_NAME])

        first = cleaned.iloc[0]
        self.assertEqual(first["month"], 3)
        self.assertEqual(first["day"], 15)
        self.assertEqual(first["hour"], 14)
        self.assertEqual(first["speed_differential"], 20)
        self.assertEqual(first[LABEL_NAME], 1)

        second = cleaned.iloc[1]
        self.assertEqual(second["speed_differential"], 9)
        self.assertEqual(second[LABEL_NAME], 0)

    def test_examples_from_cleaned_table(self):
        examples = build_examples(clean_stops(self.raw))
        self.assertEqual(examples[0], Example(features=(3, 15, 14, 20), label=1))
        self.assertEqual(examples[1].label_name, "Warning")

        X, y = examples_to_arrays(examples)
        self.assertEqual(X.shape, (2, 4))
        np.testing.assert_array_equal(y, [1, 0])

    def test_nothing_left(self):
        raw = select_stop_columns(pd.DataFrame(RAW_ROWS[2:4]))
        with self.assertRaises(StopDataError):
            clean_stops(raw)

    def test_missing_column(self):
        frame = pd.DataFrame(RAW_ROWS).drop(columns=[STOP_COLUMNS["description"]])
        with self.assertRaises(StopDataError):
            select_stop_columns(frame)


class TestLoadFromCsv(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.csv_path = Path(self.test_dir) / "stops.csv"
        pd.DataFrame(RAW_ROWS).to_csv(self.csv_path, index=False)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_load_examples(self):
        examples = load_examples(self.csv_path)
        self.assertEqual(len(examples), 2)
        self.assertEqual(sorted(ex.label for ex in examples), [0, 1])

    def test_keeps_recognised_columns(self):
        stops = load_stops(self.csv_path)
        self.assertEqual(set(stops.columns), set(STOP_COLUMNS))
        self.assertEqual(len(stops), len(RAW_ROWS))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_stops(Path(self.test_dir) / "absent.csv")


class TestExample(unittest.TestCase):
    def test_label_must_be_binary(self):
        with self.assertRaises(ValueError):
            Example(features=(1.0,), label=2)

    def test_features_become_float_tuple(self):
        example = Example(features=[1, 2], label=1)
        self.assertEqual(example.features, (1.0, 2.0))
        self.assertTrue(example.is_positive)


class TestExploration(unittest.TestCase):
    def setUp(self):
        rng = np.random.RandomState(0)
        n = 200
        labels = (rng.uniform(size=n) < 0.4).astype(int)
        self.cleaned = pd.DataFrame({
            "month": rng.randint(1, 13, size=n).astype(float),
            "day": rng.randint(1, 29, size=n).astype(float),
            "hour": rng.randint(0, 24, size=n).astype(float),
            "speed_differential": np.where(labels == 1, 25.0, 10.0) + rng.normal(0, 3, size=n),
            LABEL_NAME: labels,
        })

    def test_summary(self):
        summary = summarize_stops(self.cleaned)

        self.assertEqual(summary["n_stops"], 200)
        self.assertEqual(summary["n_citations"] + summary["n_warnings"], 200)
        self.assertAlmostEqual(summary["citation_share"], self.cleaned[LABEL_NAME].mean())
        self.assertEqual(set(summary["speed_differential"]), {"Citation", "Warning"})

        test = summary["speed_differential_test"]
        self.assertGreater(test["mean_diff"], 10)
        self.assertLess(test["p_value"], 0.001)

    def test_rate_by_hour_bounded(self):
        rates = citation_rate_by(self.cleaned, "hour")
        self.assertTrue(set(rates) <= set(range(24)))
        for rate in rates.values():
            self.assertGreaterEqual(rate, 0.0)
            self.assertLessEqual(rate, 1.0)


if __name__ == '__main__':
    unittest.main()
