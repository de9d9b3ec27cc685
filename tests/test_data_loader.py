"""
Unit tests for CSV loading, cleaning and the Dataset accessors.
"""

import math
import shutil
import tempfile
import unittest
from pathlib import Path
import sys

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from happiness_dashboard.core.config import (
    HAPPINESS, RANKING_BAR_MAX, SERIES_BEST, SERIES_WORST, SERIES_UKRAINE,
    WORST_FILE, AVERAGE_UKRAINE_FILE, MISSING_LABEL,
)
from happiness_dashboard.core.data_loader import (
    DataLoadError, load_dataset, load_series_csv, load_average_csv, clean_series_frame,
    filter_by_range, dataset_from_frames, get_data_dir,
)
from happiness_dashboard.core.utils import parse_population
from happiness_dashboard.models import YearRange, Observation
from tests.fixtures.sample_data import (
    write_sample_csvs, create_sample_dataset, create_ukraine_frame, YEARS, UKRAINE_YEARS,
)


class TestLoadDataset(unittest.TestCase):
    """Test suite for load_dataset on a directory of sample CSVs."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        write_sample_csvs(self.test_dir)

    def tearDown(self):
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_all_files_load(self):
        dataset = load_dataset(self.test_dir)
        self.assertEqual(dataset.errors, {})
        self.assertEqual(len(dataset.series(SERIES_BEST)), len(YEARS))
        self.assertEqual(len(dataset.series(SERIES_UKRAINE)), len(UKRAINE_YEARS))
        self.assertFalse(dataset.is_empty)

    def test_years_are_integers_and_sorted(self):
        ukraine = load_dataset(self.test_dir).series(SERIES_UKRAINE)
        self.assertTrue(pd.api.types.is_integer_dtype(ukraine['YEAR']))
        self.assertEqual(list(ukraine['YEAR']), UKRAINE_YEARS)

    def test_country_header_alias(self):
        worst = load_dataset(self.test_dir).series(SERIES_WORST)
        self.assertIn('Country', worst.columns)
        self.assertNotIn('COUNTRY', worst.columns)
        self.assertEqual(worst.iloc[0]['Country'], 'Togo')

    def test_population_parsed(self):
        ukraine = load_dataset(self.test_dir).series(SERIES_UKRAINE)
        self.assertEqual(ukraine.iloc[0]['POPULATION'], 44831135)

    def test_malformed_metric_becomes_nan(self):
        ukraine = load_dataset(self.test_dir).series(SERIES_UKRAINE)
        row = ukraine[ukraine['YEAR'] == 2020].iloc[0]
        self.assertTrue(math.isnan(row['GENEROSITY']))
        self.assertAlmostEqual(row[HAPPINESS], 4.561)

    def test_missing_file_is_isolated(self):
        (self.test_dir / WORST_FILE).unlink()
        (self.test_dir / AVERAGE_UKRAINE_FILE).unlink()
        with self.assertLogs('happiness_dashboard.core.data_loader', level='ERROR'):
            dataset = load_dataset(self.test_dir)
        self.assertIn(WORST_FILE, dataset.errors)
        self.assertIn(AVERAGE_UKRAINE_FILE, dataset.errors)
        self.assertTrue(dataset.series(SERIES_WORST).empty)
        self.assertEqual(len(dataset.series(SERIES_BEST)), len(YEARS))
        self.assertTrue(dataset.average(SERIES_UKRAINE).empty)

    def test_empty_directory(self):
        empty = Path(tempfile.mkdtemp())
        try:
            dataset = load_dataset(empty)
            self.assertTrue(dataset.is_empty)
            self.assertEqual(len(dataset.errors), 6)
            self.assertIsNone(dataset.year_bounds())
        finally:
            shutil.rmtree(empty)

    def test_average_table(self):
        table = load_average_csv(self.test_dir / AVERAGE_UKRAINE_FILE)
        self.assertEqual(list(table.index), ['MEDIAN', 'MIN', 'MAX'])
        self.assertAlmostEqual(table.loc['MIN', HAPPINESS], 4.096)
        self.assertAlmostEqual(table.loc['MAX', HAPPINESS], 5.084)

    def test_get_data_dir_override(self):
        self.assertEqual(get_data_dir(self.test_dir), self.test_dir)


class TestCleaning(unittest.TestCase):
    """Test suite for clean_series_frame and load_series_csv errors."""

    def test_missing_required_column(self):
        frame = pd.DataFrame({'YEAR': [2015], HAPPINESS: [7.0]})
        with self.assertRaises(DataLoadError):
            clean_series_frame(frame, SERIES_BEST)

    def test_load_error_is_value_error(self):
        self.assertTrue(issubclass(DataLoadError, ValueError))

    def test_unreadable_file(self):
        with self.assertRaises(DataLoadError):
            load_series_csv('/nonexistent/dataset.csv', SERIES_UKRAINE)

    def test_rows_without_year_dropped(self):
        frame = pd.DataFrame({
            'YEAR': ['2015', 'unknown', '2017'],
            'Country': ['A', 'B', None],
            HAPPINESS: ['7.1', '6.0', 'bad'],
        })
        with self.assertLogs('happiness_dashboard.core.data_loader', level='WARNING'):
            cleaned = clean_series_frame(frame, SERIES_BEST)
        self.assertEqual(list(cleaned['YEAR']), [2015, 2017])
        self.assertEqual(cleaned.iloc[1]['Country'], MISSING_LABEL)
        self.assertTrue(math.isnan(cleaned.iloc[1][HAPPINESS]))
        self.assertEqual(set(cleaned['SERIES']), {SERIES_BEST})

    def test_numeric_population_with_gap(self):
        tmp = Path(tempfile.mkdtemp())
        try:
            path = tmp / "ukraine.csv"
            path.write_text("YEAR,Country,POPULATION\n2017,Ukraine,44831135\n2018,Ukraine,\n")
            loaded = load_series_csv(path, SERIES_UKRAINE)
        finally:
            shutil.rmtree(tmp)
        self.assertEqual(loaded['POPULATION'].iloc[0], 44831135.0)
        self.assertTrue(math.isnan(loaded['POPULATION'].iloc[1]))

    def test_parse_population(self):
        self.assertEqual(parse_population('43.531.422'), 43531422)
        self.assertEqual(parse_population(44831135.0), 44831135.0)
        self.assertEqual(parse_population(44831135), 44831135.0)
        self.assertTrue(math.isnan(parse_population(float('nan'))))
        self.assertTrue(math.isnan(parse_population(None)))
        self.assertTrue(math.isnan(parse_population('unknown')))


class TestDataset(unittest.TestCase):
    """Test suite for Dataset accessors and range filtering."""

    def setUp(self):
        self.dataset = create_sample_dataset()

    def test_filter_is_inclusive(self):
        ukraine = self.dataset.series(SERIES_UKRAINE)
        filtered = filter_by_range(ukraine, YearRange(2018, 2020))
        self.assertEqual(list(filtered['YEAR']), [2018, 2019, 2020])

    def test_filter_returns_copy(self):
        ukraine = self.dataset.series(SERIES_UKRAINE)
        filtered = filter_by_range(ukraine, YearRange(2018, 2020))
        filtered[HAPPINESS] = 0.0
        self.assertNotEqual(self.dataset.series(SERIES_UKRAINE)[HAPPINESS].sum(), 0.0)

    def test_accessors_return_copies(self):
        frame = self.dataset.series(SERIES_BEST)
        frame.loc[:, HAPPINESS] = RANKING_BAR_MAX * 2
        self.assertLess(self.dataset.series(SERIES_BEST)[HAPPINESS].max(), RANKING_BAR_MAX)

    def test_years_and_bounds(self):
        self.assertEqual(self.dataset.years(), YEARS)
        self.assertEqual(self.dataset.year_bounds(), YearRange(2015, 2024))

    def test_combined_filter_by_series(self):
        rows = self.dataset.filter(YearRange(2015, 2016))
        self.assertEqual(sorted(rows['SERIES'].unique()), [SERIES_BEST, SERIES_WORST])

    def test_observations(self):
        observations = self.dataset.observations([SERIES_UKRAINE])
        self.assertEqual(len(observations), len(UKRAINE_YEARS))
        first = observations[0]
        self.assertIsInstance(first, Observation)
        self.assertEqual((first.country, first.year, first.series), ('Ukraine', 2017, SERIES_UKRAINE))
        self.assertAlmostEqual(first.value(HAPPINESS), 4.096)
        self.assertTrue(math.isnan(first.value('UNKNOWN')))

    def test_from_frames_matches_csv_cleaning(self):
        dataset = dataset_from_frames({SERIES_UKRAINE: create_ukraine_frame()})
        self.assertEqual(dataset.series(SERIES_UKRAINE).iloc[0]['POPULATION'], 44831135)
        self.assertTrue(dataset.series(SERIES_BEST).empty)


if __name__ == '__main__':
    unittest.main()
