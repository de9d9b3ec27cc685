"""
Unit tests for the selection broadcaster.

Covers clamping, malformed input rejection, publication counts, subscriber
isolation and every trigger source (bucket, brush, pip, reset).
"""

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from happiness_dashboard.models import YearRange
from happiness_dashboard.selection import (
    SelectionBroadcaster, LinearScale, clamp_range, parse_bucket,
)

BOUNDS = YearRange(2015, 2024)


class TestClampRange(unittest.TestCase):
    """Test suite for the clamping policy."""

    def test_out_of_bounds_clamped_to_dataset(self):
        self.assertEqual(clamp_range((2010, 2030), BOUNDS), YearRange(2015, 2024))

    def test_reversed_bounds_swapped(self):
        self.assertEqual(clamp_range((2022, 2018), BOUNDS), YearRange(2018, 2022))

    def test_both_below_collapse_to_lower_bound(self):
        self.assertEqual(clamp_range((2000, 2001), BOUNDS), YearRange(2015, 2015))

    def test_fractional_years_rounded(self):
        self.assertEqual(clamp_range((2016.4, 2019.6), BOUNDS), YearRange(2016, 2020))

    def test_mapping_and_yearrange_inputs(self):
        self.assertEqual(clamp_range({'min': 2017, 'max': 2019}, BOUNDS), YearRange(2017, 2019))
        self.assertEqual(clamp_range(YearRange(2013, 2016), BOUNDS), YearRange(2015, 2016))

    def test_result_always_ordered_and_bounded(self):
        for lo in range(2005, 2035, 3):
            for hi in range(2005, 2035, 4):
                result = clamp_range((lo, hi), BOUNDS)
                self.assertLessEqual(result.min, result.max)
                self.assertGreaterEqual(result.min, BOUNDS.min)
                self.assertLessEqual(result.max, BOUNDS.max)

    def test_malformed_raises(self):
        for bad in [None, 'abc', (None, 2019), {'min': 2017}, (float('nan'), 2018), 5, (10 ** 400, 2020)]:
            with self.subTest(candidate=bad):
                with self.assertRaises((ValueError, KeyError, TypeError)):
                    clamp_range(bad, BOUNDS)


class TestSetRange(unittest.TestCase):
    """Test suite for SelectionBroadcaster.set_range and subscriptions."""

    def setUp(self):
        self.broadcaster = SelectionBroadcaster()
        self.received = []
        self.unsubscribe = self.broadcaster.subscribe(self.received.append)

    def test_default_range_is_full_span(self):
        self.assertEqual(self.broadcaster.get_current_range(), YearRange(2015, 2024))

    def test_publishes_exactly_once(self):
        result = self.broadcaster.set_range((2018, 2020))
        self.assertEqual(result, YearRange(2018, 2020))
        self.assertEqual(self.received, [YearRange(2018, 2020)])
        self.assertEqual(self.broadcaster.publish_count, 1)

    def test_out_of_range_request_clamped_before_publish(self):
        self.broadcaster.set_range([2010, 2030])
        self.assertEqual(self.received, [YearRange(2015, 2024)])

    def test_same_range_still_published(self):
        self.broadcaster.set_range((2018, 2020))
        self.broadcaster.set_range((2018, 2020))
        self.assertEqual(len(self.received), 2)

    def test_malformed_input_keeps_previous_range(self):
        self.broadcaster.set_range((2018, 2020))
        for bad in [None, 'abc', (None, 2019), {'min': 2017}, (float('nan'), 2018), ('x', 'y'),
                    (10 ** 400, 2020), (2016, -10 ** 400)]:
            with self.subTest(candidate=bad):
                self.assertIsNone(self.broadcaster.set_range(bad))
        self.assertEqual(self.broadcaster.get_current_range(), YearRange(2018, 2020))
        self.assertEqual(len(self.received), 1)

    def test_unsubscribe_is_idempotent(self):
        self.unsubscribe()
        self.unsubscribe()
        self.broadcaster.set_range((2019, 2019))
        self.assertEqual(self.received, [])
        self.assertEqual(self.broadcaster.subscriber_count, 0)

    def test_failing_subscriber_does_not_block_others(self):
        def broken(year_range):
            raise RuntimeError("render failed")

        later = []
        self.broadcaster.subscribe(broken)
        self.broadcaster.subscribe(later.append)
        with self.assertLogs('happiness_dashboard.selection.broadcaster', level='ERROR'):
            self.broadcaster.set_range((2016, 2017))
        self.assertEqual(self.received, [YearRange(2016, 2017)])
        self.assertEqual(later, [YearRange(2016, 2017)])

    def test_handler_may_unsubscribe_while_notified(self):
        calls = []

        def once(year_range):
            calls.append(year_range)
            remove()

        remove = self.broadcaster.subscribe(once)
        self.broadcaster.set_range((2016, 2018))
        self.broadcaster.set_range((2017, 2018))
        self.assertEqual(calls, [YearRange(2016, 2018)])
        self.assertEqual(len(self.received), 2)

    def test_subscribe_rejects_non_callable(self):
        with self.assertRaises(TypeError):
            self.broadcaster.subscribe("not callable")

    def test_initial_range_is_clamped(self):
        broadcaster = SelectionBroadcaster(initial=(2000, 2030))
        self.assertEqual(broadcaster.get_current_range(), YearRange(2015, 2024))

    def test_reset_restores_default(self):
        self.broadcaster.set_range((2019, 2020))
        self.assertEqual(self.broadcaster.reset(), YearRange(2015, 2024))
        self.assertEqual(self.received[-1], YearRange(2015, 2024))


class TestTriggerSources(unittest.TestCase):
    """Test suite for bucket, brush and pip inputs."""

    def setUp(self):
        self.broadcaster = SelectionBroadcaster()
        self.received = []
        self.broadcaster.subscribe(self.received.append)

    def test_parse_bucket(self):
        self.assertEqual(parse_bucket('2019'), (2019, 2019))
        self.assertEqual(parse_bucket('2015-2024'), (2015, 2024))
        self.assertEqual(parse_bucket(' 2024 - 2015 '), (2015, 2024))

    def test_bucket_selection(self):
        self.assertEqual(self.broadcaster.set_from_bucket('2019'), YearRange(2019, 2019))
        self.assertEqual(self.broadcaster.set_from_bucket('2024-2015'), YearRange(2015, 2024))

    def test_malformed_bucket_rejected(self):
        for label in ['abc', '2015-', '', None, '2015-2016-2017']:
            with self.subTest(label=label):
                self.assertIsNone(self.broadcaster.set_from_bucket(label))
        self.assertEqual(self.received, [])

    def test_brush_in_years(self):
        self.assertEqual(self.broadcaster.set_from_brush((2016.8, 2020.2)), YearRange(2017, 2020))

    def test_brush_in_pixels_is_inverted(self):
        scale = LinearScale((2015, 2024), (0, 900))
        self.assertEqual(self.broadcaster.set_from_brush((100, 500), scale), YearRange(2016, 2020))

    def test_degenerate_brush_publishes_nothing(self):
        scale = LinearScale((2015, 2024), (0, 900))
        self.assertIsNone(self.broadcaster.set_from_brush((300, 300), scale))
        self.assertIsNone(self.broadcaster.set_from_brush((2018.2, 2017.8)))
        self.assertEqual(self.received, [])
        self.assertEqual(self.broadcaster.get_current_range(), YearRange(2015, 2024))

    def test_cleared_or_malformed_brush_ignored(self):
        self.assertIsNone(self.broadcaster.set_from_brush(None))
        self.assertIsNone(self.broadcaster.set_from_brush(('a', 'b')))
        self.assertIsNone(self.broadcaster.set_from_brush((1, 2, 3)))
        self.assertIsNone(self.broadcaster.set_from_brush((10 ** 400, 10), LinearScale((2015, 2024), (0, 900))))
        self.assertIsNone(self.broadcaster.nudge_to_pip(10 ** 400))
        self.assertEqual(self.received, [])

    def test_pip_moves_nearest_handle(self):
        self.assertEqual(self.broadcaster.nudge_to_pip(2017), YearRange(2017, 2024))
        self.assertEqual(self.broadcaster.nudge_to_pip(2022), YearRange(2017, 2022))

    def test_pip_tie_moves_upper_handle(self):
        self.broadcaster.set_range((2016, 2020))
        self.assertEqual(self.broadcaster.nudge_to_pip(2018), YearRange(2016, 2018))

    def test_pip_outside_range_extends_it(self):
        self.broadcaster.set_range((2017, 2019))
        self.assertEqual(self.broadcaster.nudge_to_pip(2015), YearRange(2015, 2019))

    def test_malformed_pip_rejected(self):
        self.assertIsNone(self.broadcaster.nudge_to_pip('soon'))
        self.assertEqual(self.received, [])


if __name__ == '__main__':
    unittest.main()
