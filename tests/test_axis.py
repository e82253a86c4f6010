import unittest
from unittest import mock

import numpy as np

from tickerplot.axis import AxisType, Orientation, ScaleType
from tickerplot.axis_rect import AxisRect
from tickerplot.geometry import Alignment, MarginSide, Rect
from tickerplot.plot import Plot
from tickerplot.range import Range


class AxisTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.plot = Plot()
        rect = self.plot.axis_rect
        rect.set_auto_margins(MarginSide.NONE)
        rect.set_outer_rect(Rect(50, 20, 400, 200))
        self.x = self.plot.x_axis
        self.y = self.plot.y_axis


class AxisTransformTests(AxisTestCase):
    def test_horizontal_axis_maps_range_onto_rect_width(self) -> None:
        self.assertEqual(self.x.orientation, Orientation.HORIZONTAL)
        self.assertAlmostEqual(self.x.coord_to_pixel(0), 50)
        self.assertAlmostEqual(self.x.coord_to_pixel(5), 450)
        self.assertAlmostEqual(self.x.coord_to_pixel(2.5), 250)

    def test_vertical_axis_grows_upwards(self) -> None:
        self.assertAlmostEqual(self.y.coord_to_pixel(0), 220)
        self.assertAlmostEqual(self.y.coord_to_pixel(5), 20)
        self.assertAlmostEqual(self.y.pixel_to_coord(120), 2.5)

    def test_reversed_range_mirrors_mapping(self) -> None:
        self.x.set_range_reversed(True)
        self.assertAlmostEqual(self.x.coord_to_pixel(0), 450)
        self.assertAlmostEqual(self.x.coord_to_pixel(5), 50)
        self.assertAlmostEqual(self.x.pixel_to_coord(450), 0)

    def test_pixel_to_coord_inverts_coord_to_pixel(self) -> None:
        self.x.set_range(-3.0, 17.0)
        for value in (-3.0, 0.25, 4.0, 16.5):
            self.assertAlmostEqual(self.x.pixel_to_coord(self.x.coord_to_pixel(value)), value)

    def test_logarithmic_mapping(self) -> None:
        self.x.set_scale_type(ScaleType.LOGARITHMIC)
        self.x.set_range(1, 100)
        self.assertAlmostEqual(self.x.coord_to_pixel(10), 250)
        self.assertAlmostEqual(self.x.pixel_to_coord(250), 10)
        self.y.set_scale_type(ScaleType.LOGARITHMIC)
        self.y.set_range(1, 100)
        self.assertAlmostEqual(self.y.coord_to_pixel(10), 120)

    def test_round_trip_for_every_orientation_scale_and_direction(self) -> None:
        cases = {
            ScaleType.LINEAR: ((-3.0, 17.0), (-3.0, 0.25, 4.0, 16.5)),
            ScaleType.LOGARITHMIC: ((1.0, 100.0), (1.0, 1.5, 10.0, 42.0, 100.0)),
        }
        for axis in (self.x, self.y):
            for scale_type, (bounds, values) in cases.items():
                for reversed_ in (False, True):
                    axis.set_scale_type(scale_type)
                    axis.set_range(*bounds)
                    axis.set_range_reversed(reversed_)
                    for value in values:
                        with self.subTest(axis=axis.axis_type, scale=scale_type, reversed=reversed_, value=value):
                            self.assertAlmostEqual(axis.pixel_to_coord(axis.coord_to_pixel(value)), value)

    def test_logarithmic_value_outside_domain_is_pushed_off_rect(self) -> None:
        self.x.set_scale_type(ScaleType.LOGARITHMIC)
        self.x.set_range(1, 100)
        self.assertEqual(self.x.coord_to_pixel(-1), -150)
        self.x.set_range_reversed(True)
        self.assertEqual(self.x.coord_to_pixel(-1), 650)


class AxisRangeTests(AxisTestCase):
    def test_invalid_range_is_rejected(self) -> None:
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_range(0, 1e300))
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_range(1, 1))
        self.assertEqual(self.x.range, Range(0, 5))

    def test_unchanged_range_is_not_reported(self) -> None:
        calls = []
        self.x.on_range_changed(lambda new, old: calls.append((new, old)))
        with self.assertNoLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_range(5, 0))
        self.assertEqual(calls, [])

    def test_listener_receives_new_and_old_range(self) -> None:
        calls = []
        self.x.on_range_changed(lambda new, old: calls.append((new, old)))
        self.assertTrue(self.x.set_range(Range(1, 2)))
        self.assertEqual(calls, [(Range(1, 2), Range(0, 5))])

    def test_range_returns_copy(self) -> None:
        rng = self.x.range
        rng.upper = 100
        self.assertEqual(self.x.range, Range(0, 5))

    def test_move_and_scale_linear_range(self) -> None:
        self.x.move_range(1)
        self.assertEqual(self.x.range, Range(1, 6))
        self.x.scale_range(2, 1)
        self.assertEqual(self.x.range, Range(1, 11))

    def test_set_range_around(self) -> None:
        self.x.set_range_around(10, 4, Alignment.LEFT)
        self.assertEqual(self.x.range, Range(10, 14))
        self.x.set_range_around(10, 4, Alignment.RIGHT)
        self.assertEqual(self.x.range, Range(6, 10))
        self.x.set_range_around(10, 4)
        self.assertEqual(self.x.range, Range(8, 12))

    def test_single_bound_setter_rejects_empty_range(self) -> None:
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_range_lower(5))
        self.assertEqual(self.x.range, Range(0, 5))
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_range_upper(0))
        self.assertEqual(self.x.range, Range(0, 5))

    def test_rejected_range_change_is_not_reported_and_plot_still_renders(self) -> None:
        calls = []
        self.x.on_range_changed(lambda new, old: calls.append(new))
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.x.set_range_lower(5)
        self.assertEqual(calls, [])
        self.assertEqual(self.plot.replot().shape, (480, 640, 4))

    def test_log_move_by_zero_factor_is_rejected(self) -> None:
        self.x.set_scale_type(ScaleType.LOGARITHMIC)
        self.x.set_range(1, 100)
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.move_range(0))
        self.assertEqual(self.x.range, Range(1, 100))
        self.assertTrue(self.x.move_range(10))
        self.assertEqual(self.x.range, Range(10, 1000))

    def test_single_bound_setters(self) -> None:
        self.x.set_range_lower(-1)
        self.x.set_range_upper(3)
        self.assertEqual(self.x.range, Range(-1, 3))

    def test_switching_to_log_scale_moves_bound_off_zero(self) -> None:
        self.x.set_scale_type(ScaleType.LOGARITHMIC)
        self.assertEqual(self.x.range, Range(0.001, 5))

    def test_log_scaling_needs_center_in_same_sign_domain(self) -> None:
        self.x.set_scale_type(ScaleType.LOGARITHMIC)
        self.x.set_range(1, 100)
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.x.scale_range(2, -1)
        self.assertEqual(self.x.range, Range(1, 100))
        self.x.scale_range(0.5, 10)
        self.assertAlmostEqual(self.x.range.lower, 10 ** 0.5)
        self.assertAlmostEqual(self.x.range.upper, 10 ** 1.5)

    def test_log_base_must_exceed_one(self) -> None:
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_scale_log_base(1))
        self.assertEqual(self.x.scale_log_base, 10.0)
        self.assertTrue(self.x.set_scale_log_base(2))

    def test_scale_ratio_matches_pixels_per_unit(self) -> None:
        self.y.set_scale_ratio(self.x, 1.0)
        self.assertEqual(self.y.range, Range(1.25, 3.75))


class AxisTickTests(AxisTestCase):
    def test_auto_ticks_for_default_range(self) -> None:
        self.x.setup_tick_vectors()
        self.assertAlmostEqual(self.x.tick_step, 0.8)
        self.assertEqual(self.x.sub_tick_count, 3)
        np.testing.assert_allclose(self.x.tick_vector, np.arange(8) * 0.8)
        self.assertEqual(self.x.tick_vector_labels, ["0", "0.8", "1.6", "2.4", "3.2", "4", "4.8", ""])
        sub = self.x.sub_tick_vector
        self.assertTrue(np.all((sub >= 0) & (sub <= 5)))
        np.testing.assert_allclose(sub[:3], [0.2, 0.4, 0.6])

    def test_manual_ticks_and_labels_are_kept(self) -> None:
        self.x.set_auto_ticks(False)
        self.x.set_auto_tick_labels(False)
        self.x.set_tick_vector([1, 2.5, 7])
        self.x.set_tick_vector_labels(["a", "b", "c"])
        self.x.setup_tick_vectors()
        np.testing.assert_allclose(self.x.tick_vector, [1, 2.5, 7])
        self.assertEqual(self.x.tick_vector_labels, ["a", "b", "c"])
        np.testing.assert_allclose(self.x.sub_tick_vector, [1.3, 1.6, 1.9, 2.2, 3.4, 4.3])

    def test_logarithmic_ticks_are_powers_of_base(self) -> None:
        self.x.set_scale_type(ScaleType.LOGARITHMIC)
        self.x.set_range(1, 1000)
        self.x.setup_tick_vectors()
        np.testing.assert_allclose(self.x.tick_vector, [1, 10, 100, 1000])
        self.assertEqual(self.x.sub_tick_count, 8)
        self.assertEqual(self.x.tick_vector_labels, ["1", "10", "100", "1000"])

    def test_fixed_step_is_used_when_auto_step_is_off(self) -> None:
        self.x.set_auto_tick_step(False)
        self.x.set_tick_step(2)
        self.x.setup_tick_vectors()
        np.testing.assert_allclose(self.x.tick_vector, [0, 2, 4, 6])
        self.assertEqual(self.x.tick_vector_labels, ["0", "2", "4", ""])
        self.assertEqual(self.x.sub_tick_count, 3)

    def test_auto_tick_count_must_be_positive(self) -> None:
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_auto_tick_count(0))
        self.assertEqual(self.x.auto_tick_count, 6)

    def test_axis_without_plot_generates_nothing(self) -> None:
        rect = AxisRect()
        axis = rect.axis(AxisType.BOTTOM)
        axis.setup_tick_vectors()
        self.assertEqual(axis.tick_vector.size, 0)

    def test_number_format_is_validated(self) -> None:
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_number_format("x"))
        self.assertTrue(self.x.set_number_format("f"))
        self.x.set_number_precision(1)
        self.x.setup_tick_vectors()
        self.assertEqual(self.x.tick_vector_labels[:3], ["0.0", "0.8", "1.6"])


class AxisMarginTests(AxisTestCase):
    def test_margin_is_cached_until_a_setting_changes(self) -> None:
        self.x.setup_tick_vectors()
        with mock.patch("tickerplot.axis.text_size", return_value=(10, 7)) as measured:
            self.assertEqual(self.x.calculate_margin(), 7 + 5 + 5)
            calls = measured.call_count
            self.assertEqual(self.x.calculate_margin(), 17)
            self.assertEqual(measured.call_count, calls)
            self.x.set_label("time")
            self.assertEqual(self.x.calculate_margin(), 17 + 7 + 5)

    def test_vertical_axis_margin_uses_label_width(self) -> None:
        self.y.setup_tick_vectors()
        with mock.patch("tickerplot.axis.text_size", return_value=(10, 7)):
            self.assertEqual(self.y.calculate_margin(), 10 + 5 + 5)
            self.y.set_tick_length(5, 3)
            self.assertEqual(self.y.calculate_margin(), 3 + 10 + 5 + 5)

    def test_hidden_axis_only_needs_padding(self) -> None:
        self.assertFalse(self.plot.x_axis2.visible)
        self.assertEqual(self.plot.x_axis2.calculate_margin(), 5)
        self.plot.x_axis2.set_padding(8)
        self.assertEqual(self.plot.x_axis2.calculate_margin(), 8)

    def test_tick_label_rotation_is_validated(self) -> None:
        with self.assertLogs("tickerplot.axis", level="WARNING"):
            self.assertFalse(self.x.set_tick_label_rotation(45))
        self.assertTrue(self.x.set_tick_label_rotation(90))
        self.assertEqual(self.x.tick_label_rotation, 90)


if __name__ == "__main__":
    unittest.main()
