import random
import unittest

from tickerplot.geometry import MAX_SIZE
from tickerplot.sections import get_section_sizes


class SectionSizeTests(unittest.TestCase):
    def test_equal_stretch_splits_evenly(self) -> None:
        self.assertEqual(get_section_sizes([MAX_SIZE, MAX_SIZE], [0, 0], [1, 1], 100), [50, 50])

    def test_section_hitting_maximum_is_capped(self) -> None:
        self.assertEqual(get_section_sizes([30, MAX_SIZE], [0, 0], [1, 1], 100), [30, 70])

    def test_stretch_factors_weight_free_space(self) -> None:
        self.assertEqual(get_section_sizes([MAX_SIZE] * 2, [0, 0], [1, 3], 100), [25, 75])

    def test_section_below_minimum_is_locked_and_rest_resolved(self) -> None:
        self.assertEqual(get_section_sizes([MAX_SIZE] * 2, [40, 0], [1, 3], 100), [40, 60])

    def test_infeasible_minimums_become_stretch_factors(self) -> None:
        self.assertEqual(get_section_sizes([MAX_SIZE] * 2, [60, 20], [1, 1], 40), [30, 10])

    def test_all_sections_capped_leaves_free_space(self) -> None:
        self.assertEqual(get_section_sizes([10, 20], [0, 0], [1, 1], 100), [10, 20])

    def test_mismatched_lengths_return_empty(self) -> None:
        with self.assertLogs("tickerplot.sections", level="WARNING"):
            self.assertEqual(get_section_sizes([1, 2], [0], [1, 1], 10), [])

    def test_empty_input_returns_empty(self) -> None:
        self.assertEqual(get_section_sizes([], [], [], 10), [])

    def test_uniformly_scaled_stretch_factors_give_same_result(self) -> None:
        base = get_section_sizes([40, MAX_SIZE, MAX_SIZE], [0, 10, 0], [1, 2, 3], 250)
        scaled = get_section_sizes([40, MAX_SIZE, MAX_SIZE], [0, 10, 0], [10, 20, 30], 250)
        self.assertEqual(base, scaled)

    def test_random_inputs_respect_bounds_and_never_hit_iteration_caps(self) -> None:
        rng = random.Random(20240517)
        with self.assertNoLogs("tickerplot.sections", level="WARNING"):
            for _ in range(500):
                count = rng.randint(1, 7)
                stretch = [rng.uniform(0.1, 5.0) for _ in range(count)]
                mins = [rng.randint(0, 60) for _ in range(count)]
                maxs = [m + rng.randint(0, 200) if rng.random() < 0.7 else MAX_SIZE for m in mins]
                total = rng.randint(0, 600)
                sizes = get_section_sizes(maxs, mins, stretch, total)
                self.assertEqual(len(sizes), count)
                if sum(mins) > total:
                    continue
                for size, lo, hi in zip(sizes, mins, maxs):
                    self.assertGreaterEqual(size, lo)
                    self.assertLessEqual(size, hi)
                if total <= sum(maxs):
                    self.assertLessEqual(abs(sum(sizes) - total), count / 2.0)


if __name__ == "__main__":
    unittest.main()
