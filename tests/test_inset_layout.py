import unittest

from tickerplot.geometry import Alignment, Rect, RectF
from tickerplot.inset_layout import DEFAULT_INSET_RECT, InsetLayout, InsetPlacement
from tickerplot.layout import LayoutElement


class InsetLayoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.inset = InsetLayout()
        self.inset.set_outer_rect(Rect(0, 0, 200, 100))

    def _element(self, width=0, height=0):
        el = LayoutElement()
        el.set_minimum_size(width, height)
        return el

    def test_free_rect_is_fraction_of_inset(self) -> None:
        el = self._element()
        self.inset.add_element_rect(el, RectF(0.5, 0.5, 0.25, 0.5))
        self.inset.update()
        self.assertEqual(el.outer_rect, Rect(100, 50, 50, 50))
        self.assertEqual(self.inset.inset_placement(0), InsetPlacement.FREE)

    def test_free_rect_is_clamped_to_minimum_size(self) -> None:
        el = self._element(80, 0)
        self.inset.add_element_rect(el, RectF(0.5, 0.5, 0.25, 0.5))
        self.inset.update()
        self.assertEqual(el.outer_rect, Rect(100, 50, 80, 50))

    def test_border_aligned_bottom_right(self) -> None:
        el = self._element(40, 20)
        self.inset.add_element(el, Alignment.RIGHT | Alignment.BOTTOM)
        self.inset.update()
        self.assertEqual(el.outer_rect, Rect(160, 80, 40, 20))
        self.assertEqual(self.inset.inset_rect(0), DEFAULT_INSET_RECT)

    def test_border_aligned_top_left(self) -> None:
        el = self._element(40, 20)
        self.inset.add_element(el, Alignment.LEFT | Alignment.TOP)
        self.inset.update()
        self.assertEqual(el.outer_rect, Rect(0, 0, 40, 20))

    def test_border_aligned_without_edges_is_centered(self) -> None:
        el = self._element(40, 20)
        self.inset.add_element(el, Alignment.CENTER)
        self.inset.update()
        self.assertEqual(el.outer_rect, Rect(80, 40, 40, 20))

    def test_placement_can_be_switched(self) -> None:
        el = self._element(40, 20)
        self.inset.add_element(el)
        self.assertTrue(self.inset.set_inset_placement(0, InsetPlacement.FREE))
        self.assertTrue(self.inset.set_inset_rect(0, RectF(0.0, 0.0, 0.5, 0.5)))
        self.inset.update()
        self.assertEqual(el.outer_rect, Rect(0, 0, 100, 50))

    def test_invalid_index_is_reported(self) -> None:
        with self.assertLogs("tickerplot.inset_layout", level="WARNING"):
            self.assertEqual(self.inset.inset_rect(3), RectF())
        with self.assertLogs("tickerplot.inset_layout", level="WARNING"):
            self.assertFalse(self.inset.set_inset_alignment(0, Alignment.LEFT))
        with self.assertLogs("tickerplot.inset_layout", level="WARNING"):
            self.assertIsNone(self.inset.take_at(0))

    def test_take_removes_bookkeeping(self) -> None:
        a, b = self._element(), self._element()
        self.inset.add_element(a, Alignment.LEFT | Alignment.TOP)
        self.inset.add_element_rect(b, RectF(0.1, 0.1, 0.1, 0.1))
        self.assertTrue(self.inset.take(a))
        self.assertEqual(self.inset.element_count(), 1)
        self.assertIs(self.inset.element_at(0), b)
        self.assertEqual(self.inset.inset_placement(0), InsetPlacement.FREE)
        self.assertIsNone(a.layout)


if __name__ == "__main__":
    unittest.main()
