import unittest

from tickerplot.layer import AntialiasedElement, Layer, Layerable
from tickerplot.painter import Painter, PainterMode, new_canvas
from tickerplot.plot import Plot


class RecordingLayerable(Layerable):
    def __init__(self, plot, name, log, target_layer="", parent=None):
        super().__init__(plot, target_layer, parent)
        self.name = name
        self._log = log

    def draw(self, painter):
        self._log.append(self.name)


class LayerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plot = Plot(200, 150)
        self.log: list[str] = []

    def test_new_layerable_lands_on_current_layer(self) -> None:
        item = RecordingLayerable(self.plot, "a", self.log)
        self.assertIs(item.layer, self.plot.current_layer)
        self.assertEqual(item.layer.name, "main")
        self.assertIn(item, self.plot.layer("main").children)

    def test_set_layer_moves_between_layers(self) -> None:
        item = RecordingLayerable(self.plot, "a", self.log)
        self.assertTrue(item.set_layer("grid"))
        self.assertNotIn(item, self.plot.layer("main").children)
        self.assertIs(self.plot.layer("grid").children[-1], item)

    def test_set_layer_to_unknown_name_keeps_layer(self) -> None:
        item = RecordingLayerable(self.plot, "a", self.log)
        with self.assertLogs("tickerplot.layer", level="WARNING"):
            self.assertFalse(item.set_layer("nope"))
        self.assertEqual(item.layer.name, "main")

    def test_set_layer_of_other_plot_is_rejected(self) -> None:
        item = RecordingLayerable(self.plot, "a", self.log)
        other = Plot(100, 100)
        with self.assertLogs("tickerplot.layer", level="WARNING"):
            self.assertFalse(item.set_layer(other.layer("grid")))
        self.assertEqual(item.layer.name, "main")
        self.assertNotIn(item, other.layer("grid").children)

    def test_duplicate_add_and_unknown_remove_are_reported(self) -> None:
        layer = self.plot.layer("legend")
        item = RecordingLayerable(self.plot, "a", self.log, target_layer="legend")
        with self.assertLogs("tickerplot.layer", level="WARNING"):
            self.assertFalse(layer.add_child(item))
        self.assertEqual(layer.children.count(item), 1)
        stranger = RecordingLayerable(self.plot, "b", self.log)
        with self.assertLogs("tickerplot.layer", level="WARNING"):
            self.assertFalse(layer.remove_child(stranger))

    def test_prepend_puts_child_below_existing_ones(self) -> None:
        first = RecordingLayerable(self.plot, "first", self.log, target_layer="legend")
        second = RecordingLayerable(self.plot, "second", self.log)
        self.assertTrue(second.move_to_layer(self.plot.layer("legend"), prepend=True))
        self.assertEqual(self.plot.layer("legend").children, [second, first])

    def test_real_visibility_follows_every_ancestor(self) -> None:
        root = RecordingLayerable(self.plot, "root", self.log)
        middle = RecordingLayerable(self.plot, "middle", self.log, parent=root)
        leaf = RecordingLayerable(self.plot, "leaf", self.log, parent=middle)
        self.assertTrue(leaf.real_visibility())
        root.set_visible(False)
        self.assertFalse(leaf.real_visibility())
        self.assertFalse(middle.real_visibility())
        root.set_visible(True)
        middle.set_visible(False)
        self.assertFalse(leaf.real_visibility())
        self.assertTrue(root.real_visibility())

    def test_parent_reference_does_not_keep_parent_alive(self) -> None:
        parent = RecordingLayerable(None, "parent", self.log)
        child = RecordingLayerable(None, "child", self.log, parent=parent)
        del parent
        self.assertIsNone(child.parent_layerable)
        self.assertTrue(child.real_visibility())

    def test_release_detaches_from_layer(self) -> None:
        item = RecordingLayerable(self.plot, "a", self.log)
        item.release()
        self.assertIsNone(item.layer)
        self.assertNotIn(item, self.plot.layer("main").children)

    def test_initialize_parent_plot_only_once(self) -> None:
        item = RecordingLayerable(None, "a", self.log)
        item.initialize_parent_plot(self.plot)
        self.assertIs(item.parent_plot, self.plot)
        with self.assertLogs("tickerplot.layer", level="WARNING"):
            item.initialize_parent_plot(Plot(50, 50))
        self.assertIs(item.parent_plot, self.plot)

    def test_layer_created_outside_plot_has_no_index(self) -> None:
        layer = Layer(self.plot, "detached")
        self.assertEqual(layer.index, -1)
        self.assertIs(layer.parent_plot, self.plot)


class AntialiasingHintTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plot = Plot(50, 50)
        self.painter = Painter(new_canvas(50, 50), PainterMode.VECTORIZED)
        self.item = RecordingLayerable(self.plot, "a", [])

    def test_local_setting_applies_without_overrides(self) -> None:
        self.item.set_antialiased(True)
        self.item.apply_default_antialiasing_hint(self.painter)
        self.assertTrue(self.painter.antialiasing)
        self.item.set_antialiased(False)
        self.item.apply_default_antialiasing_hint(self.painter)
        self.assertFalse(self.painter.antialiasing)

    def test_plot_overrides_win_over_local_setting(self) -> None:
        self.item.set_antialiased(True)
        self.plot.set_not_antialiased_elements(AntialiasedElement.OTHER)
        self.item.apply_default_antialiasing_hint(self.painter)
        self.assertFalse(self.painter.antialiasing)
        self.item.set_antialiased(False)
        self.plot.set_antialiased_elements(AntialiasedElement.ALL)
        self.assertEqual(self.plot.not_antialiased_elements, AntialiasedElement.NONE)
        self.item.apply_default_antialiasing_hint(self.painter)
        self.assertTrue(self.painter.antialiasing)


if __name__ == "__main__":
    unittest.main()
