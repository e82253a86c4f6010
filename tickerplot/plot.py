from __future__ import annotations

from enum import Enum
import logging
from typing import Any, Mapping

import numpy as np

from tickerplot.axis import Axis, AxisType
from tickerplot.axis_rect import AxisRect
from tickerplot.curve import Curve
from tickerplot.geometry import Rect, Size
from tickerplot.grid_layout import GridLayout
from tickerplot.layer import AntialiasedElement, Layer
from tickerplot.layout import final_minimum_size
from tickerplot.painter import Painter, PainterMode, Pen, new_canvas
from tickerplot.theme import PlotTheme, parse_hex_color, validate_theme

LOGGER = logging.getLogger(__name__)

DEFAULT_LAYERS = ("background", "grid", "main", "axes", "legend")


class LayerInsertMode(Enum):
    BELOW = "below"
    ABOVE = "above"


class Plot:
    """Root drawing surface: owns the layers, the top-level layout and the curves.

    `replot()` regenerates every axis' ticks, lays out `plot_layout` inside the
    viewport and then paints the layers from bottom to top.
    """

    def __init__(self, width: int = 640, height: int = 480, theme: PlotTheme | Mapping[str, Any] | None = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("plot width/height must be > 0")
        self._theme = theme if isinstance(theme, PlotTheme) else validate_theme(theme)
        self._size = Size(int(width), int(height))
        self._viewport = Rect(0, 0, int(width), int(height))
        self._minimum_size = Size(0, 0)
        self._antialiased_elements = AntialiasedElement.NONE
        self._not_antialiased_elements = AntialiasedElement.NONE
        self._painter_modes = PainterMode.DEFAULT
        self._curves: list[Curve] = []
        self._last_frame: np.ndarray | None = None

        self._layers: list[Layer] = [Layer(self, name) for name in DEFAULT_LAYERS]
        self._update_layer_indexes()
        self._current_layer: Layer = self._layers[DEFAULT_LAYERS.index("main")]

        self._plot_layout = GridLayout(self)
        default_rect = AxisRect(self, setup_default_axes=True)
        self._plot_layout.add_element(0, 0, default_rect)
        default_rect.set_layer("background")
        self._plot_layout.set_outer_rect(self._viewport)

        self.x_axis: Axis | None = default_rect.axis(AxisType.BOTTOM)
        self.y_axis: Axis | None = default_rect.axis(AxisType.LEFT)
        self.x_axis2: Axis | None = default_rect.axis(AxisType.TOP)
        self.y_axis2: Axis | None = default_rect.axis(AxisType.RIGHT)

    @property
    def theme(self) -> PlotTheme:
        return self._theme

    # -- layers -----------------------------------------------------------

    @property
    def layers(self) -> list[Layer]:
        return list(self._layers)

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    def layer(self, key: str | int) -> Layer | None:
        """Layer by name, or by index counted from the bottom."""
        if isinstance(key, int):
            if 0 <= key < len(self._layers):
                return self._layers[key]
            LOGGER.warning("index out of bounds: %s", key)
            return None
        for layer in self._layers:
            if layer.name == key:
                return layer
        return None

    @property
    def current_layer(self) -> Layer:
        return self._current_layer

    def set_current_layer(self, layer: Layer | str) -> bool:
        if isinstance(layer, str):
            found = self.layer(layer)
            if found is None:
                LOGGER.warning("layer with name doesn't exist: %s", layer)
                return False
            layer = found
        if not self._has_layer(layer):
            LOGGER.warning("layer not a layer of this plot: %r", layer)
            return False
        self._current_layer = layer
        return True

    def add_layer(self, name: str, other_layer: Layer | None = None, mode: LayerInsertMode = LayerInsertMode.ABOVE) -> bool:
        """Insert a new empty layer above or below `other_layer` (default: the top layer)."""
        if other_layer is None:
            other_layer = self._layers[-1]
        if not self._has_layer(other_layer):
            LOGGER.warning("other layer not a layer of this plot: %r", other_layer)
            return False
        if self.layer(name) is not None:
            LOGGER.warning("a layer with this name already exists: %s", name)
            return False
        index = other_layer.index + (1 if mode == LayerInsertMode.ABOVE else 0)
        self._layers.insert(index, Layer(self, name))
        self._update_layer_indexes()
        return True

    def remove_layer(self, layer: Layer) -> bool:
        """Remove `layer`, handing its children to the neighbouring layer.

        Children move on top of the layer below; when the bottom layer goes they
        are put underneath the children of the layer above instead, keeping
        their relative order. The last remaining layer cannot be removed.
        """
        if not self._has_layer(layer):
            LOGGER.warning("layer not a layer of this plot: %r", layer)
            return False
        if len(self._layers) < 2:
            LOGGER.warning("can't remove last layer")
            return False
        removed_index = layer.index
        is_first = removed_index == 0
        target = self._layers[removed_index + 1] if is_first else self._layers[removed_index - 1]
        children = layer.children
        if is_first:
            for child in reversed(children):
                child.move_to_layer(target, prepend=True)
        else:
            for child in children:
                child.move_to_layer(target, prepend=False)
        if layer is self._current_layer:
            self._current_layer = target
        del self._layers[removed_index]
        self._update_layer_indexes()
        return True

    def move_layer(self, layer: Layer, other_layer: Layer, mode: LayerInsertMode = LayerInsertMode.ABOVE) -> bool:
        """Move `layer` directly above or below `other_layer`."""
        if not self._has_layer(layer):
            LOGGER.warning("layer not a layer of this plot: %r", layer)
            return False
        if not self._has_layer(other_layer):
            LOGGER.warning("other layer not a layer of this plot: %r", other_layer)
            return False
        if layer is other_layer:
            return True
        del self._layers[layer.index]
        target_index = next(i for i, candidate in enumerate(self._layers) if candidate is other_layer)
        if mode == LayerInsertMode.ABOVE:
            target_index += 1
        self._layers.insert(target_index, layer)
        self._update_layer_indexes()
        return True

    def _has_layer(self, layer: Layer) -> bool:
        return any(candidate is layer for candidate in self._layers)

    def _update_layer_indexes(self) -> None:
        for i, layer in enumerate(self._layers):
            layer._index = i

    # -- layout and geometry ----------------------------------------------

    @property
    def plot_layout(self) -> GridLayout:
        return self._plot_layout

    @property
    def axis_rect(self) -> AxisRect | None:
        """The axis rect in the top-left cell of `plot_layout`, if any."""
        if self._plot_layout.has_element(0, 0):
            element = self._plot_layout.element(0, 0)
            if isinstance(element, AxisRect):
                return element
        return None

    def axis_rects(self) -> list[AxisRect]:
        return [el for el in self._plot_layout.elements(recursive=True) if isinstance(el, AxisRect)]

    def axes(self) -> list[Axis]:
        return [axis for rect in self.axis_rects() for axis in rect.axes()]

    @property
    def size(self) -> Size:
        return self._size

    @property
    def viewport(self) -> Rect:
        return self._viewport

    def set_viewport(self, rect: Rect) -> None:
        self._viewport = rect
        self._plot_layout.set_outer_rect(rect)

    def resize(self, width: int, height: int) -> None:
        """Change the surface size; it never shrinks below `minimum_size`."""
        width = max(int(width), self._minimum_size.width, 1)
        height = max(int(height), self._minimum_size.height, 1)
        self._size = Size(width, height)
        self.set_viewport(Rect(0, 0, width, height))

    @property
    def minimum_size(self) -> Size:
        return self._minimum_size

    def minimum_size_hint(self) -> Size:
        return self._plot_layout.minimum_size_hint()

    def layout_size_constraints_changed(self) -> None:
        """Called when a layout element's size limits changed somewhere in `plot_layout`."""
        self._minimum_size = final_minimum_size(self._plot_layout)
        if self._size.width < self._minimum_size.width or self._size.height < self._minimum_size.height:
            self.resize(self._size.width, self._size.height)

    # -- antialiasing -----------------------------------------------------

    @property
    def antialiased_elements(self) -> AntialiasedElement:
        return self._antialiased_elements

    @property
    def not_antialiased_elements(self) -> AntialiasedElement:
        return self._not_antialiased_elements

    def set_antialiased_elements(self, elements: AntialiasedElement) -> None:
        """Force antialiasing on for `elements`; they are dropped from the forced-off set."""
        self._antialiased_elements = elements
        self._not_antialiased_elements &= ~elements

    def set_not_antialiased_elements(self, elements: AntialiasedElement) -> None:
        self._not_antialiased_elements = elements
        self._antialiased_elements &= ~elements

    def set_painter_modes(self, modes: PainterMode) -> None:
        self._painter_modes = modes

    # -- curves -----------------------------------------------------------

    @property
    def curves(self) -> list[Curve]:
        return list(self._curves)

    def add_curve(self, x: Any = None, y: Any = None, key_axis: Axis | None = None, value_axis: Axis | None = None) -> Curve | None:
        key_axis = key_axis if key_axis is not None else self.x_axis
        value_axis = value_axis if value_axis is not None else self.y_axis
        if key_axis is None or value_axis is None:
            LOGGER.warning("can't add curve without key and value axis")
            return None
        curve = Curve(self, key_axis, value_axis, x, y)
        curve.set_pen(Pen(parse_hex_color(self._theme.curve_color), curve.pen.width))
        self._curves.append(curve)
        return curve

    def remove_curve(self, curve: Curve) -> bool:
        for i, candidate in enumerate(self._curves):
            if candidate is curve:
                del self._curves[i]
                curve.release()
                return True
        LOGGER.warning("curve not in list: %r", curve)
        return False

    # -- rendering --------------------------------------------------------

    def replot(self) -> np.ndarray:
        """Lay out and paint everything; returns the RGBA frame."""
        for axis in self.axes():
            axis.setup_tick_vectors()
        self._plot_layout.update()
        canvas = new_canvas(self._size.width, self._size.height, color=parse_hex_color(self._theme.background))
        painter = Painter(canvas, self._painter_modes)
        for layer in self._layers:
            for child in layer.children:
                if not child.real_visibility():
                    continue
                painter.save()
                painter.set_clip_rect(child.clip_rect())
                child.apply_default_antialiasing_hint(painter)
                child.draw(painter)
                painter.restore()
        self._last_frame = painter.to_rgba()
        return self._last_frame.copy()

    def to_rgba(self) -> np.ndarray:
        """Last rendered frame, rendering first if nothing was drawn yet."""
        if self._last_frame is None:
            return self.replot()
        return self._last_frame.copy()
