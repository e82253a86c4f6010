from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tickerplot.axis import ALL_AXIS_TYPES, Axis, AxisType, axis_type_for
from tickerplot.geometry import MarginSide, Size, iter_sides
from tickerplot.layout import LayoutElement
from tickerplot.painter import Painter

if TYPE_CHECKING:
    from tickerplot.plot import Plot

LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


class AxisRect(LayoutElement):
    """Layout element carrying axes on its four sides.

    The inner rect is the data area every axis maps onto. Its automatic
    margins are exactly what the axes need for ticks, tick labels and labels.
    Several axes on one side are stacked outwards by their offsets.
    """

    def __init__(self, plot: "Plot | None" = None, setup_default_axes: bool = True) -> None:
        super().__init__(plot)
        self._axes: dict[AxisType, list[Axis]] = {axis_type: [] for axis_type in ALL_AXIS_TYPES}
        self._background: RGBA | None = None
        if setup_default_axes:
            x_axis = self.add_axis(AxisType.BOTTOM)
            self.add_axis(AxisType.LEFT)
            x_axis2 = self.add_axis(AxisType.TOP)
            y_axis2 = self.add_axis(AxisType.RIGHT)
            for secondary in (x_axis2, y_axis2):
                secondary.set_visible(False)
                secondary.grid.set_visible(False)
                secondary.grid.set_zero_line_pen(None)

    @property
    def background(self) -> RGBA | None:
        return self._background

    def set_background(self, color: RGBA | None) -> None:
        self._background = color

    def axis_count(self, axis_type: AxisType) -> int:
        return len(self._axes.get(axis_type, []))

    def axis(self, axis_type: AxisType, index: int = 0) -> Axis | None:
        axes = self._axes.get(axis_type, [])
        if 0 <= index < len(axes):
            return axes[index]
        LOGGER.warning("axis index out of bounds: %s %s", axis_type, index)
        return None

    def axes(self, types: AxisType = AxisType.LEFT | AxisType.RIGHT | AxisType.TOP | AxisType.BOTTOM) -> list[Axis]:
        result: list[Axis] = []
        for axis_type in ALL_AXIS_TYPES:
            if axis_type in types:
                result.extend(self._axes[axis_type])
        return result

    def add_axis(self, axis_type: AxisType) -> Axis:
        """Create a new axis outside the existing ones on that side."""
        axis = Axis(self, axis_type)
        plot = self.parent_plot
        if plot is not None:
            axis.apply_theme(plot.theme)
        self._axes[axis_type].append(axis)
        return axis

    def add_axes(self, types: AxisType) -> list[Axis]:
        return [self.add_axis(axis_type) for axis_type in ALL_AXIS_TYPES if axis_type in types]

    def remove_axis(self, axis: Axis) -> bool:
        for axes in self._axes.values():
            for i, candidate in enumerate(axes):
                if candidate is axis:
                    del axes[i]
                    axis.grid.release()
                    axis.release()
                    return True
        LOGGER.warning("axis is not in this axis rect: %r", axis)
        return False

    @property
    def left(self) -> int:
        return self.rect.left

    @property
    def right(self) -> int:
        return self.rect.right

    @property
    def top(self) -> int:
        return self.rect.top

    @property
    def bottom(self) -> int:
        return self.rect.bottom

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height

    @property
    def center(self) -> tuple[float, float]:
        return self.rect.center

    def update(self) -> None:
        for side in iter_sides(MarginSide.ALL):
            self._update_axes_offset(axis_type_for(side))
        super().update()

    def calculate_auto_margin(self, side: MarginSide) -> int:
        """Offset plus margin of the outermost axis on `side`, 0 without axes."""
        axis_type = axis_type_for(side)
        self._update_axes_offset(axis_type)
        axes = self._axes[axis_type]
        if not axes:
            return 0
        outer = axes[-1]
        return outer.offset + outer.calculate_margin()

    def minimum_size_hint(self) -> Size:
        return Size(50, 50)

    def parent_plot_initialized(self, plot: "Plot | None") -> None:
        super().parent_plot_initialized(plot)
        if plot is None:
            return
        for axis in self.axes():
            if axis.parent_plot is None:
                axis.initialize_parent_plot(plot)
                axis.set_layer("axes")
                axis.apply_theme(plot.theme)
            grid = axis.grid
            if grid.parent_plot is None:
                grid.initialize_parent_plot(plot)
                grid.set_layer("grid")

    def draw(self, painter: Painter) -> None:
        if self._background is not None:
            painter.fill_rect(self.rect, self._background)

    def release(self) -> None:
        for axis in self.axes():
            self.remove_axis(axis)
        super().release()

    def _update_axes_offset(self, axis_type: AxisType) -> None:
        axes = self._axes[axis_type]
        if not axes:
            return
        first_visible_seen = axes[0].visible
        for i in range(1, len(axes)):
            previous = axes[i - 1]
            offset = previous.offset + previous.calculate_margin()
            if axes[i].visible:
                if first_visible_seen:
                    offset += axes[i].tick_length_in
                first_visible_seen = True
            axes[i].set_offset(offset)
