from __future__ import annotations

from typing import TYPE_CHECKING, Any
import weakref

import numpy as np

from tickerplot.axis import Axis, Orientation
from tickerplot.errors import PlotDataError
from tickerplot.geometry import Rect
from tickerplot.layer import AntialiasedElement, Layerable
from tickerplot.painter import Painter, Pen

if TYPE_CHECKING:
    from tickerplot.plot import Plot


def _coerce_1d(values: Any, label: str) -> np.ndarray:
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} must be numeric") from exc
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D, got shape {arr.shape}")
    return arr


class Curve(Layerable):
    """Polyline through (key, value) data, mapped by a key axis and a value axis.

    Points with a non-finite coordinate are skipped. The curve is clipped to the
    key axis' axis rect.
    """

    antialiased_element = AntialiasedElement.CURVES

    def __init__(self, plot: "Plot", key_axis: Axis, value_axis: Axis, x: Any = None, y: Any = None) -> None:
        if key_axis.orientation == value_axis.orientation:
            raise PlotDataError("key and value axis must have different orientations")
        self._x = np.empty(0, dtype=np.float64)
        self._y = np.empty(0, dtype=np.float64)
        # Data is checked before the curve is put on a layer.
        if y is not None:
            self.set_data(x, y)
        super().__init__(plot, "", key_axis.axis_rect)
        self._key_axis = weakref.ref(key_axis)
        self._value_axis = weakref.ref(value_axis)
        self._pen = Pen((0, 0, 255, 255), 1)
        self._name = ""

    @property
    def key_axis(self) -> Axis | None:
        return self._key_axis()

    @property
    def value_axis(self) -> Axis | None:
        return self._value_axis()

    @property
    def x(self) -> np.ndarray:
        return self._x.copy()

    @property
    def y(self) -> np.ndarray:
        return self._y.copy()

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    @property
    def pen(self) -> Pen:
        return self._pen

    def set_pen(self, pen: Pen) -> None:
        self._pen = pen

    def set_data(self, x: Any, y: Any) -> None:
        """Replace the data; `x` defaults to 0, 1, 2 ... when omitted."""
        y_arr = _coerce_1d(y, "y")
        x_arr = np.arange(y_arr.size, dtype=np.float64) if x is None else _coerce_1d(x, "x")
        if x_arr.shape != y_arr.shape:
            raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
        self._x = x_arr.copy()
        self._y = y_arr.copy()

    def rescale_axes(self) -> None:
        """Fit both axis ranges to the finite data."""
        mask = np.isfinite(self._x) & np.isfinite(self._y)
        if not np.any(mask):
            return
        for axis, values in ((self.key_axis, self._x[mask]), (self.value_axis, self._y[mask])):
            if axis is None:
                continue
            lower, upper = float(np.min(values)), float(np.max(values))
            if lower == upper:
                lower, upper = lower - 0.5, upper + 0.5
            axis.set_range(lower, upper)

    def pixel_points(self) -> tuple[np.ndarray, np.ndarray]:
        """Data mapped to pixel coordinates as (xs, ys)."""
        key_axis, value_axis = self.key_axis, self.value_axis
        if key_axis is None or value_axis is None or self._x.size == 0:
            return np.empty(0), np.empty(0)
        keys = np.asarray([key_axis.coord_to_pixel(float(v)) if np.isfinite(v) else np.nan for v in self._x])
        values = np.asarray([value_axis.coord_to_pixel(float(v)) if np.isfinite(v) else np.nan for v in self._y])
        if key_axis.orientation == Orientation.HORIZONTAL:
            return keys, values
        return values, keys

    def clip_rect(self) -> Rect:
        key_axis = self.key_axis
        axis_rect = key_axis.axis_rect if key_axis is not None else None
        return axis_rect.rect if axis_rect is not None else super().clip_rect()

    def draw(self, painter: Painter) -> None:
        xs, ys = self.pixel_points()
        if xs.size < 2:
            return
        painter.set_pen(self._pen)
        painter.draw_polyline(xs.tolist(), ys.tolist())
