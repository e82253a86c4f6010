from __future__ import annotations

from enum import Enum, Flag, auto
import logging
import math
from typing import TYPE_CHECKING, Callable, Sequence
import weakref

import numpy as np

from tickerplot.geometry import Alignment, MarginSide, Rect
from tickerplot.layer import AntialiasedElement, Layerable
from tickerplot.painter import Painter, Pen
from tickerplot.range import Range
from tickerplot.text import Font, text_size
from tickerplot.theme import PlotTheme, parse_hex_color
from tickerplot.ticks import (
    auto_sub_tick_count,
    auto_tick_step,
    format_tick_label,
    linear_ticks,
    log_ticks,
    sub_ticks,
    visible_tick_bounds,
)

if TYPE_CHECKING:
    from tickerplot.axis_rect import AxisRect

LOGGER = logging.getLogger(__name__)

# Pixel distance used for values a logarithmic axis cannot represent.
LOG_OVERFLOW_PX = 200

RangeListener = Callable[[Range, Range], None]


class AxisType(Flag):
    LEFT = auto()
    RIGHT = auto()
    TOP = auto()
    BOTTOM = auto()


ALL_AXIS_TYPES = (AxisType.LEFT, AxisType.RIGHT, AxisType.TOP, AxisType.BOTTOM)


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ScaleType(Enum):
    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"


def orientation_of(axis_type: AxisType) -> Orientation:
    if axis_type in (AxisType.TOP, AxisType.BOTTOM):
        return Orientation.HORIZONTAL
    return Orientation.VERTICAL


def margin_side_for(axis_type: AxisType) -> MarginSide:
    return {
        AxisType.LEFT: MarginSide.LEFT,
        AxisType.RIGHT: MarginSide.RIGHT,
        AxisType.TOP: MarginSide.TOP,
        AxisType.BOTTOM: MarginSide.BOTTOM,
    }[axis_type]


def axis_type_for(side: MarginSide) -> AxisType:
    return {
        MarginSide.LEFT: AxisType.LEFT,
        MarginSide.RIGHT: AxisType.RIGHT,
        MarginSide.TOP: AxisType.TOP,
        MarginSide.BOTTOM: AxisType.BOTTOM,
    }[side]


class Axis(Layerable):
    """One axis along a side of an axis rect.

    Owns the numeric range and everything derived from it: tick and sub tick
    positions, tick labels, the coordinate/pixel transform and the margin the
    axis needs outside its axis rect. The pixel span is always the axis rect's
    inner rect.
    """

    antialiased_element = AntialiasedElement.AXES

    def __init__(self, axis_rect: "AxisRect", axis_type: AxisType) -> None:
        plot = axis_rect.parent_plot
        layer = "axes" if plot is not None and plot.layer("axes") is not None else ""
        super().__init__(plot, layer, axis_rect)
        self._axis_rect = weakref.ref(axis_rect)
        self._axis_type = axis_type
        self._orientation = orientation_of(axis_type)
        self._offset = 0
        self._padding = 5

        self._range = Range(0.0, 5.0)
        self._range_reversed = False
        self._scale_type = ScaleType.LINEAR
        self._scale_log_base = 10.0
        self._scale_log_base_log_inv = 1.0 / math.log(10.0)
        self._range_listeners: list[RangeListener] = []

        self._auto_ticks = True
        self._auto_tick_step = True
        self._auto_tick_count = 6
        self._tick_step = 1.0
        self._auto_sub_ticks = True
        self._sub_tick_count = 4
        self._auto_tick_labels = True
        self._tick_vector = np.empty(0, dtype=np.float64)
        self._tick_vector_labels: list[str] = []
        self._sub_tick_vector = np.empty(0, dtype=np.float64)
        self._low_visible_tick = -1
        self._high_visible_tick = -1

        self._ticks = True
        self._tick_length_in = 5
        self._tick_length_out = 0
        self._sub_tick_length_in = 2
        self._sub_tick_length_out = 0
        self._tick_labels = True
        self._tick_label_padding = 5
        self._tick_label_rotation = 0
        self._tick_label_font = Font()
        self._tick_label_color = (0, 0, 0, 255)
        self._number_format = "g"
        self._number_precision = 6
        self._label = ""
        self._label_padding = 5
        self._label_font = Font()
        self._label_color = (0, 0, 0, 255)

        self._base_pen = Pen((0, 0, 0, 255), 1)
        self._tick_pen = Pen((0, 0, 0, 255), 1)
        self._sub_tick_pen = Pen((0, 0, 0, 255), 1)

        self._cached_margin = 0
        self._cached_margin_valid = False

        self._grid = Grid(self)

    def __repr__(self) -> str:
        return f"Axis({self._axis_type.name}, range={self._range!r})"

    # -- structure --------------------------------------------------------

    @property
    def axis_rect(self) -> "AxisRect | None":
        return self._axis_rect()

    @property
    def axis_type(self) -> AxisType:
        return self._axis_type

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def grid(self) -> "Grid":
        return self._grid

    @property
    def offset(self) -> int:
        return self._offset

    def set_offset(self, offset: int) -> None:
        self._offset = int(offset)

    @property
    def padding(self) -> int:
        return self._padding

    def set_padding(self, padding: int) -> None:
        if padding != self._padding:
            self._padding = int(padding)
            self._invalidate_margin()

    def set_visible(self, on: bool) -> None:
        if bool(on) != self.visible:
            self._invalidate_margin()
        super().set_visible(on)

    # -- range ------------------------------------------------------------

    @property
    def range(self) -> Range:
        return self._range.copy()

    @property
    def range_reversed(self) -> bool:
        return self._range_reversed

    @property
    def scale_type(self) -> ScaleType:
        return self._scale_type

    @property
    def scale_log_base(self) -> float:
        return self._scale_log_base

    def on_range_changed(self, callback: RangeListener) -> None:
        """Register `callback(new_range, old_range)`, called after every range change."""
        self._range_listeners.append(callback)

    def set_range(self, lower: float | Range, upper: float | None = None) -> bool:
        """Replace the range; invalid ranges are rejected and leave it untouched."""
        if isinstance(lower, Range):
            new = lower.copy()
        else:
            if upper is None:
                raise TypeError("set_range needs a Range or both bounds")
            if not Range.valid_range(lower, upper):
                LOGGER.warning("rejected invalid range: %s .. %s", lower, upper)
                return False
            new = Range(lower, upper)
        if new.lower == self._range.lower and new.upper == self._range.upper:
            return False
        if not Range.valid(new):
            LOGGER.warning("rejected invalid range: %r", new)
            return False
        self._apply_range(new)
        return True

    def set_range_around(self, position: float, size: float, alignment: Alignment = Alignment.CENTER) -> bool:
        """Range of `size` with `position` at its lower end, upper end or center."""
        if Alignment.LEFT in alignment:
            return self.set_range(position, position + size)
        if Alignment.RIGHT in alignment:
            return self.set_range(position - size, position)
        return self.set_range(position - size / 2.0, position + size / 2.0)

    def set_range_lower(self, lower: float) -> bool:
        if self._range.lower == lower:
            return False
        return self._apply_checked_range(Range(lower, self._range.upper))

    def set_range_upper(self, upper: float) -> bool:
        if self._range.upper == upper:
            return False
        return self._apply_checked_range(Range(self._range.lower, upper))

    def set_range_reversed(self, reversed_: bool) -> None:
        if reversed_ != self._range_reversed:
            self._range_reversed = bool(reversed_)
            self._invalidate_margin()

    def move_range(self, diff: float) -> bool:
        """Shift by `diff`; on a logarithmic axis `diff` is a factor."""
        if self._scale_type == ScaleType.LINEAR:
            new = Range(self._range.lower + diff, self._range.upper + diff)
        else:
            new = Range(self._range.lower * diff, self._range.upper * diff)
        return self._apply_checked_range(new)

    def scale_range(self, factor: float, center: float) -> None:
        """Scale the range by `factor` around the coordinate `center`."""
        lower, upper = self._range.lower, self._range.upper
        if self._scale_type == ScaleType.LINEAR:
            new_lower = (lower - center) * factor + center
            new_upper = (upper - center) * factor + center
        else:
            if not ((upper < 0 and center < 0) or (upper > 0 and center > 0)):
                LOGGER.warning("center of scaling operation doesn't lie in same logarithmic sign domain as range: %s", center)
                return
            new_lower = (lower / center) ** factor * center
            new_upper = (upper / center) ** factor * center
        if Range.valid_range(new_lower, new_upper):
            self._apply_range(Range(new_lower, new_upper))
        else:
            LOGGER.warning("scaling would produce an invalid range: %s .. %s", new_lower, new_upper)

    def set_scale_ratio(self, other: "Axis", ratio: float = 1.0) -> None:
        """Size the range so one unit here is `ratio` times a unit of `other` in pixels."""
        own_rect, other_rect = self.axis_rect, other.axis_rect
        if own_rect is None or other_rect is None:
            LOGGER.warning("axis without axis rect, cannot set scale ratio")
            return
        other_px = other_rect.width if other.orientation == Orientation.HORIZONTAL else other_rect.height
        own_px = own_rect.width if self._orientation == Orientation.HORIZONTAL else own_rect.height
        if other_px <= 0:
            LOGGER.warning("other axis has no pixel extent, cannot set scale ratio")
            return
        new_size = ratio * other.range.size * own_px / float(other_px)
        self.set_range_around(self._range.center, new_size, Alignment.CENTER)

    def set_scale_type(self, scale_type: ScaleType) -> None:
        if scale_type == self._scale_type:
            return
        self._scale_type = scale_type
        if scale_type == ScaleType.LOGARITHMIC:
            self._apply_range(self._range.sanitized_for_log_scale())
        self._invalidate_margin()

    def set_scale_log_base(self, base: float) -> bool:
        if base <= 1:
            LOGGER.warning("invalid logarithmic scale base (must be greater 1): %s", base)
            return False
        self._scale_log_base = float(base)
        self._scale_log_base_log_inv = 1.0 / math.log(base)
        self._invalidate_margin()
        return True

    # -- ticks ------------------------------------------------------------

    @property
    def auto_ticks(self) -> bool:
        return self._auto_ticks

    @property
    def auto_tick_count(self) -> int:
        return self._auto_tick_count

    @property
    def tick_step(self) -> float:
        return self._tick_step

    @property
    def sub_tick_count(self) -> int:
        return self._sub_tick_count

    @property
    def tick_vector(self) -> np.ndarray:
        return self._tick_vector.copy()

    @property
    def sub_tick_vector(self) -> np.ndarray:
        return self._sub_tick_vector.copy()

    @property
    def tick_vector_labels(self) -> list[str]:
        return list(self._tick_vector_labels)

    def set_auto_ticks(self, on: bool) -> None:
        if on != self._auto_ticks:
            self._auto_ticks = bool(on)
            self._invalidate_margin()

    def set_auto_tick_step(self, on: bool) -> None:
        if on != self._auto_tick_step:
            self._auto_tick_step = bool(on)
            self._invalidate_margin()

    def set_auto_sub_ticks(self, on: bool) -> None:
        self._auto_sub_ticks = bool(on)

    def set_auto_tick_labels(self, on: bool) -> None:
        if on != self._auto_tick_labels:
            self._auto_tick_labels = bool(on)
            self._invalidate_margin()

    def set_auto_tick_count(self, count: int) -> bool:
        if count <= 0:
            LOGGER.warning("auto tick count must be greater than zero: %s", count)
            return False
        if count != self._auto_tick_count:
            self._auto_tick_count = int(count)
            self._invalidate_margin()
        return True

    def set_tick_step(self, step: float) -> None:
        if step != self._tick_step:
            self._tick_step = float(step)
            self._invalidate_margin()

    def set_sub_tick_count(self, count: int) -> None:
        self._sub_tick_count = max(0, int(count))

    def set_tick_vector(self, ticks: Sequence[float] | np.ndarray) -> None:
        """Manual tick positions, used while auto ticks are off."""
        self._tick_vector = np.asarray(ticks, dtype=np.float64).copy()
        self._invalidate_margin()

    def set_tick_vector_labels(self, labels: Sequence[str]) -> None:
        """Manual tick labels, used while auto tick labels are off."""
        self._tick_vector_labels = [str(label) for label in labels]
        self._invalidate_margin()

    def setup_tick_vectors(self) -> None:
        """Regenerate ticks, sub ticks and labels for the current range."""
        if self.parent_plot is None:
            return
        if (not self._ticks and not self._tick_labels) or self._range.size <= 0:
            return
        if self._auto_ticks:
            self._generate_auto_ticks()
        self._low_visible_tick, self._high_visible_tick = visible_tick_bounds(
            self._tick_vector, self._range.lower, self._range.upper
        )
        if self._tick_vector.size == 0:
            self._sub_tick_vector = np.empty(0, dtype=np.float64)
            return
        self._sub_tick_vector = sub_ticks(
            self._tick_vector,
            self._range.lower,
            self._range.upper,
            self._sub_tick_count,
            self._low_visible_tick,
            self._high_visible_tick,
        )
        if self._auto_tick_labels:
            step = self._tick_step if self._scale_type == ScaleType.LINEAR else None
            labels = [""] * self._tick_vector.size
            for i in range(self._low_visible_tick, self._high_visible_tick + 1):
                labels[i] = format_tick_label(
                    float(self._tick_vector[i]), self._number_format, self._number_precision, step=step
                )
            if labels != self._tick_vector_labels:
                self._tick_vector_labels = labels
                self._invalidate_margin()

    def _generate_auto_ticks(self) -> None:
        if self._scale_type == ScaleType.LINEAR:
            if self._auto_tick_step:
                self._tick_step = auto_tick_step(self._range.size, self._auto_tick_count)
            if self._auto_sub_ticks:
                self._sub_tick_count = auto_sub_tick_count(self._tick_step, self._sub_tick_count)
            self._tick_vector = linear_ticks(self._range.lower, self._range.upper, self._tick_step)
        else:
            if self._auto_sub_ticks:
                self._sub_tick_count = max(0, int(round(self._scale_log_base)) - 2)
            self._tick_vector = log_ticks(self._range.lower, self._range.upper, self._scale_log_base)

    # -- decoration -------------------------------------------------------

    @property
    def ticks(self) -> bool:
        return self._ticks

    def set_ticks(self, show: bool) -> None:
        if show != self._ticks:
            self._ticks = bool(show)
            self._invalidate_margin()

    @property
    def tick_labels(self) -> bool:
        return self._tick_labels

    def set_tick_labels(self, show: bool) -> None:
        if show != self._tick_labels:
            self._tick_labels = bool(show)
            self._invalidate_margin()

    @property
    def tick_length_in(self) -> int:
        return self._tick_length_in

    @property
    def tick_length_out(self) -> int:
        return self._tick_length_out

    def set_tick_length(self, inside: int, outside: int = 0) -> None:
        self._tick_length_in = int(inside)
        if outside != self._tick_length_out:
            self._tick_length_out = int(outside)
            self._invalidate_margin()

    def set_sub_tick_length(self, inside: int, outside: int = 0) -> None:
        self._sub_tick_length_in = int(inside)
        if outside != self._sub_tick_length_out:
            self._sub_tick_length_out = int(outside)
            self._invalidate_margin()

    @property
    def tick_label_padding(self) -> int:
        return self._tick_label_padding

    def set_tick_label_padding(self, padding: int) -> None:
        if padding != self._tick_label_padding:
            self._tick_label_padding = int(padding)
            self._invalidate_margin()

    @property
    def tick_label_rotation(self) -> int:
        return self._tick_label_rotation

    def set_tick_label_rotation(self, degrees: int) -> bool:
        """Quarter-turn rotation of tick labels, one of -90, 0 or 90."""
        if degrees not in (-90, 0, 90):
            LOGGER.warning("tick label rotation must be -90, 0 or 90 degrees: %s", degrees)
            return False
        if degrees != self._tick_label_rotation:
            self._tick_label_rotation = int(degrees)
            self._invalidate_margin()
        return True

    def set_tick_label_font(self, font: Font) -> None:
        if font != self._tick_label_font:
            self._tick_label_font = font
            self._invalidate_margin()

    def set_tick_label_color(self, color: tuple[int, int, int, int]) -> None:
        self._tick_label_color = color

    @property
    def number_format(self) -> str:
        return self._number_format

    @property
    def number_precision(self) -> int:
        return self._number_precision

    def set_number_format(self, number_format: str) -> bool:
        if number_format not in ("f", "e", "g"):
            LOGGER.warning("number format must be one of f, e, g: %s", number_format)
            return False
        if number_format != self._number_format:
            self._number_format = number_format
            self._invalidate_margin()
        return True

    def set_number_precision(self, precision: int) -> None:
        if precision != self._number_precision:
            self._number_precision = max(0, int(precision))
            self._invalidate_margin()

    @property
    def label(self) -> str:
        return self._label

    def set_label(self, text: str) -> None:
        if text != self._label:
            self._label = text
            self._invalidate_margin()

    @property
    def label_padding(self) -> int:
        return self._label_padding

    def set_label_padding(self, padding: int) -> None:
        if padding != self._label_padding:
            self._label_padding = int(padding)
            self._invalidate_margin()

    def set_label_font(self, font: Font) -> None:
        if font != self._label_font:
            self._label_font = font
            self._invalidate_margin()

    def set_label_color(self, color: tuple[int, int, int, int]) -> None:
        self._label_color = color

    def set_base_pen(self, pen: Pen) -> None:
        self._base_pen = pen

    def set_tick_pen(self, pen: Pen) -> None:
        self._tick_pen = pen

    def set_sub_tick_pen(self, pen: Pen) -> None:
        self._sub_tick_pen = pen

    def apply_theme(self, theme: PlotTheme) -> None:
        axis_color = parse_hex_color(theme.axis_color)
        text_color = parse_hex_color(theme.text_color)
        self._base_pen = Pen(axis_color, 1)
        self._tick_pen = Pen(axis_color, 1)
        self._sub_tick_pen = Pen(axis_color, 1)
        self._tick_label_color = text_color
        self._label_color = text_color
        self._tick_label_font = Font(theme.font_family, theme.tick_label_font_px)
        self._label_font = Font(theme.font_family, theme.label_font_px)
        self._tick_label_padding = theme.tick_label_padding
        self._label_padding = theme.label_padding
        self._padding = theme.padding
        self._invalidate_margin()
        self._grid.apply_theme(theme)

    # -- transforms -------------------------------------------------------

    def coord_to_pixel(self, value: float) -> float:
        """Pixel position of the coordinate `value` along this axis.

        The range spans the axis rect from `left` to `right` and from `bottom` to
        `top`, where `right` and `bottom` are the exclusive edges `left + width`
        and `top + height`.
        """
        rect = self._pixel_rect()
        lower, upper = self._range.lower, self._range.upper
        if self._orientation == Orientation.HORIZONTAL:
            if self._scale_type == ScaleType.LINEAR:
                if not self._range_reversed:
                    return (value - lower) / self._range.size * rect.width + rect.left
                return (upper - value) / self._range.size * rect.width + rect.left
            if value >= 0 and upper < 0:
                return rect.right + LOG_OVERFLOW_PX if not self._range_reversed else rect.left - LOG_OVERFLOW_PX
            if value <= 0 and upper > 0:
                return rect.left - LOG_OVERFLOW_PX if not self._range_reversed else rect.right + LOG_OVERFLOW_PX
            ratio = self._base_log(value / lower) if not self._range_reversed else self._base_log(upper / value)
            return ratio / self._base_log(upper / lower) * rect.width + rect.left
        if self._scale_type == ScaleType.LINEAR:
            if not self._range_reversed:
                return rect.bottom - (value - lower) / self._range.size * rect.height
            return rect.bottom - (upper - value) / self._range.size * rect.height
        if value >= 0 and upper < 0:
            return rect.top - LOG_OVERFLOW_PX if not self._range_reversed else rect.bottom + LOG_OVERFLOW_PX
        if value <= 0 and upper > 0:
            return rect.bottom + LOG_OVERFLOW_PX if not self._range_reversed else rect.top - LOG_OVERFLOW_PX
        ratio = self._base_log(value / lower) if not self._range_reversed else self._base_log(upper / value)
        return rect.bottom - ratio / self._base_log(upper / lower) * rect.height

    def pixel_to_coord(self, value: float) -> float:
        """Inverse of `coord_to_pixel` inside the range's domain."""
        rect = self._pixel_rect()
        lower, upper = self._range.lower, self._range.upper
        if self._orientation == Orientation.HORIZONTAL:
            if rect.width == 0:
                return lower
            frac = (value - rect.left) / rect.width
        else:
            if rect.height == 0:
                return lower
            frac = (rect.bottom - value) / rect.height
        if self._scale_type == ScaleType.LINEAR:
            if not self._range_reversed:
                return frac * self._range.size + lower
            return -frac * self._range.size + upper
        if not self._range_reversed:
            return (upper / lower) ** frac * lower
        return (upper / lower) ** (-frac) * upper

    def _base_log(self, value: float) -> float:
        return math.log(value) * self._scale_log_base_log_inv

    def _pixel_rect(self) -> Rect:
        axis_rect = self.axis_rect
        return axis_rect.rect if axis_rect is not None else Rect()

    # -- margin and drawing -----------------------------------------------

    def calculate_margin(self) -> int:
        """Pixels this axis needs outside its axis rect; cached until a setting changes."""
        if self._cached_margin_valid:
            return self._cached_margin
        margin = 0
        if self.visible:
            if self._ticks:
                margin += max(0, self._tick_length_out, self._sub_tick_length_out)
            if self._tick_labels:
                margin += self._max_tick_label_extent()
                margin += self._tick_label_padding
            if self._label:
                margin += text_size(self._label, self._label_font)[1]
                margin += self._label_padding
        margin += self._padding
        self._cached_margin = margin
        self._cached_margin_valid = True
        return margin

    def draw(self, painter: Painter) -> None:
        rect = self._pixel_rect()
        origin_x, origin_y = self._origin(rect)
        horizontal = self._orientation == Orientation.HORIZONTAL

        painter.set_pen(self._base_pen)
        if horizontal:
            start, end = (origin_x, origin_y), (origin_x + rect.width, origin_y)
        else:
            start, end = (origin_x, origin_y), (origin_x, origin_y - rect.height)
        if self._range_reversed:
            start, end = end, start
        painter.draw_line(start[0], start[1], end[0], end[1])

        # Positive direction points into the axis rect.
        tick_dir = -1 if self._axis_type in (AxisType.BOTTOM, AxisType.RIGHT) else 1
        low, high = self._low_visible_tick, self._high_visible_tick
        if self._ticks:
            painter.set_pen(self._tick_pen)
            for i in range(max(low, 0), min(high, self._tick_vector.size - 1) + 1):
                self._draw_tick(painter, self.coord_to_pixel(float(self._tick_vector[i])), origin_x, origin_y,
                                self._tick_length_in, self._tick_length_out, tick_dir)
            painter.set_pen(self._sub_tick_pen)
            for value in self._sub_tick_vector:
                self._draw_tick(painter, self.coord_to_pixel(float(value)), origin_x, origin_y,
                                self._sub_tick_length_in, self._sub_tick_length_out, tick_dir)

        margin = max(0, self._tick_length_out, self._sub_tick_length_out) if self._ticks else 0
        if self._tick_labels:
            margin += self._tick_label_padding
            painter.set_pen(Pen(self._tick_label_color))
            extent = 0
            for i in range(max(low, 0), min(high, len(self._tick_vector_labels) - 1) + 1):
                text = self._tick_vector_labels[i]
                if not text:
                    continue
                size = self._place_tick_label(
                    painter, self.coord_to_pixel(float(self._tick_vector[i])), origin_x, origin_y, margin, text
                )
                extent = max(extent, size[1] if horizontal else size[0])
            margin += extent

        if self._label:
            margin += self._label_padding
            painter.set_pen(Pen(self._label_color))
            self._draw_label(painter, rect, origin_x, origin_y, margin)

    def _origin(self, rect: Rect) -> tuple[int, int]:
        if self._axis_type == AxisType.LEFT:
            return rect.left - self._offset, rect.bottom
        if self._axis_type == AxisType.RIGHT:
            return rect.right + self._offset, rect.bottom
        if self._axis_type == AxisType.TOP:
            return rect.left, rect.top - self._offset
        return rect.left, rect.bottom + self._offset

    def _draw_tick(
        self,
        painter: Painter,
        position: float,
        origin_x: int,
        origin_y: int,
        length_in: int,
        length_out: int,
        tick_dir: int,
    ) -> None:
        if self._orientation == Orientation.HORIZONTAL:
            painter.draw_line(position, origin_y - length_out * tick_dir, position, origin_y + length_in * tick_dir)
        else:
            painter.draw_line(origin_x - length_out * tick_dir, position, origin_x + length_in * tick_dir, position)

    def _place_tick_label(
        self,
        painter: Painter,
        position: float,
        origin_x: int,
        origin_y: int,
        distance: int,
        text: str,
    ) -> tuple[int, int]:
        w, h = text_size(text, self._tick_label_font, self._tick_label_rotation)
        if self._axis_type == AxisType.LEFT:
            x, y = origin_x - distance - w, position - h / 2.0
        elif self._axis_type == AxisType.RIGHT:
            x, y = origin_x + distance, position - h / 2.0
        elif self._axis_type == AxisType.TOP:
            x, y = position - w / 2.0, origin_y - distance - h
        else:
            x, y = position - w / 2.0, origin_y + distance
        painter.draw_text(x, y, text, self._tick_label_font, rotate_deg=self._tick_label_rotation)
        return w, h

    def _draw_label(self, painter: Painter, rect: Rect, origin_x: int, origin_y: int, margin: int) -> None:
        w, h = text_size(self._label, self._label_font)
        if self._axis_type == AxisType.LEFT:
            x, y, rotate = origin_x - margin - h, rect.top + (rect.height - w) / 2.0, 90
        elif self._axis_type == AxisType.RIGHT:
            x, y, rotate = origin_x + margin, rect.top + (rect.height - w) / 2.0, -90
        elif self._axis_type == AxisType.TOP:
            x, y, rotate = rect.left + (rect.width - w) / 2.0, origin_y - margin - h, 0
        else:
            x, y, rotate = rect.left + (rect.width - w) / 2.0, origin_y + margin, 0
        painter.draw_text(x, y, self._label, self._label_font, rotate_deg=rotate)

    def _max_tick_label_extent(self) -> int:
        low, high = visible_tick_bounds(self._tick_vector, self._range.lower, self._range.upper)
        extent = 0
        for i in range(max(low, 0), min(high, len(self._tick_vector_labels) - 1) + 1):
            text = self._tick_vector_labels[i]
            if not text:
                continue
            w, h = text_size(text, self._tick_label_font, self._tick_label_rotation)
            extent = max(extent, h if self._orientation == Orientation.HORIZONTAL else w)
        return extent

    def _apply_range(self, new: Range) -> None:
        old = self._range
        if self._scale_type == ScaleType.LOGARITHMIC:
            self._range = new.sanitized_for_log_scale()
        else:
            self._range = new.sanitized_for_lin_scale()
        self._invalidate_margin()
        for listener in list(self._range_listeners):
            listener(self._range.copy(), old.copy())

    def _apply_checked_range(self, new: Range) -> bool:
        """Apply `new` unless it, or its scale-sanitized form, is not a valid range."""
        if self._scale_type == ScaleType.LOGARITHMIC:
            candidate = new.sanitized_for_log_scale()
        else:
            candidate = new.sanitized_for_lin_scale()
        if not Range.valid(candidate):
            LOGGER.warning("rejected invalid range: %r", candidate)
            return False
        self._apply_range(candidate)
        return True

    def _invalidate_margin(self) -> None:
        self._cached_margin_valid = False


class Grid(Layerable):
    """Grid lines of one axis, spanning the axis rect at the axis' ticks.

    The grid's parent layerable is its axis, so hiding the axis hides the grid.
    """

    antialiased_element = AntialiasedElement.GRID

    def __init__(self, axis: Axis) -> None:
        plot = axis.parent_plot
        layer = "grid" if plot is not None and plot.layer("grid") is not None else ""
        super().__init__(plot, layer, axis)
        self._axis = weakref.ref(axis)
        self._sub_grid_visible = False
        self._antialiased_sub_grid = False
        self._antialiased_zero_line = False
        self._pen = Pen((200, 200, 200, 255), 1)
        self._sub_grid_pen = Pen((220, 220, 220, 255), 1)
        self._zero_line_pen: Pen | None = Pen((200, 200, 200, 255), 1)

    @property
    def axis(self) -> Axis | None:
        return self._axis()

    @property
    def sub_grid_visible(self) -> bool:
        return self._sub_grid_visible

    def set_sub_grid_visible(self, visible: bool) -> None:
        self._sub_grid_visible = bool(visible)

    def set_antialiased_sub_grid(self, enabled: bool) -> None:
        self._antialiased_sub_grid = bool(enabled)

    def set_antialiased_zero_line(self, enabled: bool) -> None:
        self._antialiased_zero_line = bool(enabled)

    @property
    def pen(self) -> Pen:
        return self._pen

    def set_pen(self, pen: Pen) -> None:
        self._pen = pen

    def set_sub_grid_pen(self, pen: Pen) -> None:
        self._sub_grid_pen = pen

    @property
    def zero_line_pen(self) -> Pen | None:
        return self._zero_line_pen

    def set_zero_line_pen(self, pen: Pen | None) -> None:
        """Pen for the line at coordinate 0; `None` draws it as a regular grid line."""
        self._zero_line_pen = pen

    def apply_theme(self, theme: PlotTheme) -> None:
        self._pen = Pen(parse_hex_color(theme.grid_color), 1)
        self._sub_grid_pen = Pen(parse_hex_color(theme.sub_grid_color), 1)
        if self._zero_line_pen is not None:
            self._zero_line_pen = Pen(parse_hex_color(theme.zero_line_color), 1)

    def clip_rect(self) -> Rect:
        axis = self.axis
        axis_rect = axis.axis_rect if axis is not None else None
        return axis_rect.rect if axis_rect is not None else super().clip_rect()

    def draw(self, painter: Painter) -> None:
        axis = self.axis
        if axis is None or axis.axis_rect is None:
            return
        if self._sub_grid_visible:
            self._draw_sub_grid_lines(painter, axis)
        self._draw_grid_lines(painter, axis)

    def _draw_grid_lines(self, painter: Painter, axis: Axis) -> None:
        ticks = axis._tick_vector
        low = max(axis._low_visible_tick, 0)
        high = min(axis._high_visible_tick, ticks.size - 1)
        zero_index = -1
        rng = axis.range
        if self._zero_line_pen is not None and rng.lower < 0 < rng.upper:
            self.apply_antialiasing_hint(painter, self._antialiased_zero_line, AntialiasedElement.ZERO_LINE)
            painter.set_pen(self._zero_line_pen)
            epsilon = rng.size * 1e-6
            for i in range(low, high + 1):
                if abs(ticks[i]) < epsilon:
                    zero_index = i
                    self._draw_line_at(painter, axis, float(ticks[i]))
                    break
        self.apply_default_antialiasing_hint(painter)
        painter.set_pen(self._pen)
        for i in range(low, high + 1):
            if i != zero_index:
                self._draw_line_at(painter, axis, float(ticks[i]))

    def _draw_sub_grid_lines(self, painter: Painter, axis: Axis) -> None:
        self.apply_antialiasing_hint(painter, self._antialiased_sub_grid, AntialiasedElement.SUB_GRID)
        painter.set_pen(self._sub_grid_pen)
        for value in axis._sub_tick_vector:
            self._draw_line_at(painter, axis, float(value))

    def _draw_line_at(self, painter: Painter, axis: Axis, value: float) -> None:
        rect = axis.axis_rect.rect  # type: ignore[union-attr]
        t = axis.coord_to_pixel(value)
        if axis.orientation == Orientation.HORIZONTAL:
            painter.draw_line(t, rect.bottom, t, rect.top)
        else:
            painter.draw_line(rect.left, t, rect.right, t)
