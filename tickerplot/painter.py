from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Flag, auto
import logging
import math
from typing import Sequence

import numpy as np

from tickerplot.geometry import Rect
from tickerplot.text import Font, draw_text

LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


class PainterMode(Flag):
    DEFAULT = 0
    VECTORIZED = auto()
    NO_CACHE = auto()
    NON_COSMETIC = auto()


@dataclass(frozen=True)
class Pen:
    color: RGBA = (0, 0, 0, 255)
    width: int = 1


@dataclass(frozen=True)
class _PainterState:
    pen: Pen
    brush: RGBA | None
    translation: tuple[float, float]
    clip: Rect | None
    antialiasing: bool


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


class Painter:
    """Drawing surface handed to every layerable's `draw`.

    Wraps an RGBA canvas instead of extending it, so that the pen, line and
    antialiasing corrections below cannot be bypassed by callers.
    """

    def __init__(self, canvas: np.ndarray, modes: PainterMode = PainterMode.DEFAULT) -> None:
        if canvas.ndim != 3 or canvas.shape[2] != 4 or canvas.dtype != np.uint8:
            raise ValueError("canvas must be an HxWx4 uint8 array")
        self._canvas = canvas
        self._modes = modes
        self._state = _PainterState(
            pen=Pen(),
            brush=None,
            translation=(0.0, 0.0),
            clip=None,
            antialiasing=False,
        )
        self._stack: list[_PainterState] = []

    @property
    def canvas(self) -> np.ndarray:
        return self._canvas

    @property
    def modes(self) -> PainterMode:
        return self._modes

    @property
    def pen(self) -> Pen:
        return self._state.pen

    @property
    def brush(self) -> RGBA | None:
        return self._state.brush

    @property
    def antialiasing(self) -> bool:
        return self._state.antialiasing

    @property
    def translation(self) -> tuple[float, float]:
        return self._state.translation

    @property
    def clip_rect(self) -> Rect | None:
        return self._state.clip

    def set_modes(self, modes: PainterMode) -> None:
        self._modes = modes

    def set_mode(self, mode: PainterMode, enabled: bool = True) -> None:
        if enabled:
            self._modes |= mode
        else:
            self._modes &= ~mode

    def set_pen(self, pen: Pen | RGBA) -> None:
        if not isinstance(pen, Pen):
            pen = Pen(color=tuple(pen))  # type: ignore[arg-type]
        if PainterMode.NON_COSMETIC in self._modes and pen.width <= 0:
            pen = replace(pen, width=1)
        self._state = replace(self._state, pen=pen)

    def set_brush(self, color: RGBA | None) -> None:
        self._state = replace(self._state, brush=color)

    def set_antialiasing(self, enabled: bool) -> None:
        if self._state.antialiasing == enabled:
            return
        self._state = replace(self._state, antialiasing=enabled)
        if PainterMode.VECTORIZED not in self._modes:
            # Keep antialiased and aliased strokes on the same pixel grid.
            shift = 0.5 if enabled else -0.5
            self.translate(shift, shift)

    def translate(self, dx: float, dy: float) -> None:
        tx, ty = self._state.translation
        self._state = replace(self._state, translation=(tx + dx, ty + dy))

    def set_clip_rect(self, rect: Rect | None) -> None:
        self._state = replace(self._state, clip=rect)

    def save(self) -> None:
        self._stack.append(self._state)

    def restore(self) -> None:
        if not self._stack:
            LOGGER.warning("unbalanced painter save/restore")
            return
        self._state = self._stack.pop()

    def draw_line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        if not self._state.antialiasing and PainterMode.VECTORIZED not in self._modes:
            x0, y0, x1, y1 = (float(_round_half_up(v)) for v in (x0, y0, x1, y1))
        self._stroke_segment(x0, y0, x1, y1, self._state.pen)

    def draw_polyline(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        pts = list(zip(xs, ys))
        for (ax, ay), (bx, by) in zip(pts, pts[1:]):
            if not (math.isfinite(ax) and math.isfinite(ay) and math.isfinite(bx) and math.isfinite(by)):
                continue
            self.draw_line(ax, ay, bx, by)

    def fill_rect(self, rect: Rect, color: RGBA | None = None) -> None:
        fill = color if color is not None else self._state.brush
        if fill is None or rect.is_empty():
            return
        tx, ty = self._offset()
        target, ox, oy = self._target()
        x0 = max(0, rect.left + tx - ox)
        y0 = max(0, rect.top + ty - oy)
        x1 = min(target.shape[1], rect.right + tx - ox)
        y1 = min(target.shape[0], rect.bottom + ty - oy)
        if x1 <= x0 or y1 <= y0:
            return
        _blend_block(target[y0:y1, x0:x1], fill)

    def draw_rect(self, rect: Rect) -> None:
        if self._state.brush is not None:
            self.fill_rect(rect)
        r, b = rect.right - 1, rect.bottom - 1
        self.draw_line(rect.left, rect.top, r, rect.top)
        self.draw_line(r, rect.top, r, b)
        self.draw_line(r, b, rect.left, b)
        self.draw_line(rect.left, b, rect.left, rect.top)

    def draw_text(self, x: float, y: float, text: str, font: Font, *, rotate_deg: int = 0) -> None:
        """Draw `text` with its top-left corner at (x, y) in the pen color."""
        tx, ty = self._offset()
        target, ox, oy = self._target()
        draw_text(
            target,
            _round_half_up(x) + tx - ox,
            _round_half_up(y) + ty - oy,
            text,
            self._state.pen.color,
            font,
            rotate_deg=rotate_deg,
        )

    def to_rgba(self) -> np.ndarray:
        return self._canvas.copy()

    def _offset(self) -> tuple[int, int]:
        tx, ty = self._state.translation
        return (int(math.floor(tx)), int(math.floor(ty)))

    def _target(self) -> tuple[np.ndarray, int, int]:
        clip = self._state.clip
        if clip is None:
            return self._canvas, 0, 0
        h, w = self._canvas.shape[:2]
        bounded = clip.intersected(Rect(0, 0, w, h))
        view = self._canvas[bounded.top : bounded.bottom, bounded.left : bounded.right]
        return view, bounded.left, bounded.top

    def _stroke_segment(self, x0: float, y0: float, x1: float, y1: float, pen: Pen) -> None:
        width = max(1, pen.width)
        tx, ty = self._state.translation
        target, ox, oy = self._target()
        if target.size == 0:
            return
        ax, ay = x0 + tx - ox, y0 + ty - oy
        bx, by = x1 + tx - ox, y1 + ty - oy
        steps = int(max(abs(bx - ax), abs(by - ay))) + 1
        if steps > 100000:
            # Far out-of-view segments would only produce clipped pixels.
            steps = 100000
        xs = np.floor(np.linspace(ax, bx, steps + 1)).astype(np.int64)
        ys = np.floor(np.linspace(ay, by, steps + 1)).astype(np.int64)
        radius = (width - 1) // 2
        extra = width - 1 - radius
        if radius or extra:
            offsets = np.arange(-radius, extra + 1)
            if abs(bx - ax) >= abs(by - ay):
                ys = (ys[:, None] + offsets[None, :]).ravel()
                xs = np.repeat(xs, offsets.size)
            else:
                xs = (xs[:, None] + offsets[None, :]).ravel()
                ys = np.repeat(ys, offsets.size)
        keep = (xs >= 0) & (xs < target.shape[1]) & (ys >= 0) & (ys < target.shape[0])
        if not np.any(keep):
            return
        flat = np.unique(ys[keep] * target.shape[1] + xs[keep])
        _blend_points(target, flat // target.shape[1], flat % target.shape[1], pen.color)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _blend_block(block: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32)
    block[:, :, :3] = (src * a + block[:, :, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    block[:, :, 3] = np.maximum(block[:, :, 3], color[3])


def _blend_points(dst: np.ndarray, ys: np.ndarray, xs: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32)
    current = dst[ys, xs, :3].astype(np.float32)
    dst[ys, xs, :3] = (src * a + current * (1.0 - a)).astype(np.uint8)
    dst[ys, xs, 3] = np.maximum(dst[ys, xs, 3], color[3])
