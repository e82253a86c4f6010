from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Iterator


MAX_SIZE = 16777215


class MarginSide(Flag):
    NONE = 0
    LEFT = auto()
    RIGHT = auto()
    TOP = auto()
    BOTTOM = auto()
    ALL = LEFT | RIGHT | TOP | BOTTOM


_SIDE_ORDER = (MarginSide.LEFT, MarginSide.RIGHT, MarginSide.TOP, MarginSide.BOTTOM)


def iter_sides(sides: MarginSide) -> Iterator[MarginSide]:
    for side in _SIDE_ORDER:
        if side in sides:
            yield side


class Alignment(Flag):
    NONE = 0
    LEFT = auto()
    RIGHT = auto()
    HCENTER = auto()
    TOP = auto()
    BOTTOM = auto()
    VCENTER = auto()
    CENTER = HCENTER | VCENTER


@dataclass(frozen=True)
class Size:
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Margins:
    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0

    def value(self, side: MarginSide) -> int:
        if side == MarginSide.LEFT:
            return self.left
        if side == MarginSide.RIGHT:
            return self.right
        if side == MarginSide.TOP:
            return self.top
        if side == MarginSide.BOTTOM:
            return self.bottom
        raise ValueError(f"not a single margin side: {side}")

    def with_value(self, side: MarginSide, value: int) -> "Margins":
        if side == MarginSide.LEFT:
            return Margins(int(value), self.top, self.right, self.bottom)
        if side == MarginSide.RIGHT:
            return Margins(self.left, self.top, int(value), self.bottom)
        if side == MarginSide.TOP:
            return Margins(self.left, int(value), self.right, self.bottom)
        if side == MarginSide.BOTTOM:
            return Margins(self.left, self.top, self.right, int(value))
        raise ValueError(f"not a single margin side: {side}")


@dataclass(frozen=True)
class Rect:
    """Integer pixel rectangle; `right`/`bottom` are exclusive edges."""

    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.width * 0.5, self.top + self.height * 0.5)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def shrunk_by(self, margins: Margins) -> "Rect":
        return Rect(
            left=self.left + margins.left,
            top=self.top + margins.top,
            width=max(0, self.width - margins.left - margins.right),
            height=max(0, self.height - margins.top - margins.bottom),
        )

    def adjusted(self, dl: int, dt: int, dr: int, db: int) -> "Rect":
        """Move each edge by the given amount; positive `dr`/`db` grow the rect."""
        return Rect(self.left + dl, self.top + dt, self.width - dl + dr, self.height - dt + db)

    def moved_to(self, left: int, top: int) -> "Rect":
        return Rect(int(left), int(top), self.width, self.height)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom

    def intersected(self, other: "Rect") -> "Rect":
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(left, top, max(0, right - left), max(0, bottom - top))


@dataclass(frozen=True)
class RectF:
    """Fractional rectangle, used for free inset placement."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
