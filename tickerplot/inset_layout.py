from __future__ import annotations

from enum import Enum
import logging
from typing import TYPE_CHECKING

from tickerplot.geometry import Alignment, Rect, RectF
from tickerplot.layout import Layout, LayoutElement, final_maximum_size, final_minimum_size

if TYPE_CHECKING:
    from tickerplot.plot import Plot

LOGGER = logging.getLogger(__name__)

DEFAULT_INSET_RECT = RectF(0.6, 0.6, 0.4, 0.4)


class InsetPlacement(Enum):
    FREE = "free"
    BORDER_ALIGNED = "border_aligned"


class InsetLayout(Layout):
    """Places children inside its rect, either freely or against its borders.

    Free children get a rect given in fractions of the inset's own rect and are
    then clamped to their size constraints. Border-aligned children are sized
    to their minimum and pushed against the requested edges; an axis without
    an edge flag is centered.
    """

    def __init__(self, plot: "Plot | None" = None) -> None:
        super().__init__(plot)
        self._elements: list[LayoutElement] = []
        self._placements: list[InsetPlacement] = []
        self._alignments: list[Alignment] = []
        self._rects: list[RectF] = []

    def inset_placement(self, index: int) -> InsetPlacement:
        if self._valid_index(index):
            return self._placements[index]
        return InsetPlacement.FREE

    def inset_alignment(self, index: int) -> Alignment:
        if self._valid_index(index):
            return self._alignments[index]
        return Alignment.NONE

    def inset_rect(self, index: int) -> RectF:
        if self._valid_index(index):
            return self._rects[index]
        return RectF()

    def set_inset_placement(self, index: int, placement: InsetPlacement) -> bool:
        if not self._valid_index(index):
            return False
        self._placements[index] = placement
        return True

    def set_inset_alignment(self, index: int, alignment: Alignment) -> bool:
        if not self._valid_index(index):
            return False
        self._alignments[index] = alignment
        return True

    def set_inset_rect(self, index: int, rect: RectF) -> bool:
        if not self._valid_index(index):
            return False
        self._rects[index] = rect
        return True

    def add_element(self, element: LayoutElement | None, alignment: Alignment = Alignment.RIGHT | Alignment.TOP) -> bool:
        """Add `element` border-aligned at `alignment`."""
        return self._insert(element, InsetPlacement.BORDER_ALIGNED, alignment, DEFAULT_INSET_RECT)

    def add_element_rect(self, element: LayoutElement | None, rect: RectF) -> bool:
        """Add `element` freely placed at the fractional `rect`."""
        return self._insert(element, InsetPlacement.FREE, Alignment.RIGHT | Alignment.TOP, rect)

    def update_layout(self) -> None:
        outer = self.rect
        for i, element in enumerate(self._elements):
            min_size = final_minimum_size(element)
            max_size = final_maximum_size(element)
            if self._placements[i] == InsetPlacement.FREE:
                frac = self._rects[i]
                width = int(outer.width * frac.width)
                height = int(outer.height * frac.height)
                width = min(max(width, min_size.width), max_size.width)
                height = min(max(height, min_size.height), max_size.height)
                placed = Rect(
                    int(outer.left + outer.width * frac.x),
                    int(outer.top + outer.height * frac.y),
                    width,
                    height,
                )
            else:
                al = self._alignments[i]
                width, height = min_size.width, min_size.height
                if Alignment.LEFT in al:
                    left = outer.left
                elif Alignment.RIGHT in al:
                    left = outer.right - width
                else:
                    left = int(outer.left + outer.width * 0.5 - width * 0.5)
                if Alignment.TOP in al:
                    top = outer.top
                elif Alignment.BOTTOM in al:
                    top = outer.bottom - height
                else:
                    top = int(outer.top + outer.height * 0.5 - height * 0.5)
                placed = Rect(left, top, width, height)
            element.set_outer_rect(placed)

    def element_count(self) -> int:
        return len(self._elements)

    def element_at(self, index: int) -> LayoutElement | None:
        if 0 <= index < len(self._elements):
            return self._elements[index]
        return None

    def take_at(self, index: int) -> LayoutElement | None:
        if not 0 <= index < len(self._elements):
            LOGGER.warning("attempt to take invalid index: %s", index)
            return None
        element = self._elements.pop(index)
        del self._placements[index]
        del self._alignments[index]
        del self._rects[index]
        self.release_element(element)
        return element

    def take(self, element: LayoutElement | None) -> bool:
        if element is None:
            LOGGER.warning("can't take null element")
            return False
        for i, child in enumerate(self._elements):
            if child is element:
                self.take_at(i)
                return True
        LOGGER.warning("element not in this layout, couldn't take")
        return False

    def _insert(
        self,
        element: LayoutElement | None,
        placement: InsetPlacement,
        alignment: Alignment,
        rect: RectF,
    ) -> bool:
        if element is None:
            LOGGER.warning("can't add null element")
            return False
        previous = element.layout
        if previous is not None:
            previous.take(element)
        self._elements.append(element)
        self._placements.append(placement)
        self._alignments.append(alignment)
        self._rects.append(rect)
        self.adopt_element(element)
        return True

    def _valid_index(self, index: int) -> bool:
        if 0 <= index < len(self._elements):
            return True
        LOGGER.warning("invalid element index: %s", index)
        return False
