from __future__ import annotations

import logging
from typing import TYPE_CHECKING
import weakref

from tickerplot.geometry import MarginSide, iter_sides

if TYPE_CHECKING:
    from tickerplot.layout import LayoutElement
    from tickerplot.plot import Plot

LOGGER = logging.getLogger(__name__)


class MarginGroup:
    """Ties one margin side of several layout elements to a common size.

    Members register themselves through `LayoutElement.set_margin_group`; the
    group only observes them and never keeps them alive.
    """

    def __init__(self, plot: "Plot | None" = None) -> None:
        self._plot = plot
        self._children: dict[MarginSide, list[weakref.ReferenceType[LayoutElement]]] = {
            side: [] for side in iter_sides(MarginSide.ALL)
        }

    @property
    def parent_plot(self) -> "Plot | None":
        return self._plot

    def elements(self, side: MarginSide) -> list["LayoutElement"]:
        self._prune(side)
        return [ref() for ref in self._children.get(side, []) if ref() is not None]  # type: ignore[misc]

    def is_empty(self) -> bool:
        return not any(self.elements(side) for side in self._children)

    def clear(self) -> None:
        for side in list(self._children):
            for element in reversed(self.elements(side)):
                element.set_margin_group(side, None)

    def common_margin(self, side: MarginSide) -> int:
        """Largest automatic margin any member wants on `side`.

        Members that do not compute `side` automatically are ignored; each
        member's own minimum margin is honoured.
        """
        result = 0
        for element in self.elements(side):
            if side not in element.auto_margins:
                continue
            m = max(element.calculate_auto_margin(side), element.minimum_margins.value(side))
            if m > result:
                result = m
        return result

    def add_child(self, side: MarginSide, element: "LayoutElement") -> bool:
        if any(member is element for member in self.elements(side)):
            LOGGER.warning("element is already child of this margin group side %s", side)
            return False
        self._children[side].append(weakref.ref(element))
        return True

    def remove_child(self, side: MarginSide, element: "LayoutElement") -> bool:
        refs = self._children.get(side, [])
        for i, ref in enumerate(refs):
            if ref() is element:
                del refs[i]
                return True
        LOGGER.warning("element is not child of this margin group side %s", side)
        return False

    def _prune(self, side: MarginSide) -> None:
        refs = self._children.get(side)
        if refs:
            refs[:] = [ref for ref in refs if ref() is not None]
