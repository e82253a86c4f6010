from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import TYPE_CHECKING, Sequence
import weakref

from tickerplot.geometry import MAX_SIZE, MarginSide, Margins, Rect, Size, iter_sides
from tickerplot.layer import Layerable
from tickerplot.sections import get_section_sizes

if TYPE_CHECKING:
    from tickerplot.margin_group import MarginGroup
    from tickerplot.painter import Painter
    from tickerplot.plot import Plot

LOGGER = logging.getLogger(__name__)


class LayoutElement(Layerable):
    """Rectangular region taking part in the layout tree.

    The outer rect is assigned by the parent layout; the inner rect (`rect`) is
    the outer rect shrunk by the margins. Margins on sides listed in
    `auto_margins` are recomputed on every `update()`.
    """

    def __init__(self, plot: "Plot | None" = None) -> None:
        super().__init__(plot)
        self._parent_layout: weakref.ReferenceType[Layout] | None = None
        self._minimum_size = Size(0, 0)
        self._maximum_size = Size(MAX_SIZE, MAX_SIZE)
        self._rect = Rect()
        self._outer_rect = Rect()
        self._margins = Margins()
        self._minimum_margins = Margins()
        self._auto_margins = MarginSide.ALL
        self._margin_groups: dict[MarginSide, MarginGroup] = {}

    @property
    def layout(self) -> "Layout | None":
        return self._parent_layout() if self._parent_layout is not None else None

    @property
    def rect(self) -> Rect:
        return self._rect

    @property
    def outer_rect(self) -> Rect:
        return self._outer_rect

    @property
    def margins(self) -> Margins:
        return self._margins

    @property
    def minimum_margins(self) -> Margins:
        return self._minimum_margins

    @property
    def auto_margins(self) -> MarginSide:
        return self._auto_margins

    @property
    def minimum_size(self) -> Size:
        return self._minimum_size

    @property
    def maximum_size(self) -> Size:
        return self._maximum_size

    @property
    def margin_groups(self) -> dict[MarginSide, "MarginGroup"]:
        return dict(self._margin_groups)

    def margin_group(self, side: MarginSide) -> "MarginGroup | None":
        return self._margin_groups.get(side)

    def set_outer_rect(self, rect: Rect) -> None:
        if self._outer_rect == rect:
            return
        self._outer_rect = rect
        self._rect = rect.shrunk_by(self._margins)

    def set_margins(self, margins: Margins) -> None:
        if self._margins == margins:
            return
        self._margins = margins
        self._rect = self._outer_rect.shrunk_by(margins)

    def set_minimum_margins(self, margins: Margins) -> None:
        self._minimum_margins = margins

    def set_auto_margins(self, sides: MarginSide) -> None:
        self._auto_margins = sides

    def set_minimum_size(self, width: int, height: int) -> None:
        size = Size(int(width), int(height))
        if size == self._minimum_size:
            return
        self._minimum_size = size
        parent = self.layout
        if parent is not None:
            parent.size_constraints_changed()

    def set_maximum_size(self, width: int, height: int) -> None:
        size = Size(int(width), int(height))
        if size == self._maximum_size:
            return
        self._maximum_size = size
        parent = self.layout
        if parent is not None:
            parent.size_constraints_changed()

    def set_margin_group(self, sides: MarginSide, group: "MarginGroup | None") -> None:
        for side in iter_sides(sides):
            old = self._margin_groups.get(side)
            if old is group:
                continue
            if old is not None:
                old.remove_child(side, self)
            if group is None:
                self._margin_groups.pop(side, None)
            else:
                self._margin_groups[side] = group
                group.add_child(side, self)

    def update(self) -> None:
        """Resolve automatic margins and apply them to the inner rect."""
        if self._auto_margins == MarginSide.NONE:
            return
        margins = self._margins
        for side in iter_sides(self._auto_margins):
            group = self._margin_groups.get(side)
            if group is not None:
                value = group.common_margin(side)
            else:
                value = self.calculate_auto_margin(side)
            margins = margins.with_value(side, max(value, self._minimum_margins.value(side)))
        self.set_margins(margins)

    def minimum_size_hint(self) -> Size:
        return self._minimum_size

    def maximum_size_hint(self) -> Size:
        return self._maximum_size

    def elements(self, recursive: bool = False) -> list["LayoutElement | None"]:
        return []

    def calculate_auto_margin(self, side: MarginSide) -> int:
        return max(self._margins.value(side), self._minimum_margins.value(side))

    def parent_plot_initialized(self, plot: "Plot | None") -> None:
        for element in self.elements(recursive=False):
            if element is not None and element.parent_plot is None:
                element.initialize_parent_plot(plot)

    def draw(self, painter: "Painter") -> None:
        return

    def release(self) -> None:
        """Leave every margin group and the parent layout, then the layer."""
        self.set_margin_group(MarginSide.ALL, None)
        parent = self.layout
        if parent is not None:
            parent.take(self)
        super().release()


class Layout(LayoutElement, ABC):
    """Layout element whose only job is to arrange child layout elements.

    Concrete layouts provide the indexed child access below; `update()` then
    lays out the children and propagates the update to them.
    """

    def update(self) -> None:
        super().update()
        self.update_layout()
        for i in range(self.element_count()):
            element = self.element_at(i)
            if element is not None:
                element.update()

    def elements(self, recursive: bool = False) -> list[LayoutElement | None]:
        result = [self.element_at(i) for i in range(self.element_count())]
        if recursive:
            for element in list(result):
                if element is not None:
                    result.extend(element.elements(recursive))
        return result

    def simplify(self) -> None:
        return

    def update_layout(self) -> None:
        return

    @abstractmethod
    def element_count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def element_at(self, index: int) -> LayoutElement | None:
        raise NotImplementedError

    @abstractmethod
    def take_at(self, index: int) -> LayoutElement | None:
        raise NotImplementedError

    @abstractmethod
    def take(self, element: LayoutElement) -> bool:
        raise NotImplementedError

    def remove_at(self, index: int) -> bool:
        """Take the element at `index` out and release it for good."""
        element = self.take_at(index)
        if element is None:
            return False
        element.release()
        return True

    def remove(self, element: LayoutElement | None) -> bool:
        if element is None or not self.take(element):
            return False
        element.release()
        return True

    def clear(self) -> None:
        for i in range(self.element_count() - 1, -1, -1):
            if self.element_at(i) is not None:
                self.remove_at(i)
        self.simplify()

    def release(self) -> None:
        self.clear()
        super().release()

    def size_constraints_changed(self) -> None:
        parent = self.layout
        if parent is not None:
            parent.size_constraints_changed()
        elif self.parent_plot is not None and self.parent_plot.plot_layout is self:
            self.parent_plot.layout_size_constraints_changed()

    def adopt_element(self, element: LayoutElement | None) -> None:
        if element is None:
            LOGGER.warning("null element passed to adopt_element")
            return
        element._parent_layout = weakref.ref(self)
        element.set_parent_layerable(self)
        if element.parent_plot is None and self.parent_plot is not None:
            element.initialize_parent_plot(self.parent_plot)

    def release_element(self, element: LayoutElement | None) -> None:
        if element is None:
            LOGGER.warning("null element passed to release_element")
            return
        element._parent_layout = None
        element.set_parent_layerable(None)

    def get_section_sizes(
        self,
        max_sizes: Sequence[int],
        min_sizes: Sequence[int],
        stretch_factors: Sequence[float],
        total_size: int,
    ) -> list[int]:
        return get_section_sizes(max_sizes, min_sizes, stretch_factors, total_size)


def final_minimum_size(element: LayoutElement) -> Size:
    """Explicit minimum size where set, otherwise the element's minimum size hint."""
    hint = element.minimum_size_hint()
    explicit = element.minimum_size
    return Size(
        explicit.width if explicit.width > 0 else hint.width,
        explicit.height if explicit.height > 0 else hint.height,
    )


def final_maximum_size(element: LayoutElement) -> Size:
    hint = element.maximum_size_hint()
    explicit = element.maximum_size
    return Size(
        explicit.width if explicit.width < MAX_SIZE else hint.width,
        explicit.height if explicit.height < MAX_SIZE else hint.height,
    )
