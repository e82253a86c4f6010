from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from tickerplot.geometry import MAX_SIZE, Rect, Size
from tickerplot.layout import Layout, LayoutElement, final_maximum_size, final_minimum_size

if TYPE_CHECKING:
    from tickerplot.plot import Plot

LOGGER = logging.getLogger(__name__)


class GridLayout(Layout):
    """Rows x columns of cells, each empty or holding one layout element.

    Column widths and row heights are resolved with the section-size solver
    from the per-column/row stretch factors and the cells' size constraints.
    Spacing is inserted between cells, not around them.
    """

    def __init__(self, plot: "Plot | None" = None) -> None:
        super().__init__(plot)
        self._elements: list[list[LayoutElement | None]] = []
        self._column_stretch_factors: list[float] = []
        self._row_stretch_factors: list[float] = []
        self._column_spacing = 5
        self._row_spacing = 5

    @property
    def row_count(self) -> int:
        return len(self._elements)

    @property
    def column_count(self) -> int:
        return len(self._elements[0]) if self._elements else 0

    @property
    def column_stretch_factors(self) -> list[float]:
        return list(self._column_stretch_factors)

    @property
    def row_stretch_factors(self) -> list[float]:
        return list(self._row_stretch_factors)

    @property
    def column_spacing(self) -> int:
        return self._column_spacing

    @property
    def row_spacing(self) -> int:
        return self._row_spacing

    def set_column_spacing(self, pixels: int) -> None:
        self._column_spacing = int(pixels)

    def set_row_spacing(self, pixels: int) -> None:
        self._row_spacing = int(pixels)

    def element(self, row: int, column: int) -> LayoutElement | None:
        if not 0 <= row < self.row_count:
            LOGGER.warning("invalid row: %s", row)
            return None
        if not 0 <= column < self.column_count:
            LOGGER.warning("invalid column: %s", column)
            return None
        found = self._elements[row][column]
        if found is None:
            LOGGER.warning("requested cell is empty: row %s column %s", row, column)
        return found

    def has_element(self, row: int, column: int) -> bool:
        if 0 <= row < self.row_count and 0 <= column < self.column_count:
            return self._elements[row][column] is not None
        return False

    def add_element(self, row: int, column: int, element: LayoutElement | None) -> bool:
        """Place `element` in a cell, growing the grid as needed.

        Fails without changing anything if the cell is occupied or the indices
        are negative. An element living in another layout is taken out of it.
        """
        if element is None:
            LOGGER.warning("can't add null element to row %s column %s", row, column)
            return False
        if row < 0 or column < 0:
            LOGGER.warning("invalid cell: row %s column %s", row, column)
            return False
        if self.has_element(row, column):
            LOGGER.warning("there is already an element in row %s column %s", row, column)
            return False
        previous = element.layout
        if previous is not None:
            previous.take(element)
        self.expand_to(row + 1, column + 1)
        self._elements[row][column] = element
        self.adopt_element(element)
        return True

    def set_column_stretch_factor(self, column: int, factor: float) -> bool:
        if not 0 <= column < self.column_count:
            LOGGER.warning("invalid column: %s", column)
            return False
        if factor <= 0:
            LOGGER.warning("invalid stretch factor, must be positive: %s", factor)
            return False
        self._column_stretch_factors[column] = float(factor)
        return True

    def set_column_stretch_factors(self, factors: Sequence[float]) -> bool:
        if len(factors) != len(self._column_stretch_factors):
            LOGGER.warning("column count not equal to passed stretch factor count: %s", list(factors))
            return False
        self._column_stretch_factors = _positive_factors(factors)
        return True

    def set_row_stretch_factor(self, row: int, factor: float) -> bool:
        if not 0 <= row < self.row_count:
            LOGGER.warning("invalid row: %s", row)
            return False
        if factor <= 0:
            LOGGER.warning("invalid stretch factor, must be positive: %s", factor)
            return False
        self._row_stretch_factors[row] = float(factor)
        return True

    def set_row_stretch_factors(self, factors: Sequence[float]) -> bool:
        if len(factors) != len(self._row_stretch_factors):
            LOGGER.warning("row count not equal to passed stretch factor count: %s", list(factors))
            return False
        self._row_stretch_factors = _positive_factors(factors)
        return True

    def expand_to(self, row_count: int, column_count: int) -> None:
        while self.row_count < row_count:
            self._elements.append([])
            self._row_stretch_factors.append(1.0)
        columns = max(self.column_count, column_count)
        for row in self._elements:
            row.extend([None] * (columns - len(row)))
        while len(self._column_stretch_factors) < columns:
            self._column_stretch_factors.append(1.0)

    def insert_row(self, new_index: int) -> None:
        if not self._elements or not self._elements[0]:
            self.expand_to(1, 1)
            return
        new_index = max(0, min(new_index, self.row_count))
        self._row_stretch_factors.insert(new_index, 1.0)
        self._elements.insert(new_index, [None] * self.column_count)

    def insert_column(self, new_index: int) -> None:
        if not self._elements or not self._elements[0]:
            self.expand_to(1, 1)
            return
        new_index = max(0, min(new_index, self.column_count))
        self._column_stretch_factors.insert(new_index, 1.0)
        for row in self._elements:
            row.insert(new_index, None)

    def update_layout(self) -> None:
        if not self._elements:
            return
        min_col_widths, min_row_heights = self._minimum_row_col_sizes()
        max_col_widths, max_row_heights = self._maximum_row_col_sizes()
        total_col_spacing = (self.column_count - 1) * self._column_spacing
        total_row_spacing = (self.row_count - 1) * self._row_spacing
        col_widths = self.get_section_sizes(
            max_col_widths, min_col_widths, self._column_stretch_factors, self.rect.width - total_col_spacing
        )
        row_heights = self.get_section_sizes(
            max_row_heights, min_row_heights, self._row_stretch_factors, self.rect.height - total_row_spacing
        )
        if not col_widths or not row_heights:
            return
        y = self.rect.top
        for row in range(self.row_count):
            if row > 0:
                y += row_heights[row - 1] + self._row_spacing
            x = self.rect.left
            for col in range(self.column_count):
                if col > 0:
                    x += col_widths[col - 1] + self._column_spacing
                element = self._elements[row][col]
                if element is not None:
                    element.set_outer_rect(Rect(x, y, col_widths[col], row_heights[row]))

    def element_count(self) -> int:
        return self.row_count * self.column_count

    def element_at(self, index: int) -> LayoutElement | None:
        if 0 <= index < self.element_count():
            row, col = divmod(index, self.column_count)
            return self._elements[row][col]
        return None

    def take_at(self, index: int) -> LayoutElement | None:
        element = self.element_at(index)
        if element is None:
            LOGGER.warning("attempt to take invalid index: %s", index)
            return None
        self.release_element(element)
        row, col = divmod(index, self.column_count)
        self._elements[row][col] = None
        return element

    def take(self, element: LayoutElement | None) -> bool:
        if element is None:
            LOGGER.warning("can't take null element")
            return False
        for i in range(self.element_count()):
            if self.element_at(i) is element:
                self.take_at(i)
                return True
        LOGGER.warning("element not in this layout, couldn't take")
        return False

    def simplify(self) -> None:
        """Drop every row and column that has no occupied cell."""
        for row in range(self.row_count - 1, -1, -1):
            if all(cell is None for cell in self._elements[row]):
                del self._row_stretch_factors[row]
                del self._elements[row]
                if not self._elements:
                    self._column_stretch_factors.clear()
        for col in range(self.column_count - 1, -1, -1):
            if all(self._elements[row][col] is None for row in range(self.row_count)):
                del self._column_stretch_factors[col]
                for cells in self._elements:
                    del cells[col]

    def minimum_size_hint(self) -> Size:
        min_col_widths, min_row_heights = self._minimum_row_col_sizes()
        width = sum(min_col_widths) + max(0, self.column_count - 1) * self._column_spacing
        height = sum(min_row_heights) + max(0, self.row_count - 1) * self._row_spacing
        return Size(
            width + self.margins.left + self.margins.right,
            height + self.margins.top + self.margins.bottom,
        )

    def maximum_size_hint(self) -> Size:
        max_col_widths, max_row_heights = self._maximum_row_col_sizes()
        width = sum(max_col_widths) + max(0, self.column_count - 1) * self._column_spacing
        height = sum(max_row_heights) + max(0, self.row_count - 1) * self._row_spacing
        return Size(
            min(MAX_SIZE, width + self.margins.left + self.margins.right),
            min(MAX_SIZE, height + self.margins.top + self.margins.bottom),
        )

    def _minimum_row_col_sizes(self) -> tuple[list[int], list[int]]:
        widths = [0] * self.column_count
        heights = [0] * self.row_count
        for row, cells in enumerate(self._elements):
            for col, element in enumerate(cells):
                if element is None:
                    continue
                size = final_minimum_size(element)
                widths[col] = max(widths[col], size.width)
                heights[row] = max(heights[row], size.height)
        return widths, heights

    def _maximum_row_col_sizes(self) -> tuple[list[int], list[int]]:
        widths = [MAX_SIZE] * self.column_count
        heights = [MAX_SIZE] * self.row_count
        for row, cells in enumerate(self._elements):
            for col, element in enumerate(cells):
                if element is None:
                    continue
                size = final_maximum_size(element)
                widths[col] = min(widths[col], size.width)
                heights[row] = min(heights[row], size.height)
        return widths, heights


def _positive_factors(factors: Sequence[float]) -> list[float]:
    out: list[float] = []
    for factor in factors:
        if factor <= 0:
            LOGGER.warning("invalid stretch factor, must be positive: %s", factor)
            out.append(1.0)
        else:
            out.append(float(factor))
    return out
