from __future__ import annotations

from enum import Flag, auto
import logging
from typing import TYPE_CHECKING, Union
import weakref

from tickerplot.geometry import Rect

if TYPE_CHECKING:
    from tickerplot.painter import Painter
    from tickerplot.plot import Plot

LOGGER = logging.getLogger(__name__)


class AntialiasedElement(Flag):
    NONE = 0
    AXES = auto()
    GRID = auto()
    SUB_GRID = auto()
    ZERO_LINE = auto()
    CURVES = auto()
    OTHER = auto()
    ALL = AXES | GRID | SUB_GRID | ZERO_LINE | CURVES | OTHER


class Layer:
    """Ordered bucket of layerables.

    Layers with a higher `index` are painted above layers with a lower one; inside
    a layer, later children are painted above earlier ones. Use
    `Layerable.set_layer` to move objects between layers, not `add_child`.
    """

    def __init__(self, plot: "Plot", name: str) -> None:
        self._plot = weakref.ref(plot)
        self._name = name
        self._index = -1
        self._children: list[Layerable] = []

    def __repr__(self) -> str:
        return f"Layer({self._name!r}, index={self._index})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def index(self) -> int:
        return self._index

    @property
    def parent_plot(self) -> "Plot | None":
        return self._plot()

    @property
    def children(self) -> list["Layerable"]:
        return list(self._children)

    def add_child(self, layerable: "Layerable", prepend: bool = False) -> bool:
        if any(child is layerable for child in self._children):
            LOGGER.warning("layerable is already child of layer %s: %r", self._name, layerable)
            return False
        if prepend:
            self._children.insert(0, layerable)
        else:
            self._children.append(layerable)
        return True

    def remove_child(self, layerable: "Layerable") -> bool:
        for i, child in enumerate(self._children):
            if child is layerable:
                del self._children[i]
                return True
        LOGGER.warning("layerable is not child of layer %s: %r", self._name, layerable)
        return False


class Layerable:
    """Base class of everything that is painted on a layer.

    Besides its layer, a layerable may have a parent layerable. The parent only
    affects visibility (see `real_visibility`); it does not own the child.
    """

    antialiased_element = AntialiasedElement.OTHER

    def __init__(
        self,
        plot: "Plot | None" = None,
        target_layer: str = "",
        parent_layerable: "Layerable | None" = None,
    ) -> None:
        self._visible = True
        self._antialiased = True
        self._plot = plot
        self._layer: weakref.ReferenceType[Layer] | None = None
        self._parent_layerable: weakref.ReferenceType[Layerable] | None = None
        if parent_layerable is not None:
            self.set_parent_layerable(parent_layerable)
        if plot is not None:
            if not target_layer:
                self.set_layer(plot.current_layer)
            elif not self.set_layer(target_layer):
                LOGGER.warning("setting initial layer to %s failed", target_layer)

    @property
    def visible(self) -> bool:
        return self._visible

    def set_visible(self, on: bool) -> None:
        self._visible = bool(on)

    @property
    def antialiased(self) -> bool:
        return self._antialiased

    def set_antialiased(self, enabled: bool) -> None:
        self._antialiased = bool(enabled)

    @property
    def parent_plot(self) -> "Plot | None":
        return self._plot

    @property
    def layer(self) -> Layer | None:
        return self._layer() if self._layer is not None else None

    @property
    def parent_layerable(self) -> "Layerable | None":
        return self._parent_layerable() if self._parent_layerable is not None else None

    def set_parent_layerable(self, parent: "Layerable | None") -> None:
        self._parent_layerable = weakref.ref(parent) if parent is not None else None

    def set_layer(self, layer: Union[Layer, str, None]) -> bool:
        """Move onto `layer` (object or name), above the objects already on it."""
        if isinstance(layer, str):
            if self._plot is None:
                LOGGER.warning("no parent plot set, cannot resolve layer %s", layer)
                return False
            target = self._plot.layer(layer)
            if target is None:
                LOGGER.warning("there is no layer with name %s", layer)
                return False
            layer = target
        return self.move_to_layer(layer, prepend=False)

    def move_to_layer(self, layer: Layer | None, prepend: bool = False) -> bool:
        if layer is not None and self._plot is None:
            LOGGER.warning("no parent plot set")
            return False
        if layer is not None and layer.parent_plot is not self._plot:
            LOGGER.warning("layer %s is not in the same plot as this layerable", layer.name)
            return False
        current = self.layer
        if current is not None:
            current.remove_child(self)
        self._layer = weakref.ref(layer) if layer is not None else None
        if layer is not None:
            layer.add_child(self, prepend)
        return True

    def real_visibility(self) -> bool:
        """Own visibility AND-ed with every ancestor's; recomputed on each call."""
        parent = self.parent_layerable
        return self._visible and (parent is None or parent.real_visibility())

    def initialize_parent_plot(self, plot: "Plot | None") -> None:
        """Attach a layerable that was created without a plot.

        Can be done once; the hook `parent_plot_initialized` lets containers pass
        the plot on to their children.
        """
        if self._plot is not None:
            LOGGER.warning("parent plot already initialized")
            return
        if plot is None:
            LOGGER.warning("initialize_parent_plot called with no plot")
        self._plot = plot
        self.parent_plot_initialized(plot)

    def parent_plot_initialized(self, plot: "Plot | None") -> None:
        return

    def apply_antialiasing_hint(
        self,
        painter: "Painter",
        local_antialiased: bool,
        override_element: AntialiasedElement,
    ) -> None:
        plot = self._plot
        if plot is not None and override_element & plot.not_antialiased_elements:
            painter.set_antialiasing(False)
        elif plot is not None and override_element & plot.antialiased_elements:
            painter.set_antialiasing(True)
        else:
            painter.set_antialiasing(local_antialiased)

    def apply_default_antialiasing_hint(self, painter: "Painter") -> None:
        self.apply_antialiasing_hint(painter, self._antialiased, self.antialiased_element)

    def clip_rect(self) -> Rect:
        if self._plot is not None:
            return self._plot.viewport
        return Rect()

    def draw(self, painter: "Painter") -> None:
        raise NotImplementedError

    def release(self) -> None:
        """Detach from the current layer; the layerable is not drawn afterwards."""
        current = self.layer
        if current is not None:
            current.remove_child(self)
            self._layer = None
