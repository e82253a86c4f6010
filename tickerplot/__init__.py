from tickerplot.api import figure
from tickerplot.axis import Axis, AxisType, Grid, Orientation, ScaleType
from tickerplot.axis_rect import AxisRect
from tickerplot.curve import Curve
from tickerplot.errors import PlotConfigError, PlotDataError
from tickerplot.geometry import Alignment, MarginSide, Margins, Rect, RectF, Size
from tickerplot.grid_layout import GridLayout
from tickerplot.inset_layout import InsetLayout, InsetPlacement
from tickerplot.layer import AntialiasedElement, Layer, Layerable
from tickerplot.layout import Layout, LayoutElement
from tickerplot.margin_group import MarginGroup
from tickerplot.painter import Painter, PainterMode, Pen
from tickerplot.plot import LayerInsertMode, Plot
from tickerplot.range import Range
from tickerplot.text import Font
from tickerplot.theme import DEFAULT_THEME, PlotTheme, validate_theme

__all__ = [
    "Alignment",
    "AntialiasedElement",
    "Axis",
    "AxisRect",
    "AxisType",
    "Curve",
    "DEFAULT_THEME",
    "Font",
    "Grid",
    "GridLayout",
    "InsetLayout",
    "InsetPlacement",
    "Layer",
    "LayerInsertMode",
    "Layerable",
    "Layout",
    "LayoutElement",
    "MarginGroup",
    "MarginSide",
    "Margins",
    "Orientation",
    "Painter",
    "PainterMode",
    "Pen",
    "Plot",
    "PlotConfigError",
    "PlotDataError",
    "PlotTheme",
    "Range",
    "Rect",
    "RectF",
    "ScaleType",
    "Size",
    "figure",
    "validate_theme",
]
