from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

from tickerplot.errors import PlotConfigError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_COLOR_TOKENS = (
    "background",
    "axis_color",
    "grid_color",
    "sub_grid_color",
    "zero_line_color",
    "text_color",
    "curve_color",
)
_SIZE_TOKENS = ("tick_label_font_px", "label_font_px")
_PADDING_TOKENS = ("tick_label_padding", "label_padding", "padding")


@dataclass(frozen=True)
class PlotTheme:
    """Colors, fonts and spacings applied to a plot's axes, grids and curves."""

    background: str = "#FFFFFF"
    axis_color: str = "#000000"
    grid_color: str = "#C8C8C8"
    sub_grid_color: str = "#DCDCDC"
    zero_line_color: str = "#C8C8C8"
    text_color: str = "#000000"
    curve_color: str = "#0000FF"
    font_family: str = "DejaVu Sans"
    tick_label_font_px: float = 10.0
    label_font_px: float = 11.0
    tick_label_padding: int = 5
    label_padding: int = 5
    padding: int = 5


DEFAULT_THEME = PlotTheme()


def parse_hex_color(value: str) -> tuple[int, int, int, int]:
    """`#RRGGBB` or `#RRGGBBAA` to an RGBA tuple."""
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        raise PlotConfigError(f"not a hex color (#RRGGBB or #RRGGBBAA): {value!r}")
    raw = value[1:]
    r, g, b = int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)
    a = int(raw[6:8], 16) if len(raw) == 8 else 255
    return (r, g, b, a)


def validate_theme(overrides: Mapping[str, Any] | None = None) -> PlotTheme:
    """Merge `overrides` into the default theme and check every token."""
    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise PlotConfigError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise PlotConfigError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise PlotConfigError("Token `font_family` must be a non-empty string")

    for key in _SIZE_TOKENS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], (int, float)) or float(raw[key]) <= 0:
            raise PlotConfigError(f"Token `{key}` must be a positive number")

    for key in _PADDING_TOKENS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], int) or raw[key] < 0:
            raise PlotConfigError(f"Token `{key}` must be a non-negative integer")

    return PlotTheme(
        **{key: str(raw[key]) for key in _COLOR_TOKENS},
        font_family=str(raw["font_family"]),
        tick_label_font_px=float(raw["tick_label_font_px"]),
        label_font_px=float(raw["label_font_px"]),
        tick_label_padding=int(raw["tick_label_padding"]),
        label_padding=int(raw["label_padding"]),
        padding=int(raw["padding"]),
    )
