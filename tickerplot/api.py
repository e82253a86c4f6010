from __future__ import annotations

from typing import Any, Mapping

from tickerplot.plot import Plot
from tickerplot.theme import PlotTheme

DEFAULT_WIDTH = 640
DEFAULT_ASPECT_RATIO = 4.0 / 3.0


def figure(
    width: int | None = None,
    height: int | None = None,
    *,
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
    theme: PlotTheme | Mapping[str, Any] | None = None,
) -> Plot:
    if aspect_ratio <= 0:
        raise ValueError("aspect_ratio must be > 0")
    if width is None and height is None:
        width = DEFAULT_WIDTH
        height = max(1, int(round(DEFAULT_WIDTH / aspect_ratio)))
    elif width is None and height is not None:
        if height <= 0:
            raise ValueError("height must be > 0")
        width = max(1, int(round(height * aspect_ratio)))
    elif width is not None and height is None:
        if width <= 0:
            raise ValueError("width must be > 0")
        height = max(1, int(round(width / aspect_ratio)))
    assert width is not None and height is not None
    return Plot(width, height, theme=theme)
