from __future__ import annotations


class PlotConfigError(ValueError):
    pass


class PlotDataError(ValueError):
    pass
