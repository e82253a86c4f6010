from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging
import math

import numpy as np

LOGGER = logging.getLogger(__name__)

_SUB_TICK_EPSILON = 0.01
# Indexed by mantissa 1..9 of the tick step.
_SUB_TICKS_INTEGER = (4, 3, 2, 3, 4, 2, 6, 3, 2)
_SUB_TICKS_HALF = (2, 4, 4, 2, 4, 4, 2, 4, 4)


def auto_tick_step(range_size: float, approximate_count: int) -> float:
    """Step giving roughly `approximate_count` ticks over `range_size`.

    The mantissa of the exact step is rounded to the nearest multiple of 0.5
    below 5 and to the nearest even integer from 5 on, so steps read as 1,
    1.5, 2 ... 4.5, 6, 8, 10 times a power of ten.
    """
    exact = range_size / (approximate_count + 1e-10)
    magnitude = 10.0 ** math.floor(math.log10(exact))
    mantissa = exact / magnitude
    if mantissa < 5:
        return math.floor(mantissa * 2.0 + 0.5) / 2.0 * magnitude
    return math.floor(mantissa / 2.0 + 0.5) * 2.0 * magnitude


def auto_sub_tick_count(tick_step: float, fallback: int) -> int:
    """Sub tick count that splits `tick_step` into readable pieces.

    Only steps whose mantissa is an integer or ends in .5 are recognised; any
    other step keeps `fallback`.
    """
    if not math.isfinite(tick_step) or tick_step <= 0:
        return fallback
    mantissa = tick_step / 10.0 ** math.floor(math.log10(tick_step))
    frac, whole = math.modf(mantissa)
    int_part = int(whole)
    if frac < _SUB_TICK_EPSILON or 1.0 - frac < _SUB_TICK_EPSILON:
        if 1.0 - frac < _SUB_TICK_EPSILON:
            int_part += 1
        if 1 <= int_part <= 9:
            return _SUB_TICKS_INTEGER[int_part - 1]
    elif abs(frac - 0.5) < _SUB_TICK_EPSILON:
        if 1 <= int_part <= 9:
            return _SUB_TICKS_HALF[int_part - 1]
    return fallback


def linear_ticks(lower: float, upper: float, step: float) -> np.ndarray:
    """Multiples of `step` from just below `lower` to just above `upper`."""
    if not (math.isfinite(step) and step > 0):
        LOGGER.warning("invalid tick step: %s", step)
        return np.empty(0, dtype=np.float64)
    first = math.floor(lower / step)
    last = math.ceil(upper / step)
    return np.arange(first, last + 1, dtype=np.float64) * step


def log_ticks(lower: float, upper: float, log_base: float) -> np.ndarray:
    """Integer powers of `log_base` covering the range.

    Ranges entirely below zero get negated powers. A range touching or
    crossing zero has no logarithmic ticks.
    """
    values: list[float] = []
    if lower > 0 and upper > 0:
        current = log_base ** math.floor(math.log(lower) / math.log(log_base))
        values.append(current)
        while 0 < current < upper:
            current *= log_base
            values.append(current)
    elif lower < 0 and upper < 0:
        current = -(log_base ** math.ceil(math.log(-lower) / math.log(log_base)))
        values.append(current)
        while upper > current and current < 0:
            current /= log_base
            values.append(current)
    else:
        LOGGER.warning("invalid range for logarithmic plot: %s .. %s", lower, upper)
    return np.asarray(values, dtype=np.float64)


def visible_tick_bounds(ticks: np.ndarray, lower: float, upper: float) -> tuple[int, int]:
    """Index of the first tick >= `lower` and of the last tick <= `upper`.

    When no tick falls inside, the returned `low` ends up greater than `high`,
    so iterating `range(low, high + 1)` visits nothing.
    """
    low, high = -1, -1
    for i in range(len(ticks)):
        if ticks[i] >= lower:
            low = i
            break
    for i in range(len(ticks) - 1, -1, -1):
        if ticks[i] <= upper:
            high = i
            break
    if high >= 0 and low == -1:
        low = high + 1
    elif low >= 0 and high == -1:
        high = low - 1
    return low, high


def sub_ticks(
    ticks: np.ndarray,
    lower: float,
    upper: float,
    sub_tick_count: int,
    low_index: int,
    high_index: int,
) -> np.ndarray:
    """Evenly spaced sub ticks between neighbouring major ticks.

    One major tick outside the visible bounds is included on each side so the
    partial intervals at the range ends get their sub ticks as well. Sub ticks
    outside `[lower, upper]` are dropped.
    """
    if sub_tick_count <= 0 or len(ticks) < 2:
        return np.empty(0, dtype=np.float64)
    low_tick = low_index - 1 if low_index > 0 else low_index
    high_tick = high_index + 1 if high_index < len(ticks) - 1 else high_index
    values: list[float] = []
    for i in range(max(low_tick, 0) + 1, min(high_tick, len(ticks) - 1) + 1):
        step = (ticks[i] - ticks[i - 1]) / float(sub_tick_count + 1)
        for k in range(1, sub_tick_count + 1):
            value = ticks[i - 1] + k * step
            if value < lower:
                continue
            if value > upper:
                break
            values.append(float(value))
    return np.asarray(values, dtype=np.float64)


def format_tick_label(value: float, number_format: str = "g", precision: int = 6, *, step: float | None = None) -> str:
    """Text shown for a tick at `value`.

    `number_format` is one of ``"f"``, ``"e"`` or ``"g"``. Values within
    floating noise of zero (relative to `step` when given) read as ``"0"``.
    """
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    if number_format == "f":
        d = Decimal(repr(value))
        try:
            q = d.quantize(Decimal("1").scaleb(-precision))
        except InvalidOperation:
            q = d
        out = format(q, "f")
    elif number_format in ("e", "g"):
        out = format(value, f".{precision}{number_format}")
    else:
        LOGGER.warning("unknown number format, falling back to g: %s", number_format)
        out = format(value, f".{precision}g")
    if out.startswith("-") and float(out) == 0.0:
        out = out[1:]
    return out
