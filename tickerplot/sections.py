from __future__ import annotations

import logging
import math
from typing import Sequence

LOGGER = logging.getLogger(__name__)


def get_section_sizes(
    max_sizes: Sequence[int],
    min_sizes: Sequence[int],
    stretch_factors: Sequence[float],
    total_size: int,
) -> list[int]:
    """Split `total_size` pixels among 1-D sections (grid rows or columns).

    Free space is handed out in proportion to the stretch factors. Sections
    that reach their maximum are locked first; afterwards sections that ended
    up below their minimum are locked at the minimum and the rest is solved
    again. When the minimums cannot all be met, they become the stretch
    factors and the sections shrink proportionally instead.
    """
    if not (len(max_sizes) == len(min_sizes) == len(stretch_factors)):
        LOGGER.warning(
            "section vectors differ in length: max=%s min=%s stretch=%s",
            list(max_sizes),
            list(min_sizes),
            list(stretch_factors),
        )
        return []
    if not stretch_factors:
        return []

    count = len(stretch_factors)
    max_sizes = [float(v) for v in max_sizes]
    min_sizes = [float(v) for v in min_sizes]
    stretch = [float(v) for v in stretch_factors]
    sizes = [0.0] * count

    if total_size < sum(min_sizes):
        stretch = list(min_sizes)
        min_sizes = [0.0] * count

    minimum_locked: set[int] = set()
    unfinished = list(range(count))
    free_size = float(total_size)
    cap = count * 2

    outer = 0
    while unfinished and outer < cap:
        outer += 1
        inner = 0
        while unfinished and inner < cap:
            inner += 1
            next_id = -1
            next_max = 1e12
            for sec in unfinished:
                if stretch[sec] <= 0:
                    continue
                hits_max_at = (max_sizes[sec] - sizes[sec]) / stretch[sec]
                if hits_max_at < next_max:
                    next_max = hits_max_at
                    next_id = sec
            stretch_sum = sum(stretch[sec] for sec in unfinished)
            next_max_limit = free_size / stretch_sum if stretch_sum > 0 else 0.0
            if next_id >= 0 and next_max < next_max_limit:
                for sec in unfinished:
                    grow = next_max * stretch[sec]
                    sizes[sec] += grow
                    free_size -= grow
                unfinished.remove(next_id)
            else:
                for sec in unfinished:
                    sizes[sec] += next_max_limit * stretch[sec]
                unfinished.clear()
        if inner == cap and unfinished:
            LOGGER.warning(
                "section solver exceeded inner iteration cap: max=%s min=%s stretch=%s total=%s",
                max_sizes,
                min_sizes,
                stretch,
                total_size,
            )

        violation = False
        for sec in range(count):
            if sec in minimum_locked:
                continue
            if sizes[sec] < min_sizes[sec]:
                sizes[sec] = min_sizes[sec]
                violation = True
                minimum_locked.add(sec)
        if violation:
            free_size = float(total_size)
            for sec in range(count):
                if sec in minimum_locked:
                    free_size -= sizes[sec]
                elif sec not in unfinished:
                    unfinished.append(sec)
            for sec in unfinished:
                sizes[sec] = 0.0
    if outer == cap and unfinished:
        LOGGER.warning(
            "section solver exceeded outer iteration cap: max=%s min=%s stretch=%s total=%s",
            max_sizes,
            min_sizes,
            stretch,
            total_size,
        )

    return [_round_half_away(v) for v in sizes]


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))
