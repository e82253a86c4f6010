from __future__ import annotations

from typing import Iterator


class Range:
    """Numeric interval an axis spans; kept normalized so `lower <= upper`."""

    MIN_RANGE = 1e-280
    MAX_RANGE = 1e250

    __slots__ = ("lower", "upper")

    def __init__(self, lower: float = 0.0, upper: float = 0.0) -> None:
        self.lower = float(lower)
        self.upper = float(upper)
        self.normalize()

    def __repr__(self) -> str:
        return f"Range({self.lower!r}, {self.upper!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.lower == other.lower and self.upper == other.upper

    def __iter__(self) -> Iterator[float]:
        yield self.lower
        yield self.upper

    def copy(self) -> "Range":
        return Range(self.lower, self.upper)

    @property
    def size(self) -> float:
        return self.upper - self.lower

    @property
    def center(self) -> float:
        return (self.upper + self.lower) * 0.5

    def normalize(self) -> None:
        if self.lower > self.upper:
            self.lower, self.upper = self.upper, self.lower

    def expand(self, other: "Range") -> None:
        # Both ranges are assumed to be normalized.
        if self.lower > other.lower:
            self.lower = other.lower
        if self.upper < other.upper:
            self.upper = other.upper

    def expanded(self, other: "Range") -> "Range":
        result = self.copy()
        result.expand(other)
        return result

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def sanitized_for_log_scale(self) -> "Range":
        """Return a copy that does not touch or cross zero.

        A bound sitting on zero, or the bound on the narrower side of zero, is
        replaced by `range_fac` or `range_fac` times the other bound, whichever
        is closer to zero.
        """
        range_fac = 1e-3
        out = Range(self.lower, self.upper)
        if out.lower == 0.0 and out.upper != 0.0:
            out.lower = _positive_floor(out.upper, range_fac)
        elif out.lower != 0.0 and out.upper == 0.0:
            out.upper = _negative_ceiling(out.lower, range_fac)
        elif out.lower < 0 < out.upper:
            if -out.lower > out.upper:
                out.upper = _negative_ceiling(out.lower, range_fac)
            else:
                out.lower = _positive_floor(out.upper, range_fac)
        return out

    def sanitized_for_lin_scale(self) -> "Range":
        return Range(self.lower, self.upper)

    @classmethod
    def valid_range(cls, lower: float, upper: float) -> bool:
        span = abs(lower - upper)
        return (
            -cls.MAX_RANGE < lower < cls.MAX_RANGE
            and -cls.MAX_RANGE < upper < cls.MAX_RANGE
            and cls.MIN_RANGE < span < cls.MAX_RANGE
        )

    @classmethod
    def valid(cls, value: "Range") -> bool:
        return cls.valid_range(value.lower, value.upper)


def _positive_floor(upper: float, range_fac: float) -> float:
    return range_fac if range_fac < upper * range_fac else upper * range_fac


def _negative_ceiling(lower: float, range_fac: float) -> float:
    return -range_fac if -range_fac > lower * range_fac else lower * range_fac
