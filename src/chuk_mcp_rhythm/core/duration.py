"""
Duration primitive - rational musical time.

Durations are exact fractions, so proportional subdivision of deeply nested
tuplets never accumulates rounding error.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, ClassVar


@dataclass(frozen=True)
class Duration:
    """
    A non-negative rational quantity of musical time.

    Immutable, hashable and totally ordered. Used both for lengths and
    for absolute offsets from the start of a piece.
    """

    value: Fraction

    ZERO: ClassVar[Duration]

    def __post_init__(self) -> None:
        if not isinstance(self.value, Fraction):
            object.__setattr__(self, "value", Fraction(self.value))
        if self.value < 0:
            raise ValueError(f"Duration must be non-negative, got {self.value}")

    @classmethod
    def parse(cls, raw: Any) -> Duration:
        """
        Build a Duration from the representations tokens and files use.

        Accepts another Duration, an int, a Fraction, a string such as
        '3/16' or '4', or a two-item [numerator, denominator] sequence.
        """
        if isinstance(raw, Duration):
            return raw
        if isinstance(raw, bool):
            raise ValueError(f"Cannot interpret {raw!r} as a duration")
        if isinstance(raw, (int, Fraction)):
            return cls(Fraction(raw))
        if isinstance(raw, str):
            try:
                return cls(Fraction(raw.strip()))
            except (ValueError, ZeroDivisionError):
                raise ValueError(f"Invalid duration: {raw!r}") from None
        if isinstance(raw, (list, tuple)) and len(raw) == 2:
            numerator, denominator = raw
            if int(denominator) == 0:
                raise ValueError(f"Invalid duration: {raw!r}")
            return cls(Fraction(int(numerator), int(denominator)))
        raise ValueError(f"Cannot interpret {raw!r} as a duration")

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.value + other.value)

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        result = self.value - other.value
        if result < 0:
            raise ValueError(f"Duration subtraction went negative: {self} - {other}")
        return Duration(result)

    def __mul__(self, n: int | Fraction) -> Duration:
        if isinstance(n, (int, Fraction)):
            return Duration(self.value * n)
        return NotImplemented

    def __rmul__(self, n: int | Fraction) -> Duration:
        return self.__mul__(n)

    def __truediv__(self, n: int) -> Duration:
        if not isinstance(n, int):
            return NotImplemented
        return Duration(self.value / n)

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.value >= other.value

    def __bool__(self) -> bool:
        return self.value != 0

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        if self.value.denominator == 1:
            return f"Duration({self.value.numerator})"
        return f"Duration(Fraction({self.value.numerator}, {self.value.denominator}))"


Duration.ZERO = Duration(Fraction(0))

DURATION_ZERO = Duration.ZERO
