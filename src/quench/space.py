"""
Value objects describing where the search is allowed to go.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

from dataclasses import dataclass
from typing import Iterator
import math
import numpy as np
import numpy.typing as npt

from .exceptions import InvalidBounds


@dataclass(frozen=True)
class Point:
    """
    A pair of real coordinates.

    Parameters
    ----------
    x : float
        First coordinate.
    y : float
        Second coordinate.
    """

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def norm(self) -> float:
        """Euclidean distance from the origin."""
        return math.hypot(self.x, self.y)

    def as_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y], dtype=float)


@dataclass(frozen=True)
class SearchSpace:
    """
    Square domain ``[min_bound, max_bound]`` applied independently to both coordinates.

    Parameters
    ----------
    min_bound : float
        Lower bound of each coordinate (inclusive).
    max_bound : float
        Upper bound of each coordinate (inclusive). Must be strictly greater than ``min_bound``.

    Raises
    ------
    InvalidBounds
        If either bound or the width ``max_bound - min_bound`` is not a finite number, or ``min_bound >= max_bound``.
    """

    min_bound: float
    max_bound: float

    def __post_init__(self) -> None:
        try:
            min_bound, max_bound = float(self.min_bound), float(self.max_bound)
        except (TypeError, ValueError) as e:
            raise InvalidBounds(f'Bounds must be real numbers, got {self.min_bound!r} and {self.max_bound!r}') from e
        if not (math.isfinite(min_bound) and math.isfinite(max_bound)):
            raise InvalidBounds(f'Bounds must be finite, got [{min_bound}, {max_bound}]')
        if not min_bound < max_bound:
            raise InvalidBounds(f'min_bound must be strictly smaller than max_bound, got [{min_bound}, {max_bound}]')
        if not math.isfinite(max_bound - min_bound):
            raise InvalidBounds(f'Width of [{min_bound}, {max_bound}] is not representable as a finite number')
        # frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, 'min_bound', min_bound)
        object.__setattr__(self, 'max_bound', max_bound)

    @classmethod
    def from_bounds(cls, bounds: 'SearchSpace | tuple[float, float]') -> 'SearchSpace':
        """Accept either an existing SearchSpace or a ``(min_bound, max_bound)`` pair."""
        if isinstance(bounds, SearchSpace):
            return bounds
        try:
            min_bound, max_bound = bounds
        except (TypeError, ValueError) as e:
            raise InvalidBounds(f'Expected a SearchSpace or a (min_bound, max_bound) pair, got {bounds!r}') from e
        return cls(min_bound=min_bound, max_bound=max_bound)

    @property
    def width(self) -> float:
        return self.max_bound - self.min_bound

    def clamp_value(self, value: float) -> float:
        return min(max(value, self.min_bound), self.max_bound)

    def clamp(self, x: float, y: float) -> Point:
        """Project a pair of coordinates onto the domain. Out-of-range values stick to the nearest bound."""
        return Point(self.clamp_value(x), self.clamp_value(y))

    def contains(self, point: Point) -> bool:
        return self.min_bound <= point.x <= self.max_bound and self.min_bound <= point.y <= self.max_bound

    def sample(self, rng: np.random.Generator) -> Point:
        """Draw a uniformly random point, x first and then y."""
        x = float(rng.uniform(self.min_bound, self.max_bound))
        y = float(rng.uniform(self.min_bound, self.max_bound))
        return Point(x, y)
