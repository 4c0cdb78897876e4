"""
Standard template and objects for the functions being maximized.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

from abc import ABC, abstractmethod
from typing import Callable


class Objective(ABC):
    """
    Pure, deterministic real-valued function of two coordinates. The annealer **maximizes** it.

    Objectives must not have side effects: the annealer caches the value of the current point and assumes that
    re-evaluating the same coordinates gives the same number.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def evaluate(self, x: float, y: float) -> float:
        """
        Value of the objective at ``(x, y)``.

        Parameters
        ----------
        x : float
            First coordinate.
        y : float
            Second coordinate.

        Returns
        -------
        float
            Objective value, higher is better.
        """
        pass

    def __call__(self, x: float, y: float) -> float:
        return float(self.evaluate(x, y))

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name={self.name!r})'


class InverseQuadratic(Objective):
    """``f(x, y) = 1 / (1 + x^2 + y^2)``, a single smooth peak of height 1 at the origin."""

    def __init__(self) -> None:
        super().__init__(name='inverse_quadratic')

    def evaluate(self, x: float, y: float) -> float:
        return 1.0 / (1.0 + x * x + y * y)


class FunctionObjective(Objective):
    """Wraps a plain callable ``f(x, y) -> float`` so it can carry a name."""

    def __init__(self, function: Callable[[float, float], float], name: str | None = None) -> None:
        if not callable(function):
            raise TypeError(f'function must be callable, not {type(function)}')
        super().__init__(name=name if name is not None else getattr(function, '__name__', 'function'))
        self.function = function

    def evaluate(self, x: float, y: float) -> float:
        return self.function(x, y)


def as_objective(objective: Objective | Callable[[float, float], float]) -> Objective:
    """Accept either an Objective or any callable of two reals."""
    if isinstance(objective, Objective):
        return objective
    return FunctionObjective(objective)
