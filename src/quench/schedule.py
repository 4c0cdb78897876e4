"""
Validated configuration of the geometric cooling schedule.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

import math
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .constants import (
    DEFAULT_COOLING_RATE,
    DEFAULT_FINAL_TEMP,
    DEFAULT_INITIAL_STEP_SIZE,
    DEFAULT_INITIAL_TEMP,
    DEFAULT_ITERATIONS_PER_TEMP,
)
from .exceptions import InvalidSchedule


def validate_positive_finite(value: float, field_name: str) -> float:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f'{field_name} must be a finite number greater than 0, got {value}')
    return value


class ScheduleConfig(BaseModel):
    """
    Parameters of a geometric annealing schedule.

    A temperature stage is ``iterations_per_temp`` evaluations followed by one cooling event, which multiplies the
    temperature by ``cooling_rate`` and the step size by :data:`~quench.constants.STEP_SIZE_DECAY`. The run is over
    once the temperature is at or below ``final_temp``.

    Parameters
    ----------
    initial_temp : float
        Starting temperature, > 0 and > ``final_temp``.
    final_temp : float
        Stopping temperature, > 0.
    cooling_rate : float
        Multiplicative cooling factor, strictly between 0 and 1.
    iterations_per_temp : int
        Number of evaluations per temperature stage, >= 1.
    initial_step_size : float
        Starting half-width of the uniform perturbation window, > 0.
    """

    model_config = ConfigDict(frozen=True)

    initial_temp: float
    final_temp: float
    cooling_rate: float
    iterations_per_temp: int
    initial_step_size: float

    @field_validator('initial_temp')
    def validate_initial_temp(cls, v: float) -> float:
        return validate_positive_finite(v, 'initial_temp')

    @field_validator('final_temp')
    def validate_final_temp(cls, v: float) -> float:
        return validate_positive_finite(v, 'final_temp')

    @field_validator('initial_step_size')
    def validate_initial_step_size(cls, v: float) -> float:
        v = validate_positive_finite(v, 'initial_step_size')
        # the perturbation window [-v, v] must have a finite width
        if not math.isfinite(2 * v):
            raise ValueError(f'initial_step_size must leave the perturbation window [-v, v] finite, got {v}')
        return v

    @field_validator('cooling_rate')
    def validate_cooling_rate(cls, v: float) -> float:
        if not 0 < v < 1:
            raise ValueError(f'cooling_rate must be strictly between 0 and 1, got {v}')
        return v

    @field_validator('iterations_per_temp')
    def validate_iterations_per_temp(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f'iterations_per_temp must be at least 1, got {v}')
        return v

    @model_validator(mode='after')
    def validate_temperature_order(self) -> 'ScheduleConfig':
        if not self.initial_temp > self.final_temp:
            raise ValueError(
                f'initial_temp ({self.initial_temp}) must be greater than final_temp ({self.final_temp})'
            )
        return self

    @classmethod
    def build(cls, **kwargs: float) -> 'ScheduleConfig':
        """Like the constructor, but reports invalid parameters as :class:`~quench.exceptions.InvalidSchedule`."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            problems = '; '.join(
                f'{".".join(str(loc) for loc in error["loc"]) or "schedule"}: {error["msg"]}' for error in e.errors()
            )
            raise InvalidSchedule(f'Invalid annealing schedule: {problems}') from e

    @classmethod
    def default(cls) -> 'ScheduleConfig':
        return cls(
            initial_temp=DEFAULT_INITIAL_TEMP,
            final_temp=DEFAULT_FINAL_TEMP,
            cooling_rate=DEFAULT_COOLING_RATE,
            iterations_per_temp=DEFAULT_ITERATIONS_PER_TEMP,
            initial_step_size=DEFAULT_INITIAL_STEP_SIZE,
        )

    def n_stages(self) -> int:
        """
        Number of cooling events a complete run performs.

        Computed by repeated multiplication, the same way the annealer cools, so that floating point rounding agrees
        with :meth:`~quench.annealer.Annealer.is_done` exactly.
        """
        temperature = self.initial_temp
        n = 0
        while temperature > self.final_temp:
            temperature *= self.cooling_rate
            n += 1
        return n

    def total_steps(self) -> int:
        """Number of ``step()`` calls (evaluations plus cooling events) a complete run takes."""
        return self.n_stages() * (self.iterations_per_temp + 1)
