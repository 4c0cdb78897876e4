"""
Simulated annealing as an incremental state machine.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

from dataclasses import dataclass, replace
from typing import Callable, ClassVar
import logging
import numpy as np

from .constants import STEP_SIZE_DECAY
from .exceptions import NotConfigured
from .objectives import InverseQuadratic, Objective, as_objective
from .schedule import ScheduleConfig
from .space import Point, SearchSpace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    """Result of a single call to :meth:`Annealer.step`."""

    kind: ClassVar[str] = 'step'


@dataclass(frozen=True)
class Evaluated(StepOutcome):
    """
    A candidate was generated and evaluated.

    Parameters
    ----------
    moved : bool
        Whether the candidate became the current point.
    improved : bool
        Whether the candidate raised the best value found so far (independent of ``moved``).
    candidate : Point
        The clamped candidate that was evaluated.
    delta : float
        ``f(candidate) - f(current)``, with ``current`` taken before the move.
    """

    kind: ClassVar[str] = 'evaluated'

    moved: bool
    improved: bool
    candidate: Point
    delta: float


@dataclass(frozen=True)
class Cooled(StepOutcome):
    """A cooling event lowered the temperature to ``new_temperature``."""

    kind: ClassVar[str] = 'cooled'

    new_temperature: float


@dataclass(frozen=True)
class AlreadyDone(StepOutcome):
    """The schedule had already finished, nothing happened."""

    kind: ClassVar[str] = 'already_done'


@dataclass
class AnnealerState:
    """
    All mutable search state of an :class:`Annealer`.

    Attributes
    ----------
    current : Point
        Present position of the search. May be worse than ``best``.
    current_value : float
        Objective value at ``current``.
    best : Point
        Best point evaluated during the run.
    best_value : float
        Objective value at ``best``. Never decreases.
    temperature : float | None
        Acceptance temperature, None until a schedule is configured.
    step_size : float | None
        Half-width of the uniform perturbation window, None until a schedule is configured.
    total_iterations : int
        Number of evaluations since the schedule was configured.
    iterations_at_current_temperature : int
        Number of evaluations since the last cooling event.
    cooling_events : int
        Number of cooling events since the schedule was configured.
    """

    current: Point
    current_value: float
    best: Point
    best_value: float
    temperature: float | None = None
    step_size: float | None = None
    total_iterations: int = 0
    iterations_at_current_temperature: int = 0
    cooling_events: int = 0


class Annealer:
    """
    Maximizes a two-dimensional objective by simulated annealing, one step per call.

    The annealer owns its state and its random generator. A driver configures a schedule, then calls :meth:`step`
    until :meth:`is_done` and may read the accessors between any two calls.

    Parameters
    ----------
    search_space : SearchSpace | tuple[float, float]
        Domain of both coordinates.
    objective : Objective | Callable[[float, float], float], default=InverseQuadratic()
        Pure function to maximize.
    seed : int | None, default=None
        Seed of the random generator. None gives a non-deterministic run.

    Raises
    ------
    InvalidBounds
        If the search space bounds are malformed.

    Examples
    --------
    >>> annealer = Annealer(SearchSpace(-5.0, 5.0), seed=0)
    >>> annealer.configure_schedule(1000.0, 0.01, 0.995, 100, 1.0)
    >>> while not annealer.is_done():
    ...     outcome = annealer.step()
    """

    def __init__(
        self,
        search_space: SearchSpace | tuple[float, float],
        objective: Objective | Callable[[float, float], float] | None = None,
        seed: int | None = None,
    ) -> None:
        self._search_space = SearchSpace.from_bounds(search_space)
        self._objective = as_objective(objective if objective is not None else InverseQuadratic())
        self._rng = np.random.default_rng(seed)
        self._schedule: ScheduleConfig | None = None

        start = self._search_space.sample(self._rng)
        start_value = self._objective(start.x, start.y)
        self._state = AnnealerState(current=start, current_value=start_value, best=start, best_value=start_value)

        logger.debug(f'Annealer created on {self._search_space} with objective {self._objective}')
        logger.debug(f'Starting point {start} with value {start_value}')

    def configure_schedule(
        self,
        initial_temp: float,
        final_temp: float,
        cooling_rate: float,
        iterations_per_temp: int,
        initial_step_size: float,
    ) -> None:
        """
        Validate and apply a cooling schedule. Must be called before the first :meth:`step`.

        Resets temperature, step size and iteration counters. The current and best points are kept.

        Raises
        ------
        InvalidSchedule
            If any parameter lies outside its domain. The annealer is left untouched.
        """
        config = ScheduleConfig.build(
            initial_temp=initial_temp,
            final_temp=final_temp,
            cooling_rate=cooling_rate,
            iterations_per_temp=iterations_per_temp,
            initial_step_size=initial_step_size,
        )
        self._apply_schedule(config)

    def configure(self, config: ScheduleConfig) -> None:
        """
        Apply a :class:`~quench.schedule.ScheduleConfig`.

        The config is validated again, so instances built with ``model_construct`` cannot bypass the checks.

        Raises
        ------
        InvalidSchedule
            If any parameter lies outside its domain. The annealer is left untouched.
        """
        self._apply_schedule(ScheduleConfig.build(**config.model_dump()))

    def _apply_schedule(self, config: ScheduleConfig) -> None:
        self._schedule = config
        self._state.temperature = config.initial_temp
        self._state.step_size = config.initial_step_size
        self._state.total_iterations = 0
        self._state.iterations_at_current_temperature = 0
        self._state.cooling_events = 0
        logger.debug(f'Schedule configured: {config}')

    def is_done(self) -> bool:
        """True once a configured schedule has cooled to ``final_temp`` or below."""
        if self._schedule is None:
            return False
        assert self._state.temperature is not None, 'Configured annealer must have a temperature'
        return self._state.temperature <= self._schedule.final_temp

    def step(self) -> StepOutcome:
        """
        Advance the search by one unit of work.

        Either evaluates one candidate (while the current temperature stage has evaluations left) or performs one
        cooling event, never both.

        Returns
        -------
        StepOutcome
            :class:`Evaluated`, :class:`Cooled`, or :class:`AlreadyDone` once the schedule has finished.

        Raises
        ------
        NotConfigured
            If no schedule has been configured yet.
        """
        if self._schedule is None:
            raise NotConfigured('configure_schedule() must be called before step()')
        if self.is_done():
            return AlreadyDone()
        if self._state.iterations_at_current_temperature < self._schedule.iterations_per_temp:
            return self._evaluate()
        return self._cool()

    def _propose(self) -> Point:
        """Uniformly perturb the current point, x first and then y, and clamp the result into bounds."""
        step_size = self._state.step_size
        current = self._state.current
        dx = float(self._rng.uniform(-step_size, step_size))
        dy = float(self._rng.uniform(-step_size, step_size))
        return self._search_space.clamp(current.x + dx, current.y + dy)

    def _accept(self, delta: float) -> bool:
        """Metropolis rule for a maximizer. Only non-improving moves consume a random draw."""
        if delta > 0:
            return True
        acceptance_probability = float(np.exp(delta / self._state.temperature))
        logger.debug(f'{delta=}, {acceptance_probability=}')
        return self._rng.random() < acceptance_probability

    def _evaluate(self) -> Evaluated:
        state = self._state
        candidate = self._propose()
        candidate_value = self._objective(candidate.x, candidate.y)
        delta = candidate_value - state.current_value

        moved = self._accept(delta)
        if moved:
            state.current = candidate
            state.current_value = candidate_value

        # best is tracked on the candidate whether or not it was accepted
        improved = candidate_value > state.best_value
        if improved:
            state.best = candidate
            state.best_value = candidate_value
            logger.debug(f'New best {candidate} with value {candidate_value}')

        state.total_iterations += 1
        state.iterations_at_current_temperature += 1
        return Evaluated(moved=moved, improved=improved, candidate=candidate, delta=delta)

    def _cool(self) -> Cooled:
        assert self._schedule is not None
        state = self._state
        state.temperature *= self._schedule.cooling_rate
        state.step_size *= STEP_SIZE_DECAY
        state.iterations_at_current_temperature = 0
        state.cooling_events += 1
        logger.debug(f'Cooling event {state.cooling_events}: T={state.temperature}, step_size={state.step_size}')
        return Cooled(new_temperature=state.temperature)

    def snapshot(self) -> AnnealerState:
        """Independent copy of the current state."""
        return replace(self._state)

    @property
    def search_space(self) -> SearchSpace:
        return self._search_space

    @property
    def objective(self) -> Objective:
        return self._objective

    @property
    def schedule(self) -> ScheduleConfig | None:
        return self._schedule

    @property
    def is_configured(self) -> bool:
        return self._schedule is not None

    @property
    def current_point(self) -> Point:
        return self._state.current

    @property
    def current_value(self) -> float:
        return self._state.current_value

    @property
    def best_point(self) -> Point:
        return self._state.best

    @property
    def best_value(self) -> float:
        return self._state.best_value

    @property
    def temperature(self) -> float | None:
        return self._state.temperature

    @property
    def step_size(self) -> float | None:
        return self._state.step_size

    @property
    def total_iterations(self) -> int:
        return self._state.total_iterations

    @property
    def iterations_at_current_temperature(self) -> int:
        return self._state.iterations_at_current_temperature

    @property
    def cooling_events(self) -> int:
        return self._state.cooling_events
