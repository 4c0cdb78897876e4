"""
Callback system for drivers of the Annealer, following PyTorch Lightning patterns.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

from dataclasses import dataclass
from abc import ABC
from typing import Any
import logging

import pandas as pd

from .annealer import Annealer, StepOutcome

logger = logging.getLogger(__name__)


@dataclass
class CallbackContext:
    """
    Container for all information passed to callbacks during a run.

    Parameters
    ----------
    step : int
        Number of ``step()`` calls made by the driver so far (0 before the first call).
    outcome : StepOutcome | None
        Outcome of the latest ``step()`` call, None at run start.
    annealer : Annealer
        The annealer being driven. Callbacks must only read from it.
    metrics : dict[str, float]
        Snapshot of the annealer state, including:
        - 'current_value', 'best_value'
        - 'current_x', 'current_y', 'best_x', 'best_y'
        - 'temperature', 'step_size', 'total_iterations'
    """

    step: int
    outcome: StepOutcome | None
    annealer: Annealer
    metrics: dict[str, float]


class Callback(ABC):
    """
    Abstract base class for callbacks in the annealing run.

    Callbacks can be used to monitor, log, or stop a run. All hook methods have default no-op implementations, so
    subclasses only need to override the methods they care about. A callback asks for the run to stop by setting
    ``self._should_stop = True``.

    Examples
    --------
    >>> class MyCallback(Callback):
    ...     def on_step_end(self, context: CallbackContext) -> None:
    ...         print(f"Step {context.step}: best = {context.metrics['best_value']}")
    """

    def on_run_start(self, context: CallbackContext) -> None:
        """
        Called once before the first step of a run.

        Parameters
        ----------
        context : CallbackContext
            Context containing the initial state and annealer reference.
        """
        pass

    def on_step_end(self, context: CallbackContext) -> None:
        """
        Called after each ``step()`` call.

        All callbacks execute even if early stopping is triggered.

        Parameters
        ----------
        context : CallbackContext
            Context containing the step outcome and metrics.
        """
        pass

    def on_run_end(self, context: CallbackContext) -> None:
        """
        Called once after the run loop exits, whatever the reason.

        Parameters
        ----------
        context : CallbackContext
            Context containing the final state.
        """
        pass


class CallbackManager:
    """
    Manages the execution of callbacks during a run.

    Extracts metrics from the annealer, dispatches hooks in registration order and collects early stopping requests.
    An exception raised inside a callback is logged and swallowed so that observers cannot break a run.

    Parameters
    ----------
    callbacks : list[Callback] | None, optional
        List of callbacks to execute. If None, an empty list is used.
    """

    def __init__(self, callbacks: list[Callback] | None = None) -> None:
        self.callbacks: list[Callback] = list(callbacks) if callbacks is not None else []
        self._should_stop: bool = False

    def add_callback(self, callback: Callback) -> None:
        self.callbacks.append(callback)

    def extract_metrics(self, annealer: Annealer) -> dict[str, float]:
        """
        Read a flat dictionary of metrics from the annealer.

        Temperature and step size are NaN while the annealer is unconfigured.
        """
        current, best = annealer.current_point, annealer.best_point
        temperature = annealer.temperature
        step_size = annealer.step_size
        return {
            'current_value': annealer.current_value,
            'best_value': annealer.best_value,
            'current_x': current.x,
            'current_y': current.y,
            'best_x': best.x,
            'best_y': best.y,
            'temperature': float('nan') if temperature is None else temperature,
            'step_size': float('nan') if step_size is None else step_size,
            'total_iterations': float(annealer.total_iterations),
        }

    def build_context(self, step: int, outcome: StepOutcome | None, annealer: Annealer) -> CallbackContext:
        return CallbackContext(step=step, outcome=outcome, annealer=annealer, metrics=self.extract_metrics(annealer))

    def on_run_start(self, context: CallbackContext) -> None:
        self._should_stop = False
        for callback in self.callbacks:
            try:
                callback.on_run_start(context)
            except Exception as e:
                logger.error(f'Error in callback {callback.__class__.__name__}.on_run_start: {e}', exc_info=True)

    def on_step_end(self, context: CallbackContext) -> bool:
        """
        Execute on_step_end for all registered callbacks.

        Returns
        -------
        bool
            True if any callback asked the run to stop.
        """
        self._should_stop = False
        for callback in self.callbacks:
            try:
                callback.on_step_end(context)
                if getattr(callback, '_should_stop', False):
                    self._should_stop = True
            except Exception as e:
                logger.error(f'Error in callback {callback.__class__.__name__}.on_step_end: {e}', exc_info=True)

        return self._should_stop

    def on_run_end(self, context: CallbackContext) -> None:
        for callback in self.callbacks:
            try:
                callback.on_run_end(context)
            except Exception as e:
                logger.error(f'Error in callback {callback.__class__.__name__}.on_run_end: {e}', exc_info=True)


class MilestoneLogger(Callback):
    """
    Logs a progress line at INFO level on each cooling event that falls on a multiple of ``every`` evaluations.

    The line reports the temperature after cooling. When ``every`` is not a multiple of ``iterations_per_temp``,
    milestones only fall on their common multiples.

    Parameters
    ----------
    every : int, default=1000
        Evaluation interval between two progress lines.
    log_cooling : bool, default=False
        Also log a line for the other cooling events.
    """

    def __init__(self, every: int = 1000, log_cooling: bool = False) -> None:
        if every < 1:
            raise ValueError(f'every must be at least 1, got {every}')
        self.every = every
        self.log_cooling = log_cooling

    def on_run_start(self, context: CallbackContext) -> None:
        m = context.metrics
        logger.info(
            f'Run started at ({m["current_x"]:.4f}, {m["current_y"]:.4f}) - value={m["current_value"]:.6f} - '
            f'T={m["temperature"]:.4g}'
        )

    def on_step_end(self, context: CallbackContext) -> None:
        m = context.metrics
        if context.outcome is None or context.outcome.kind != 'cooled':
            return
        if context.annealer.total_iterations % self.every == 0:
            logger.info(
                f'Iteration={context.annealer.total_iterations} - T={m["temperature"]:.4g} - '
                f'best=({m["best_x"]:.4f}, {m["best_y"]:.4f}) - best_value={m["best_value"]:.6f}'
            )
        elif self.log_cooling:
            logger.info(f'Cooled to T={m["temperature"]:.4g} - step_size={m["step_size"]:.4g}')

    def on_run_end(self, context: CallbackContext) -> None:
        m = context.metrics
        logger.info(
            f'Run finished after {context.annealer.total_iterations} iterations - '
            f'best=({m["best_x"]:.6f}, {m["best_y"]:.6f}) - best_value={m["best_value"]:.6f}'
        )


class EarlyStopping(Callback):
    """
    Callback that monitors a metric and signals early stopping when it stops improving.

    Parameters
    ----------
    monitor : str
        Metric name to monitor (e.g., "best_value", "current_value").
    patience : int
        Number of steps with no improvement before stopping.
    min_delta : float, default=0.0
        Minimum change in the monitored metric to be considered an improvement.
    mode : str, default="max"
        Whether higher ("max") or lower ("min") values are better.

    Examples
    --------
    >>> early_stop = EarlyStopping(monitor="best_value", patience=5_000)
    """

    def __init__(self, monitor: str, patience: int, min_delta: float = 0.0, mode: str = 'max') -> None:
        if mode not in ('min', 'max'):
            raise ValueError(f'mode must be "min" or "max", got {mode}')

        self.monitor = monitor
        self.patience = patience
        self.min_delta = min_delta
        self.mode = mode
        self._should_stop = False
        self._best_value: float | None = None
        self._steps_since_improvement = 0

    def on_run_start(self, context: CallbackContext) -> None:
        """Reset tracking state at the start of a run."""
        self._should_stop = False
        self._best_value = None
        self._steps_since_improvement = 0

    def on_step_end(self, context: CallbackContext) -> None:
        if self.monitor not in context.metrics:
            logger.warning(
                f'EarlyStopping monitoring "{self.monitor}" but metric not found in context. '
                f'Available metrics: {list(context.metrics.keys())}'
            )
            return

        current_value = context.metrics[self.monitor]

        if self._best_value is None:
            self._best_value = current_value
            self._steps_since_improvement = 0
            return

        if self.mode == 'max':
            is_better = current_value > (self._best_value + self.min_delta)
        else:
            is_better = current_value < (self._best_value - self.min_delta)

        if is_better:
            self._best_value = current_value
            self._steps_since_improvement = 0
        else:
            self._steps_since_improvement += 1

        if self._steps_since_improvement >= self.patience:
            self._should_stop = True
            logger.info(
                f'EarlyStopping triggered: {self.monitor} has not improved for {self.patience} steps. '
                f'Best value: {self._best_value}, Current value: {current_value}'
            )


class TrajectoryRecorder(Callback):
    """
    Keeps the metrics of every ``every``-th step in memory, e.g. for a renderer drawing the search path.

    Parameters
    ----------
    every : int, default=1
        Record one row per ``every`` driver steps. The initial state is always recorded.
    """

    def __init__(self, every: int = 1) -> None:
        if every < 1:
            raise ValueError(f'every must be at least 1, got {every}')
        self.every = every
        self.rows: list[dict[str, Any]] = []

    def _record(self, context: CallbackContext) -> None:
        kind = context.outcome.kind if context.outcome is not None else 'start'
        self.rows.append({'step': context.step, 'kind': kind, **context.metrics})

    def on_run_start(self, context: CallbackContext) -> None:
        self._record(context)

    def on_step_end(self, context: CallbackContext) -> None:
        if context.step % self.every == 0:
            self._record(context)

    def to_dataframe(self) -> pd.DataFrame:
        """Recorded rows as a DataFrame, one row per recorded step."""
        return pd.DataFrame(self.rows)
