"""
Reference driver that runs an Annealer in a tight loop.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

import logging

from .annealer import Annealer, StepOutcome
from .callbacks import Callback, CallbackManager
from .exceptions import NotConfigured
from .space import Point

logger = logging.getLogger(__name__)


class AnnealingDriver:
    """
    Calls :meth:`~quench.annealer.Annealer.step` until the schedule finishes, a callback asks to stop, or a step
    budget is used up.

    Any other cadence (a UI timer, single stepping in a debugger) can drive the annealer directly, this class only
    bundles the common loop with callback dispatch. The driver must be the only code stepping the annealer while
    :meth:`run` is executing.

    Parameters
    ----------
    annealer : Annealer
        A configured annealer.
    callbacks : list[Callback] | None, optional
        Observers notified after each step.
    max_steps : int | None, optional
        Maximum number of ``step()`` calls per :meth:`run`. None means no limit.
    """

    def __init__(
        self,
        annealer: Annealer,
        callbacks: list[Callback] | None = None,
        max_steps: int | None = None,
    ) -> None:
        if max_steps is not None and max_steps < 0:
            raise ValueError(f'max_steps must be None or non-negative, not {max_steps}')
        self.annealer = annealer
        self.callback_manager = CallbackManager(callbacks)
        self.max_steps = max_steps
        self.steps_taken = 0
        self.stopped_early = False

    def _budget_left(self, steps_this_run: int) -> bool:
        return self.max_steps is None or steps_this_run < self.max_steps

    def run(self) -> Point:
        """
        Drive the annealer and return the best point found so far.

        Calling :meth:`run` again after a budget or early stop continues the same search.

        Raises
        ------
        NotConfigured
            If the annealer has no schedule. No callback is invoked in that case.
        """
        if not self.annealer.is_configured:
            raise NotConfigured('Annealer must be configured before it can be driven')

        self.stopped_early = False
        manager = self.callback_manager
        manager.on_run_start(manager.build_context(self.steps_taken, None, self.annealer))
        logger.debug(f'Run started at driver step {self.steps_taken}')

        steps_this_run = 0
        outcome: StepOutcome | None = None
        while not self.annealer.is_done() and self._budget_left(steps_this_run):
            outcome = self.annealer.step()
            steps_this_run += 1
            self.steps_taken += 1

            if manager.on_step_end(manager.build_context(self.steps_taken, outcome, self.annealer)):
                self.stopped_early = True
                logger.info(f'Run stopped early by a callback after {self.steps_taken} steps')
                break

        manager.on_run_end(manager.build_context(self.steps_taken, outcome, self.annealer))
        logger.debug(
            f'Run ended after {steps_this_run} steps - done={self.annealer.is_done()} - '
            f'best_value={self.annealer.best_value}'
        )
        return self.annealer.best_point
