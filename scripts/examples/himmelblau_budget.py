import logging
import quench as qn
from quench.callbacks import EarlyStopping, MilestoneLogger
from quench.driver import AnnealingDriver

logging.basicConfig(level=logging.INFO)


def negated_himmelblau(x: float, y: float) -> float:
    return -((x * x + y - 11) ** 2 + (x + y * y - 7) ** 2)


annealer = qn.Annealer((-5.0, 5.0), objective=qn.FunctionObjective(negated_himmelblau, name='himmelblau'), seed=7)
annealer.configure_schedule(
    initial_temp=100.0,
    final_temp=1e-3,
    cooling_rate=0.98,
    iterations_per_temp=50,
    initial_step_size=0.5,
)

driver = AnnealingDriver(
    annealer,
    callbacks=[MilestoneLogger(every=2_000, log_cooling=False), EarlyStopping(monitor='best_value', patience=5_000)],
    max_steps=20_000,
)
best = driver.run()
print(f'best point {best} with value {annealer.best_value:.6f} (stopped early: {driver.stopped_early})')
