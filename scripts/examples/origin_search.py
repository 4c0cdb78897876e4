import logging
import quench as qn
from quench.callbacks import MilestoneLogger, TrajectoryRecorder
from quench.driver import AnnealingDriver

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')

annealer = qn.Annealer(
    search_space=qn.SearchSpace(min_bound=-5.0, max_bound=5.0),
    objective=qn.InverseQuadratic(),
    seed=42,
)
annealer.configure_schedule(
    initial_temp=1000.0,
    final_temp=0.01,
    cooling_rate=0.995,
    iterations_per_temp=100,
    initial_step_size=1.0,
)

recorder = TrajectoryRecorder(every=101)
driver = AnnealingDriver(annealer, callbacks=[MilestoneLogger(every=10_000), recorder])
best = driver.run()

trajectory = recorder.to_dataframe()
print(trajectory[['step', 'temperature', 'current_value', 'best_value']].tail())
print(f'best point {best} with value {annealer.best_value:.8f}')
