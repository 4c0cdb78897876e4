"""
Unit tests for the callback system.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

import logging
import math
import pandas as pd
import pytest
import quench as qn
from quench.callbacks import (
    Callback,
    CallbackContext,
    CallbackManager,
    EarlyStopping,
    MilestoneLogger,
    TrajectoryRecorder,
)


def make_context(annealer: qn.Annealer, step: int = 0, metrics: dict[str, float] | None = None) -> CallbackContext:
    if metrics is None:
        metrics = CallbackManager().extract_metrics(annealer)
    return CallbackContext(step=step, outcome=None, annealer=annealer, metrics=metrics)


# ============================================================================
# Test CallbackContext and Callback
# ============================================================================


def test_CallbackContext_creation(configured_annealer):
    metrics = {'best_value': 0.5}
    outcome = qn.Cooled(new_temperature=5.0)
    context = CallbackContext(step=3, outcome=outcome, annealer=configured_annealer, metrics=metrics)

    assert context.step == 3
    assert context.outcome == outcome
    assert context.annealer is configured_annealer
    assert context.metrics == metrics


def test_Callback_default_implementations(configured_annealer):
    callback = Callback()
    context = make_context(configured_annealer)

    # Should not raise any exceptions
    callback.on_run_start(context)
    callback.on_step_end(context)
    callback.on_run_end(context)


# ============================================================================
# Test CallbackManager
# ============================================================================


def test_CallbackManager_initialization():
    manager = CallbackManager()
    assert len(manager.callbacks) == 0

    manager = CallbackManager([Callback()])
    assert len(manager.callbacks) == 1

    manager.add_callback(Callback())
    assert len(manager.callbacks) == 2


def test_CallbackManager_extract_metrics(configured_annealer):
    metrics = CallbackManager().extract_metrics(configured_annealer)

    assert metrics['current_value'] == configured_annealer.current_value
    assert metrics['best_value'] == configured_annealer.best_value
    assert metrics['current_x'] == configured_annealer.current_point.x
    assert metrics['current_y'] == configured_annealer.current_point.y
    assert metrics['best_x'] == configured_annealer.best_point.x
    assert metrics['best_y'] == configured_annealer.best_point.y
    assert metrics['temperature'] == configured_annealer.temperature
    assert metrics['step_size'] == configured_annealer.step_size
    assert metrics['total_iterations'] == 0.0


def test_CallbackManager_extract_metrics_unconfigured(annealer):
    metrics = CallbackManager().extract_metrics(annealer)
    assert math.isnan(metrics['temperature'])
    assert math.isnan(metrics['step_size'])


def test_CallbackManager_execution_order(configured_annealer):
    call_order = []

    class TestCallback(Callback):
        def __init__(self, name: str):
            self.name = name

        def on_step_end(self, context: CallbackContext) -> None:
            call_order.append(self.name)

    manager = CallbackManager([TestCallback('callback1'), TestCallback('callback2')])
    should_stop = manager.on_step_end(make_context(configured_annealer))

    assert call_order == ['callback1', 'callback2']
    assert should_stop is False


def test_CallbackManager_all_callbacks_execute_on_early_stop(configured_annealer):
    call_order = []

    class StopCallback(Callback):
        def on_step_end(self, context: CallbackContext) -> None:
            call_order.append('stop')
            self._should_stop = True

    class ContinueCallback(Callback):
        def on_step_end(self, context: CallbackContext) -> None:
            call_order.append('continue')

    manager = CallbackManager([StopCallback(), ContinueCallback()])
    should_stop = manager.on_step_end(make_context(configured_annealer))

    assert call_order == ['stop', 'continue']
    assert should_stop is True


def test_CallbackManager_exception_handling(configured_annealer, caplog):
    class FailingCallback(Callback):
        def on_run_start(self, context: CallbackContext) -> None:
            raise RuntimeError('start failure')

        def on_step_end(self, context: CallbackContext) -> None:
            raise ValueError('Test exception')

        def on_run_end(self, context: CallbackContext) -> None:
            raise KeyError('end failure')

    class WorkingCallback(Callback):
        def __init__(self):
            self.called = []

        def on_run_start(self, context: CallbackContext) -> None:
            self.called.append('start')

        def on_step_end(self, context: CallbackContext) -> None:
            self.called.append('step')

        def on_run_end(self, context: CallbackContext) -> None:
            self.called.append('end')

    working_callback = WorkingCallback()
    manager = CallbackManager([FailingCallback(), working_callback])
    context = make_context(configured_annealer)

    with caplog.at_level(logging.ERROR, logger='quench.callbacks'):
        manager.on_run_start(context)
        assert manager.on_step_end(context) is False
        manager.on_run_end(context)

    assert working_callback.called == ['start', 'step', 'end']
    assert 'FailingCallback.on_step_end' in caplog.text
    assert 'Test exception' in caplog.text


# ============================================================================
# Test EarlyStopping
# ============================================================================


def test_EarlyStopping_initialization():
    early_stop = EarlyStopping(monitor='best_value', patience=10)
    assert early_stop.monitor == 'best_value'
    assert early_stop.patience == 10
    assert early_stop.mode == 'max'
    assert early_stop._should_stop is False


def test_EarlyStopping_invalid_mode():
    with pytest.raises(ValueError, match='mode must be "min" or "max"'):
        EarlyStopping(monitor='best_value', patience=10, mode='invalid')


def test_EarlyStopping_patience_max_mode(configured_annealer):
    early_stop = EarlyStopping(monitor='best_value', patience=2)
    early_stop.on_run_start(make_context(configured_annealer))

    early_stop.on_step_end(make_context(configured_annealer, metrics={'best_value': 0.1}))
    assert early_stop._best_value == 0.1
    assert early_stop._steps_since_improvement == 0

    early_stop.on_step_end(make_context(configured_annealer, metrics={'best_value': 0.2}))
    assert early_stop._best_value == 0.2
    assert early_stop._steps_since_improvement == 0

    early_stop.on_step_end(make_context(configured_annealer, metrics={'best_value': 0.2}))
    assert early_stop._steps_since_improvement == 1
    assert early_stop._should_stop is False

    early_stop.on_step_end(make_context(configured_annealer, metrics={'best_value': 0.2}))
    assert early_stop._steps_since_improvement == 2
    assert early_stop._should_stop is True

    # a new run resets the state
    early_stop.on_run_start(make_context(configured_annealer))
    assert early_stop._should_stop is False
    assert early_stop._best_value is None


def test_EarlyStopping_min_mode_with_min_delta(configured_annealer):
    early_stop = EarlyStopping(monitor='temperature', patience=1, min_delta=0.5, mode='min')
    early_stop.on_step_end(make_context(configured_annealer, metrics={'temperature': 10.0}))
    early_stop.on_step_end(make_context(configured_annealer, metrics={'temperature': 9.0}))
    assert early_stop._best_value == 9.0
    early_stop.on_step_end(make_context(configured_annealer, metrics={'temperature': 8.8}))
    assert early_stop._should_stop is True


def test_EarlyStopping_missing_metric_warns(configured_annealer, caplog):
    early_stop = EarlyStopping(monitor='not_a_metric', patience=1)
    with caplog.at_level(logging.WARNING, logger='quench.callbacks'):
        early_stop.on_step_end(make_context(configured_annealer))
    assert 'not_a_metric' in caplog.text
    assert early_stop._should_stop is False


# ============================================================================
# Test MilestoneLogger
# ============================================================================


def test_MilestoneLogger_rejects_bad_interval():
    with pytest.raises(ValueError):
        MilestoneLogger(every=0)


def test_MilestoneLogger_logs_on_cooling_events_at_interval(configured_annealer, caplog):
    milestone = MilestoneLogger(every=6, log_cooling=True)
    manager = CallbackManager([milestone])

    with caplog.at_level(logging.INFO, logger='quench.callbacks'):
        manager.on_run_start(manager.build_context(0, None, configured_annealer))
        for step in range(1, 9):
            outcome = configured_annealer.step()
            manager.on_step_end(manager.build_context(step, outcome, configured_annealer))
        manager.on_run_end(manager.build_context(8, outcome, configured_annealer))

    messages = [record.getMessage() for record in caplog.records]
    # 8 steps = 6 evaluations and 2 cooling events, after 3 and 6 evaluations
    assert messages[0].startswith('Run started')
    milestones = [message for message in messages if message.startswith('Iteration=')]
    assert len(milestones) == 1
    # reports the temperature after the second cooling event: 10 * 0.5 * 0.5
    assert milestones[0].startswith('Iteration=6 - T=2.5 ')
    assert sum(message.startswith('Cooled to T=5 ') for message in messages) == 1
    assert messages[-1].startswith('Run finished after 6 iterations')


def test_MilestoneLogger_stays_quiet_between_cooling_events(configured_annealer, caplog):
    milestone = MilestoneLogger(every=1)
    manager = CallbackManager([milestone])
    with caplog.at_level(logging.INFO, logger='quench.callbacks'):
        for step in range(1, 4):
            outcome = configured_annealer.step()
            assert outcome.kind == 'evaluated'
            manager.on_step_end(manager.build_context(step, outcome, configured_annealer))
    assert caplog.text == ''


def test_MilestoneLogger_skips_cooling_lines_by_default(configured_annealer, caplog):
    milestone = MilestoneLogger(every=100)
    manager = CallbackManager([milestone])
    with caplog.at_level(logging.INFO, logger='quench.callbacks'):
        for step in range(1, 5):
            outcome = configured_annealer.step()
            manager.on_step_end(manager.build_context(step, outcome, configured_annealer))
    assert caplog.text == ''


# ============================================================================
# Test TrajectoryRecorder
# ============================================================================


def test_TrajectoryRecorder_rejects_bad_interval():
    with pytest.raises(ValueError):
        TrajectoryRecorder(every=0)


def test_TrajectoryRecorder_to_dataframe(configured_annealer):
    recorder = TrajectoryRecorder(every=2)
    manager = CallbackManager([recorder])

    manager.on_run_start(manager.build_context(0, None, configured_annealer))
    for step in range(1, 9):
        outcome = configured_annealer.step()
        manager.on_step_end(manager.build_context(step, outcome, configured_annealer))

    df = recorder.to_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert list(df['step']) == [0, 2, 4, 6, 8]
    assert df['kind'].iloc[0] == 'start'
    # every fourth step of the small schedule is a cooling event
    assert list(df['kind'].iloc[1:]) == ['evaluated', 'cooled', 'evaluated', 'cooled']
    assert {'current_x', 'current_y', 'best_x', 'best_y', 'best_value', 'temperature'} <= set(df.columns)
    assert df['best_value'].is_monotonic_increasing
    assert df['temperature'].iloc[-1] == configured_annealer.temperature


def test_TrajectoryRecorder_empty_dataframe():
    assert TrajectoryRecorder().to_dataframe().empty
