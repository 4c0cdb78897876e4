"""
Quench
-------

Incremental simulated annealing for two-dimensional objectives. The search runs one step at a time so that a
driver can observe (or render) the current and best points between any two calls.
"""

import importlib
from typing import Any

from .utils import get_version_from_pyproject

__version__ = get_version_from_pyproject()

__all__ = [
    'Annealer',
    'AnnealerState',
    'StepOutcome',
    'Evaluated',
    'Cooled',
    'AlreadyDone',
    'SearchSpace',
    'Point',
    'ScheduleConfig',
    'Objective',
    'InverseQuadratic',
    'FunctionObjective',
    'QuenchError',
    'InvalidBounds',
    'InvalidSchedule',
    'NotConfigured',
    'callbacks',
    'constants',
    'driver',
    'objectives',
]

_LAZY_ATTRS = {
    'Annealer': '.annealer',
    'AnnealerState': '.annealer',
    'StepOutcome': '.annealer',
    'Evaluated': '.annealer',
    'Cooled': '.annealer',
    'AlreadyDone': '.annealer',
    'SearchSpace': '.space',
    'Point': '.space',
    'ScheduleConfig': '.schedule',
    'Objective': '.objectives',
    'InverseQuadratic': '.objectives',
    'FunctionObjective': '.objectives',
    'QuenchError': '.exceptions',
    'InvalidBounds': '.exceptions',
    'InvalidSchedule': '.exceptions',
    'NotConfigured': '.exceptions',
}

_LAZY_MODULES = {
    'callbacks': '.callbacks',
    'constants': '.constants',
    'driver': '.driver',
    'objectives': '.objectives',
}


def __getattr__(name: str) -> Any:
    """
    Lazily import attributes and modules on first access.

    Keeps ``import quench`` cheap: pandas is only pulled in once the callbacks module is touched.
    """
    if name in _LAZY_ATTRS:
        module = importlib.import_module(_LAZY_ATTRS[name], __name__)
        attr = getattr(module, name)
        globals()[name] = attr
        return attr
    if name in _LAZY_MODULES:
        module = importlib.import_module(_LAZY_MODULES[name], __name__)
        globals()[name] = module
        return module
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    default_dir = set(globals().keys())
    default_dir.update(__all__)
    return sorted(default_dir)
