"""
Errors raised by the annealer when it is built or driven incorrectly.

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""


class QuenchError(Exception):
    """Base class for all errors raised by quench."""


class InvalidBounds(QuenchError, ValueError):
    """Search space bounds are malformed, i.e. not finite or ``min_bound >= max_bound``."""


class InvalidSchedule(QuenchError, ValueError):
    """A schedule parameter lies outside its documented domain."""


class NotConfigured(QuenchError, RuntimeError):
    """A step was requested before a schedule was configured."""
