"""
Default search domain and annealing schedule

MIT License

Copyright (c) 2025 Jakub Lála, Ayham Al-Saffar, Stefano Angioletti-Uberti
"""

# Search domain, applied to both coordinates
DEFAULT_MIN_BOUND = -5.0
DEFAULT_MAX_BOUND = 5.0

# Perturbation half-width shrinks by this factor at every cooling event
STEP_SIZE_DECAY = 0.99

# Default schedule
DEFAULT_INITIAL_TEMP = 1000.0
DEFAULT_FINAL_TEMP = 0.01
DEFAULT_COOLING_RATE = 0.995
DEFAULT_ITERATIONS_PER_TEMP = 100
DEFAULT_INITIAL_STEP_SIZE = 1.0
