from .cycle import CycleResult, CycleStatus, detect_cycle, fast_path, find_attracting_cycle, refine_period
from .diagnostics import ContractionFit, estimate_contraction_rate, iterate_map, verify_periodicity
from .errors import (
    CycleNotFoundError,
    CycleWarning,
    MaxIterationsExceededError,
    MaxIterationsWarning,
    PeriodNotFoundError,
    RefinementExhaustedWarning,
)
from .logging import enable_logging, logger
from .maps import ComplexMap
from .scan import run_period_scan
from .suite import run_reference_suite
from .tolerance import default_tolerance, working_digits

logger.disable("attracting_cycle")

__all__ = [
    "CycleResult",
    "CycleStatus",
    "ComplexMap",
    "find_attracting_cycle",
    "fast_path",
    "detect_cycle",
    "refine_period",
    "default_tolerance",
    "working_digits",
    "iterate_map",
    "verify_periodicity",
    "estimate_contraction_rate",
    "ContractionFit",
    "CycleWarning",
    "MaxIterationsWarning",
    "RefinementExhaustedWarning",
    "CycleNotFoundError",
    "MaxIterationsExceededError",
    "PeriodNotFoundError",
    "run_period_scan",
    "run_reference_suite",
    "enable_logging",
]
