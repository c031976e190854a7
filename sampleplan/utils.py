"""
sampleplan/utils.py

Utility functions used across the package:
  - Domain validation for planner inputs
  - Reporting / formatting helpers for the CLI
"""

from __future__ import annotations
from dataclasses import asdict, is_dataclass
from typing import Dict

import math
import numbers


class DomainError(ValueError):
    """Raised when a planner input is non-finite or outside its domain."""


# -------------------------
# Validation
# -------------------------

def check_finite(name: str, value: float) -> float:
    if isinstance(value, (str, bytes)):
        raise DomainError(f"{name} must be a number, got {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise DomainError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise DomainError(f"{name} must be finite, got {value}")
    return value

def check_probability(name: str, value: float) -> float:
    value = check_finite(name, value)
    if not (0.0 < value < 1.0):
        raise DomainError(f"{name} must be in (0,1), got {value}")
    return value

def check_positive(name: str, value: float) -> float:
    value = check_finite(name, value)
    if value <= 0:
        raise DomainError(f"{name} must be > 0, got {value}")
    return value

def check_non_negative(name: str, value: float) -> float:
    value = check_finite(name, value)
    if value < 0:
        raise DomainError(f"{name} must be >= 0, got {value}")
    return value

def check_tails(tails: int) -> int:
    if isinstance(tails, bool) or not isinstance(tails, numbers.Integral) or tails not in (1, 2):
        raise DomainError(f"tails must be 1 or 2, got {tails!r}")
    return int(tails)

def check_variations(num_variations: int) -> int:
    try:
        k = int(num_variations)
    except (TypeError, ValueError, OverflowError):
        k = None
    if k is None or isinstance(num_variations, bool) or k != num_variations or k < 1:
        raise DomainError(f"num_variations must be an integer >= 1, got {num_variations!r}")
    return k

def check_dropoff(dropoff_rate: float) -> float:
    dropoff_rate = check_finite("dropoff_rate", dropoff_rate)
    if not (0.0 <= dropoff_rate < 1.0):
        raise DomainError(f"dropoff_rate must be in [0,1), got {dropoff_rate}")
    return dropoff_rate


# -------------------------
# Reporting / formatting
# -------------------------

def as_report_dict(obj) -> Dict:
    """
    Convert dataclass or dict-like result to a plain dict for JSON/printing.
    """
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    raise TypeError("Expected dataclass or dict.")

def fmt_pct(x: float, digits: int = 2) -> str:
    return f"{100.0 * x:.{digits}f}%"

def fmt_float(x: float, digits: int = 4) -> str:
    return f"{x:.{digits}f}"

def fmt_int(n: int) -> str:
    return f"{n:,}"
