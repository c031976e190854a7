"""
sampleplan/normal.py

Standard normal helpers for power calculations.

The quantile function is Acklam's rational approximation (relative error
below 1.15e-9 over the open unit interval), so the planner needs no
special-function library at runtime.
"""

from __future__ import annotations

import math

from .utils import check_finite, check_probability, check_tails


# Central region: numerator a, denominator b
_A = (
    -3.969683028665376e+01, 2.209460984245205e+02, -2.759285104469687e+02,
    1.383577518672690e+02, -3.066479806614716e+01, 2.506628277459239e+00,
)
_B = (
    -5.447609879822406e+01, 1.615858368580409e+02, -1.556989798598866e+02,
    6.680131188771972e+01, -1.328068155288572e+01,
)
# Tails: numerator c, denominator d
_C = (
    -7.784894002430293e-03, -3.223964580411365e-01, -2.400758277161838e+00,
    -2.549732539343734e+00, 4.374664141464968e+00, 2.938163982698783e+00,
)
_D = (
    7.784695709041462e-03, 3.224671290700398e-01,
    2.445134137142996e+00, 3.754408661907416e+00,
)

P_LOW = 0.02425
P_HIGH = 1.0 - P_LOW
P_CLAMP = 1e-12


def _tail(q: float) -> float:
    c, d = _C, _D
    return (
        (((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5])
        / ((((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1.0)
    )

def inverse_normal_quantile(p: float) -> float:
    """
    Inverse of the standard normal CDF.

    p is clamped to [1e-12, 1 - 1e-12] so the result is always finite;
    only NaN or infinite input is rejected.
    """
    p = check_finite("p", p)
    p = min(max(p, P_CLAMP), 1.0 - P_CLAMP)

    if p < P_LOW:
        return _tail(math.sqrt(-2.0 * math.log(p)))
    if p > P_HIGH:
        return -_tail(math.sqrt(-2.0 * math.log(1.0 - p)))

    a, b = _A, _B
    q = p - 0.5
    r = q * q
    return (
        (((((a[0] * r + a[1]) * r + a[2]) * r + a[3]) * r + a[4]) * r + a[5]) * q
        / (((((b[0] * r + b[1]) * r + b[2]) * r + b[3]) * r + b[4]) * r + 1.0)
    )

def norm_cdf(x: float) -> float:
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))

def critical_value(alpha: float, tails: int = 2) -> float:
    """z for the significance level: 1 - alpha/2 quantile if two-tailed, else 1 - alpha."""
    alpha = check_probability("alpha", alpha)
    tails = check_tails(tails)
    a = alpha / 2.0 if tails == 2 else alpha
    return inverse_normal_quantile(1.0 - a)

def power_critical_value(power: float) -> float:
    power = check_probability("power", power)
    return inverse_normal_quantile(power)
