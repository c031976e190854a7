"""
sampleplan/sanity.py

Built-in self-checks for the planner engine:
  - larger MDE needs a smaller sample
  - one-tailed tests need fewer units than two-tailed
  - allocation ratio shifts units between the groups
  - quantile approximation agrees with scipy
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List

import numpy as np
from scipy import stats

from .normal import inverse_normal_quantile
from .power import two_proportion_sample_size


@dataclass(frozen=True)
class CheckResult:
    name: str
    passed: bool
    message: str


def check_mde_monotonic(base: float = 0.05, alpha: float = 0.05, power: float = 0.8) -> CheckResult:
    small = two_proportion_sample_size(base, base + 0.01, alpha, power, tails=2)
    large = two_proportion_sample_size(base, base + 0.02, alpha, power, tails=2)
    return CheckResult(
        name="mde_monotonic",
        passed=large.total < small.total,
        message="Larger MDE -> smaller sample",
    )

def check_one_vs_two_tailed(base: float = 0.05, alpha: float = 0.05, power: float = 0.8) -> CheckResult:
    two = two_proportion_sample_size(base, base + 0.01, alpha, power, tails=2)
    one = two_proportion_sample_size(base, base + 0.01, alpha, power, tails=1)
    return CheckResult(
        name="one_vs_two_tailed",
        passed=one.total < two.total,
        message="One-tailed < two-tailed",
    )

def check_allocation(base: float = 0.05, alpha: float = 0.05, power: float = 0.8) -> CheckResult:
    eq = two_proportion_sample_size(base, base + 0.01, alpha, power, tails=2, ratio=1.0)
    skew = two_proportion_sample_size(base, base + 0.01, alpha, power, tails=2, ratio=2.0)
    return CheckResult(
        name="allocation_ratio",
        passed=skew.n_a < eq.n_a and skew.n_b > eq.n_b,
        message="Allocation affects group sizes",
    )

def check_quantile_accuracy(tol: float = 5e-9, n_points: int = 2001) -> CheckResult:
    """
    Error of the quantile approximation against scipy's norm.ppf, scaled by
    max(1, |x|), over a grid that reaches deep into both tails.
    """
    grid = np.concatenate([
        np.logspace(-10, np.log10(0.02), 200),
        np.linspace(0.02, 0.98, n_points),
        1.0 - np.logspace(-10, np.log10(0.02), 200),
    ])
    approx = np.array([inverse_normal_quantile(p) for p in grid])
    exact = stats.norm.ppf(grid)
    err = float(np.max(np.abs(approx - exact) / np.maximum(1.0, np.abs(exact))))
    return CheckResult(
        name="quantile_accuracy",
        passed=err < tol,
        message=f"Quantile max scaled error {err:.2e} (tol {tol:.0e})",
    )

def run_self_checks() -> List[CheckResult]:
    return [
        check_mde_monotonic(),
        check_one_vs_two_tailed(),
        check_allocation(),
        check_quantile_accuracy(),
    ]
