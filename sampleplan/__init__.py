"""
sampleplan: A/B test sample-size planning (critical values, sample-size
formulas, Bonferroni/drop-off/duration post-processing, scenario sweeps).

Public API is re-exported here for convenience.
"""

from importlib.metadata import PackageNotFoundError, version as _version

# ---- Version ----
try:
    __version__ = _version("sampleplan")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# ---- Re-exports ----
from .utils import DomainError  # noqa: F401

# Normal quantile / critical values
from .normal import (  # noqa: F401
    inverse_normal_quantile,
    norm_cdf,
    critical_value,
    power_critical_value,
)

# Sample size formulas
from .power import (  # noqa: F401
    SampleSizeResult,
    two_proportion_sample_size,
    two_mean_sample_size,
    variation_rate,
    mean_delta,
)

# Scenario post-processing
from .scenarios import (  # noqa: F401
    ScenarioResult,
    SweepRow,
    bonferroni_alpha,
    aggregate_scenario,
    plan_proportions,
    plan_means,
    parse_percent_list,
    parse_alpha_list,
    parse_mde_list,
    iter_scenarios,
    sweep_scenarios,
    scenarios_frame,
)

# Self-checks
from .sanity import CheckResult, run_self_checks  # noqa: F401

__all__ = [
    "__version__",
    "DomainError",
    # normal
    "inverse_normal_quantile",
    "norm_cdf",
    "critical_value",
    "power_critical_value",
    # power
    "SampleSizeResult",
    "two_proportion_sample_size",
    "two_mean_sample_size",
    "variation_rate",
    "mean_delta",
    # scenarios
    "ScenarioResult",
    "SweepRow",
    "bonferroni_alpha",
    "aggregate_scenario",
    "plan_proportions",
    "plan_means",
    "parse_percent_list",
    "parse_alpha_list",
    "parse_mde_list",
    "iter_scenarios",
    "sweep_scenarios",
    "scenarios_frame",
    # sanity
    "CheckResult",
    "run_self_checks",
]
