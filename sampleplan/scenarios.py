"""
sampleplan/scenarios.py

Turns raw per-group sample sizes into a plan:
  - Bonferroni correction of alpha for multiple variations
  - rounding, variation-count aggregation and drop-off inflation
  - duration from daily traffic
  - scenario sweeps over a grid of significance levels and MDEs

Dependencies:
  - pandas (tabular view of a sweep)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Union
import logging
import math
import re

import pandas as pd

from .power import (
    EffectType,
    SampleSizeResult,
    two_mean_sample_size,
    two_proportion_sample_size,
    variation_rate,
)
from .utils import (
    DomainError,
    check_dropoff,
    check_non_negative,
    check_probability,
    check_variations,
)

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7.0

# leading number of an entry, so "5%" reads as 5
_LEADING_NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


# -------------------------
# Single scenario
# -------------------------

@dataclass(frozen=True)
class ScenarioResult:
    n_control: int
    n_per_variation: int
    subtotal: int
    n_control_adjusted: int
    n_per_variation_adjusted: int
    total: int
    num_variations: int
    days_needed: float
    weeks_needed: float
    bonferroni: bool = False

def _ceil_positive(x: float) -> int:
    return max(0, math.ceil(x))

def bonferroni_alpha(alpha: float, num_variations: int = 1, enabled: bool = True) -> float:
    """
    Significance level per comparison. Must be applied to the alpha passed
    to the sample-size formula, never to its output.
    """
    alpha = check_probability("alpha", alpha)
    k = check_variations(num_variations)
    return alpha / k if enabled else alpha

def aggregate_scenario(
    raw: SampleSizeResult,
    num_variations: int = 1,
    bonferroni: bool = False,
    dropoff_rate: float = 0.0,
    daily_traffic: float = 0.0,
) -> ScenarioResult:
    """
    Round raw group sizes up, multiply out the variations, inflate for
    drop-off and convert the final total into days and weeks.

    Zero traffic means "unknown", so the duration is reported as 0.
    """
    k = check_variations(num_variations)
    d = check_dropoff(dropoff_rate)
    traffic = check_non_negative("daily_traffic", daily_traffic)
    if not (math.isfinite(raw.n_a) and math.isfinite(raw.n_b)):
        raise DomainError("raw sample sizes must be finite (is the effect size zero?)")

    n_control = _ceil_positive(raw.n_a)
    n_per_variation = _ceil_positive(raw.n_b)
    subtotal = n_control + n_per_variation * k

    if d > 0:
        n_control_adj = _ceil_positive(n_control / (1 - d))
        n_per_variation_adj = _ceil_positive(n_per_variation / (1 - d))
        total = n_control_adj + n_per_variation_adj * k
    else:
        n_control_adj, n_per_variation_adj = n_control, n_per_variation
        total = subtotal

    if traffic > 0:
        days = total / traffic
    else:
        logger.warning("daily_traffic is 0: duration reported as 0 days")
        days = 0.0
    logger.debug("aggregated: control=%d per_variation=%d k=%d dropoff=%s total=%d days=%.2f",
                 n_control, n_per_variation, k, d, total, days)

    return ScenarioResult(
        n_control=n_control,
        n_per_variation=n_per_variation,
        subtotal=subtotal,
        n_control_adjusted=n_control_adj,
        n_per_variation_adjusted=n_per_variation_adj,
        total=total,
        num_variations=k,
        days_needed=days,
        weeks_needed=days / DAYS_PER_WEEK,
        bonferroni=bool(bonferroni),
    )

def plan_proportions(
    p_a: float,
    p_b: float,
    alpha: float = 0.05,
    power: float = 0.8,
    tails: int = 2,
    ratio: float = 1.0,
    num_variations: int = 1,
    bonferroni: bool = False,
    dropoff_rate: float = 0.0,
    daily_traffic: float = 0.0,
) -> ScenarioResult:
    alpha_used = bonferroni_alpha(alpha, num_variations, bonferroni)
    raw = two_proportion_sample_size(p_a, p_b, alpha_used, power, tails, ratio)
    return aggregate_scenario(raw, num_variations, bonferroni, dropoff_rate, daily_traffic)

def plan_means(
    sd_a: float,
    sd_b: float,
    delta: float,
    alpha: float = 0.05,
    power: float = 0.8,
    tails: int = 2,
    ratio: float = 1.0,
    num_variations: int = 1,
    bonferroni: bool = False,
    dropoff_rate: float = 0.0,
    daily_traffic: float = 0.0,
) -> ScenarioResult:
    alpha_used = bonferroni_alpha(alpha, num_variations, bonferroni)
    raw = two_mean_sample_size(sd_a, sd_b, delta, alpha_used, power, tails, ratio)
    return aggregate_scenario(raw, num_variations, bonferroni, dropoff_rate, daily_traffic)


# -------------------------
# Free-text lists
# -------------------------

def parse_percent_list(text: str, upper: Optional[float] = None) -> List[float]:
    """
    "1, 5, 10" -> [0.01, 0.05, 0.10].

    Each entry is read up to the end of its leading number ("5%" -> 5).
    Entries without one, or that are <= 0 or >= upper (when given), are dropped. Never raises; an all-invalid list comes back empty.
    """
    out: List[float] = []
    for raw in str(text).split(","):
        token = raw.strip()
        if not token:
            continue
        match = _LEADING_NUMBER.match(token)
        if match is None:
            logger.debug("dropping non-numeric entry %r", token)
            continue
        value = float(match.group(0)) / 100.0
        if not math.isfinite(value) or value <= 0 or (upper is not None and value >= upper):
            logger.debug("dropping out-of-range entry %r", token)
            continue
        out.append(value)
    return out

def parse_alpha_list(text: str) -> List[float]:
    return parse_percent_list(text, upper=1.0)

def parse_mde_list(text: str) -> List[float]:
    return parse_percent_list(text)


# -------------------------
# Sweeps
# -------------------------

@dataclass(frozen=True)
class SweepRow:
    alpha: float
    mde: float
    control_rate: float
    variation_rate: float
    alpha_used: float
    result: ScenarioResult

def iter_scenarios(
    alphas: Union[str, Iterable[float]],
    mdes: Union[str, Iterable[float]],
    baseline: float,
    effect_type: EffectType = "relative",
    power: float = 0.8,
    tails: int = 2,
    ratio: float = 1.0,
    num_variations: int = 1,
    bonferroni: bool = False,
    dropoff_rate: float = 0.0,
    daily_traffic: float = 0.0,
) -> Iterator[SweepRow]:
    """
    One scenario per (alpha, mde) pair, alphas in the outer loop and MDEs in
    the inner loop, both in input order. Strings are parsed as comma-separated
    percentages. MDEs that push the variation rate out of (0,1) are skipped.
    """
    alpha_list = parse_alpha_list(alphas) if isinstance(alphas, str) else list(alphas)
    mde_list = parse_mde_list(mdes) if isinstance(mdes, str) else list(mdes)

    for alpha in alpha_list:
        alpha_used = bonferroni_alpha(alpha, num_variations, bonferroni)
        for mde in mde_list:
            p_b = variation_rate(baseline, mde, effect_type)
            if not (0.0 < p_b < 1.0):
                logger.debug("dropping mde %r: variation rate %s outside (0,1)", mde, p_b)
                continue
            raw = two_proportion_sample_size(baseline, p_b, alpha_used, power, tails, ratio)
            yield SweepRow(
                alpha=alpha,
                mde=mde,
                control_rate=baseline,
                variation_rate=p_b,
                alpha_used=alpha_used,
                result=aggregate_scenario(raw, num_variations, bonferroni, dropoff_rate, daily_traffic),
            )

def sweep_scenarios(*args, **kwargs) -> List[SweepRow]:
    rows = list(iter_scenarios(*args, **kwargs))
    logger.info("sweep produced %d scenarios", len(rows))
    return rows

SWEEP_COLUMNS = [
    "Significance Level (%)",
    "MDE (%)",
    "Control Rate (%)",
    "Variation Rate (%)",
    "Number of Variations",
    "n (Control)",
    "n (per Variation)",
    "Total Sample Size",
    "Duration (Days)",
    "Duration (Weeks)",
]

def scenarios_frame(rows: Sequence[SweepRow]) -> pd.DataFrame:
    """
    Sweep as a table, in percent units. Group sizes are the drop-off
    adjusted ones; days are rounded up and weeks kept to one decimal.
    """
    records = []
    for row in rows:
        res = row.result
        records.append({
            "Significance Level (%)": 100.0 * row.alpha,
            "MDE (%)": 100.0 * row.mde,
            "Control Rate (%)": 100.0 * row.control_rate,
            "Variation Rate (%)": 100.0 * row.variation_rate,
            "Number of Variations": res.num_variations,
            "n (Control)": res.n_control_adjusted,
            "n (per Variation)": res.n_per_variation_adjusted,
            "Total Sample Size": res.total,
            "Duration (Days)": math.ceil(res.days_needed),
            "Duration (Weeks)": round(res.weeks_needed, 1),
        })
    return pd.DataFrame(records, columns=SWEEP_COLUMNS)
