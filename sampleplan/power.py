from dataclasses import dataclass
from typing import Literal
import logging
import math

from .normal import critical_value, power_critical_value
from .utils import (
    DomainError,
    check_finite,
    check_non_negative,
    check_positive,
    check_probability,
)

logger = logging.getLogger(__name__)

EffectType = Literal["relative", "absolute"]

@dataclass(frozen=True)
class SampleSizeResult:
    n_a: float
    n_b: float
    total: float

def variation_rate(baseline: float, mde: float, effect_type: EffectType = "relative") -> float:
    """
    Expected variation rate for a baseline rate and a minimum detectable effect.
    relative: baseline * (1 + mde); absolute: baseline + mde.
    """
    baseline = check_probability("baseline", baseline)
    mde = check_finite("mde", mde)
    if effect_type == "relative":
        return baseline * (1.0 + mde)
    if effect_type == "absolute":
        return baseline + mde
    raise DomainError("effect_type must be 'relative' or 'absolute'")

def mean_delta(mean_a: float, mean_b: float) -> float:
    return abs(check_finite("mean_b", mean_b) - check_finite("mean_a", mean_a))

def two_proportion_sample_size(
    p_a: float,
    p_b: float,
    alpha: float = 0.05,
    power: float = 0.8,
    tails: int = 2,
    ratio: float = 1.0,   # n_b / n_a
) -> SampleSizeResult:
    """
    Per-group sample sizes for comparing two proportions (unpooled variance).

    Equal proportions are the degenerate case: no effect to detect, so all
    sizes are zero. Sizes are real valued; rounding happens at aggregation.
    """
    p_a = check_probability("p_a", p_a)
    p_b = check_probability("p_b", p_b)
    ratio = check_positive("ratio", ratio)

    delta = abs(p_b - p_a)
    if delta == 0:
        logger.warning("p_a == p_b (%s): no effect to detect, sample size is zero", p_a)
        return SampleSizeResult(0.0, 0.0, 0.0)

    za = critical_value(alpha, tails)
    zb = power_critical_value(power)

    var_a = p_a * (1 - p_a)
    var_b = p_b * (1 - p_b)
    term_alpha = za * math.sqrt(var_a * (1 + 1 / ratio))
    term_beta = zb * math.sqrt(var_a + var_b / ratio)

    n_a = (term_alpha + term_beta) ** 2 / delta ** 2
    n_b = ratio * n_a
    return SampleSizeResult(n_a, n_b, n_a + n_b)

def two_mean_sample_size(
    sd_a: float,
    sd_b: float,
    delta: float,
    alpha: float = 0.05,
    power: float = 0.8,
    tails: int = 2,
    ratio: float = 1.0,   # n_b / n_a
) -> SampleSizeResult:
    """
    Per-group sample sizes for comparing two means.

    There is no zero-effect guard here: delta == 0 gives infinite sizes,
    and callers are expected to refuse that input before aggregating.
    """
    sd_a = check_positive("sd_a", sd_a)
    sd_b = check_positive("sd_b", sd_b)
    delta = check_non_negative("delta", delta)
    ratio = check_positive("ratio", ratio)

    za = critical_value(alpha, tails)
    zb = power_critical_value(power)

    if delta == 0:
        logger.warning("delta == 0: sample size for means is unbounded")
        return SampleSizeResult(math.inf, math.inf, math.inf)

    n_a = (za + zb) ** 2 * (sd_a ** 2 + sd_b ** 2 / ratio) / delta ** 2
    n_b = ratio * n_a
    return SampleSizeResult(n_a, n_b, n_a + n_b)
