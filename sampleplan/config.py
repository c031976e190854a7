"""
Default planner parameters.
Modify these to change what the CLI assumes when a flag is omitted.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlannerDefaults:
    alpha: float = 0.05              # significance level
    power: float = 0.80              # 1 - beta
    tails: int = 2
    ratio: float = 1.0               # n_variation / n_control
    baseline_rate: float = 0.05      # expected control conversion rate
    effect_type: str = "relative"
    mde: float = 0.05                # 5% relative lift
    mean_a: float = 100.0
    mean_b: float = 105.0
    sd_a: float = 15.0
    sd_b: float = 15.0
    num_variations: int = 2
    bonferroni: bool = True
    dropoff_rate: float = 0.0
    daily_traffic: float = 100_000.0
    sweep_alphas: str = "1, 5, 10"   # percent
    sweep_mdes: str = "1, 3, 5, 8"   # percent


DEFAULTS = PlannerDefaults()
