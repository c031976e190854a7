# tests/test_scenarios.py
import logging
import math

import pytest

from sampleplan.power import SampleSizeResult, two_proportion_sample_size, variation_rate
from sampleplan.scenarios import (
    SWEEP_COLUMNS,
    aggregate_scenario,
    bonferroni_alpha,
    parse_alpha_list,
    parse_mde_list,
    parse_percent_list,
    plan_means,
    plan_proportions,
    scenarios_frame,
    sweep_scenarios,
)
from sampleplan.utils import DomainError


def test_bonferroni_alpha():
    assert bonferroni_alpha(0.05, 2, enabled=True) == pytest.approx(0.025)
    assert bonferroni_alpha(0.05, 2, enabled=False) == pytest.approx(0.05)
    assert bonferroni_alpha(0.05, 1, enabled=True) == pytest.approx(0.05)


def test_aggregate_rounds_up_and_multiplies_variations():
    raw = SampleSizeResult(100.2, 100.2, 200.4)
    res = aggregate_scenario(raw, num_variations=3)
    assert res.n_control == 101
    assert res.n_per_variation == 101
    assert res.subtotal == 101 + 101 * 3
    assert res.total == res.subtotal
    assert res.days_needed == 0.0
    assert res.weeks_needed == 0.0


def test_aggregate_no_dropoff_total_is_exact_subtotal():
    raw = two_proportion_sample_size(0.05, 0.06)
    res = aggregate_scenario(raw, num_variations=2, dropoff_rate=0.0)
    assert res.total == res.n_control + res.n_per_variation * 2
    assert res.n_control_adjusted == res.n_control
    assert res.n_per_variation_adjusted == res.n_per_variation


def test_aggregate_dropoff_inflates_each_group_then_sums():
    raw = SampleSizeResult(100.0, 100.0, 200.0)
    res = aggregate_scenario(raw, num_variations=2, dropoff_rate=0.5)
    assert res.n_control_adjusted == 200
    assert res.n_per_variation_adjusted == 200
    assert res.total == 200 + 200 * 2
    assert res.subtotal == 300
    assert res.total >= res.subtotal


@pytest.mark.parametrize("d", [0.01, 0.1, 0.33, 0.5, 0.9])
def test_aggregate_dropoff_never_below_subtotal(d):
    raw = two_proportion_sample_size(0.05, 0.055)
    res = aggregate_scenario(raw, num_variations=2, dropoff_rate=d)
    assert res.total >= res.subtotal


def test_aggregate_duration_from_traffic():
    raw = SampleSizeResult(700.0, 700.0, 1400.0)
    res = aggregate_scenario(raw, num_variations=1, daily_traffic=100)
    assert res.total == 1400
    assert res.days_needed == pytest.approx(14.0)
    assert res.weeks_needed == pytest.approx(2.0)


def test_aggregate_zero_raw_is_zero_plan():
    res = aggregate_scenario(SampleSizeResult(0.0, 0.0, 0.0), num_variations=2, dropoff_rate=0.1, daily_traffic=10)
    assert res.total == 0
    assert res.days_needed == 0.0


@pytest.mark.parametrize("kwargs", [
    dict(num_variations=0),
    dict(num_variations=1.5),
    dict(dropoff_rate=1.0),
    dict(dropoff_rate=-0.1),
    dict(daily_traffic=-5),
])
def test_aggregate_domain_errors(kwargs):
    with pytest.raises(DomainError):
        aggregate_scenario(SampleSizeResult(10.0, 10.0, 20.0), **kwargs)


def test_aggregate_rejects_unbounded_sizes():
    with pytest.raises(DomainError):
        aggregate_scenario(SampleSizeResult(math.inf, math.inf, math.inf))


def test_plan_proportions_applies_bonferroni_before_formula():
    corrected = plan_proportions(0.05, 0.06, alpha=0.05, num_variations=2, bonferroni=True)
    raw = two_proportion_sample_size(0.05, 0.06, alpha=0.025)
    assert corrected.n_control == math.ceil(raw.n_a)
    assert corrected.bonferroni is True

    plain = plan_proportions(0.05, 0.06, alpha=0.05, num_variations=2, bonferroni=False)
    assert plain.n_control < corrected.n_control


def test_plan_end_to_end_golden():
    res = plan_proportions(0.05, 0.055, alpha=0.05, power=0.8, tails=2, ratio=1.0,
                           num_variations=1, bonferroni=False, dropoff_rate=0.0)
    raw = two_proportion_sample_size(0.05, 0.055)
    assert res.n_control == math.ceil(raw.n_a)
    assert 30240 <= res.n_control <= 30250
    assert res.total == 2 * res.n_control


def test_plan_means_refuses_zero_delta():
    with pytest.raises(DomainError):
        plan_means(15, 15, 0.0)


def test_plan_means_basic():
    res = plan_means(15, 15, 5, num_variations=2, daily_traffic=100)
    assert res.n_control == 142
    assert res.total == 142 * 3
    assert res.days_needed == pytest.approx(4.26)


def test_parse_percent_list():
    assert parse_percent_list("1, 5, 10") == pytest.approx([0.01, 0.05, 0.10])
    assert parse_percent_list(" 2.5 ,, 7 ") == pytest.approx([0.025, 0.07])


def test_parse_drops_invalid_entries():
    assert parse_mde_list("abc, 5, -3") == pytest.approx([0.05])
    assert parse_alpha_list("abc, 5, -3") == pytest.approx([0.05])


def test_parse_alpha_upper_bound():
    # 100% and above are not significance levels
    assert parse_alpha_list("5, 100, 150") == pytest.approx([0.05])
    assert parse_mde_list("5, 100, 150") == pytest.approx([0.05, 1.0, 1.5])


def test_parse_all_invalid_is_empty():
    assert parse_alpha_list("abc, nan, inf, 0, -1") == []
    assert parse_mde_list("") == []


def test_sweep_row_major_order():
    rows = sweep_scenarios("1,5,10", "1,3,5", baseline=0.05)
    assert len(rows) == 9
    alphas = [0.01, 0.05, 0.10]
    mdes = [0.01, 0.03, 0.05]
    for i, row in enumerate(rows):
        assert row.alpha == pytest.approx(alphas[i // 3])
        assert row.mde == pytest.approx(mdes[i % 3])
        assert row.control_rate == pytest.approx(0.05)
        assert row.variation_rate == pytest.approx(0.05 * (1 + mdes[i % 3]))


def test_sweep_sizes_shrink_along_both_axes():
    rows = sweep_scenarios([0.01, 0.05], [0.02, 0.04], baseline=0.1)
    totals = [r.result.total for r in rows]
    # larger MDE -> smaller; larger alpha -> smaller
    assert totals[1] < totals[0]
    assert totals[2] < totals[0]
    assert totals[3] < totals[2]


def test_sweep_with_bonferroni_uses_corrected_alpha():
    rows = sweep_scenarios("5", "5", baseline=0.05, num_variations=4, bonferroni=True)
    assert rows[0].alpha_used == pytest.approx(0.0125)
    single = plan_proportions(0.05, variation_rate(0.05, 0.05), alpha=0.05, num_variations=4, bonferroni=True)
    assert rows[0].result == single


def test_sweep_absolute_effect():
    rows = sweep_scenarios("5", "1", baseline=0.05, effect_type="absolute")
    assert rows[0].variation_rate == pytest.approx(0.06)


def test_sweep_all_invalid_is_empty():
    assert sweep_scenarios("abc", "1, 2", baseline=0.05) == []


def test_scenarios_frame():
    rows = sweep_scenarios("5, 10", "3", baseline=0.05, num_variations=2, dropoff_rate=0.1, daily_traffic=1000)
    df = scenarios_frame(rows)
    assert list(df.columns) == SWEEP_COLUMNS
    assert len(df) == 2
    first = df.iloc[0]
    assert first["Significance Level (%)"] == pytest.approx(5.0)
    assert first["MDE (%)"] == pytest.approx(3.0)
    assert first["n (Control)"] == rows[0].result.n_control_adjusted
    assert first["Total Sample Size"] == rows[0].result.total
    assert first["Duration (Days)"] == math.ceil(rows[0].result.days_needed)


def test_scenarios_frame_empty():
    df = scenarios_frame([])
    assert df.empty
    assert list(df.columns) == SWEEP_COLUMNS


def test_parse_reads_leading_number():
    assert parse_alpha_list("1%, 5%, 10%") == pytest.approx([0.01, 0.05, 0.10])
    assert parse_mde_list("5abc, 2.5 %, .5") == pytest.approx([0.05, 0.025, 0.005])
    assert parse_mde_list("%, abc, 1e999") == []


def test_sweep_skips_mde_outside_unit_interval():
    # 150% relative lift on 0.5 would be a 1.25 rate
    rows = sweep_scenarios("5", "10, 150, 20", baseline=0.5)
    assert [r.mde for r in rows] == pytest.approx([0.10, 0.20])
    assert all(0 < r.variation_rate < 1 for r in rows)


def test_sweep_skips_out_of_range_for_every_alpha():
    rows = sweep_scenarios("1, 5", "150, 10", baseline=0.5)
    assert len(rows) == 2
    assert [r.alpha for r in rows] == pytest.approx([0.01, 0.05])


def test_sweep_absolute_mde_below_zero_rate_skipped():
    rows = sweep_scenarios([0.05], [-0.10, 0.01], baseline=0.05, effect_type="absolute")
    assert [r.variation_rate for r in rows] == pytest.approx([0.06])


def test_aggregate_zero_traffic_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="sampleplan.scenarios"):
        res = aggregate_scenario(SampleSizeResult(10.0, 10.0, 20.0), daily_traffic=0)
    assert res.days_needed == 0.0
    assert "daily_traffic is 0" in caplog.text
