from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from .config import DEFAULTS
from .power import mean_delta, variation_rate
from .sanity import run_self_checks
from .scenarios import plan_means, plan_proportions, scenarios_frame, sweep_scenarios
from .utils import DomainError, as_report_dict, fmt_float, fmt_int, fmt_pct

logger = logging.getLogger(__name__)


def _add_common(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--power", type=float, default=DEFAULTS.power)
    ap.add_argument("--tails", type=int, choices=[1, 2], default=DEFAULTS.tails)
    ap.add_argument("--ratio", type=float, default=DEFAULTS.ratio, help="n_variation / n_control")
    ap.add_argument("--variations", type=int, default=DEFAULTS.num_variations,
                    help="Number of treatment arms compared against control")
    ap.add_argument("--bonferroni", action=argparse.BooleanOptionalAction, default=DEFAULTS.bonferroni)
    ap.add_argument("--dropoff", type=float, default=DEFAULTS.dropoff_rate, help="Drop-off rate in [0,1)")
    ap.add_argument("--daily-traffic", type=float, default=DEFAULTS.daily_traffic)
    ap.add_argument("--effect-type", choices=["relative", "absolute"], default=DEFAULTS.effect_type)
    ap.add_argument("--baseline", type=float, default=DEFAULTS.baseline_rate, help="Control conversion rate")
    ap.add_argument("--json", action="store_true", help="Print a JSON report instead of text")

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sampleplan", description="Plan A/B test sample sizes.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    single = sub.add_parser("single", help="Sample size for one parameter set")
    single.add_argument("--metric", choices=["proportion", "mean"], default="proportion")
    single.add_argument("--alpha", type=float, default=DEFAULTS.alpha)
    single.add_argument("--mde", type=float, default=DEFAULTS.mde,
                        help="Minimum detectable effect (fraction; relative or absolute)")
    single.add_argument("--mean-a", type=float, default=DEFAULTS.mean_a)
    single.add_argument("--mean-b", type=float, default=DEFAULTS.mean_b)
    single.add_argument("--sd-a", type=float, default=DEFAULTS.sd_a)
    single.add_argument("--sd-b", type=float, default=DEFAULTS.sd_b)
    _add_common(single)

    sweep = sub.add_parser("sweep", help="Scenario grid over significance levels and MDEs")
    sweep.add_argument("--alphas", type=str, default=DEFAULTS.sweep_alphas, help='Percentages, e.g. "1, 5, 10"')
    sweep.add_argument("--mdes", type=str, default=DEFAULTS.sweep_mdes, help='Percentages, e.g. "1, 3, 5"')
    _add_common(sweep)

    check = sub.add_parser("check", help="Run the built-in self-checks")
    check.add_argument("--json", action="store_true")
    return ap


def run_single(args: argparse.Namespace) -> Dict[str, Any]:
    common = dict(
        alpha=args.alpha,
        power=args.power,
        tails=args.tails,
        ratio=args.ratio,
        num_variations=args.variations,
        bonferroni=args.bonferroni,
        dropoff_rate=args.dropoff,
        daily_traffic=args.daily_traffic,
    )
    if args.metric == "proportion":
        p_b = variation_rate(args.baseline, args.mde, args.effect_type)
        res = plan_proportions(args.baseline, p_b, **common)
        effect = {"p_a": args.baseline, "p_b": p_b, "mde_abs": abs(p_b - args.baseline)}
    else:
        delta = mean_delta(args.mean_a, args.mean_b)
        if delta == 0:
            raise DomainError("mean_a and mean_b are equal; there is no effect to detect")
        res = plan_means(args.sd_a, args.sd_b, delta, **common)
        effect = {"mean_a": args.mean_a, "mean_b": args.mean_b, "delta": delta}
    return {"inputs": {"metric": args.metric, **common}, "effect": effect, "result": as_report_dict(res)}

def run_sweep(args: argparse.Namespace) -> List[Dict[str, Any]]:
    rows = sweep_scenarios(
        args.alphas,
        args.mdes,
        args.baseline,
        effect_type=args.effect_type,
        power=args.power,
        tails=args.tails,
        ratio=args.ratio,
        num_variations=args.variations,
        bonferroni=args.bonferroni,
        dropoff_rate=args.dropoff,
        daily_traffic=args.daily_traffic,
    )
    return scenarios_frame(rows).to_dict(orient="records")

def _print_single(report: Dict[str, Any]) -> None:
    res = report["result"]
    print(f"\nSample size plan ({report['inputs']['metric']})")
    print(f"Effect: {report['effect']}")
    print(f"n (control): {fmt_int(res['n_control'])}")
    print(f"n (per variation): {fmt_int(res['n_per_variation'])} x {res['num_variations']}")
    if res["total"] != res["subtotal"]:
        print(f"With drop-off: {fmt_int(res['n_control_adjusted'])} / {fmt_int(res['n_per_variation_adjusted'])}")
    print(f"Total: {fmt_int(res['total'])}")
    print(f"Duration: {fmt_float(res['days_needed'], 1)} days ({fmt_float(res['weeks_needed'], 1)} weeks)")


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "single":
            report = run_single(args)
            if args.json:
                print(json.dumps(report, indent=2))
            else:
                _print_single(report)
        elif args.command == "sweep":
            records = run_sweep(args)
            if args.json:
                print(json.dumps(records, indent=2))
            else:
                print(f"\nScenario Results ({len(records)} scenarios)")
                for r in records:
                    print(
                        f"alpha={fmt_pct(r['Significance Level (%)'] / 100, 1)} "
                        f"mde={fmt_pct(r['MDE (%)'] / 100, 1)} "
                        f"total={fmt_int(r['Total Sample Size'])} "
                        f"days={r['Duration (Days)']}"
                    )
        else:
            checks = run_self_checks()
            if args.json:
                print(json.dumps([as_report_dict(c) for c in checks], indent=2))
            else:
                for c in checks:
                    print(f"[{'PASS' if c.passed else 'FAIL'}] {c.message}")
            if not all(c.passed for c in checks):
                logger.error("self-checks failed")
                return 1
    except DomainError as exc:
        ap.error(str(exc))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
