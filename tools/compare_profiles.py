#!/usr/bin/env python3
"""
Compare two tuning profiles over recorded board snapshots.

Usage:
    python tools/compare_profiles.py --definitions data/definitions.json \\
        configs/normal.json configs/hard.json snapshots/*.json

Each snapshot is decided under both profiles with the same seed. Reports:
- How often both profiles choose the same action
- Top candidate scores under each profile
- Wilcoxon signed-rank test on the paired top scores
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
from scipy import stats

sys.path.insert(0, str(Path(__file__).parent.parent))

from drone_ai import decide_action, decide_deployment, load_definitions, load_profile, load_snapshot  # noqa: E402
from drone_ai.selector import seeded_random  # noqa: E402

logger = logging.getLogger(__name__)


def run_snapshot(snapshot_path: Path, definitions, weights, seed: int, phase: str) -> Dict[str, Any]:
    """Decide one snapshot under one profile"""
    snapshot = load_snapshot(snapshot_path, definitions)
    context = snapshot.context(definitions, weights=weights, rng=seeded_random(seed))
    decide = decide_deployment if phase == "deployment" else decide_action
    decision = decide(context)

    scores = [c.score for c in decision.log_context]
    return {
        'snapshot': snapshot_path.name,
        'choice': decision.payload.display_text if decision.payload else "pass",
        'top_score': max(scores) if scores else 0.0,
    }


def wilcoxon_test(scores_a: np.ndarray, scores_b: np.ndarray) -> Optional[float]:
    """p-value of the paired signed-rank test, None when it cannot be computed"""
    if len(scores_a) < 2 or np.allclose(scores_a, scores_b):
        return None
    try:
        _, p_value = stats.wilcoxon(scores_a, scores_b)
    except ValueError as e:
        logger.warning(f"Wilcoxon test failed: {e}")
        return None
    return float(p_value)


def compare_profiles(results_a: List[Dict[str, Any]], results_b: List[Dict[str, Any]]) -> Dict[str, Any]:
    scores_a = np.array([r['top_score'] for r in results_a], dtype=float)
    scores_b = np.array([r['top_score'] for r in results_b], dtype=float)
    agree = sum(1 for a, b in zip(results_a, results_b) if a['choice'] == b['choice'])
    total = len(results_a)

    return {
        'total': total,
        'agreement': agree / total if total else 0.0,
        'mean_top_a': float(scores_a.mean()) if total else 0.0,
        'mean_top_b': float(scores_b.mean()) if total else 0.0,
        'median_diff': float(np.median(scores_b - scores_a)) if total else 0.0,
        'p_value': wilcoxon_test(scores_a, scores_b),
        'disagreements': [
            {'snapshot': a['snapshot'], 'a': a['choice'], 'b': b['choice']}
            for a, b in zip(results_a, results_b) if a['choice'] != b['choice']
        ],
    }


def print_comparison(comparison: Dict[str, Any], name_a: str, name_b: str):
    print("\n" + "=" * 70)
    print("PROFILE COMPARISON")
    print("=" * 70)
    print(f"Snapshots:          {comparison['total']}")
    print(f"Same choice:        {comparison['agreement'] * 100:.1f}%")
    print(f"Mean top score:     {name_a} {comparison['mean_top_a']:.1f} vs {name_b} {comparison['mean_top_b']:.1f}")
    print(f"Median difference:  {comparison['median_diff']:+.1f}")

    p_value = comparison['p_value']
    if p_value is None:
        print("Wilcoxon:           N/A (too few or identical scores)")
    else:
        sig = "***" if p_value < 0.01 else "**" if p_value < 0.05 else "*" if p_value < 0.10 else ""
        print(f"Wilcoxon p-value:   {p_value:.4f} {sig}")

    if comparison['disagreements']:
        print("\nDisagreements:")
        for d in comparison['disagreements']:
            print(f"  {d['snapshot']:<30} {d['a']}  |  {d['b']}")
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(description="Compare two tuning profiles over recorded snapshots")
    parser.add_argument("profile_a", help="First profile JSON")
    parser.add_argument("profile_b", help="Second profile JSON")
    parser.add_argument("snapshots", nargs="+", help="Snapshot JSON files")
    parser.add_argument("--definitions", required=True, help="Drone/card definitions JSON")
    parser.add_argument("--seed", type=int, default=42, help="Tie-break seed (default: 42)")
    parser.add_argument("--phase", choices=["action", "deployment"], default="action")
    parser.add_argument("--json", action="store_true", help="Print the comparison as JSON")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    definitions = load_definitions(args.definitions)
    weights_a = load_profile(args.profile_a)
    weights_b = load_profile(args.profile_b)

    paths = [Path(p) for p in args.snapshots]
    results_a = [run_snapshot(p, definitions, weights_a, args.seed, args.phase) for p in paths]
    results_b = [run_snapshot(p, definitions, weights_b, args.seed, args.phase) for p in paths]

    comparison = compare_profiles(results_a, results_b)
    if args.json:
        print(json.dumps(comparison, indent=2))
    else:
        print_comparison(comparison, Path(args.profile_a).stem, Path(args.profile_b).stem)


if __name__ == "__main__":
    main()
