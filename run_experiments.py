#!/usr/bin/env python3
# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
run_experiments.py — Seed sweeps and condition comparisons for Chronoforge.

Each run is a separate `python -m chronoforge` process so hash randomisation
and module state never leak between seeds.  Outputs land in --output-dir:
metrics_seed_N.csv, events_seed_N.csv and one shared run_summaries.csv.

    python run_experiments.py --seeds 1-5
    python run_experiments.py --seeds 1-20 --condition no_emergence \\
        --extra-args "--disable emergence"
    python run_experiments.py --plan experiments.json
    python run_experiments.py --plan experiments.json --verify
    python run_experiments.py --compare --output-dir data

A plan file lists conditions; anything a condition omits falls back to the
plan-level defaults:

    {"default_years": 500,
     "conditions": [{"name": "baseline", "seeds": "1-10"},
                    {"name": "no_wars", "seeds": "1-10",
                     "extra_args": "--disable warfare --disable coalition_wars"}]}
"""

import argparse
import csv
import json
import os
import subprocess
import sys
import time
from collections import defaultdict
from statistics import mean


DEFAULT_YEARS   = 500
DEFAULT_SEEDS   = '1-5'
MIN_TIMEOUT_S   = 600
STDERR_TAIL     = 10
MISSING_SHOWN   = 20

# Columns of run_summaries.csv averaged per condition by --compare
COMPARE_COLUMNS = ('final_civ_count', 'peak_population', 'total_wars',
                   'total_emergences', 'total_collapses', 'arcs_concluded',
                   'final_gini')


# ════════════════════════════════════════════════════════════════════════════
# Plan handling
# ════════════════════════════════════════════════════════════════════════════

def parse_seed_range(spec: str) -> list:
    """'1-3, 7' → [1, 2, 3, 7].  Ranges are inclusive."""
    out = []
    for chunk in (c.strip() for c in spec.split(',')):
        if not chunk:
            continue
        first, sep, last = chunk.partition('-')
        if sep:
            out += list(range(int(first), int(last) + 1))
        else:
            out.append(int(first))
    return out


def _split_args(extra) -> list:
    return extra.split() if isinstance(extra, str) else list(extra or [])


def load_plan(plan_path: str) -> list:
    """Read a plan file into (name, seeds, years, extra_args) tuples."""
    with open(plan_path, 'r', encoding='utf-8') as f:
        plan = json.load(f)
    years = plan.get('default_years', DEFAULT_YEARS)
    return [
        (c['name'],
         parse_seed_range(str(c.get('seeds', DEFAULT_SEEDS))),
         c.get('years', years),
         _split_args(c.get('extra_args')))
        for c in plan.get('conditions', [])
    ]


# ════════════════════════════════════════════════════════════════════════════
# Execution
# ════════════════════════════════════════════════════════════════════════════

def build_command(seed: int, condition: str, years: float, extra_args: list,
                  output_dir: str = 'data') -> list:
    # Batch runs never write a chronicle or dashboard snapshot
    cmd = [sys.executable, '-m', 'chronoforge',
           '--seed', str(seed), '--condition', condition, '--years', str(years),
           '--metrics-dir', output_dir, '--no-dashboard', '--chronicle', '']
    return cmd + list(extra_args)


def _result(seed, condition, ok, elapsed=0.0, returncode=-1) -> dict:
    return {'seed': seed, 'condition': condition, 'ok': ok,
            'elapsed': elapsed, 'returncode': returncode}


def run_single(seed: int, condition: str, years: float,
               extra_args: list, output_dir: str = 'data') -> dict:
    """Run one seed to completion; raises TimeoutExpired / OSError."""
    started = time.time()
    print(f'  {condition:<16} seed {seed:>4} ', end='', flush=True)
    proc = subprocess.run(
        build_command(seed, condition, years, extra_args, output_dir),
        capture_output=True, text=True, encoding='utf-8', errors='replace',
        timeout=max(MIN_TIMEOUT_S, int(years)),
    )
    elapsed = round(time.time() - started, 1)
    ok = proc.returncode == 0
    print(f'{"ok" if ok else "failed rc=" + str(proc.returncode):<12} {elapsed:>7.1f}s')
    if not ok:
        for line in (proc.stderr or '').strip().splitlines()[-STDERR_TAIL:]:
            print(f'      > {line}')
    return _result(seed, condition, ok, elapsed, proc.returncode)


def run_batch(seeds: list, condition: str, years: float,
              extra_args: list, output_dir: str = 'data') -> list:
    results = []
    for seed in seeds:
        try:
            res = run_single(seed, condition, years, extra_args, output_dir)
        except subprocess.TimeoutExpired:
            print('timed out')
            res = _result(seed, condition, False)
        except OSError as exc:
            print(f'could not start ({exc})')
            res = _result(seed, condition, False)
        results.append(res)
    return results


def _tally(results: list) -> str:
    ok = sum(r['ok'] for r in results)
    spent = sum(r['elapsed'] for r in results)
    return f'{ok}/{len(results)} succeeded in {spent:.0f}s'


def run_from_plan(plan_path: str, output_dir: str = 'data') -> list:
    conditions = load_plan(plan_path)
    print(f'\n[Plan] {plan_path}: {len(conditions)} condition(s) → {output_dir}/')
    everything = []
    for name, seeds, years, extra in conditions:
        print(f'\n── {name} · {len(seeds)} seeds · {years} years ──')
        batch = run_batch(seeds, name, years, extra, output_dir)
        print(f'  {_tally(batch)}')
        everything += batch
    print(f'\n[Plan] overall: {_tally(everything)}')
    return everything


# ════════════════════════════════════════════════════════════════════════════
# Post-run checks
# ════════════════════════════════════════════════════════════════════════════

def verify_outputs(plan_path: str, output_dir: str = 'data') -> bool:
    """True when every planned seed left its metrics and events CSVs."""
    expected = [os.path.join(output_dir, 'run_summaries.csv')]
    for _name, seeds, _years, _extra in load_plan(plan_path):
        expected += [os.path.join(output_dir, f'{stem}_seed_{seed}.csv')
                     for seed in seeds for stem in ('metrics', 'events')]

    missing = [p for p in expected if not os.path.isfile(p)]
    if not missing:
        print(f'  ✓ {len(expected)} expected output files present.')
        return True
    print(f'\n  ✗ {len(missing)} missing output(s):')
    for path in missing[:MISSING_SHOWN]:
        print(f'    {path}')
    if len(missing) > MISSING_SHOWN:
        print(f'    (+{len(missing) - MISSING_SHOWN} more)')
    return False


def compare_conditions(output_dir: str = 'data') -> dict:
    """Average the run summaries per condition and print a table."""
    path = os.path.join(output_dir, 'run_summaries.csv')
    grouped = defaultdict(lambda: defaultdict(list))
    with open(path, newline='', encoding='utf-8') as f:
        for row in csv.DictReader(f):
            for col in COMPARE_COLUMNS:
                try:
                    grouped[row['condition']][col].append(float(row[col]))
                except (KeyError, TypeError, ValueError):
                    continue

    table = {cond: {col: round(mean(vals), 3) for col, vals in cols.items() if vals}
             for cond, cols in grouped.items()}

    print('\n' + 'condition'.ljust(18) + ''.join(c[:14].rjust(15) for c in COMPARE_COLUMNS))
    for cond in sorted(table):
        cells = ''.join(f'{table[cond].get(c, float("nan")):>15.2f}' for c in COMPARE_COLUMNS)
        print(cond[:17].ljust(18) + cells)
    return table


# ════════════════════════════════════════════════════════════════════════════
# CLI
# ════════════════════════════════════════════════════════════════════════════

def main(argv=None):
    ap = argparse.ArgumentParser(description='Chronoforge seed sweeps')
    ap.add_argument('--seeds', help='"1-100", "1,5,10" or "42"')
    ap.add_argument('--condition', default='baseline', help='label stored with every row')
    ap.add_argument('--years', type=float, default=DEFAULT_YEARS,
                    help=f'simulated years per run (default {DEFAULT_YEARS})')
    ap.add_argument('--extra-args', default='', help='quoted extra flags for the sim')
    ap.add_argument('--output-dir', default='data', help='CSV directory (default data)')
    ap.add_argument('--plan', help='experiment plan JSON')
    ap.add_argument('--verify', action='store_true', help='check outputs of --plan')
    ap.add_argument('--compare', action='store_true',
                    help='average run_summaries.csv per condition')
    args = ap.parse_args(argv)

    if args.compare:
        compare_conditions(args.output_dir)
        return
    if args.plan and args.verify:
        sys.exit(0 if verify_outputs(args.plan, args.output_dir) else 1)
    if args.plan:
        results = run_from_plan(args.plan, args.output_dir)
    elif args.seeds:
        seeds = parse_seed_range(args.seeds)
        print(f'\n── {args.condition} · {len(seeds)} seeds · {args.years:g} years ──')
        results = run_batch(seeds, args.condition, args.years,
                            _split_args(args.extra_args), args.output_dir)
        print(f'  {_tally(results)}')
    else:
        ap.print_help()
        sys.exit(1)
    if not all(r['ok'] for r in results):
        sys.exit(1)


if __name__ == '__main__':
    main()
