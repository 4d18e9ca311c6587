# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
metrics.py — Per-Tick Metrics Logger for Chronoforge runs.

Collects per-tick world metrics and every historical event, writing them to
CSV files for later analysis.  A run-level summary row is appended to
data/run_summaries.csv at the end.  Write failures are swallowed: a full disk
must never stop the simulation.
"""

import csv
import os
import time
from pathlib import Path

_CSV_ERRORS = (OSError, ValueError, csv.Error)   # ValueError: write to closed file


class MetricsLogger:
    """Per-tick world statistics and the event stream, as CSV files per seed."""

    METRICS_HEADER = [
        'seed', 'tick', 'year', 'civ_count', 'total_population',
        'total_wealth', 'mean_stability', 'mean_technology', 'gini',
        'active_arcs', 'territories', 'ruins', 'religions',
        'events_this_tick', 'total_wars', 'total_emergences',
        'total_collapses',
    ]
    EVENTS_HEADER = [
        'seed', 'tick', 'year', 'event_id', 'event_type', 'category',
        'significance', 'civ_id', 'title',
    ]
    SUMMARY_HEADER = [
        'seed', 'condition', 'ticks', 'final_year', 'final_civ_count',
        'peak_civ_count', 'final_population', 'peak_population',
        'total_events', 'total_wars', 'total_emergences', 'total_collapses',
        'total_constructions', 'arcs_concluded', 'mean_gini', 'final_gini',
        'wall_clock_seconds',
    ]

    def __init__(self, seed: int, condition: str, output_dir: str = "data"):
        self.seed       = seed
        self.condition  = condition
        self.output_dir = output_dir

        Path(output_dir).mkdir(parents=True, exist_ok=True)

        self._metrics_path = os.path.join(output_dir, f"metrics_seed_{seed}.csv")
        self._events_path  = os.path.join(output_dir, f"events_seed_{seed}.csv")

        self._metrics_fh = open(self._metrics_path, 'w', newline='', encoding='utf-8')
        self._events_fh  = open(self._events_path, 'w', newline='', encoding='utf-8')
        self._metrics_writer = csv.writer(self._metrics_fh)
        self._events_writer  = csv.writer(self._events_fh)

        self._metrics_writer.writerow(self.METRICS_HEADER)
        self._metrics_fh.flush()
        self._events_writer.writerow(self.EVENTS_HEADER)
        self._events_fh.flush()

        # Cumulative counters
        self.total_events        = 0
        self.total_wars          = 0
        self.total_emergences    = 0
        self.total_collapses     = 0
        self.total_constructions = 0
        self._tick_events        = 0
        self._tick               = 0

        # Running stats for finalize
        self._peak_population = 0.0
        self._peak_civ_count  = 0
        self._gini_values: list = []
        self._last_year       = 0.0

        self.start_time = time.time()

    # ──────────────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────────────

    @staticmethod
    def gini(values) -> float:
        """Gini coefficient of a list of non-negative values."""
        vals = sorted(max(0.0, v) for v in values)
        n = len(vals)
        if n == 0:
            return 0.0
        total = sum(vals)
        if total == 0:
            return 0.0
        cum = sum((2 * (i + 1) - n - 1) * v for i, v in enumerate(vals))
        return round(cum / (n * total), 4)

    # ──────────────────────────────────────────────────────────────────────
    # Per-tick recording
    # ──────────────────────────────────────────────────────────────────────

    def record_tick(self, tick, year, registry, territories, arcs=()):
        """One metrics row for tick *t*: census, territory and inequality."""
        try:
            civs = [c for c in registry.all() if c.alive]
            n = len(civs)
            pop    = sum(c.population for c in civs)
            wealth = sum(c.wealth for c in civs)
            mean_stab = round(sum(c.stability for c in civs) / n, 4) if n else 0.0
            mean_tech = round(sum(c.technology for c in civs) / n, 4) if n else 0.0
            gini = self.gini([c.wealth for c in civs])

            self._peak_population = max(self._peak_population, pop)
            self._peak_civ_count  = max(self._peak_civ_count, n)
            self._gini_values.append(gini)
            self._last_year = year

            owned = [t for t in territories.territories if not t.is_ruined]
            self._metrics_writer.writerow([
                self.seed, tick, round(year, 2), n, round(pop, 1),
                round(wealth, 1), mean_stab, mean_tech, gini,
                len(arcs), len(owned), len(territories.ruins()),
                len(territories.religions),
                self._tick_events, self.total_wars, self.total_emergences,
                self.total_collapses,
            ])
            self._tick_events = 0
            self._tick = tick

            # Flush every 100 ticks
            if tick % 100 == 0:
                self._metrics_fh.flush()

        except _CSV_ERRORS:
            pass  # a lost row must not stop the run

    # ──────────────────────────────────────────────────────────────────────
    # Event recording (registered as a HistoryLog sink)
    # ──────────────────────────────────────────────────────────────────────

    def record_event(self, rec):
        """Writes one CSV row per EventRecord and bumps the counters."""
        self.total_events += 1
        self._tick_events += 1
        if rec.category in ('Warfare', 'Coalition'):
            self.total_wars += 1
        elif rec.category == 'Revolution':
            self.total_emergences += 1
        elif rec.category == 'Collapse':
            self.total_collapses += 1
        elif rec.category == 'Construction':
            self.total_constructions += 1
        try:
            self._events_writer.writerow([
                self.seed, self._tick + 1, round(rec.year, 2), rec.id,
                rec.event_type, rec.category, round(rec.significance, 3),
                rec.civ_id if rec.civ_id is not None else '', rec.title,
            ])
        except _CSV_ERRORS:
            pass

    __call__ = record_event

    # ──────────────────────────────────────────────────────────────────────
    # Finalize — run-level summary
    # ──────────────────────────────────────────────────────────────────────

    def finalize(self, registry, arcs_concluded: int = 0):
        """Append this run's totals to the shared run_summaries.csv
        (header written only when the file is new).
        """
        try:
            wall_clock = round(time.time() - self.start_time, 2)
            civs = [c for c in registry.all() if c.alive]

            mean_gini = final_gini = 0.0
            if self._gini_values:
                mean_gini  = round(sum(self._gini_values) / len(self._gini_values), 4)
                final_gini = self._gini_values[-1]

            summary_path = os.path.join(self.output_dir, "run_summaries.csv")
            file_exists  = os.path.isfile(summary_path)
            with open(summary_path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                if not file_exists:
                    writer.writerow(self.SUMMARY_HEADER)
                writer.writerow([
                    self.seed, self.condition, self._tick, round(self._last_year, 2),
                    len(civs), self._peak_civ_count,
                    round(sum(c.population for c in civs), 1),
                    round(self._peak_population, 1),
                    self.total_events, self.total_wars, self.total_emergences,
                    self.total_collapses, self.total_constructions,
                    arcs_concluded, mean_gini, final_gini, wall_clock,
                ])

        except _CSV_ERRORS:
            pass

    # ──────────────────────────────────────────────────────────────────────
    # Cleanup
    # ──────────────────────────────────────────────────────────────────────

    def close(self):
        """Close both per-seed files; finalize() should run first."""
        for fh in (self._metrics_fh, self._events_fh):
            try:
                fh.flush()
                fh.close()
            except _CSV_ERRORS:
                pass
