"""
test_run_experiments.py — pytest suite for run_experiments.py
==============================================================
Covers: seed ranges, plan loading, command shape, output verification
and the per-condition comparison table.
"""

import json
import sys

import run_experiments
from run_experiments import build_command, parse_seed_range, verify_outputs


class TestParseSeedRange:
    def test_range(self):
        assert parse_seed_range("1-5") == [1, 2, 3, 4, 5]

    def test_list(self):
        assert parse_seed_range("1,3,5,10") == [1, 3, 5, 10]

    def test_single(self):
        assert parse_seed_range("42") == [42]

    def test_mixed(self):
        assert parse_seed_range("1-3, 7") == [1, 2, 3, 7]


class TestBuildCommand:
    def test_shape(self):
        cmd = build_command(3, 'no_wars', 100, ['--disable', 'warfare'], 'out')
        assert cmd[:3] == [sys.executable, '-m', 'chronoforge']
        assert cmd[cmd.index('--seed') + 1] == '3'
        assert cmd[cmd.index('--condition') + 1] == 'no_wars'
        assert cmd[cmd.index('--metrics-dir') + 1] == 'out'
        assert cmd[cmd.index('--chronicle') + 1] == ''
        assert '--no-dashboard' in cmd
        assert cmd[-2:] == ['--disable', 'warfare']


class TestVerifyOutputs:
    def _plan(self, tmp_path):
        plan = tmp_path / "plan.json"
        plan.write_text(json.dumps({"conditions": [{"name": "base", "seeds": "1-2"}]}),
                        encoding='utf-8')
        return str(plan)

    def test_missing_reported(self, tmp_path, capsys):
        assert verify_outputs(self._plan(tmp_path), str(tmp_path / "data")) is False
        assert "missing output" in capsys.readouterr().out

    def test_all_present(self, tmp_path, capsys):
        data = tmp_path / "data"
        data.mkdir()
        for seed in (1, 2):
            for stem in ('metrics', 'events'):
                (data / f"{stem}_seed_{seed}.csv").write_text("x\n", encoding='utf-8')
        (data / "run_summaries.csv").write_text("x\n", encoding='utf-8')
        assert verify_outputs(self._plan(tmp_path), str(data)) is True

    def test_run_batch_records_failures(self, monkeypatch):
        def boom(*args, **kwargs):
            raise OSError("no interpreter")
        monkeypatch.setattr(run_experiments.subprocess, 'run', boom)
        results = run_experiments.run_batch([1, 2], 'base', 10, [])
        assert [r['ok'] for r in results] == [False, False]
        assert [r['seed'] for r in results] == [1, 2]


class TestPlanAndCompare:
    def test_load_plan_defaults(self, tmp_path):
        plan = tmp_path / "plan.json"
        plan.write_text(json.dumps({
            "default_years": 50,
            "conditions": [{"name": "a", "seeds": "1-2"},
                           {"name": "b", "seeds": "4", "years": 10,
                            "extra_args": "--disable warfare"}]}), encoding='utf-8')
        assert run_experiments.load_plan(str(plan)) == [
            ("a", [1, 2], 50, []),
            ("b", [4], 10, ["--disable", "warfare"]),
        ]

    def test_compare_averages_per_condition(self, tmp_path, capsys):
        rows = ["seed,condition,total_wars,final_civ_count",
                "1,base,2,4", "2,base,4,6", "3,calm,0,5"]
        (tmp_path / "run_summaries.csv").write_text("\n".join(rows) + "\n",
                                                     encoding='utf-8')
        table = run_experiments.compare_conditions(str(tmp_path))
        assert table["base"]["total_wars"] == 3.0
        assert table["base"]["final_civ_count"] == 5.0
        assert table["calm"]["total_wars"] == 0.0
        assert "calm" in capsys.readouterr().out
