"""
test_dashboard_bridge.py — pytest suite for dashboard_bridge.py
================================================================
Covers: the JSON snapshot's contents, the atomic write, bounded feeds, and
the rolling population history.
"""

import collections
import json

from chronoforge import dashboard_bridge
from chronoforge.dashboard_bridge import EVENT_TAIL, grid_to_world, write_dashboard_snapshot
from chronoforge.registry  import AgentRegistry, Civilization
from chronoforge.territory import TerritoryStore


def _world():
    reg = AgentRegistry()
    reg.spawn(Civilization(name="Small", population=1000.0))
    reg.spawn(Civilization(name="Large", population=9000.0))
    reg.spawn(Civilization(name="Gone", is_active=False))
    store = TerritoryStore()
    store.found_city("Large Hold", 2, (10.0, 10.0))
    return reg, store


class TestSnapshot:
    def test_atomic_write_leaves_no_tmp(self, tmp_path, flat_terrain):
        reg, store = _world()
        path = tmp_path / "dash.json"
        write_dashboard_snapshot(20, 10.0, reg, store, flat_terrain, [], [0.01], ["x"], path)
        assert path.exists()
        assert not (tmp_path / "dash.tmp").exists()

    def test_contents(self, tmp_path, flat_terrain):
        reg, store = _world()
        path = tmp_path / "dash.json"
        write_dashboard_snapshot(20, 10.0, reg, store, flat_terrain, [],
                                 [0.01, 0.01], [f"line {i}" for i in range(60)], path)
        snap = json.loads(path.read_text(encoding='utf-8'))
        assert snap['tick'] == 20
        assert snap['alive'] == 2
        assert [c['name'] for c in snap['civs']] == ["Large", "Small"]
        assert snap['civs'][0]['stage'] == 'Unknown'
        assert snap['territories'][0]['owner_id'] == 2
        assert len(snap['event_tail']) == 40
        assert snap['tick_rate'] == 100.0
        assert len(snap['biome_grid']) == 48
        assert snap['biomes'][snap['biome_grid'][0][0]] == 'Plains'

    def test_accepts_bounded_feeds(self, tmp_path, flat_terrain):
        reg, store = _world()
        path = tmp_path / "dash.json"
        feed = collections.deque((f"line {i}" for i in range(100)), maxlen=EVENT_TAIL)
        times = collections.deque([0.02] * 50, maxlen=30)
        write_dashboard_snapshot(20, 10.0, reg, store, flat_terrain, [], times, feed, path)
        snap = json.loads(path.read_text(encoding='utf-8'))
        assert snap['event_tail'][0] == "line 60"
        assert snap['event_tail'][-1] == "line 99"
        assert snap['tick_rate'] == 50.0

    def test_population_history_rolls(self, tmp_path, flat_terrain):
        reg, store = _world()
        path = tmp_path / "dash.json"
        for t in (20, 40, 60):
            write_dashboard_snapshot(t, t / 2, reg, store, flat_terrain, [], [], [], path)
        snap = json.loads(path.read_text(encoding='utf-8'))
        assert [h['tick'] for h in snap['pop_history']] == [20, 40, 60]
        assert snap['pop_history'][-1]['populations'] == {"Small": 1000.0, "Large": 9000.0}
        dashboard_bridge.reset_history()
        write_dashboard_snapshot(80, 40.0, reg, store, flat_terrain, [], [], [], path)
        snap = json.loads(path.read_text(encoding='utf-8'))
        assert len(snap['pop_history']) == 1

    def test_grid_is_centred(self):
        x0, y0 = grid_to_world(0, 0)
        x1, y1 = grid_to_world(47, 47)
        assert x0 == -x1
        assert y0 == -y1
