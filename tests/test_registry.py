"""
test_registry.py — pytest suite for registry.py
================================================
Covers: Civilization clamping and derived stats, AgentRegistry lifecycle,
the registry cap, snapshot/commit, and PendingMutations.
"""

import pytest

from chronoforge.registry import (AgentRegistry, Civilization, PendingMutations,
                                  distance)


# ─────────────────────────────────────────────────────
# Civilization
# ─────────────────────────────────────────────────────

class TestCivilization:
    def test_clamp_forces_ranges(self):
        civ = Civilization(stability=1.7, military=14.0, hatred=-3.0,
                           population=-10.0, wealth=-1.0, resource_stress=2.0)
        civ.clamp()
        assert civ.stability == 1.0
        assert civ.military == 10.0
        assert civ.hatred == 0.0
        assert civ.population == 0.0
        assert civ.wealth == 0.0
        assert civ.resource_stress == 1.0

    def test_strength_and_power(self):
        civ = Civilization(military=8.0, technology=8.0, population=10_000.0)
        assert civ.strength == pytest.approx(640.0)
        assert civ.power == pytest.approx(640_000.0)

    def test_alive_requires_active_and_people(self):
        assert Civilization().alive
        assert not Civilization(population=0.0).alive
        assert not Civilization(is_active=False).alive

    def test_traits_round_trip(self):
        civ = Civilization()
        civ.set_traits({'greed': 7.5, 'unknown': 1.0})
        assert civ.traits()['greed'] == 7.5
        assert 'unknown' not in civ.traits()

    def test_distance(self):
        a = Civilization(position=(0.0, 0.0))
        b = Civilization(position=(3.0, 4.0))
        assert distance(a, b) == pytest.approx(5.0)
        assert distance((0.0, 0.0), (0.0, 2.0)) == pytest.approx(2.0)


# ─────────────────────────────────────────────────────
# AgentRegistry
# ─────────────────────────────────────────────────────

class TestAgentRegistry:
    def test_spawn_assigns_increasing_ids(self):
        reg = AgentRegistry()
        ids = [reg.spawn(Civilization(name=n)) for n in "ABC"]
        assert ids == [1, 2, 3]
        assert [c.name for c in reg.all()] == ["A", "B", "C"]

    def test_ids_never_reused(self):
        reg = AgentRegistry()
        first = reg.spawn(Civilization())
        reg.destroy(first)
        assert reg.spawn(Civilization()) == first + 1

    def test_spawn_records_founding_population(self):
        reg = AgentRegistry()
        cid = reg.spawn(Civilization(population=3300.0))
        assert reg.get(cid).founding_population == 3300.0

    def test_spawn_at_cap_returns_none(self):
        reg = AgentRegistry(max_civilizations=2)
        reg.spawn(Civilization())
        reg.spawn(Civilization())
        assert reg.spawn(Civilization()) is None
        assert len(reg) == 2

    def test_destroy_drops_personality(self):
        reg = AgentRegistry()
        cid = reg.spawn(Civilization(), record="rec")
        assert reg.personality(cid) == "rec"
        assert reg.destroy(cid) is True
        assert reg.personality(cid) is None
        assert reg.destroy(cid) is False

    def test_snapshot_is_independent_until_commit(self):
        reg = AgentRegistry()
        cid = reg.spawn(Civilization(population=1000.0))
        snap = reg.snapshot()
        snap[0].population = 5000.0
        assert reg.get(cid).population == 1000.0
        reg.commit(snap)
        assert reg.get(cid).population == 5000.0

    def test_commit_clamps(self):
        reg = AgentRegistry()
        reg.spawn(Civilization())
        snap = reg.snapshot()
        snap[0].stability = 3.0
        reg.commit(snap)
        assert reg.all()[0].stability == 1.0

    def test_apply_destroys_before_spawns(self):
        reg = AgentRegistry(max_civilizations=2)
        a = reg.spawn(Civilization(name="A"))
        reg.spawn(Civilization(name="B"))
        pending = PendingMutations()
        pending.queue_destroy(a)
        pending.queue_spawn(Civilization(name="C"))
        spawned, destroyed = reg.apply(pending)
        assert destroyed == [a]
        assert spawned == [3]
        assert len(reg) == 2
        assert not pending

    def test_apply_drops_spawns_over_cap(self, capsys):
        reg = AgentRegistry(max_civilizations=1)
        reg.spawn(Civilization(name="A"))
        pending = PendingMutations()
        pending.queue_spawn(Civilization(name="Overflow"))
        spawned, _ = reg.apply(pending)
        assert spawned == []
        assert len(reg) == 1
        assert "spawn of Overflow dropped" in capsys.readouterr().out


# ─────────────────────────────────────────────────────
# PendingMutations
# ─────────────────────────────────────────────────────

class TestPendingMutations:
    def test_room_accounts_for_queued_changes(self):
        p = PendingMutations()
        assert p.room(13, 15) == 2
        p.queue_spawn(Civilization())
        assert p.room(13, 15) == 1
        p.queue_destroy(4)
        assert p.room(13, 15) == 2

    def test_room_never_negative(self):
        assert PendingMutations().room(20, 15) == 0

    def test_destroy_queued_once(self):
        p = PendingMutations()
        p.queue_destroy(3)
        p.queue_destroy(3)
        assert p.destroys == [3]
