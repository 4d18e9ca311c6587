"""
test_events.py — pytest suite for events.py (passes 1 and 2)
=============================================================
Covers: each world event's effect on every living agent, the disaster's
per-realm hit roll, the world-event rate gate, heroic leader archetypes and
their record bookkeeping, and the big-realm leader bonus.
"""

import pytest

from chronoforge.events   import (DISASTER_NAMES, Leader, WorldEvent, heroic_leaders_pass,
                                  world_events_pass)
from chronoforge.registry import Civilization


def _pick(rng, wanted):
    """Make rng.choice return *wanted* whenever it is on offer."""
    rng.choice = lambda seq: wanted if wanted in seq else seq[0]
    return rng


# ─────────────────────────────────────────────────────
# World events
# ─────────────────────────────────────────────────────

class TestWorldEvents:
    def test_plague_strikes_everyone(self, make_ctx, scripted):
        a = Civilization(name="Oss")
        b = Civilization(name="Ruun", position=(500.0, 0.0))
        rng = _pick(scripted([0.0, 0.5, 0.25]), WorldEvent.PLAGUE)
        ctx = make_ctx(a, b, rng=rng, overrides={'world_event_rate': 1.0})

        world_events_pass(ctx, 1.0)

        assert a.population == pytest.approx(1_200.0)     # 1 − U(.2,.6) at .5
        assert b.population == pytest.approx(1_400.0)     # at .25
        for civ in (a, b):
            assert civ.stability == pytest.approx(0.4)
            assert civ.wealth == pytest.approx(900.0)
            assert civ.trade == pytest.approx(-2.5)
            assert ctx.record(civ).disasters == 1
        assert len(ctx.drafts) == 1
        assert ctx.drafts[0].title == "The Plague"
        assert ctx.drafts[0].category == 'Disaster'
        assert ctx.drafts[0].significance == 5.0

    def test_disaster_spares_the_lucky(self, make_ctx, scripted):
        hit  = Civilization(name="Oss", population=5_000.0, wealth=2_000.0)
        miss = Civilization(name="Ruun", position=(500.0, 0.0))
        # gate, then hit-roll 0.1 + two uniforms for Oss, hit-roll 0.9 for Ruun
        rng = _pick(scripted([0.0, 0.1, 0.5, 0.5, 0.9]), WorldEvent.DISASTER)
        ctx = make_ctx(hit, miss, rng=rng, overrides={'world_event_rate': 1.0})

        world_events_pass(ctx, 1.0)

        assert hit.population == pytest.approx(2_750.0)   # U(.3,.8) at .5
        assert hit.wealth == pytest.approx(800.0)         # U(.2,.6) at .5
        assert hit.stability == pytest.approx(0.3)
        assert miss.population == 2_000.0
        assert miss.stability == 0.8
        assert ctx.record(hit).disasters == 1
        assert ctx.record(miss).disasters == 0
        draft = ctx.drafts[0]
        assert draft.title == f"The {DISASTER_NAMES[0]}"
        assert "1 realm(s)" in draft.description
        assert draft.significance == 4.5

    def test_golden_age_counts_as_achievement(self, make_ctx, scripted):
        civ = Civilization(name="Oss")
        rng = _pick(scripted([0.0]), WorldEvent.GOLDEN_AGE)
        ctx = make_ctx(civ, rng=rng, overrides={'world_event_rate': 1.0})

        world_events_pass(ctx, 1.0)

        assert civ.wealth == pytest.approx(2_250.0)
        assert civ.technology == pytest.approx(4.0)
        assert civ.stability == pytest.approx(1.1)        # clamped by the engine
        assert ctx.record(civ).cultural_achievements == 1
        assert ctx.drafts[0].category == 'Golden Age'
        assert rng.remaining == 0

    def test_rate_gates_the_event(self, make_ctx, scripted):
        civ = Civilization(name="Oss")
        rng = scripted([0.6])
        ctx = make_ctx(civ, rng=rng, overrides={'world_event_rate': 1.0})
        world_events_pass(ctx, 0.5)
        assert ctx.drafts == []
        assert civ.population == 2_000.0

    def test_no_event_without_living_agents(self, make_ctx, scripted):
        civ = Civilization(name="Oss", is_active=False)
        rng = scripted([0.0])
        ctx = make_ctx(civ, rng=rng, overrides={'world_event_rate': 1.0})
        world_events_pass(ctx, 1.0)
        assert ctx.drafts == []
        assert rng.remaining == 1


# ─────────────────────────────────────────────────────
# Heroic leaders
# ─────────────────────────────────────────────────────

class TestHeroicLeaders:
    def test_conqueror_zeal_is_temporary(self, make_ctx, scripted):
        civ = Civilization(name="Oss")
        rng = _pick(scripted([0.0]), Leader.CONQUEROR)
        ctx = make_ctx(civ, rng=rng, overrides={'leader_rate': 1.0})

        heroic_leaders_pass(ctx, 1.0)

        assert civ.military == pytest.approx(4.0)
        assert civ.aggressiveness == pytest.approx(4.0)
        assert civ.ambition == pytest.approx(6.0)
        assert civ.population == pytest.approx(2_400.0)
        assert ctx.record(civ).modifiers == {'aggressiveness': 2.0, 'ambition': 2.0}
        draft = ctx.drafts[0]
        assert draft.category == 'Hero'
        assert draft.title.endswith("the Conqueror")
        assert draft.civ_id == civ.id

    def test_philosopher_is_an_achievement(self, make_ctx, scripted):
        civ = Civilization(name="Oss")
        rng = _pick(scripted([0.0]), Leader.PHILOSOPHER)
        ctx = make_ctx(civ, rng=rng, overrides={'leader_rate': 1.0})

        heroic_leaders_pass(ctx, 1.0)

        assert civ.culture == pytest.approx(4.0)
        assert civ.technology == pytest.approx(3.5)
        assert ctx.record(civ).cultural_achievements == 1
        assert ctx.record(civ).modifiers == {}

    def test_prophet_is_a_religious_event(self, make_ctx, scripted):
        civ = Civilization(name="Oss")
        rng = _pick(scripted([0.0]), Leader.PROPHET)
        ctx = make_ctx(civ, rng=rng, overrides={'leader_rate': 1.0})
        heroic_leaders_pass(ctx, 1.0)
        assert civ.religion == pytest.approx(4.5)
        assert ctx.record(civ).religious_events == 1

    def test_big_realm_odds_double(self, make_ctx, scripted):
        # p = 20000/10000 × 0.5 × 0.0001 = 0.0001, doubled above 15000
        small = Civilization(name="Oss", population=14_000.0, stability=0.5)
        big   = Civilization(name="Ruun", population=20_000.0, stability=0.5,
                             position=(500.0, 0.0))
        rng = _pick(scripted([0.00015, 0.00015]), Leader.BUILDER)
        ctx = make_ctx(small, big, rng=rng, overrides={'leader_rate': 0.0001})

        heroic_leaders_pass(ctx, 1.0)

        assert len(ctx.drafts) == 1
        assert ctx.drafts[0].civ_id == big.id
        assert big.production == pytest.approx(4.0)

    def test_quiet_realm_has_no_leader(self, make_ctx, scripted):
        civ = Civilization(name="Oss")
        ctx = make_ctx(civ, rng=scripted([0.5]))
        heroic_leaders_pass(ctx, 1.0)
        assert ctx.drafts == []
