"""
test_territory.py — pytest suite for territory.py
==================================================
Covers: the TerritoryStore constructors, ruin naming, conquest versus
destruction in resolve_conquest, and release of a dead owner's holdings.
"""

import pytest

from chronoforge.registry  import Civilization
from chronoforge.territory import TerritoryStore, resolve_conquest, ruin


def _pair():
    winner = Civilization(id=1, name="Tor", military=6.0, position=(0.0, 0.0))
    loser  = Civilization(id=2, name="Fen", position=(50.0, 0.0))
    return winner, loser


# ─────────────────────────────────────────────────────
# Store
# ─────────────────────────────────────────────────────

class TestStore:
    def test_found_city_defaults(self):
        store = TerritoryStore()
        city = store.found_city("Fen  Hold", 2, (1.0, 2.0), population=300.0)
        assert city.name == "Fen Hold"
        assert city.kind == 'City'
        assert city.control_radius == 50.0
        assert city.original_name == "Fen Hold"
        assert city.original_owner_id == 2

    def test_ids_increase(self):
        store = TerritoryStore()
        a = store.build_structure("A", 1, (0, 0), 'Temple')
        b = store.build_structure("B", 1, (0, 0), 'Academy')
        assert (a.id, b.id) == (1, 2)
        assert a.control_radius == 30.0

    def test_owned_by_excludes_ruins(self):
        store = TerritoryStore()
        keep = store.found_city("Keep", 1, (0, 0))
        gone = store.found_city("Gone", 1, (0, 0))
        ruin(gone)
        assert store.owned_by(1) == [keep]
        assert store.ruins() == [gone]

    def test_release_owned(self):
        store = TerritoryStore()
        store.found_city("A", 3, (0, 0))
        store.build_structure("B", 3, (0, 0), 'Palace')
        store.found_city("C", 4, (0, 0))
        assert store.release_owned(3) == 2
        assert store.owned_by(3) == []
        assert len(store.owned_by(4)) == 1


# ─────────────────────────────────────────────────────
# ruin
# ─────────────────────────────────────────────────────

class TestRuin:
    @pytest.mark.parametrize("kind,expected", [
        ('City',        "Ruins of Karis"),
        ('Temple',      "Ruined Temple of Karis"),
        ('Monument',    "Fallen Monument of Karis"),
        ('Wonder',      "Lost Wonder of Karis"),
        ('Academy',     "Abandoned Academy of Karis"),
        ('Marketplace', "Desolate Market of Karis"),
        ('Palace',      "Ancient Ruins of Karis"),
    ])
    def test_prefix_by_kind(self, kind, expected):
        store = TerritoryStore()
        terr = store.build_structure("Karis", 7, (0, 0), kind, defense=3.0, wealth=50.0)
        ruin(terr)
        assert terr.name == expected
        assert terr.kind == 'Ruins'
        assert terr.owner_id is None
        assert terr.is_ruined
        assert terr.original_name == "Karis"
        assert terr.original_owner_id == 7
        assert (terr.population, terr.wealth, terr.defense) == (0.0, 0.0, 0.0)

    def test_ruin_name_truncated(self):
        terr = TerritoryStore().found_city("Karis Hold of the Long Shore", 1, (0, 0))
        ruin(terr, max_len=20)
        assert len(terr.name) <= 20


# ─────────────────────────────────────────────────────
# resolve_conquest
# ─────────────────────────────────────────────────────

class TestResolveConquest:
    def test_city_conquered_and_renamed(self, scripted):
        winner, loser = _pair()
        store = TerritoryStore()
        city = store.found_city("Fen Hold", loser.id, loser.position)
        [draft] = resolve_conquest(store, winner, loser, scripted([0.1, 0.9]))
        assert city.owner_id == winner.id
        assert city.name == "Tor Fen Hold"
        assert city.defense == pytest.approx(1.8)
        assert draft.title == "Conquest of Fen Hold"
        assert draft.significance == 1.5

    def test_city_destroyed(self, scripted):
        winner, loser = _pair()
        store = TerritoryStore()
        city = store.found_city("Fen Hold", loser.id, loser.position)
        [draft] = resolve_conquest(store, winner, loser, scripted([0.1, 0.1]))
        assert city.name == "Ruins of Fen Hold"
        assert city.original_owner_id == loser.id
        assert draft.title == "Destruction of Fen Hold"

    def test_wonder_destruction_is_more_significant(self, scripted):
        winner, loser = _pair()
        store = TerritoryStore()
        store.build_structure("Colossus of Fen", loser.id, loser.position, 'Wonder')
        [draft] = resolve_conquest(store, winner, loser, scripted([0.1, 0.1]))
        assert draft.significance == 3.5

    def test_unaffected_holding_untouched(self, scripted):
        winner, loser = _pair()
        store = TerritoryStore()
        city = store.found_city("Fen Hold", loser.id, loser.position)
        assert resolve_conquest(store, winner, loser, scripted([0.7])) == []
        assert city.owner_id == loser.id

    def test_distant_holdings_not_at_stake(self, scripted):
        winner, loser = _pair()
        store = TerritoryStore()
        store.found_city("Far Hold", loser.id, (400.0, 0.0))
        rng = scripted([0.0, 0.0])
        assert resolve_conquest(store, winner, loser, rng) == []
        assert rng.remaining == 2

    def test_non_city_keeps_name_when_taken(self, scripted):
        winner, loser = _pair()
        store = TerritoryStore()
        temple = store.build_structure("Spire of Fen", loser.id, loser.position, 'Temple')
        resolve_conquest(store, winner, loser, scripted([0.1, 0.9]))
        assert temple.owner_id == winner.id
        assert temple.name == "Spire of Fen"
