# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
conflict.py — Passes 3, 4 and 7: every way agents hurt one another.

  coalition_pass  — the weaker realms gang up on the single strongest one
  conflicts_pass  — holy wars, betrayal, and the cascades that follow
                    collapse, breakthroughs and invasions
  warfare_pass    — pairwise wars with territory conquest and annihilation

aggressive_expansion() is the conquest-driven substitute for founding
colonies once the registry is near its cap; expansion.py calls it.

Pairwise loops walk i < j over the tick's fixed snapshot, so each unordered
pair is judged once and a pair's outcome never rewrites an earlier pair.
"""

from .dice      import chance, nearest
from .history   import EventDraft
from .registry  import distance
from .territory import resolve_conquest

# ── Coalition ─────────────────────────────────────────────────────────────
COALITION_THREAT_RADIUS = 200.0
COALITION_TRIGGER       = 0.8     # coalition power / strongest power
COALITION_VICTORY       = 1.2
COALITION_RATE          = 1.0     # per year once the trigger holds

# ── Religious war ─────────────────────────────────────────────────────────
HOLY_WAR_RADIUS   = 250.0
HOLY_WAR_ZEAL     = 7.0           # instigator's minimum religion

# ── Betrayal ──────────────────────────────────────────────────────────────
BETRAYAL_RADIUS   = 200.0
BETRAYAL_RATE     = 0.001

# ── Cascades ──────────────────────────────────────────────────────────────
COLLAPSE_RADIUS   = 300.0
COLLAPSE_RATE     = 1.0           # per year while a realm is failing
TECH_SPREAD_RATE  = 0.002
TECH_SPREAD_RANGE = 400.0
WAR_SPREAD_YEARS  = 5.0
WAR_SPREAD_JOIN   = 0.3

# ── Warfare ───────────────────────────────────────────────────────────────
SMALL_PAIR_POP      = 4_000       # both below → no war
TINY_POP            = 2_000       # either below → war odds × 0.3
SMALL_LOSER_POP     = 3_000
ANNIHILATION_POP    = 1_500

# ── Aggressive expansion ──────────────────────────────────────────────────
AGGRESSION_RADIUS   = 200.0
AGGRESSOR_EDGE      = 1.5         # aggressor strength multiplier


def _war_pair_events(ctx, title, text, significance, a, category='Warfare',
                     event_type='Military', size=1.0):
    ctx.emit(EventDraft(
        title=title, description=text, event_type=event_type, category=category,
        significance=significance, location=a.position, civ_id=a.id, size=size,
    ))


def _join(names: list) -> str:
    if len(names) <= 1:
        return ''.join(names)
    return ', '.join(names[:-1]) + ' & ' + names[-1]


# ══════════════════════════════════════════════════════════════════════════
# Pass 3 — coalition wars
# ══════════════════════════════════════════════════════════════════════════

def coalition_members(strongest, others) -> list:
    members = []
    for civ in others:
        if civ is strongest:
            continue
        threatened = (distance(civ, strongest) < COALITION_THREAT_RADIUS
                      and strongest.aggressiveness > 6)
        ambitious  = civ.ambition > 7 and civ.military > 5
        fearful    = civ.paranoia > 6 and strongest.population > civ.population * 2
        if threatened or ambitious or fearful:
            members.append(civ)
    return members


def coalition_pass(ctx, dt: float) -> None:
    live = ctx.live()
    if len(live) < 3:
        return
    strongest = max(live, key=lambda c: c.power)
    max_power = strongest.power
    if max_power < ctx.cfg.get('coalition_power_floor', 50_000):
        return
    members = coalition_members(strongest, live)
    coalition_power = sum(m.power for m in members)
    if len(members) < 2 or coalition_power < max_power * COALITION_TRIGGER:
        return
    if not chance(ctx.rng, COALITION_RATE, dt):
        return

    names = _join([m.name for m in members])
    if coalition_power > max_power * COALITION_VICTORY:
        strongest.population *= 0.4
        strongest.wealth     *= 0.2
        strongest.stability   = 0.1
        strongest.military   *= 0.5
        spoils = strongest.wealth * 0.1
        for m in members:
            m.wealth   += spoils
            m.military += 0.5
            m.pride    += 1.0
            ctx.record(m).wars_won += 1
        ctx.record(strongest).wars_lost += 1
        strongest.lost_wars += 1
        outcome = (f"The coalition of {names} shattered the might of "
                   f"{strongest.name}.")
    else:
        strongest.population *= 0.8
        strongest.wealth     *= 0.7
        strongest.stability   = max(0.2, strongest.stability - 0.3)
        for m in members:
            m.population *= 0.7
            m.wealth     *= 0.6
            m.stability   = max(0.1, m.stability - 0.4)
            m.hatred     += 2.0
            m.lost_wars  += 1
            ctx.record(m).wars_lost += 1
        strongest.successful_wars += 1
        ctx.record(strongest).wars_won += 1
        outcome = (f"{strongest.name} withstood the coalition of {names}, "
                   f"though the victory cost it dearly.")
    _war_pair_events(ctx, f"The Grand Coalition against {strongest.name}",
                     outcome, 5.0, strongest, category='Coalition', size=3.0)


# ══════════════════════════════════════════════════════════════════════════
# Pass 4 — religious wars, betrayal, cascades
# ══════════════════════════════════════════════════════════════════════════

def holy_war_rate(a, b) -> float:
    rate = 0.0
    if abs(a.religion - b.religion) > 4:
        rate += 0.08
    if a.religion > 8 and a.military > 6:
        rate += 0.12
    if a.aggressiveness > 5 and a.religion > 7:
        rate += 0.15
    return rate


def _holy_war(ctx, a, b) -> None:
    rng = ctx.rng
    sa = a.military * a.religion * a.population / 1000.0
    sb = b.military * b.religion * b.population / 1000.0
    winner, loser = (a, b) if sa >= sb else (b, a)
    p0       = loser.population
    loss     = rng.uniform(0.3, 0.6)
    transfer = rng.uniform(0.4, 0.7)

    winner.population += p0 * 0.05
    winner.wealth     += loser.wealth * transfer
    winner.religion   += 1.0
    winner.military   += 0.8
    winner.successful_wars += 1

    loser.population = p0 * (1.0 - loss)
    loser.wealth    *= 1.0 - transfer
    loser.stability  = max(0.1, loser.stability - 0.5)
    loser.religion  -= 2.0
    loser.hatred    += 3.0
    loser.lost_wars += 1
    loser.times_attacked += 1
    loser.last_attacked_year = ctx.year

    ctx.record(winner).wars_won += 1
    ctx.record(winner).religious_events += 1
    ctx.record(loser).wars_lost += 1
    _war_pair_events(
        ctx, f"Holy War of {winner.name}",
        f"Zealots of {winner.name} crushed the faithless of {loser.name}, "
        f"who lost {loss:.0%} of their people.",
        4.5, winner, category='Religion', event_type='Religious', size=2.0)


def _betrayal(ctx, betrayer, live) -> bool:
    victim = next((c for c in live
                   if c is not betrayer
                   and distance(c, betrayer) < BETRAYAL_RADIUS
                   and c.wealth > betrayer.wealth * 1.5), None)
    if victim is None:
        return False
    stolen = victim.wealth * ctx.rng.uniform(0.3, 0.6)
    victim.wealth   -= stolen
    betrayer.wealth += stolen
    betrayer.greed  += 1.0
    betrayer.pride  += 0.5
    betrayer.times_betrayed += 1
    victim.paranoia     += 2.0
    victim.hatred       += 2.5
    victim.vengefulness += 2.0
    victim.stability     = max(0.1, victim.stability - 0.3)
    victim.times_betrayed += 1
    ctx.record(betrayer).betrayals_committed += 1
    ctx.record(victim).betrayals_suffered += 1
    _war_pair_events(
        ctx, f"The Betrayal of {victim.name}",
        f"{betrayer.name} broke faith with {victim.name} and made off with "
        f"{stolen:,.0f} in treasure.",
        3.5, betrayer, category='Betrayal', event_type='Political')
    return True


def _collapse_cascade(ctx, source, live) -> None:
    hit = []
    for d, other in nearest(source, live, COLLAPSE_RADIUS):
        e = 1.0 - d / COLLAPSE_RADIUS
        other.stability = max(0.1, other.stability - 0.2 * e)
        other.trade    -= e
        other.wealth   *= 1.0 - 0.1 * e
        other.paranoia += e
        hit.append(other.name)
    if hit:
        _war_pair_events(
            ctx, f"Shockwaves from {source.name}",
            f"The unraveling of {source.name} shook {_join(hit)}.",
            3.0, source, category='Collapse', event_type='Political')


def _tech_spread(ctx, source, live) -> None:
    rng = ctx.rng
    reached = []
    for other in live:
        if other is source:
            continue
        p = max(0.0, 1.0 - distance(source, other) / TECH_SPREAD_RANGE)
        if other.trade > 5:
            p += 0.3
        if rng.random() < min(1.0, p):
            boost = rng.uniform(0.5, 2.0)
            other.technology += boost
            other.military   += boost * 0.5
            reached.append(other.name)
    if reached:
        _war_pair_events(
            ctx, f"The Knowledge of {source.name} Spreads",
            f"Discoveries born in {source.name} reached {_join(reached)}.",
            2.5, source, category='Discovery', event_type='Cultural')


def _war_spread(ctx, victim, live) -> None:
    rng = ctx.rng
    joined = []
    for other in live:
        if other is victim:
            continue
        d = distance(other, victim)
        ally        = d < 150 and other.diplomacy > 6
        kin         = abs(other.culture - victim.culture) < 2
        opportunist = other.aggressiveness > 7 and other.military > 6
        if (ally or kin or opportunist) and rng.random() < WAR_SPREAD_JOIN:
            other.military       += 1.0
            other.aggressiveness += 0.5
            other.stability      -= 0.1
            joined.append(other.name)
    if joined:
        _war_pair_events(
            ctx, f"The War for {victim.name} Widens",
            f"{_join(joined)} took up arms in the conflict around {victim.name}.",
            2.0, victim)


def conflicts_pass(ctx, dt: float) -> None:
    rng  = ctx.rng
    live = ctx.live()

    # Religious wars: zealous instigator a against a neighbour b
    for i, a in enumerate(live):
        for b in live[i + 1:]:
            if not (a.alive and b.alive):
                continue
            zealot, other = (a, b) if a.religion >= b.religion else (b, a)
            if zealot.religion < HOLY_WAR_ZEAL or distance(a, b) > HOLY_WAR_RADIUS:
                continue
            if chance(rng, holy_war_rate(zealot, other), dt):
                _holy_war(ctx, zealot, other)

    # Betrayal
    for civ in live:
        rate = (civ.greed + civ.ambition + civ.desperation) / 10.0 * BETRAYAL_RATE
        if civ.alive and chance(rng, rate, dt):
            _betrayal(ctx, civ, live)

    # Cascades
    for civ in live:
        if (civ.stability < 0.15 and civ.population > 8_000
                and chance(rng, COLLAPSE_RATE, dt)):
            _collapse_cascade(ctx, civ, live)
        if civ.technology > 9 and chance(rng, TECH_SPREAD_RATE, dt):
            _tech_spread(ctx, civ, live)
        if (civ.times_attacked > 0 and civ.last_attacked_year >= 0
                and ctx.year - civ.last_attacked_year <= WAR_SPREAD_YEARS
                and chance(rng, 1.0, dt)):
            _war_spread(ctx, civ, live)


# ══════════════════════════════════════════════════════════════════════════
# Pass 7 — warfare
# ══════════════════════════════════════════════════════════════════════════

def war_rate(a, b) -> float:
    """Per-year war odds for a pair, before the 1.0 cap and dt scaling."""
    if a.population < SMALL_PAIR_POP and b.population < SMALL_PAIR_POP:
        return 0.0
    rate = 0.0
    if abs(a.wealth - b.wealth) > 3000:
        rate += 0.05
    if abs(a.technology - b.technology) > 3:
        rate += 0.08
    if a.stability < 0.3 or b.stability < 0.3:
        rate += 0.1
    if a.aggressiveness > 6 or b.aggressiveness > 6:
        rate += 0.15
    if (a.desperation > 5 and a.greed > 4) or (b.desperation > 5 and b.greed > 4):
        rate += 0.2
    if (a.hatred > 6 and a.vengefulness > 5) or (b.hatred > 6 and b.vengefulness > 5):
        rate += 0.25
    if a.resource_stress > 0.8 or b.resource_stress > 0.8:
        rate += 0.12
    rate += max(a.aggressiveness, b.aggressiveness) / 10.0 * 0.1
    rate += max(a.desperation, b.desperation) / 10.0 * 0.15
    if a.population > 10_000 and b.population > 10_000:
        rate *= 2.0
    if a.population < TINY_POP or b.population < TINY_POP:
        rate *= 0.3
    return rate


def pick_winner(a, b):
    """(winner, loser) by military × technology × population; ties to a."""
    return (a, b) if a.strength >= b.strength else (b, a)


def resolve_war(ctx, winner, loser) -> None:
    rng  = ctx.rng
    p0   = loser.population            # every population effect keys off this
    w0   = loser.wealth
    stab0 = loser.stability
    small = p0 < SMALL_LOSER_POP
    if small:
        loss, transfer = rng.uniform(0.15, 0.35), rng.uniform(0.2, 0.4)
    else:
        loss, transfer = rng.uniform(0.25, 0.55), rng.uniform(0.3, 0.7)
    desperate = loser.desperation > 7 or winner.aggressiveness > 8
    vengeful  = loser.vengefulness > 6 or winner.hatred > 6
    if desperate:
        loss *= 1.5
        transfer *= 1.3
    if vengeful:
        loss *= 1.4
    loss     = min(1.0, loss)
    transfer = min(1.0, transfer)

    winner.population += p0 * 0.1
    winner.wealth     += w0 * transfer
    winner.military       += 0.5
    winner.aggressiveness += 0.5
    winner.pride          += 0.8
    winner.ambition       += 0.3
    winner.successful_wars += 1

    loser.population = p0 * (1.0 - loss)
    loser.wealth     = w0 * (1.0 - transfer)
    loser.stability  = max(0.2, stab0 - (0.15 if small else 0.3))
    loser.defensiveness += 1.0
    loser.paranoia      += 0.8
    loser.hatred        += 1.2
    loser.vengefulness  += 1.0
    loser.times_attacked += 1
    loser.lost_wars      += 1
    loser.last_attacked_year = ctx.year

    if loss > 0.2 or transfer > 0.4:
        loser.has_been_humiliated = True
        loser.hatred       += 2.0
        loser.vengefulness += 1.5

    ctx.record(winner).wars_won += 1
    ctx.record(loser).wars_lost += 1

    for draft in resolve_conquest(ctx.territories, winner, loser, rng):
        ctx.emit(draft)

    if loser.population <= ANNIHILATION_POP or loss > 0.7 or stab0 < 0.1:
        winner.wealth += loser.wealth
        winner.pride  += 3.0
        winner.aggressiveness += 1.0
        loser.wealth = 0.0
        ctx.kill(loser)
        _war_pair_events(
            ctx, f"Fall of {loser.name}",
            f"{winner.name} utterly destroyed {loser.name}; its last "
            f"{p0 * (1.0 - loss):,.0f} people were scattered or enslaved.",
            4.5, winner, category='Conquest', size=2.0)
        return

    kind = 'desperate ' if desperate else 'vengeful ' if vengeful else ''
    _war_pair_events(
        ctx, f"War between {winner.name} and {loser.name}",
        f"{winner.name} won a {kind}war against {loser.name}, who lost "
        f"{loss:.0%} of their people and {transfer:.0%} of their wealth.",
        2.0, winner)


def warfare_pass(ctx, dt: float) -> None:
    rng    = ctx.rng
    radius = ctx.cfg.get('conflict_radius', 150.0)
    civs   = ctx.civs
    for i, a in enumerate(civs):
        for b in civs[i + 1:]:
            if not (a.alive and b.alive):
                continue
            if distance(a, b) > radius:
                continue
            if chance(rng, war_rate(a, b), dt):
                winner, loser = pick_winner(a, b)
                resolve_war(ctx, winner, loser)


# ══════════════════════════════════════════════════════════════════════════
# Aggressive expansion (called from the expansion pass near the cap)
# ══════════════════════════════════════════════════════════════════════════

def aggressive_expansion(ctx, dt: float) -> None:
    rng  = ctx.rng
    live = ctx.live()
    for agg in live:
        if not agg.alive:
            continue
        if not (agg.population > 10_000 and agg.wealth > 6_000 and agg.stability > 0.7):
            continue
        for _, target in nearest(agg, live, AGGRESSION_RADIUS):
            if target.population >= agg.population * 0.6:
                continue
            rate = (agg.population / max(target.population, 1000.0)
                    * (agg.population / 15_000 * agg.wealth / 8_000) * 0.1)
            if not chance(rng, rate, dt):
                continue
            if agg.strength * AGGRESSOR_EDGE > target.strength:
                agg.population += target.population * 0.7
                agg.wealth     += target.wealth * 0.8
                agg.military   += 0.8
                agg.prestige   += 2.0
                agg.successful_wars += 1
                ctx.record(agg).wars_won += 1
                for draft in resolve_conquest(ctx.territories, agg, target, rng):
                    ctx.emit(draft)
                target.wealth = 0.0
                ctx.kill(target)
                _war_pair_events(
                    ctx, f"{agg.name} Annexes {target.name}",
                    f"{agg.name} swallowed its weaker neighbour {target.name} whole.",
                    3.5, agg, category='Conquest')
            else:
                agg.population *= 0.85
                agg.wealth     *= 0.8
                agg.stability   = max(0.2, agg.stability - 0.2)
                agg.lost_wars  += 1
                target.population *= 0.9
                target.military   += 0.5
                target.stability  += 0.1
                target.successful_wars += 1
                target.times_attacked  += 1
                target.last_attacked_year = ctx.year
                ctx.record(agg).wars_lost += 1
                _war_pair_events(
                    ctx, f"{target.name} Repels {agg.name}",
                    f"{target.name} threw back an invasion from {agg.name}.",
                    2.5, target)
            break                              # one action per aggressor
