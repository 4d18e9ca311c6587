# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
growth.py — Pass 6: population, carrying capacity, resources, wealth,
technology and stability.

Call order per agent:
  catastrophe check → growth rate → population → resources → technology
  → wealth → stability → milestones

The catastrophe check runs on the state the agent enters the pass with, so
a realm that already stands past the threshold collapses this tick no matter
what growth would have done.
"""

from .history import EventDraft
from .terrain import cultural_multiplier

# ── Growth rate tiers: (population below, base rate) ──────────────────────
GROWTH_TIERS = (
    (1_000,  0.12),
    (3_000,  0.08),
    (8_000,  0.05),
    (20_000, 0.02),
)
GROWTH_RATE_HUGE = -0.01
RATE_MIN, RATE_MAX = -0.15, 0.20
POPULATION_FLOOR   = 100.0

# ── Carrying capacity ─────────────────────────────────────────────────────
# Checked in order; the first specialization above SPECIALIST wins.
SPECIALIST = 6.0
BASE_CAPACITY = (
    ('trade',      8_000),
    ('military',   6_000),
    ('religion',   7_000),
    ('technology', 9_000),
    ('culture',    7_500),
)
BASE_CAPACITY_DEFAULT = 5_000
CEILING_LEVEL = 7.0
CAPACITY_CEILING = (
    ('technology', 40_000),
    ('trade',      35_000),
    ('religion',   30_000),
    ('culture',    32_000),
    ('military',   25_000),
)
CAPACITY_CEILING_DEFAULT = 20_000

# ── Economy ───────────────────────────────────────────────────────────────
WEALTH_BONUS = (           # stat > 6 → stat × coefficient per year
    ('trade',      150.0),
    ('technology', 120.0),
    ('military',    80.0),
    ('religion',    60.0),
    ('culture',     70.0),
)
REGEN_BONUS = (            # stat > 6 → flat resources per year
    ('technology', 2.0),
    ('trade',      1.5),
    ('military',   1.0),
    ('religion',   0.8),
)

# ── Catastrophic collapse thresholds ──────────────────────────────────────
CATASTROPHE_POP           = 25_000
CATASTROPHE_UNSTABLE_POP  = 15_000
CATASTROPHE_UNSTABLE_STAB = 0.2


def base_growth_rate(population: float) -> float:
    """Tiered baseline: small realms grow fast, huge ones shrink."""
    for limit, rate in GROWTH_TIERS:
        if population < limit:
            return rate
    return GROWTH_RATE_HUGE


def capacity_ceiling(civ) -> float:
    for stat, ceiling in CAPACITY_CEILING:
        if getattr(civ, stat) > CEILING_LEVEL:
            return ceiling
    return CAPACITY_CEILING_DEFAULT


def carrying_capacity(civ, env: float) -> float:
    base = BASE_CAPACITY_DEFAULT
    for stat, cap in BASE_CAPACITY:
        if getattr(civ, stat) > SPECIALIST:
            base = cap
            break
    capacity = (base
                * (1.0 + 0.8 * civ.technology)
                * min(3.0, civ.resources / 1500.0)
                * (0.3 + 0.7 * civ.stability)
                * env
                * cultural_multiplier(civ))
    return min(capacity, capacity_ceiling(civ))


def resource_deficit(civ) -> float:
    return max(0.0, civ.population / 1000.0 - civ.resources)


def growth_rate(civ, env: float) -> float:
    pop  = civ.population
    rate = base_growth_rate(pop)

    if civ.technology > 6 and pop < 20_000:
        rate += 0.05
    if civ.trade > 6 and pop < 15_000:
        rate += 0.04
    if civ.religion > 6 and pop < 12_000:
        rate += 0.03
    if civ.military > 6 and pop > 3_000:
        rate += 0.02

    pressure = pop / max(1.0, carrying_capacity(civ, env))
    if pressure > 1.0:
        rate -= 0.1 * (pressure - 1.0) ** 2

    deficit = resource_deficit(civ)
    if deficit > 0:
        rate -= 2.0 * deficit / max(1.0, pop)

    rate += (civ.stability - 0.5) * 0.1 + civ.technology * 0.01
    return min(RATE_MAX, max(RATE_MIN, rate))


def is_catastrophic(civ) -> bool:
    return (civ.population > CATASTROPHE_POP
            or (civ.population > CATASTROPHE_UNSTABLE_POP
                and civ.stability < CATASTROPHE_UNSTABLE_STAB)
            or resource_deficit(civ) > civ.population * 0.5)


def catastrophic_collapse(civ) -> None:
    civ.population *= 0.3
    civ.wealth     *= 0.1
    civ.stability   = 0.1
    civ.resources  *= 0.2


def _stability_change(civ, deficit: float, pressure: float) -> float:
    pop = civ.population
    change = 0.0
    if pop > 20_000:
        change -= 0.15
    elif pop > 10_000:
        change -= 0.08
    elif pop > 5_000:
        change -= 0.03
    elif pop < 2_000:
        change += 0.05

    if deficit > 0:
        change -= 5.0 * deficit / max(1.0, pop)
    if pressure > 1.2:
        change -= (pressure - 1.2) * 0.3

    if civ.wealth < pop * 0.1:
        change -= 0.1
    elif civ.wealth > pop * 0.5:
        change += 0.03

    if civ.technology > 6 and pop < 15_000:
        change += 0.04
    if civ.religion > 6:
        change += 0.05
    if civ.culture > 6:
        change += 0.03
    if civ.military > 6 and pop > 3_000:
        change += 0.02
    if civ.trade > 6:
        change += 0.02
    return change


def grow(civ, env: float, dt: float, resource_cap: float = 15_000) -> None:
    """Advance one agent's stocks by *dt* years (no catastrophe check)."""
    rate = growth_rate(civ, env)
    civ.population = max(POPULATION_FLOOR, civ.population * (1.0 + rate * dt))

    # Resources
    civ.resources -= civ.population / 2000.0 * dt
    regen = civ.technology * 0.5 + civ.stability * 2.0
    for stat, bonus in REGEN_BONUS:
        if getattr(civ, stat) > SPECIALIST:
            regen += bonus
    civ.resources = min(resource_cap, max(0.0, civ.resources + regen * dt * env))

    # Technology
    if civ.population < 10_000:
        civ.technology += (civ.wealth / 5000.0 + civ.stability * 0.5) * dt * 0.05
    else:
        civ.technology += civ.wealth / 10_000.0 * dt * 0.02
    civ.technology = min(10.0, civ.technology)

    # Wealth
    income      = min(civ.population * 0.1, 1000.0)
    maintenance = civ.population * 0.15
    bonus       = sum(getattr(civ, stat) * k for stat, k in WEALTH_BONUS
                      if getattr(civ, stat) > SPECIALIST) * env
    civ.wealth = max(0.0, civ.wealth + (income + bonus - maintenance) * dt)

    # Stability
    deficit  = resource_deficit(civ)
    pressure = civ.population / max(1.0, carrying_capacity(civ, env))
    change   = _stability_change(civ, deficit, pressure)
    civ.stability = min(1.0, max(0.05, civ.stability + change * dt))


def growth_pass(ctx, dt: float) -> None:
    """Pass 6."""
    resource_cap = ctx.cfg.get('resource_cap', 15_000)
    for civ in ctx.live():
        env = ctx.env(civ)

        if is_catastrophic(civ):
            before = civ.population
            catastrophic_collapse(civ)
            ctx.record(civ).disasters += 1
            ctx.emit(EventDraft(
                title=f"Collapse of {civ.name}",
                description=f"{civ.name} buckled under its own weight: "
                            f"{before - civ.population:,.0f} souls were lost "
                            f"to famine, unrest and ruin.",
                event_type='Political', category='Collapse', significance=5.0,
                location=civ.position, civ_id=civ.id, size=2.0,
            ))
            continue

        grow(civ, env, dt, resource_cap)

        if (not civ.has_reached_population_milestone
                and civ.population > 2.0 * max(POPULATION_FLOOR, civ.founding_population)):
            civ.has_reached_population_milestone = True
            ctx.emit(EventDraft(
                title=f"{civ.name} Population Boom",
                description=f"{civ.name} has doubled in size since its founding.",
                event_type='Social', category='Growth', significance=1.5,
                location=civ.position, civ_id=civ.id,
            ))

        if not civ.has_reached_technology_milestone and civ.technology > 3.0:
            civ.has_reached_technology_milestone = True
            civ.production += 2.0
            civ.military   += 1.0
            ctx.record(civ).cultural_achievements += 1
            ctx.emit(EventDraft(
                title=f"{civ.name} Masters Metallurgy",
                description=f"The smiths of {civ.name} learn to work bronze and "
                            f"iron, arming and enriching the realm.",
                event_type='Cultural', category='Discovery', significance=2.5,
                location=civ.position, civ_id=civ.id,
            ))
