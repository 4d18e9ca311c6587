# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
naming.py — Name generation and sanitization.

sanitize_name() is the single cleanup gate every stored name passes through.
ComponentNames is the default name_for() collaborator: a component-based
generator (adjective + noun + root) that is deterministic for a given seed,
kind and position, so it never touches the engine's RNG stream.
"""

import re
import zlib

DEFAULT_MAX_LEN = 40
_WS = re.compile(r'\s+')


def sanitize_name(name: str, max_len: int = DEFAULT_MAX_LEN) -> str:
    """Collapse duplicated suffix words, squeeze whitespace, truncate.

    'Varn Colony Colony' -> 'Varn Colony'.  Never raises; an empty or
    non-string input becomes 'Unnamed'.
    """
    if not isinstance(name, str):
        name = '' if name is None else str(name)
    words = _WS.sub(' ', name).strip().split(' ')
    # "X Colony Colony" style repeats anywhere in the name
    cleaned: list[str] = []
    for w in words:
        if cleaned and w and w == cleaned[-1]:
            continue
        cleaned.append(w)
    out = ' '.join(w for w in cleaned if w)
    if max_len > 0 and len(out) > max_len:
        out = out[:max_len]
    out = out.strip()
    return out or 'Unnamed'


def with_suffix(base: str, suffix: str, max_len: int = DEFAULT_MAX_LEN) -> str:
    """Append *suffix* to an already-sanitized *base* without doubling it."""
    clean = sanitize_name(base, max_len)
    if clean == suffix or clean.endswith(' ' + suffix):
        return clean
    return sanitize_name(f"{clean} {suffix}", max_len)


def with_prefix(prefix: str, base: str, max_len: int = DEFAULT_MAX_LEN) -> str:
    """Prepend *prefix* to an already-sanitized *base* without doubling it."""
    clean = sanitize_name(base, max_len)
    if clean == prefix or clean.startswith(prefix + ' '):
        return clean
    return sanitize_name(f"{prefix} {clean}", max_len)


# ── Component tables ───────────────────────────────────────────────────────
_ROOTS = [
    'Aer', 'Bal', 'Cor', 'Dun', 'Eld', 'Fen', 'Gal', 'Hal', 'Ist', 'Kar',
    'Lor', 'Mar', 'Nor', 'Oss', 'Pel', 'Qua', 'Ras', 'Sol', 'Tor', 'Ul',
    'Var', 'Wyn', 'Yr', 'Zan',
]
_ENDINGS = ['ia', 'mar', 'thal', 'dor', 'heim', 'esh', 'ond', 'ara', 'is', 'un']

# Trait-keyed adjectives for civilizations
_ADJ_BY_TRAIT = {
    'aggressiveness': ['Iron',     'Blood',    'Ruthless'],
    'defensiveness':  ['Walled',   'Steadfast', 'Shielded'],
    'greed':          ['Gilded',   'Golden',   'Hoarding'],
    'paranoia':       ['Veiled',   'Watchful', 'Shadowed'],
    'ambition':       ['Rising',   'Crowned',  'Ascendant'],
    'pride':          ['Exalted',  'Proud',    'High'],
    'hatred':         ['Scarred',  'Bitter',   'Ashen'],
    'vengefulness':   ['Avenging', 'Unbowed',  'Vowed'],
    'desperation':    ['Hungry',   'Last',     'Lean'],
}
_NOUN_BY_TYPE = {
    'Military':   ['Dominion', 'Legion',    'Warhold'],
    'Technology': ['Concord',  'Foundry',   'Compact'],
    'Religious':  ['Theocracy', 'Covenant', 'See'],
    'Trade':      ['League',   'Exchange',  'Hanse'],
    'Cultural':   ['Realm',    'Commonwealth', 'Assembly'],
}
_EVENT_WORDS = ['Battle', 'Siege', 'Accord', 'Storm', 'Rising', 'Vigil']
_SITE_WORDS  = {
    'City':        ['Hold', 'Ford', 'Gate', 'Haven', 'Reach'],
    'Temple':      ['Sanctum', 'Shrine', 'Spire'],
    'Monument':    ['Obelisk', 'Column', 'Stele'],
    'Academy':     ['Lyceum', 'Athenaeum', 'College'],
    'Marketplace': ['Bazaar', 'Agora', 'Exchange'],
    'Palace':      ['Court', 'Palace', 'Citadel'],
    'Wonder':      ['Marvel', 'Colossus', 'Gardens'],
    'Religion':    ['Faith', 'Way', 'Path', 'Light'],
}


class ComponentNames:
    """Default name generator.  name_for() is pure for a given seed."""

    def __init__(self, seed: int = 0, max_len: int = DEFAULT_MAX_LEN):
        self.seed    = seed
        self.max_len = max_len

    def _pick(self, options: list, *key) -> str:
        digest = zlib.crc32(repr((self.seed,) + key).encode('utf-8'))
        return options[digest % len(options)]

    def _root(self, *key) -> str:
        return self._pick(_ROOTS, 'root', *key) + self._pick(_ENDINGS, 'end', *key)

    def name_for(self, kind: str, position_or_stats=None, personality=None) -> str:
        """Return a sanitized display name for an agent, site, event or faith.

        kind is 'civilization', 'event', 'religion' or a territory kind
        ('City', 'Temple', ...).  position_or_stats is any repr-able key;
        personality is an optional trait mapping that flavours agent names.
        """
        key = (kind, repr(position_or_stats))
        if kind == 'civilization':
            root = self._root(*key)
            if personality:
                top = max(sorted(personality), key=lambda t: personality[t])
                adjs = _ADJ_BY_TRAIT.get(top)
                if adjs and personality[top] >= 6:
                    return sanitize_name(f"{self._pick(adjs, *key)} {root}", self.max_len)
            return sanitize_name(root, self.max_len)
        if kind == 'event':
            return sanitize_name(
                f"{self._pick(_EVENT_WORDS, *key)} of {self._root(*key)}", self.max_len)
        if kind == 'religion':
            return sanitize_name(
                f"The {self._pick(_SITE_WORDS['Religion'], *key)} of {self._root(*key)}",
                self.max_len)
        words = _SITE_WORDS.get(kind)
        if words:
            return sanitize_name(f"{self._root(*key)} {self._pick(words, *key)}", self.max_len)
        return sanitize_name(self._root(*key), self.max_len)

    def polity_title(self, civ_type: str, *key) -> str:
        """Noun that fits a civilization type ('League', 'Dominion', ...)."""
        return self._pick(_NOUN_BY_TYPE.get(civ_type, ['Realm']), 'title', *key)
