# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
history.py — Historical Event Log.

Append-only record of everything significant that happened.  Ids are
monotonic and never reused.  Every appended record is forwarded to the
registered sinks (the chronicle writer, the metrics logger, ...); the log
never waits on a sink's output.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional


@dataclass(frozen=True)
class EventRecord:
    id:           int
    title:        str
    description:  str
    year:         float
    event_type:   str                 # Military, Political, Cultural, ...
    category:     str                 # Warfare, Conquest, Collapse, ...
    significance: float
    location:     tuple = (0.0, 0.0)
    civ_id:       Optional[int] = None
    size:         float = 1.0


@dataclass
class EventDraft:
    """An event produced by a pass, before the log assigns it an id."""
    title:        str
    description:  str
    event_type:   str
    category:     str
    significance: float
    location:     tuple = (0.0, 0.0)
    civ_id:       Optional[int] = None
    size:         float = 1.0
    extra:        dict = field(default_factory=dict)


class HistoryLog:
    """Append-only event sink with monotonic ids and simple queries."""

    def __init__(self):
        self._records: list[EventRecord] = []
        self._next_id = 1
        self._sinks:   list[Callable[[EventRecord], None]] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def add_sink(self, sink: Callable[[EventRecord], None]) -> None:
        self._sinks.append(sink)

    def append(self, draft: EventDraft, year: float) -> EventRecord:
        rec = EventRecord(
            id=self._next_id,
            title=draft.title,
            description=draft.description,
            year=year,
            event_type=draft.event_type,
            category=draft.category,
            significance=draft.significance,
            location=tuple(draft.location),
            civ_id=draft.civ_id,
            size=draft.size,
        )
        self._next_id += 1
        self._records.append(rec)
        for sink in self._sinks:
            sink(rec)
        return rec

    def extend(self, drafts: Iterable[EventDraft], year: float) -> list[EventRecord]:
        return [self.append(d, year) for d in drafts]

    def query(self, since: float | None = None, until: float | None = None,
              civ_id: int | None = None, category: str | None = None,
              min_significance: float = 0.0) -> list[EventRecord]:
        """Records matching every given filter, in id order."""
        out = []
        for rec in self._records:
            if since is not None and rec.year < since:
                continue
            if until is not None and rec.year > until:
                continue
            if civ_id is not None and rec.civ_id != civ_id:
                continue
            if category is not None and rec.category != category:
                continue
            if rec.significance < min_significance:
                continue
            out.append(rec)
        return out

    def tail(self, n: int = 40) -> list[EventRecord]:
        return self._records[-n:]


class ChronicleFileSink:
    """Writes one plain-text line per record for downstream prose rendering."""

    def __init__(self, path):
        self._fh = open(path, 'a', encoding='utf-8')

    def __call__(self, rec: EventRecord) -> None:
        self._fh.write(
            f"Year {rec.year:7.1f} | #{rec.id:05d} | {rec.category:<12} | "
            f"sig {rec.significance:4.1f} | {rec.title} — {rec.description}\n")
        self._fh.flush()

    def close(self) -> None:
        self._fh.close()
