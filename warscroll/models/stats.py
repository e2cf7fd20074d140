"""Stat models — the four warscroll characteristics and the session's stat set."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class StatKind(str, enum.Enum):
    MOVE = "move"
    HEALTH = "health"
    SAVE = "save"
    CONTROL = "control"


RawStat = str | int | float | None
Numeric = int | float | None


class StatValue(BaseModel):
    """One characteristic: the unvalidated input and its normalized magnitude."""

    kind: StatKind
    raw: RawStat = None
    numeric: Numeric = None

    @property
    def is_empty(self) -> bool:
        return self.numeric is None

    @property
    def display(self) -> str:
        from warscroll.engine.formatter import format_stat

        return format_stat(self.kind, self.numeric)


def _empty_stats() -> dict[StatKind, StatValue]:
    return {kind: StatValue(kind=kind) for kind in StatKind}


class StatSet(BaseModel):
    """The in-memory stats of one session. Never persisted."""

    values: dict[StatKind, StatValue] = Field(default_factory=_empty_stats)

    def update(self, kind: StatKind | str, raw: RawStat) -> StatValue:
        """Normalize ``raw`` and store it as the new value for ``kind``."""
        from warscroll.engine.formatter import normalize

        kind = StatKind(kind)
        value = StatValue(kind=kind, raw=raw, numeric=normalize(kind, raw))
        self.values[kind] = value
        return value

    def get(self, kind: StatKind | str) -> StatValue:
        return self.values[StatKind(kind)]

    def numerics(self) -> dict[StatKind, Numeric]:
        return {kind: value.numeric for kind, value in self.values.items()}

    def clear(self) -> None:
        self.values = _empty_stats()

    @classmethod
    def from_raw(cls, raw: dict[str, RawStat] | None) -> StatSet:
        """Build a stat set from ``{"move": "6", ...}``; unknown keys are ignored."""
        stats = cls()
        for key, value in (raw or {}).items():
            try:
                kind = StatKind(key)
            except ValueError:
                continue
            stats.update(kind, value)
        return stats
