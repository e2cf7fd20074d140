"""Stat formatting — raw user input to canonical values and display strings.

Both renderers call these functions on every render so the preview and the
exported image always show the same text. Nothing here raises on bad input:
unparsable or empty input normalizes to ``None`` and formats to ``""``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping

from warscroll.models.stats import Numeric, RawStat, StatKind, StatSet

# Leading integer: optional whitespace, optional sign, digits. Trailing text
# (decimals, units) is ignored, so "4.7" reads as 4.
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# (floor, ceiling) applied once an integer stat has been entered.
# SAVE is a dice roll target, so it is kept within a six-sided die.
_INTEGER_BOUNDS: dict[StatKind, tuple[int, int | None]] = {
    StatKind.HEALTH: (0, None),
    StatKind.SAVE: (1, 6),
    StatKind.CONTROL: (0, None),
}


def _is_blank(raw: RawStat) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _parse_decimal(raw: RawStat) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    else:
        text = str(raw).strip()
        if "_" in text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def _parse_leading_int(raw: RawStat) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Longer than the interpreter's int conversion limit
        return None


def normalize(kind: StatKind | str, raw: RawStat) -> Numeric:
    """Convert raw input into the stat's canonical magnitude, or ``None``.

    MOVE accepts any non-negative decimal (fractions are kept as entered).
    HEALTH, SAVE and CONTROL take the leading integer and clamp it into their
    bounds: negatives rise to the floor, SAVE is capped at 6.
    """
    kind = StatKind(kind)
    if _is_blank(raw):
        return None

    if kind is StatKind.MOVE:
        value = _parse_decimal(raw)
        if value is None or value < 0:
            return None
        return value

    number = _parse_leading_int(raw)
    if number is None:
        return None
    floor, ceiling = _INTEGER_BOUNDS[kind]
    number = max(floor, number)
    if ceiling is not None:
        number = min(ceiling, number)
    return number


# Python writes exponents as "e-07"; browsers write "e-7"
_EXPONENT_ZEROS = re.compile(r"e([+-])0+(\d)")


def _format_number(value: int | float) -> str:
    """Shortest round-trip text, integral values without a decimal point.

    Very small fractions use exponent notation (``1e-7``). Python switches to
    it below 1e-4 where a browser waits until 1e-6; move values that small do
    not occur in practice.
    """
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return _EXPONENT_ZEROS.sub(r"e\1\2", repr(value))


def format_stat(kind: StatKind | str, numeric: Numeric) -> str:
    """Display string for a normalized value: 6 -> '6"' (move), 4 -> '4+' (save)."""
    kind = StatKind(kind)
    if numeric is None or isinstance(numeric, bool):
        return ""
    if isinstance(numeric, int):
        # Exact, however large
        if numeric < 0:
            return ""
        value: int | float = numeric
    else:
        try:
            value = float(numeric)
        except (TypeError, ValueError, OverflowError):
            return ""
        if not math.isfinite(value) or value < 0:
            return ""

    try:
        if kind is StatKind.MOVE:
            return _format_number(value) + '"'
        text = str(int(value))
    except ValueError:
        # Past the interpreter's int-to-str digit limit
        return ""
    if kind is StatKind.SAVE:
        return text + "+"
    return text


def display(kind: StatKind | str, raw: RawStat) -> str:
    """Shortcut: normalize then format."""
    return format_stat(kind, normalize(kind, raw))


def stat_numerics(stats: StatSet | Mapping[str, RawStat] | None) -> dict[StatKind, Numeric]:
    """Normalized value of every stat kind from a ``StatSet`` or a raw mapping.

    Raw mappings are normalized here; normalizing an already normalized value
    is a no-op, so both forms give the same display strings.
    """
    if isinstance(stats, StatSet):
        return stats.numerics()
    raw = stats or {}
    return {kind: normalize(kind, raw.get(kind.value)) for kind in StatKind}
