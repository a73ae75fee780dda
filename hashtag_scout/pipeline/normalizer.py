from __future__ import annotations

import re

MULTIPLIERS = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

_NUMERIC_PREFIX_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+", re.ASCII)


def normalize_magnitude(value: str) -> float:
    """Convert a compact magnitude such as ``"11K"`` or ``"1.5B"`` to a number.

    Only the leading numeric prefix is read, so ``"12,345"`` parses as ``12``.
    Suffixes are case sensitive. Returns NaN when there is no numeric prefix.
    """

    text = value.strip()
    match = _NUMERIC_PREFIX_RE.match(text)
    if not match:
        return float("nan")
    return float(match.group(0)) * MULTIPLIERS.get(text[-1], 1)
