"""
Item system - item drafting and stat parsing.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional

from stash.components import Item, StatValue

logger = logging.getLogger(__name__)


# Starter items for a fresh inventory
DEMO_ITEMS: tuple[Item, ...] = (
    Item(id="sword", name="Sword", icon="🗡️", stats={"attack": 5}),
    Item(id="shield", name="Shield", icon="🛡️", stats={"defense": 3}),
)


def coerce_stat(value: str) -> StatValue:
    """Convert a stat value to a number when it reads as one."""
    text = value.strip()
    if not text:
        return text
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def parse_stats(text: Optional[str]) -> dict[str, StatValue]:
    """
    Parse stats text such as ``"attack=5, element=fire"``.

    Pairs are comma separated. Values that read as numbers become numbers,
    anything else stays text. Pairs without ``=`` or with an empty key are
    skipped.

    Two cases differ from a plain numeric reading: an empty value
    (``"luck="``) stays ``""`` rather than becoming 0, and a value holding
    further ``=`` signs keeps all of them (``"a=b=c"`` gives ``{"a": "b=c"}``,
    not ``{"a": "b"}``).

    Returns:
        Stat name -> value, later duplicates win
    """
    stats: dict[str, StatValue] = {}
    if not text:
        return stats

    for pair in text.split(","):
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            if pair.strip():
                logger.debug(f"Skipping malformed stat pair {pair!r}")
            continue
        stats[key] = coerce_stat(value)

    return stats


def draft_item(
    name: str,
    icon: Optional[str] = None,
    description: Optional[str] = None,
    stats: Optional[Mapping[str, StatValue]] = None,
) -> Item:
    """
    Build and validate an item that has no id yet.

    Blank icon and description are stored as None.

    Raises:
        pydantic.ValidationError: if the name is empty after trimming
    """
    return Item(
        name=name,
        icon=icon or None,
        description=description or None,
        stats=dict(stats or {}),
    )
