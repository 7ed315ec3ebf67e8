"""
Inventory module - item drafting and stats text.
"""

from stash.inventory.items import (
    DEMO_ITEMS,
    coerce_stat,
    draft_item,
    parse_stats,
)

__all__ = [
    "DEMO_ITEMS",
    "coerce_stat",
    "draft_item",
    "parse_stats",
]
