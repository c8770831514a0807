"""
Order the entry groups and split each into one shown record plus hidden overrides.

Groups sort by resolved Level (0 ranks 98, missing 99) and then by their
representative id with the leading type prefix removed, so `Target_Fireball`
and `Projectile_Fireball` sit next to each other. Interrupts keep the prefix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .resolve import Resolver
from .stats_parser import Entry

LEADING_ALPHA_RE = re.compile(r"^[a-zA-Z]+")
INTERRUPT_TYPE = "InterruptData"
LEVEL_ZERO_RANK = 98
LEVEL_MISSING_RANK = 99


@dataclass(frozen=True)
class Link:
    kind: str  # "next", "self" or "base"
    target: Entry


@dataclass(frozen=True)
class ClassifiedRecord:
    entry: Entry
    show: bool
    group_index: int
    link: Optional[Link]


def level_rank(level: Optional[str]) -> int:
    if level is None:
        return LEVEL_MISSING_RANK
    try:
        value = int(level.strip())
    except ValueError:
        return LEVEL_MISSING_RANK
    return LEVEL_ZERO_RANK if value == 0 else value


def sort_name(entry: Entry) -> str:
    if entry.type == INTERRUPT_TYPE:
        return entry.id
    return LEADING_ALPHA_RE.sub("", entry.id)


def sort_groups(resolver: Resolver) -> List[str]:
    def key(group_id: str) -> Tuple[int, str, str]:
        representative = resolver.groups[group_id][0]
        return (
            level_rank(resolver.resolve(group_id, "Level")),
            sort_name(representative),
            group_id,
        )

    return sorted(resolver.groups, key=key)


def find_link(entry: Entry, group: List[Entry], position: int, groups: Dict[str, List[Entry]]) -> Optional[Link]:
    using = entry.using
    if not using:
        return None
    if using == entry.id:
        if position + 1 < len(group):
            return Link("next", group[position + 1])
        return Link("self", entry)
    base = groups.get(using)
    if not base:
        return None
    return Link("base", base[0])


def classify(resolver: Resolver) -> Tuple[List[str], List[ClassifiedRecord]]:
    """Return (sorted group ids, records: shown ones in group order, then overrides)."""
    order = sort_groups(resolver)
    shown: List[ClassifiedRecord] = []
    hidden: List[ClassifiedRecord] = []
    for index, group_id in enumerate(order):
        group = resolver.groups[group_id]
        for position, entry in enumerate(group):
            record = ClassifiedRecord(
                entry=entry,
                show=position == 0,
                group_index=index,
                link=find_link(entry, group, position, resolver.groups),
            )
            (shown if record.show else hidden).append(record)
    return order, shown + hidden
