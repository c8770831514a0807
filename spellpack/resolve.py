"""
Attribute lookup across same-id layers and `Using` prototype chains.

Layers of one id are scanned in a fixed direction (the precedence policy).
When no layer defines the attribute, the first layer whose `Using` names a
different id redirects the search to that id's group.

Default precedence is EARLIEST: the lowest-weight definer wins, so a later
layer only contributes attributes that no earlier layer sets. LATEST is kept
as an explicit alternative and is never picked implicitly.
"""

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from .helpers.output import log
from .stats_parser import Entry


class Precedence(Enum):
    EARLIEST = "earliest"
    LATEST = "latest"


def group_entries(entries: Iterable[Entry]) -> Dict[str, List[Entry]]:
    """id -> entries sorted by ascending weight (stable for equal weights)."""
    groups: Dict[str, List[Entry]] = defaultdict(list)
    for entry in entries:
        groups[entry.id].append(entry)
    return {key: sorted(group, key=lambda e: e.weight) for key, group in groups.items()}


class Resolver:
    def __init__(
        self,
        groups: Dict[str, List[Entry]],
        precedence: Precedence = Precedence.EARLIEST,
    ) -> None:
        self.groups = groups
        self.precedence = precedence

    def _scan(self, key: str) -> List[Entry]:
        group = self.groups.get(key, [])
        if self.precedence is Precedence.LATEST:
            return list(reversed(group))
        return group

    def prototype(self, key: str) -> Optional[str]:
        """First cross-id `Using` target of a group, in ascending weight order."""
        for entry in self.groups.get(key, []):
            using = entry.using
            if using and using != key:
                return using
        return None

    def resolve(self, key: str, attr: str) -> Optional[str]:
        seen: Set[str] = set()
        current: Optional[str] = key
        while current is not None:
            if current in seen:
                log("warn", f"Using cycle through {current} while resolving {key}.{attr}")
                return None
            seen.add(current)
            for entry in self._scan(current):
                if attr in entry.attributes:
                    return entry.attributes[attr]
            current = self.prototype(current)
        return None
