"""
Parser for the stat definition text files (Spell_*.txt, Passive*.txt).

  new entry "Target_Fireball"
  type "SpellData"
  using "Target_Fireball"
  data "DisplayName" "h1234;1"

One entry is accumulated at a time and flushed at the next `new` line or at
end of input. Unrecognised lines are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .codecs import str_hash
from .lang import TooltipMap

MULTI_SEP = "\x02"

NEW_ENTRY_RE = re.compile(r'^new\s+(?:entry\b\s*)?"?([^"]*)"?\s*$')
DATA_PAIR_RE = re.compile(r'"([^"]+)" "([^"]+)"')
FUNCTION_CALL_RE = re.compile(r"([a-zA-Z]+\([0-9',.+\-a-zA-Z /\\()_]*\))")
HANDLE_VERSION_RE = re.compile(r";\d+$")

LOCALIZED_KEYS = ("DisplayName", "Description", "ExtraDescription")
UPCAST_KEY = "TooltipUpcastDescription"
UNKNOWN = "unknown"


# eq=False: entries hash by identity, two layers may carry identical fields
@dataclass(frozen=True, eq=False)
class Entry:
    id: str
    type: str
    weight: int
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def using(self) -> Optional[str]:
        return self.attributes.get("Using")


class _Draft:
    def __init__(self, entry_id: str) -> None:
        self.id = entry_id
        self.type = ""
        self.attributes: Dict[str, str] = {}

    def freeze(self, weight: int) -> Entry:
        return Entry(self.id, self.type, weight, dict(self.attributes))


def _unquote(text: str) -> str:
    return text.strip().replace('"', "")


def transform_value(
    key: str,
    value: str,
    lang: Mapping[str, str],
    tooltips: TooltipMap,
) -> str:
    value = FUNCTION_CALL_RE.sub(r"<b>\1</b>", value)
    if key == UPCAST_KEY:
        tip = tooltips.by_hash(str_hash(value))
        if tip is None:
            return value
        name, text = tip
        return f"{name}<br>{text}"
    if key in LOCALIZED_KEYS:
        handle = HANDLE_VERSION_RE.sub("", value)
        return lang.get(handle, handle)
    if value == UNKNOWN:
        return ""
    return value.replace(";", MULTI_SEP)


def parse_stats(
    text: str,
    weight: int,
    lang: Mapping[str, str],
    tooltips: TooltipMap,
) -> List[Entry]:
    entries: List[Entry] = []
    draft: Optional[_Draft] = None

    def flush() -> None:
        if draft is not None and draft.id:
            entries.append(draft.freeze(weight))

    for raw_line in re.split(r"\r?\n", text.lstrip("\ufeff")):
        line = raw_line.strip()
        if line.startswith("new ") or line.startswith("new\t"):
            match = NEW_ENTRY_RE.match(line)
            if not match:
                continue
            flush()
            draft = _Draft(match.group(1).strip())
            continue
        if draft is None:
            continue
        if line.startswith("using "):
            draft.attributes["Using"] = _unquote(line[6:])
        elif line.startswith("type "):
            draft.type = _unquote(line[5:])
        elif line.startswith("data "):
            pairs = DATA_PAIR_RE.findall(line)
            if len(pairs) != 1:
                continue
            key, value = pairs[0]
            draft.attributes[key] = transform_value(key, value, lang, tooltips)
    flush()
    return entries
