"""
Localization (contentuid -> text) and tooltip (UUID -> name, text) maps.

Both are read once per run and shared read-only by every parse task.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .codecs import str_hash
from .errors import DecodeError, SourceError

CHILDREN_SPLIT_RE = re.compile(r"<children>|</children>")

Tooltip = Tuple[str, str]


def read_xml_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise SourceError(f"open file error: {path}: {e}") from e


def parse_lang(xml_text: str) -> Dict[str, str]:
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise DecodeError(f"localization xml: {e}") from e
    lang: Dict[str, str] = {}
    for content in root.iter("content"):
        uid = content.attrib.get("contentuid")
        if uid:
            lang[uid] = content.text or ""
    return lang


def load_lang(path: Path) -> Dict[str, str]:
    return parse_lang(read_xml_text(path))


class TooltipMap(Mapping[str, Tooltip]):
    """UUID -> (name, text), with a secondary index keyed by `str_hash(uuid)`."""

    def __init__(self, items: Iterable[Tuple[str, Tooltip]] = ()) -> None:
        self._by_uuid: Dict[str, Tooltip] = {}
        for uuid, tip in items:
            self._by_uuid[uuid] = tip
        self._by_hash: Dict[str, Tooltip] = {
            str_hash(uuid): tip for uuid, tip in self._by_uuid.items()
        }

    def __getitem__(self, uuid: str) -> Tooltip:
        return self._by_uuid[uuid]

    def __iter__(self):
        return iter(self._by_uuid)

    def __len__(self) -> int:
        return len(self._by_uuid)

    def by_hash(self, key: str) -> Optional[Tooltip]:
        return self._by_hash.get(key)


def _node_tooltip(node: ET.Element, lang: Mapping[str, str]) -> Tuple[str, Tooltip]:
    uuid = ""
    name = ""
    text = ""
    for attr in node.iter("attribute"):
        attr_id = attr.attrib.get("id", "")
        value = attr.attrib.get("value")
        if attr_id.startswith("U"):
            uuid = value or ""
        elif attr_id.startswith("N"):
            name = value or attr.attrib.get("handle", "")
        elif attr_id.startswith("T"):
            handle = attr.attrib.get("handle")
            if handle:
                text = lang.get(handle, handle)
            elif value:
                text = value
    return uuid, (name, text)


def parse_tooltips(xml_text: str, lang: Mapping[str, str]) -> TooltipMap:
    slices = CHILDREN_SPLIT_RE.split(xml_text)
    if len(slices) < 2:
        raise DecodeError("tooltip xml has no <children> block")
    try:
        root = ET.fromstring(f"<children>{slices[1]}</children>")
    except ET.ParseError as e:
        raise DecodeError(f"tooltip xml: {e}") from e
    items = []
    for node in root.findall("node"):
        uuid, tip = _node_tooltip(node, lang)
        if uuid:
            items.append((uuid, tip))
    return TooltipMap(items)


def load_tooltips(path: Path, lang: Mapping[str, str]) -> TooltipMap:
    return parse_tooltips(read_xml_text(path), lang)
