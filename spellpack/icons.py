"""Read icon UV positions out of the atlas lsx files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, List

from .errors import DecodeError
from .lang import read_xml_text

UV_SCALE = 32


def quantize(raw: str) -> int:
    # truncate toward zero, clamp into an unsigned byte
    return max(0, min(0xFF, int(float(raw) * UV_SCALE)))


def parse_icon_uvs(xml_text: str, atlas_index: int) -> Dict[str, List[int]]:
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise DecodeError(f"icon xml: {e}") from e
    icons: Dict[str, List[int]] = {}
    for node in root.iter("node"):
        if node.attrib.get("id") != "IconUV":
            continue
        values = {
            attr.attrib.get("id"): attr.attrib.get("value")
            for attr in node.findall("attribute")
        }
        key = values.get("MapKey")
        if not key:
            continue
        try:
            u = quantize(values.get("U1") or "0")
            v = quantize(values.get("V1") or "0")
        except ValueError as e:
            raise DecodeError(f"icon {key}: bad UV value ({e})") from e
        icons[key] = [u, v, atlas_index]
    return icons


def load_icons(paths: Iterable[Path]) -> Dict[str, List[int]]:
    """Icon key -> [u, v, atlas index]; atlas index follows the configured file order."""
    icons: Dict[str, List[int]] = {}
    for index, path in enumerate(paths):
        icons.update(parse_icon_uvs(read_xml_text(path), index))
    return icons
