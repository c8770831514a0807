"""
Key dictionary and record encoder.

A record is the token of every attribute name (in attribute order), a NUL,
then the attribute values joined by NUL:

  <tok(Name)><tok(Level)> NUL Fireball NUL 3
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from .classify import ClassifiedRecord
from .codecs import n2s, s2n, token_width
from .stats_parser import Entry

NUL = "\x00"


class KeyDictionary:
    """Append-only attribute-name list; a name's token is n2s(first-seen index)."""

    def __init__(self) -> None:
        self.keys: List[str] = []
        self._index: Dict[str, int] = {}

    def token(self, key: str) -> str:
        index = self._index.get(key)
        if index is None:
            index = len(self.keys)
            self.keys.append(key)
            self._index[key] = index
        return n2s(index)

    def __len__(self) -> int:
        return len(self.keys)


def with_synthetic_attributes(
    record: ClassifiedRecord,
    record_index: Dict[Entry, int],
    layer_names: Sequence[str],
) -> Dict[str, str]:
    attrs = dict(record.entry.attributes)
    if record.link is not None:
        attrs["Using"] = str(record_index[record.link.target])
    else:
        attrs.pop("Using", None)
    if not record.show:
        attrs["i"] = str(record.group_index)
    weight = record.entry.weight
    attrs["mod"] = layer_names[weight] if weight < len(layer_names) else str(weight)
    return attrs


def encode_attributes(attrs: Dict[str, str], keys: KeyDictionary) -> str:
    header = "".join(keys.token(key) for key in attrs)
    return header + NUL + NUL.join(attrs.values())


def encode_records(
    records: Sequence[ClassifiedRecord],
    layer_names: Sequence[str],
    keys: KeyDictionary,
) -> List[str]:
    record_index = {record.entry: i for i, record in enumerate(records)}
    return [
        encode_attributes(with_synthetic_attributes(record, record_index, layer_names), keys)
        for record in records
    ]


def decode_record(record: str, keys: Sequence[str]) -> Dict[str, str]:
    """Inverse of encode_attributes, given the run's key list."""
    header, _, body = record.partition(NUL)
    names: List[str] = []
    pos = 0
    while pos < len(header):
        width = token_width(header[pos])
        names.append(keys[s2n(header[pos:pos + width])])
        pos += width
    values = body.split(NUL) if names else []
    if len(values) != len(names):
        raise ValueError(f"record has {len(names)} keys but {len(values)} values")
    return dict(zip(names, values))
