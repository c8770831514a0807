"""
End-to-end conversion: context -> parse -> classify -> encode.

The RunContext is built once at the start of a run and handed to every stage;
nothing is cached at module level.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping

from .classify import classify
from .config import Cfg
from .encode import KeyDictionary, decode_record, encode_records
from .errors import DecodeError, SourceError
from .helpers.output import format_path_for_console, log
from .icons import load_icons
from .lang import TooltipMap, load_lang, load_tooltips
from .loader import DEFAULT_WORKERS, FileFailure, discover_sources, load_entries
from .resolve import Precedence, Resolver, group_entries

OUTPUT_NAME = "spells.json"


@dataclass(frozen=True)
class RunContext:
    cfg: Cfg
    lang: Mapping[str, str]
    tooltips: TooltipMap
    icons: Mapping[str, List[int]]


@dataclass
class ConvertResult:
    version: str
    records: List[str]
    ids: List[str]
    types: str
    keys: List[str]
    icons: Dict[str, List[int]]
    dds: List[str]
    failures: List[FileFailure] = field(default_factory=list)


def build_context(cfg: Cfg) -> RunContext:
    lang = load_lang(cfg.data_path(cfg.english))
    log("info", f"localization: {len(lang)} strings")
    tooltips = load_tooltips(cfg.data_path(cfg.tooltips), lang)
    log("info", f"tooltips: {len(tooltips)}")
    icons = load_icons(cfg.data_path(p) for p in cfg.icons)
    log("info", f"icons: {len(icons)} from {len(cfg.icons)} atlas file(s)")
    return RunContext(cfg=cfg, lang=lang, tooltips=tooltips, icons=icons)


def spell_types(records_attrs: List[Mapping[str, str]]) -> str:
    seen: Dict[str, None] = {}
    for attrs in records_attrs:
        value = attrs.get("SpellType")
        if value:
            seen.setdefault(value, None)
    return ",".join(seen)


def convert(
    ctx: RunContext,
    workers: int = DEFAULT_WORKERS,
    keep_going: bool = False,
    precedence: Precedence = Precedence.EARLIEST,
) -> ConvertResult:
    cfg = ctx.cfg
    sources = discover_sources(cfg.unpack_dir, cfg.spells, cfg.file_prefixes)
    outcome = load_entries(sources, ctx.lang, ctx.tooltips, workers=workers)
    for failure in outcome.failures:
        log("fail", f"{format_path_for_console(failure.path, cfg.unpack_dir)}: {failure.error}")
    if outcome.failures and not keep_going:
        names = ", ".join(f.path.name for f in outcome.failures)
        raise SourceError(f"{len(outcome.failures)} of {outcome.files} file(s) failed to parse: {names}")
    log("info", f"parsed {len(outcome.entries)} entries from {outcome.files} file(s)")

    resolver = Resolver(group_entries(outcome.entries), precedence)
    order, records = classify(resolver)
    keys = KeyDictionary()
    encoded = encode_records(records, cfg.layer_names, keys)
    shown = sum(1 for r in records if r.show)
    log("info", f"{len(order)} groups: {shown} shown, {len(records) - shown} overrides, {len(keys)} keys")

    return ConvertResult(
        version=cfg.version,
        records=encoded,
        ids=[r.entry.id for r in records],
        types=spell_types([r.entry.attributes for r in records]),
        keys=list(keys.keys),
        icons=dict(ctx.icons),
        dds=list(cfg.dds),
        failures=list(outcome.failures),
    )


def write_output(result: ConvertResult, path: Path) -> None:
    payload = {
        "version": result.version,
        "types": result.types,
        "keys": result.keys,
        "dds": result.dds,
        "icons": result.icons,
        "ids": result.ids,
        "records": result.records,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=True), encoding="utf-8")


def decoded_rows(ids: List[str], records: List[str], keys: List[str]) -> Dict[str, Dict[str, str]]:
    """Entry id -> decoded attributes; repeated ids (override layers) get a `#n` suffix."""
    rows: Dict[str, Dict[str, str]] = {}
    counts: Dict[str, int] = {}
    for entry_id, record in zip(ids, records):
        n = counts.get(entry_id, 0)
        counts[entry_id] = n + 1
        rows[entry_id if n == 0 else f"{entry_id}#{n}"] = decode_record(record, keys)
    return rows


def result_rows(result: ConvertResult) -> Dict[str, Dict[str, str]]:
    return decoded_rows(result.ids, result.records, result.keys)


def load_output_rows(path: Path) -> Dict[str, Dict[str, str]]:
    """Decoded rows of a previously written output file (empty if missing)."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return decoded_rows(data.get("ids") or [], data.get("records") or [], data.get("keys") or [])
    except (ValueError, IndexError, AttributeError, TypeError) as e:
        raise DecodeError(f"unreadable output file: {path}: {e}") from e
