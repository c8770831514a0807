"""
Discover the stat files of every configured layer and parse them in parallel.

Each layer directory gets a fixed weight (its position in the config); every
file is one task. Failed files are collected instead of aborting the pool so
the caller can report all of them at once.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Sequence, Tuple

from .errors import SourceError
from .lang import TooltipMap
from .stats_parser import Entry, parse_stats

DEFAULT_WORKERS = 8


@dataclass(frozen=True)
class SourceFile:
    path: Path
    weight: int


@dataclass(frozen=True)
class FileFailure:
    path: Path
    error: str


@dataclass
class LoadOutcome:
    entries: List[Entry] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    files: int = 0


def discover_sources(
    unpack_dir: Path,
    layers: Sequence[Tuple[str, str]],
    prefixes: Sequence[str],
) -> List[SourceFile]:
    sources: List[SourceFile] = []
    for weight, (rel_dir, _name) in enumerate(layers):
        layer_dir = unpack_dir / rel_dir
        if not layer_dir.is_dir():
            raise SourceError(f"missing spell directory: {layer_dir}")
        for path in sorted(layer_dir.iterdir()):
            if path.is_file() and path.name.startswith(tuple(prefixes)):
                sources.append(SourceFile(path, weight))
    return sources


def parse_source(
    source: SourceFile,
    lang: Mapping[str, str],
    tooltips: TooltipMap,
) -> List[Entry]:
    text = source.path.read_text(encoding="utf-8-sig", errors="replace")
    return parse_stats(text, source.weight, lang, tooltips)


def load_entries(
    sources: Sequence[SourceFile],
    lang: Mapping[str, str],
    tooltips: TooltipMap,
    workers: int = DEFAULT_WORKERS,
) -> LoadOutcome:
    outcome = LoadOutcome(files=len(sources))
    if not sources:
        return outcome
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = [
            pool.submit(parse_source, source, lang, tooltips) for source in sources
        ]
        # joined in submission order so the merged list is reproducible
        for source, future in zip(sources, futures):
            try:
                outcome.entries.extend(future.result())
            except Exception as e:
                outcome.failures.append(FileFailure(source.path, f"{type(e).__name__}: {e}"))
    return outcome
