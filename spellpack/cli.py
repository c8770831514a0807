"""
Build the viewer's spell data from an unpacked game data tree.

Usage:
  spellpack --config cfg.yaml
  spellpack --config cfg.yaml --out public/spells.json --diff public/spells.json
  spellpack --config cfg.yaml --keep-going --workers 4

Reads the localization, tooltip and icon XML named in the config, parses every
Spell_*/Passive* stat file of each configured layer, and writes one JSON file
holding the encoded records, the key list, spell types and icon positions.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_CFG, load_cfg
from .errors import SpellpackError
from .helpers.diff import report_record_deltas
from .helpers.output import format_path_for_console, log, set_quiet
from .loader import DEFAULT_WORKERS
from .pipeline import (
    OUTPUT_NAME,
    build_context,
    convert,
    load_output_rows,
    result_rows,
    write_output,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert stat/spell definitions into the viewer's compact record stream.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CFG, help="Path to cfg.yaml.")
    parser.add_argument("--out", type=Path, default=None, help=f"Output JSON (default: <assets>/{OUTPUT_NAME}).")
    parser.add_argument("--diff", type=Path, default=None, help="Previous output JSON to report record deltas against.")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Parallel parse tasks.")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Write output even if some stat files failed to parse (failures are still listed).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Convert and report without writing output.")
    parser.add_argument("--quiet", action="store_true", help="Only print warnings and failures.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_quiet(args.quiet)
    try:
        cfg = load_cfg(args.config)
        ctx = build_context(cfg)
        # read before writing: --diff and --out are usually the same file
        previous = load_output_rows(args.diff) if args.diff else None
        result = convert(ctx, workers=args.workers, keep_going=args.keep_going)
    except SpellpackError as e:
        raise SystemExit(f"[error] {e}")

    if previous is not None:
        report_record_deltas(previous, result_rows(result))

    out_path = args.out or Path(cfg.assets) / OUTPUT_NAME
    if args.dry_run:
        log("dry-run", f"{len(result.records)} records, not written")
    else:
        write_output(result, out_path)
        log("done", f"wrote {len(result.records)} records to {format_path_for_console(out_path)}")
    return 1 if result.failures else 0
