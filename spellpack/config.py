"""
Load the conversion config (cfg.yaml).

Example:
  assets: public
  version: "4.1.1"
  tooltips: Shared/Public/Shared/GUI/TooltipExtraTexts.lsx
  english: English/Localization/English/english.xml
  unpack_dir: /data/UnpackedData
  spells:
    - [Shared/Public/Shared/Stats/Generated/Data, Shared]
    - [Gustav/Public/Gustav/Stats/Generated/Data, Gustav]
  icons: [Shared/Public/Shared/GUI/Icons_Skills.lsx]
  dds: [Icons_Skills.dds]
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigError

DEFAULT_CFG = Path("cfg.yaml")
DEFAULT_FILE_PREFIXES = ("Spell_", "Passive")

REQUIRED_STR_KEYS = ("assets", "version", "tooltips", "unpack_dir", "english")


@dataclass(frozen=True)
class Cfg:
    assets: str
    version: str
    tooltips: str
    unpack_dir: Path
    english: str
    spells: Tuple[Tuple[str, str], ...]
    icons: Tuple[str, ...] = ()
    dds: Tuple[str, ...] = ()
    file_prefixes: Tuple[str, ...] = DEFAULT_FILE_PREFIXES

    @property
    def layer_names(self) -> List[str]:
        return [flag for _, flag in self.spells]

    def data_path(self, rel: str) -> Path:
        return self.unpack_dir / rel


def _str_list(raw: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"config key `{key}` must be a list of strings")
    return tuple(value)


def parse_cfg(raw: Any) -> Cfg:
    if not isinstance(raw, dict):
        raise ConfigError(f"config must be a mapping, got {type(raw).__name__}")
    for key in REQUIRED_STR_KEYS:
        value = raw.get(key)
        if value is None:
            raise ConfigError(f"missing config key `{key}`")
        if not isinstance(value, (str, int, float)):
            raise ConfigError(f"config key `{key}` must be a string")

    spells_raw = raw.get("spells")
    if not isinstance(spells_raw, list) or not spells_raw:
        raise ConfigError("config key `spells` must be a non-empty list of [directory, name] pairs")
    spells: List[Tuple[str, str]] = []
    for pair in spells_raw:
        if not isinstance(pair, list) or len(pair) != 2 or not all(isinstance(p, str) for p in pair):
            raise ConfigError(f"malformed `spells` entry: {pair!r}")
        spells.append((pair[0], pair[1]))

    prefixes = _str_list(raw, "file_prefixes") or DEFAULT_FILE_PREFIXES
    return Cfg(
        assets=str(raw["assets"]),
        # yaml reads an unquoted 4.1 as a float
        version=str(raw["version"]),
        tooltips=str(raw["tooltips"]),
        unpack_dir=Path(str(raw["unpack_dir"])).expanduser(),
        english=str(raw["english"]),
        spells=tuple(spells),
        icons=_str_list(raw, "icons"),
        dds=_str_list(raw, "dds"),
        file_prefixes=prefixes,
    )


def load_cfg(path: Path = DEFAULT_CFG) -> Cfg:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"parse cfg fail: {e}") from e
    cfg = parse_cfg(raw)
    if not cfg.unpack_dir.is_absolute():
        cfg = replace(cfg, unpack_dir=(path.parent / cfg.unpack_dir).resolve())
    return cfg
