import json
from dataclasses import replace

import pytest

from spellpack import loader
from spellpack.errors import SourceError
from spellpack.pipeline import (
    build_context,
    convert,
    load_output_rows,
    result_rows,
    write_output,
)
from spellpack.loader import discover_sources, load_entries
from spellpack.resolve import Resolver, group_entries

EXPECTED_IDS = [
    "Target_Bless",
    "Target_Fireball",
    "Target_Fireball_Quickened",
    "Shout_Cantrip",
    "Passive_Alert",
    "Target_Fireball",
]


@pytest.fixture
def ctx(cfg):
    return build_context(cfg)


def test_context_maps(ctx):
    assert ctx.lang["h_alert_name"] == "Alert"
    assert len(ctx.tooltips) == 2
    assert ctx.icons["statIcons_YeenoghusHunger"] == [6, 11, 0]


def test_layered_fireball_resolution(ctx):
    cfg = ctx.cfg
    sources = discover_sources(cfg.unpack_dir, cfg.spells, cfg.file_prefixes)
    entries = load_entries(sources, ctx.lang, ctx.tooltips).entries
    resolver = Resolver(group_entries(entries))
    assert resolver.resolve("Target_Fireball", "DisplayName") == "Fireball"
    assert resolver.resolve("Target_Fireball", "Description") == "A brighter streak flashes."
    assert resolver.resolve("Target_Fireball_Quickened", "Level") == "3"


def test_convert_orders_and_encodes(ctx):
    result = convert(ctx, workers=3)
    assert result.ids == EXPECTED_IDS
    assert result.types == "Target,Shout"
    assert result.version == "4.1"
    assert result.dds == ["Icons_Skills.dds", "Icons_Items.dds"]
    assert result.failures == []
    assert result.keys[:4] == ["SpellType", "Level", "DisplayName", "mod"]
    assert result.records[0] == "\x03\x04\x05\x06\x00Target\x001\x00Bless\x00Base"


def test_convert_synthetic_links(ctx):
    rows = result_rows(convert(ctx))
    assert rows["Target_Fireball_Quickened"]["Using"] == "1"
    assert "Using" not in rows["Target_Fireball"]
    patch = rows["Target_Fireball#1"]
    assert patch == {
        "Using": "5",
        "Description": "A brighter streak flashes.",
        "i": "1",
        "mod": "Mod",
    }
    assert rows["Shout_Cantrip"]["DisplayName"] == "h_not_in_lang"
    assert rows["Shout_Cantrip"]["Sheathing"] == ""
    assert rows["Target_Fireball"]["TooltipDamageList"] == (
        "<b>DealDamage(8d6,Fire)</b>\x02<b>DealDamage(1d6,Fire)</b>"
    )


def test_convert_is_reproducible(ctx):
    first = convert(ctx, workers=1)
    second = convert(ctx, workers=4)
    assert first.records == second.records
    assert first.keys == second.keys


def test_failed_file_aborts_unless_keep_going(ctx, tmp_path, monkeypatch):
    layer = tmp_path / "layer"
    layer.mkdir()
    (layer / "Spell_Good.txt").write_text('new entry "Target_Good"\ndata "Level" "1"\n', encoding="utf-8")
    (layer / "Spell_Bad.txt").write_text('new entry "Target_Bad"\n', encoding="utf-8")
    real_parse = loader.parse_stats

    def flaky_parse(text, weight, lang, tooltips):
        if "Target_Bad" in text:
            raise RuntimeError("boom")
        return real_parse(text, weight, lang, tooltips)

    monkeypatch.setattr(loader, "parse_stats", flaky_parse)
    bad_ctx = replace(ctx, cfg=replace(ctx.cfg, unpack_dir=tmp_path, spells=(("layer", "Only"),)))
    with pytest.raises(SourceError, match="Spell_Bad.txt"):
        convert(bad_ctx)
    result = convert(bad_ctx, keep_going=True)
    assert result.ids == ["Target_Good"]
    assert [f.path.name for f in result.failures] == ["Spell_Bad.txt"]


def test_write_and_reload_output(ctx, tmp_path):
    result = convert(ctx)
    out = tmp_path / "public" / "spells.json"
    write_output(result, out)
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["records"] == result.records
    assert data["icons"]["Item_Potion"] == [16, 8, 1]
    assert load_output_rows(out) == result_rows(result)
    assert load_output_rows(tmp_path / "missing.json") == {}
