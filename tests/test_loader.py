import pytest

from spellpack import loader
from spellpack.errors import SourceError
from spellpack.lang import TooltipMap
from spellpack.loader import SourceFile, discover_sources, load_entries

from conftest import UNPACK

LAYERS = [("layers/Base", "Base"), ("layers/Mod", "Mod")]


def test_discovery_filters_prefixes_and_assigns_weights():
    sources = discover_sources(UNPACK, LAYERS, ("Spell_", "Passive"))
    assert [(s.path.parent.name, s.path.name, s.weight) for s in sources] == [
        ("Base", "Passive.txt", 0),
        ("Base", "Spell_Shout.txt", 0),
        ("Base", "Spell_Target.txt", 0),
        ("Mod", "Spell_Target.txt", 1),
    ]


def test_missing_layer_directory():
    with pytest.raises(SourceError):
        discover_sources(UNPACK, [("layers/Nope", "Nope")], ("Spell_",))


def test_load_entries_merges_all_files(lang, tooltips):
    sources = discover_sources(UNPACK, LAYERS, ("Spell_", "Passive"))
    outcome = load_entries(sources, lang, tooltips, workers=2)
    assert outcome.failures == []
    assert outcome.files == 4
    ids = [e.id for e in outcome.entries]
    assert ids.count("Target_Fireball") == 2
    assert "Status_Ignored" not in ids
    assert len(ids) == 6


def test_failed_file_is_reported_without_losing_others(monkeypatch, tmp_path):
    good = tmp_path / "Spell_Good.txt"
    good.write_text('new entry "Target_Good"\n', encoding="utf-8")
    bad = tmp_path / "Spell_Bad.txt"
    bad.write_text('new entry "Target_Bad"\n', encoding="utf-8")
    real_parse = loader.parse_stats

    def flaky_parse(text, weight, lang, tooltips):
        if "Target_Bad" in text:
            raise RuntimeError("boom")
        return real_parse(text, weight, lang, tooltips)

    monkeypatch.setattr(loader, "parse_stats", flaky_parse)
    outcome = load_entries(
        [SourceFile(bad, 0), SourceFile(good, 0), SourceFile(tmp_path / "Spell_Gone.txt", 1)],
        {},
        TooltipMap(),
    )
    assert [e.id for e in outcome.entries] == ["Target_Good"]
    assert [f.path.name for f in outcome.failures] == ["Spell_Bad.txt", "Spell_Gone.txt"]
    assert "RuntimeError: boom" in outcome.failures[0].error
    assert outcome.failures[1].error.startswith("FileNotFoundError")


def test_no_sources():
    outcome = load_entries([], {}, TooltipMap())
    assert outcome.entries == [] and outcome.files == 0


def test_byte_order_mark_keeps_first_entry(tmp_path):
    path = tmp_path / "Spell_Bom.txt"
    path.write_bytes('new entry "Target_A"\ndata "Level" "1"\nnew entry "Target_B"\n'.encode("utf-8-sig"))
    outcome = load_entries([SourceFile(path, 0)], {}, TooltipMap())
    assert outcome.failures == []
    assert [e.id for e in outcome.entries] == ["Target_A", "Target_B"]
    assert outcome.entries[0].attributes == {"Level": "1"}
