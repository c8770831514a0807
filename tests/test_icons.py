import pytest

from spellpack.errors import DecodeError, SourceError
from spellpack.icons import load_icons, parse_icon_uvs, quantize

from conftest import UNPACK

ATLASES = [UNPACK / "GUI" / "Icons_Skills.lsx", UNPACK / "GUI" / "Icons_Items.lsx"]


def test_icon_from_first_atlas():
    icons = load_icons(ATLASES)
    assert icons["statIcons_YeenoghusHunger"] == [6, 11, 0]
    assert icons["Spell_Evocation_Fireball"] == [1, 31, 0]


def test_icon_atlas_index_follows_config_order():
    icons = load_icons(ATLASES)
    assert icons["Item_Potion"] == [16, 8, 1]
    assert load_icons(reversed(ATLASES))["Item_Potion"] == [16, 8, 0]


def test_icon_without_map_key_is_skipped():
    assert len(load_icons(ATLASES[:1])) == 2


def test_quantize_truncates_and_clamps_into_a_byte():
    assert quantize("0.999") == 31
    assert quantize("0") == 0
    assert quantize("8.0") == 255
    assert quantize("-0.5") == 0
    assert quantize("-0.01") == 0


def test_bad_uv_value():
    xml = (
        "<save><node id='IconUV'>"
        "<attribute id='MapKey' value='k'/><attribute id='U1' value='abc'/>"
        "</node></save>"
    )
    with pytest.raises(DecodeError):
        parse_icon_uvs(xml, 0)


def test_missing_atlas_file():
    with pytest.raises(SourceError):
        load_icons([UNPACK / "GUI" / "Icons_Nope.lsx"])
