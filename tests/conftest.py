from pathlib import Path

import pytest

from spellpack.config import load_cfg
from spellpack.lang import load_lang, load_tooltips

FIXTURES = Path(__file__).resolve().parent / "fixtures"
UNPACK = FIXTURES / "unpack"


@pytest.fixture
def cfg():
    return load_cfg(FIXTURES / "cfg.yaml")


@pytest.fixture
def lang():
    return load_lang(UNPACK / "Localization" / "english.xml")


@pytest.fixture
def tooltips(lang):
    return load_tooltips(UNPACK / "GUI" / "TooltipExtraTexts.lsx", lang)
