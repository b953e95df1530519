from __future__ import annotations

import pytest

from pyinicfg.options import OptionSpec
from pyinicfg.section import (
    MAIN_SECTION_SPEC,
    Section,
    SectionSpec,
    make_section_name,
    strip_section_name,
    word_wrap_commented,
)
from pyinicfg.sections import FileSections
from tests.utils import INTERACTION_SPEC, MISC_SPEC, SMALL_SPEC


def test_section_names_are_bracketed():
    assert make_section_name("misc") == "[misc]"
    assert make_section_name("[misc]") == "[misc]"
    assert make_section_name("") == ""
    assert strip_section_name("[misc]") == "misc"
    assert INTERACTION_SPEC.name == "[interaction-method]"


def test_section_from_spec():
    sec = Section(MISC_SPEC, ".small")
    assert sec.config_type == "small"
    assert sec.name == "[misc]"
    assert sec.active()
    assert sec.option_names == ["sets-mode", "port-naming"]
    assert sec.option_set.value("sets-mode") == "normal"
    assert sec.option_set.source_file == "small"
    assert sec.option_set.source_section == "[misc]"


def test_section_name_override():
    sec = Section(MISC_SPEC, "rc", "other")
    assert sec.name == "[other]"
    assert sec.config_type == "rc"


def test_sections_do_not_share_state():
    first = Section(MISC_SPEC, "rc")
    second = Section(MISC_SPEC, "rc")
    first.option_set.change_value("sets-mode", "expand")
    assert second.option_set.value("sets-mode") == "normal"
    clone = first.copy()
    clone.option_set.change_value("sets-mode", "auto")
    assert first.option_set.value("sets-mode") == "expand"
    assert MISC_SPEC.options["sets-mode"].value == ""


def test_find_option_spec():
    sec = Section(INTERACTION_SPEC, "small")
    assert sec.find_option_spec("s").name == "snap-split"
    assert sec.find_option_spec("missing") is None


def test_empty_section_is_inactive():
    sec = Section(SectionSpec("[empty]"), "rc")
    assert not sec.active()
    assert sec.add_option("late", OptionSpec("", "string", True, "x"))
    assert sec.active()
    assert sec.option_names == ["late"]
    assert not sec.add_option("late", OptionSpec("", "string", True, "y"))


def test_section_spec_rejects_duplicate_pairs():
    pairs = [
        ("a", OptionSpec("", "string")),
        ("a", OptionSpec("", "string")),
    ]
    with pytest.raises(ValueError):
        SectionSpec("[dup]", "", pairs)


def test_settings_text_follows_spec_order():
    sec = Section(MISC_SPEC, "small")
    text = sec.settings_text()
    assert text.startswith("\n# Miscellaneous settings.\n# These are just examples.\n[misc]\n\n")
    body = text.split("[misc]\n\n", 1)[1].splitlines()
    assert body[0].startswith('sets-mode = "normal"')
    assert body[1].startswith('port-naming = "short"')


def test_word_wrap_commented():
    text = word_wrap_commented("word " * 30)
    lines = text.splitlines()
    assert len(lines) > 1
    assert all(line.startswith("# ") and len(line) <= 78 for line in lines)


def test_file_sections_from_spec():
    fs = FileSections(SMALL_SPEC)
    assert fs.config_type == "small"
    assert fs.section_names() == ["[Cfg66]", "[comments]", "[misc]", "[interaction-method]"]
    assert fs.find_section("misc").name == "[misc]"
    assert fs.find_options("[interaction-method]").value("snap-split") == "false"
    assert fs.find_section("nothing") is None
    assert fs.find_options("nothing") is None
    assert fs.active()


def test_file_sections_share_specs_read_only():
    fs = FileSections(SMALL_SPEC)
    fs.find_options("misc").change_value("sets-mode", "auto")
    other = FileSections(SMALL_SPEC)
    assert other.find_options("misc").value("sets-mode") == "normal"
    assert SMALL_SPEC.sections[0] is MAIN_SECTION_SPEC


def test_config_type_fixup():
    fs = FileSections(SMALL_SPEC)
    fs.extension = ".rc"
    assert fs.config_type == "rc"
    assert fs.find_section("misc").config_type == "rc"
    fs.config_type = "usr"
    assert fs.extension == ".usr"
    assert fs.find_options("misc").source_file == "usr"


def test_file_name_and_path(tmp_path):
    fs = FileSections(SMALL_SPEC)
    assert fs.file_name() == "small.small"
    assert fs.file_path(tmp_path) == tmp_path.resolve() / "small.small"


def test_default_directory_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("PYINICFG_CONFIG_DIR", str(tmp_path))
    fs = FileSections(SMALL_SPEC)
    assert fs.file_path() == tmp_path.resolve() / "small.small"


def test_ininame_splits_path():
    fs = FileSections(ininame="/tmp/cfg/app.session")
    assert fs.directory == "/tmp/cfg"
    assert fs.basename == "app"
    assert fs.config_type == "session"


def test_stock_file_sections():
    fs = FileSections.stock()
    assert fs.config_type == ""
    opts = fs.find_options("")
    assert opts is not None
    assert opts.value("log") == "app.log"
    assert fs.find_section("").option_names[0] == "description"


def test_duplicate_section_not_added():
    fs = FileSections(SMALL_SPEC)
    assert not fs.add(Section(MISC_SPEC, "small"))
    assert len(fs) == 4


def test_file_settings_text():
    text = FileSections(SMALL_SPEC).settings_text()
    assert "small.small\nA small test file.\n" in text
    assert "[interaction-method]" in text
