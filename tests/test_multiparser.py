from __future__ import annotations

import logging

import pytest

from pyinicfg import log
from pyinicfg.manager import SectionRegistry
from tests.utils import SMALL_SPEC, audio_spec, ui_spec


@pytest.fixture
def registry() -> SectionRegistry:
    reg = SectionRegistry()
    assert reg.add_sections_list(
        [SMALL_SPEC, audio_spec("rc"), ui_spec("usr", option="ui-gain")]
    )
    return reg


def test_options_routed_to_owning_section(registry):
    argv = ["prog", "--sets-mode", "expand", "-g", "1.5", "--theme=light", "-s"]
    assert registry.parse_cli(argv)
    assert registry.value("sets-mode", "small", "misc") == "expand"
    assert registry.floating_value("gain", "rc", "audio") == 1.5
    assert registry.value("theme", "usr", "ui") == "light"
    assert registry.boolean_value("snap-split", "small", "interaction-method")
    misc = registry.find_options("small", "misc")
    assert misc.was_read_from_cli("sets-mode")
    assert not misc.was_read_from_cli("port-naming")


def test_unmapped_names_are_skipped(registry, caplog):
    with caplog.at_level(logging.DEBUG, logger="pyinicfg"):
        assert registry.parse_cli(["prog", "--unknown-thing", "-a", "--channels=4"])
    assert not registry.parser.has_error
    assert registry.integer_value("channels", "rc", "audio") == 4
    assert "unknown-thing" in caplog.text


def test_cli_disabled_option_not_routed(registry):
    assert registry.parse_cli(["prog", "--double-click-edit=false"])
    assert registry.value("double-click-edit", "small", "interaction-method") == "true"


def test_invalid_value_reported(registry):
    assert not registry.parse_cli(["prog", "--channels=12"])
    assert "channels" in registry.error_msg
    assert registry.integer_value("channels", "rc", "audio") == 2


def test_overflow_routes_through_registry(registry):
    assert registry.parse_cli(["prog", "-o", "port-naming=long", "--option", "snap-split"])
    assert registry.value("port-naming", "small", "misc") == "long"
    assert registry.boolean_value("snap-split", "small", "interaction-method")


def test_fixed_flags_read_from_global_set(registry):
    assert registry.parse_cli(["prog", "--verbose", "--version"])
    assert registry.boolean_value("verbose")
    assert registry.parser.verbose_request
    assert registry.parser.version_request
    assert log.run_state.verbose
    assert log.logger.level == logging.DEBUG


def test_log_file_from_global_set(registry, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert registry.parse_cli(["prog", "-o", "log"])
    assert registry.parser.use_log_file
    assert log.run_state.log_file == "app.log"


def test_owner_lookup(registry):
    assert registry.parser.owner("gain") == ("rc", "[audio]")
    assert registry.parser.owner("g") == ("rc", "[audio]")
    assert registry.parser.owner("h") == ("", "")
    assert registry.parser.owner("double-click-edit") is None
    assert registry.parser.owner("zz") is None


def test_check_option_uses_mappings(registry):
    argv = ["prog", "-t", "dark", "--bogus"]
    assert registry.parser.check_option(argv, "-t")
    assert not registry.parser.check_option(argv, "bogus")


def test_help_covers_every_file(registry):
    text = registry.parser.cli_help_text()
    for name in ("--help", "--sets-mode", "--gain", "--theme"):
        assert name in text


def test_unknown_code_stops_cluster(registry):
    assert not registry.parse_cli(["prog", "-zst"])
    assert "Option '-z' not found" in registry.error_msg
    assert not registry.boolean_value("snap-split", "small", "interaction-method")


def test_known_cluster_applies_every_code(registry):
    assert registry.parse_cli(["prog", "-sV"])
    assert registry.boolean_value("snap-split", "small", "interaction-method")
    assert registry.boolean_value("verbose")
