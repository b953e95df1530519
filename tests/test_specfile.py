from __future__ import annotations

import pytest

from pyinicfg.errors import SpecLoadError
from pyinicfg.options import Kind
from pyinicfg.section import COMMENTS_SPEC, MAIN_SECTION_SPEC
from pyinicfg.specfile import (
    dumps_file_spec,
    load_file_spec,
    loads_file_spec,
    save_file_spec,
)
from tests.utils import DEMO_TOML, SMALL_SPEC


def test_loads_file_spec():
    spec = loads_file_spec(DEMO_TOML)
    assert spec.extension == "rc"
    assert spec.config_type == "rc"
    assert spec.basename == "demo"
    assert spec.sections[0] is MAIN_SECTION_SPEC
    audio = spec.sections[1]
    assert audio.name == "[audio]"
    gain = audio.options["gain"]
    assert gain.code == "g"
    assert gain.kind is Kind.FLOATING
    assert gain.cli_enabled
    mute = audio.options["mute"]
    assert mute.kind is Kind.BOOLEAN
    assert not mute.cli_enabled


def test_dump_and_reload(tmp_path):
    path = tmp_path / "specs" / "small.toml"
    save_file_spec(path, SMALL_SPEC)
    loaded = load_file_spec(path)
    assert loaded == SMALL_SPEC
    assert loaded.sections[1] is COMMENTS_SPEC
    text = dumps_file_spec(SMALL_SPEC)
    assert 'name = "[misc]"' in text
    assert "config-type" not in text


@pytest.mark.parametrize(
    "text",
    [
        "extension = ",
        'basename = "x"',
        'extension = "rc"\nsections = 3',
        'extension = "rc"\n[[sections]]\ndescription = "no name"',
        'extension = "rc"\n[[sections]]\nname = "a"\n[sections.options.x]\nkind = "colour"',
        'extension = "rc"\n[[sections]]\nname = "a"\n[sections.options.x]\ncode = "ab"',
        'extension = "rc"\n[[sections]]\nname = "a"\n[sections.options]\nx = 3',
    ],
)
def test_malformed_documents_raise(text):
    with pytest.raises(SpecLoadError):
        loads_file_spec(text)


def test_missing_file_raises(tmp_path):
    with pytest.raises(SpecLoadError):
        load_file_spec(tmp_path / "absent.toml")
