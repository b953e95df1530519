"""TOML documents describing configuration files.

Example::

    extension = "rc"
    basename = "demo"
    description = "Demo file."

    [[sections]]
    name = "[Cfg66]"            # no options: the stock header section

    [[sections]]
    name = "[audio]"
    description = "Audio settings."

    [sections.options.gain]
    code = "g"
    kind = "floating"
    cli = true
    default = "0.0<=1.0<=2.0"
    description = "Output gain."
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import SpecLoadError
from .options import OptionSpec
from .section import (
    COMMENTS_SECTION,
    COMMENTS_SPEC,
    MAIN_SECTION,
    MAIN_SECTION_SPEC,
    SectionSpec,
    make_section_name,
)
from .sections import FileSpec

__all__ = [
    "dumps_file_spec",
    "load_file_spec",
    "loads_file_spec",
    "save_file_spec",
]

_STOCK_SECTIONS = {
    MAIN_SECTION: MAIN_SECTION_SPEC,
    COMMENTS_SECTION: COMMENTS_SPEC,
}


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


def _option_spec(name: str, data: Any) -> OptionSpec:
    if not isinstance(data, Mapping):
        raise SpecLoadError(f"option {name!r} must be a table")
    try:
        return OptionSpec(
            code=_text(data.get("code", "")),
            kind=_text(data.get("kind", "boolean")),
            cli_enabled=bool(data.get("cli", True)),
            default=_text(data.get("default", "")),
            value=_text(data.get("value", "")),
            description=_text(data.get("description", "")),
            built_in=bool(data.get("built_in", False)),
        )
    except ValueError as exc:
        raise SpecLoadError(f"option {name!r}: {exc}") from exc


def _section_spec(data: Any) -> SectionSpec:
    if not isinstance(data, Mapping) or not data.get("name"):
        raise SpecLoadError("every section needs a name")
    name = make_section_name(_text(data["name"]))
    options = data.get("options")
    if options is None and name in _STOCK_SECTIONS:
        return _STOCK_SECTIONS[name]
    options = options or {}
    if not isinstance(options, Mapping):
        raise SpecLoadError(f"options of {name} must be a table")
    specs = {str(k): _option_spec(str(k), v) for k, v in options.items()}
    return SectionSpec(name, _text(data.get("description", "")), specs)


def loads_file_spec(text: str) -> FileSpec:
    """Parse a TOML document into a :class:`FileSpec`."""
    try:
        data = tomlkit.parse(text).unwrap()
    except TOMLKitError as exc:
        raise SpecLoadError(f"invalid specification: {exc}") from exc
    extension = _text(data.get("extension", ""))
    if not extension:
        raise SpecLoadError("specification has no extension")
    sections = data.get("sections", [])
    if not isinstance(sections, list):
        raise SpecLoadError("'sections' must be an array of tables")
    return FileSpec(
        extension=extension,
        directory=_text(data.get("directory", "")),
        basename=_text(data.get("basename", "")),
        description=_text(data.get("description", "")),
        sections=tuple(_section_spec(s) for s in sections),
    )


def load_file_spec(path: str | Path) -> FileSpec:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"cannot read {path}: {exc}") from exc
    return loads_file_spec(text)


def dumps_file_spec(spec: FileSpec) -> str:
    doc = tomlkit.document()
    doc.add("extension", spec.extension)
    if spec.directory:
        doc.add("directory", spec.directory)
    doc.add("basename", spec.basename)
    doc.add("description", spec.description)
    sections = tomlkit.aot()
    for sec in spec.sections:
        table = tomlkit.table()
        table.add("name", sec.name)
        if _STOCK_SECTIONS.get(sec.name) is sec:
            sections.append(table)
            continue
        table.add("description", sec.description)
        options = tomlkit.table()
        for name, opt in sec.options.items():
            entry = tomlkit.table()
            entry.add("code", opt.code)
            entry.add("kind", str(opt.kind))
            entry.add("cli", opt.cli_enabled)
            entry.add("default", opt.default)
            if opt.value:
                entry.add("value", opt.value)
            entry.add("description", opt.description)
            if opt.built_in:
                entry.add("built_in", True)
            options.add(name, entry)
        table.add("options", options)
        sections.append(table)
    doc.add("sections", sections)
    return tomlkit.dumps(doc)


def save_file_spec(path: str | Path, spec: FileSpec) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(dumps_file_spec(spec), encoding="utf-8")
    tmp.replace(path)
