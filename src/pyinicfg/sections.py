from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .options import OptionSet
from .paths import expand_directory
from .section import (
    GLOBAL,
    Section,
    SectionSpec,
    config_type_of,
    make_section_name,
)

logger = logging.getLogger(__name__)

FILE_INTRO = (
    "This file holds configuration data for pyinicfg applications.\n"
    "It follows a format similar to the INI files of MS-DOS."
)


@dataclass(frozen=True)
class FileSpec:
    """Static description of one configuration file.

    ``sections`` refers to shared :class:`SectionSpec` objects; they are
    never copied or modified when the file is built.
    """

    extension: str
    directory: str = ""
    basename: str = ""
    description: str = ""
    sections: tuple[SectionSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", tuple(self.sections))

    @property
    def config_type(self) -> str:
        return config_type_of(self.extension)


class FileSections:
    """All the sections of one configuration file."""

    app_version = "pyinicfg application configuration file"

    def __init__(self, spec: FileSpec | None = None, *, ininame: str = "") -> None:
        self.directory = ""
        self.basename = ""
        self.description = "This is a generic configuration file."
        self.version = 0
        self.sections: list[Section] = []
        self._extension = ""
        self._config_type = ""
        if ininame:
            path = Path(ininame)
            if str(path.parent) != ".":
                self.directory = str(path.parent)
            self.basename = path.stem
            self.extension = path.suffix
        if spec is not None:
            self.directory = spec.directory or self.directory
            self.basename = spec.basename or self.basename
            self.extension = spec.extension or self.extension
            if spec.description:
                self.description = spec.description
            for sec in spec.sections:
                self.add(Section(sec, self.extension))

    @classmethod
    def stock(cls) -> FileSections:
        """A file-less instance holding only the built-in options."""
        result = cls()
        result.description = "Built-in options."
        result.add(Section.stock())
        return result

    def __repr__(self) -> str:
        return f"FileSections(type={self.config_type!r}, sections={self.section_names()})"

    def __iter__(self) -> Iterator[Section]:
        return iter(self.sections)

    def __len__(self) -> int:
        return len(self.sections)

    # -- config type fix-up ---------------------------------------------------

    @property
    def extension(self) -> str:
        return self._extension

    @extension.setter
    def extension(self, value: str) -> None:
        self._extension = value
        self._fixup(config_type_of(value))

    @property
    def config_type(self) -> str:
        return self._config_type

    @config_type.setter
    def config_type(self, value: str) -> None:
        value = config_type_of(value)
        self._extension = f".{value}" if value else ""
        self._fixup(value)

    def _fixup(self, config_type: str) -> None:
        self._config_type = config_type
        for sec in self.sections:
            sec.config_type = config_type
            sec.option_set.source_file = config_type

    # -- sections -------------------------------------------------------------

    def add(self, section: Section) -> bool:
        if self.find_section(section.name) is not None:
            logger.warning(
                "Section %s already in '%s' file, not added",
                section.name or "(global)", self.config_type,
            )
            return False
        section.config_type = self.config_type
        section.option_set.source_file = self.config_type
        self.sections.append(section)
        return True

    def section_names(self) -> list[str]:
        return [sec.name for sec in self.sections]

    def active(self) -> bool:
        return any(sec.active() for sec in self.sections)

    def find_section(self, name: str = GLOBAL) -> Section | None:
        target = make_section_name(name)
        for sec in self.sections:
            if sec.name == target:
                return sec
        return None

    def find_options(self, name: str = GLOBAL) -> OptionSet | None:
        sec = self.find_section(name)
        return sec.option_set if sec is not None else None

    # -- files and text -------------------------------------------------------

    def file_name(self) -> str:
        if not self.config_type:
            return self.basename
        return f"{self.basename}.{self.config_type}"

    def file_path(self, directory: str | Path | None = None) -> Path:
        base = directory if directory is not None else self.directory
        return expand_directory(base) / self.file_name()

    def settings_text(self) -> str:
        text = self.app_version + "\n" + FILE_INTRO + "\n"
        text += self.file_name() + "\n" + self.description + "\n"
        for sec in self.sections:
            text += sec.settings_text()
        return text

    def cli_help_text(self, color: bool = False) -> str:
        return "".join(
            sec.cli_help_text(color=color)
            for sec in self.sections
            if any(opt.cli_enabled for _, opt in sec.option_set.items())
        )

    def help_text(self) -> str:
        return "".join(f"{sec.name}\n{sec.help_text()}" for sec in self.sections)

    def debug_text(self, show_builtins: bool = False) -> str:
        head = f"File '{self.file_name()}' type '{self.config_type}'\n"
        return head + "".join(sec.debug_text(show_builtins) for sec in self.sections)
