"""Process-wide registry of configuration files.

A :class:`SectionRegistry` maps a config type (a file extension without the
dot) to the :class:`FileSections` of that file, and owns the
:class:`MultiParser` that routes command-line options to them.  Options are
addressed by ``(name, config_type, section)``; the empty :data:`GLOBAL`
config type and section address the built-in options.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from . import inifile
from .cmdline import MultiParser
from .options import Option, OptionSet
from .section import GLOBAL, Section, config_type_of
from .sections import FileSections, FileSpec

logger = logging.getLogger(__name__)


class SectionRegistry:
    def __init__(self, *, single_dash_long: bool = False) -> None:
        self._files: dict[str, FileSections] = {}
        self.parser = MultiParser(self, single_dash_long=single_dash_long)
        stock = FileSections.stock()
        self._files[GLOBAL] = stock
        self.parser.cli_mappings_add(stock)

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __contains__(self, config_type: object) -> bool:
        return config_type in self._files

    def __repr__(self) -> str:
        return f"SectionRegistry({list(self._files)})"

    # -- registration ---------------------------------------------------------

    def add_sections(self, spec: FileSpec) -> bool:
        """Register the file described by *spec*.

        Fails without changing anything if the config type is empty or
        already present, or if one of its CLI options collides with an
        option that is already mapped.
        """
        config_type = config_type_of(spec.extension)
        if not config_type:
            logger.warning("File specification has no extension, not added")
            return False
        if config_type in self._files:
            logger.warning("Config type '%s' already registered", config_type)
            return False
        fs = FileSections(spec)
        if not self.parser.check_mappings(fs):
            return False
        self._files[config_type] = fs
        self.parser.cli_mappings_add(fs)
        logger.debug("Registered config type '%s'", config_type)
        return True

    def add_sections_list(self, specs: Iterable[FileSpec]) -> bool:
        for spec in specs:
            if not self.add_sections(spec):
                return False
        return True

    def count(self) -> int:
        """Number of registered files, the global one excluded."""
        return len(self._files) - 1

    def active(self) -> bool:
        return self.count() > 0

    def config_types(self) -> list[str]:
        return [ct for ct in self._files if ct != GLOBAL]

    # -- lookup ---------------------------------------------------------------

    def find_sections(self, config_type: str = GLOBAL) -> FileSections | None:
        return self._files.get(config_type_of(config_type))

    def find_section(
        self, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> Section | None:
        fs = self.find_sections(config_type)
        return fs.find_section(section) if fs is not None else None

    def find_options(
        self, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> OptionSet | None:
        sec = self.find_section(config_type, section)
        return sec.option_set if sec is not None else None

    def find_option_spec(
        self, name: str, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> Option | None:
        opts = self.find_options(config_type, section)
        return opts.find(name) if opts is not None else None

    # -- triplet access -------------------------------------------------------

    def value(self, name: str, config_type: str = GLOBAL, section: str = GLOBAL) -> str:
        opts = self.find_options(config_type, section)
        return opts.value(name) if opts is not None else ""

    def boolean_value(
        self, name: str, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> bool:
        opts = self.find_options(config_type, section)
        return opts.boolean_value(name) if opts is not None else False

    def integer_value(
        self, name: str, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> int:
        opts = self.find_options(config_type, section)
        return opts.integer_value(name) if opts is not None else 0

    def floating_value(
        self, name: str, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> float:
        opts = self.find_options(config_type, section)
        return opts.floating_value(name) if opts is not None else 0.0

    def set_value(
        self, name: str, value: str, config_type: str = GLOBAL, section: str = GLOBAL
    ) -> bool:
        opts = self.find_options(config_type, section)
        return opts.set_value(name, value) if opts is not None else False

    def change_value(
        self,
        name: str,
        value: str,
        config_type: str = GLOBAL,
        section: str = GLOBAL,
        from_cli: bool = False,
    ) -> bool:
        opts = self.find_options(config_type, section)
        return opts.change_value(name, value, from_cli) if opts is not None else False

    # -- command line and files -----------------------------------------------

    def parse_cli(self, argv: Sequence[str]) -> bool:
        return self.parser.parse(argv)

    @property
    def error_msg(self) -> str:
        return self.parser.error_msg

    def read(self, config_type: str, path: str | Path | None = None) -> bool:
        fs = self.find_sections(config_type)
        if fs is None or config_type_of(config_type) == GLOBAL:
            logger.warning("Cannot read unknown config type '%s'", config_type)
            return False
        return inifile.read_file(fs, path)

    def write(self, config_type: str, path: str | Path | None = None) -> bool:
        fs = self.find_sections(config_type)
        if fs is None or config_type_of(config_type) == GLOBAL:
            logger.warning("Cannot write unknown config type '%s'", config_type)
            return False
        return inifile.write_file(fs, path)

    def cli_help_text(self, color: bool = False) -> str:
        return "".join(fs.cli_help_text(color=color) for fs in self._files.values())

    def help_text(self) -> str:
        return "".join(fs.help_text() for fs in self._files.values())

    def debug_text(self, show_builtins: bool = False) -> str:
        return "".join(fs.debug_text(show_builtins) for fs in self._files.values())
