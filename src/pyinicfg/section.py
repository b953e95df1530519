from __future__ import annotations

import copy
import logging
import textwrap
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .options import (
    STOCK_OPTIONS,
    TERMINAL_WIDTH,
    Option,
    OptionSet,
    OptionSpec,
)

logger = logging.getLogger(__name__)

GLOBAL = ""

MAIN_SECTION = "[Cfg66]"
COMMENTS_SECTION = "[comments]"


def make_section_name(name: str) -> str:
    """Return *name* in bracketed ``[name]`` form; an empty name stays empty."""
    name = name.strip()
    if not name or (name.startswith("[") and name.endswith("]")):
        return name
    return f"[{name}]"


def strip_section_name(name: str) -> str:
    name = name.strip()
    if name.startswith("[") and name.endswith("]"):
        return name[1:-1]
    return name


def config_type_of(extension: str) -> str:
    return extension[1:] if extension.startswith(".") else extension


def word_wrap_commented(text: str, width: int = TERMINAL_WIDTH) -> str:
    """Wrap *text* into ``# `` prefixed lines, keeping its own line breaks."""
    lines: list[str] = []
    for para in text.rstrip("\n").splitlines():
        wrapped = textwrap.wrap(para, width - 2)
        if not wrapped:
            lines.append("#")
        lines.extend(f"# {line}" for line in wrapped)
    return "\n".join(lines)


@dataclass(frozen=True)
class SectionSpec:
    """Static description of one ``[section]``: its name, text and options."""

    name: str
    description: str = ""
    options: Mapping[str, OptionSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", make_section_name(self.name))
        opts = self.options
        if not isinstance(opts, Mapping):
            opts = _ordered_pairs(opts)
        object.__setattr__(self, "options", dict(opts))


def _ordered_pairs(pairs: Iterable[tuple[str, OptionSpec]]) -> dict[str, OptionSpec]:
    result: dict[str, OptionSpec] = {}
    for name, spec in pairs:
        if name in result:
            raise ValueError(f"duplicate option in section spec: {name!r}")
        result[name] = spec
    return result


MAIN_SECTION_SPEC = SectionSpec(
    MAIN_SECTION,
    "This file holds the main configuration data for pyinicfg applications.\n"
    "It follows a format similar to the old INI files of MS-DOS.\n"
    "'config-type' can be used to make sure the right kind of file is in use.\n"
    "'version' helps the application to detect older configuration files.\n",
    {
        "config-type": OptionSpec(
            "", "string", False, "session", "",
            description="The type of configuration file.",
        ),
        "version": OptionSpec(
            "", "integer", False, "0", "",
            description="Configuration file version.",
        ),
    },
)

COMMENTS_SPEC = SectionSpec(
    COMMENTS_SECTION,
    "[comments] holds user documentation for this file. The first empty, hash-\n"
    "commented, or tag line ends the comment. Use a space for line breaks.\n",
    {
        "comment": OptionSpec(
            "", "section", False,
            "Add your comment block here.", "",
            description="Configuration file user comments.",
        ),
    },
)


class Section:
    """One ``[section]`` of one configuration file.

    The section owns its :class:`OptionSet`; :attr:`option_names` keeps the
    order in which the options were specified, which is the output order.
    """

    def __init__(
        self,
        spec: SectionSpec,
        extension: str = "",
        name_override: str = "",
        *,
        stock: bool = False,
    ) -> None:
        self.config_type = config_type_of(extension)
        self.name = make_section_name(name_override or spec.name)
        self.description = spec.description
        self.option_names: list[str] = []
        self.option_set = OptionSet(
            source_file=self.config_type,
            source_section=self.name,
            stock=stock,
        )
        if stock:
            self.option_names.extend(self.option_set.names())
        for name, opt in spec.options.items():
            self.add_option(name, opt)
        self.option_set.initialize()

    @classmethod
    def stock(cls) -> Section:
        """The global section holding only the built-in options."""
        return cls(SectionSpec(GLOBAL, "Built-in command-line options."), stock=True)

    def __repr__(self) -> str:
        return f"Section({self.name!r}, type={self.config_type!r}, options={len(self.option_set)})"

    def active(self) -> bool:
        return not self.option_set.empty()

    def copy(self) -> Section:
        return copy.deepcopy(self)

    def add_name(self, name: str) -> None:
        if name not in self.option_names:
            self.option_names.append(name)

    def add_option(self, name: str, spec: OptionSpec | Option) -> bool:
        if self.option_set.add(name, spec):
            self.add_name(name)
            return True
        return False

    def add_options(self, specs: Mapping[str, OptionSpec]) -> bool:
        if not self.option_set.add_all(specs):
            return False
        for name in specs:
            self.add_name(name)
        return True

    def find_option_spec(self, name: str) -> Option | None:
        return self.option_set.find(name)

    def description_commented(self) -> str:
        return word_wrap_commented(self.description)

    def settings_text(self) -> str:
        """The section as it is written to a configuration file."""
        text = "\n" + self.description_commented() + "\n" + self.name + "\n\n"
        for name in self.option_names:
            text += self.option_set.setting_line(name) + "\n"
        return text

    def cli_help_text(self, color: bool = False) -> str:
        return self.option_set.cli_help_text(color=color)

    def help_text(self) -> str:
        return self.option_set.help_text()

    def debug_text(self, show_builtins: bool = False) -> str:
        return f"{self.name or '(global)'}\n" + self.option_set.debug_text(show_builtins)
