from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..options import Option, OptionSet
from ..section import GLOBAL
from ..sections import FileSections
from .parser import Parser

if TYPE_CHECKING:  # pragma: no cover
    from ..manager import SectionRegistry

logger = logging.getLogger(__name__)


class MultiParser(Parser):
    """Parser routing each option to the file and section that owns it.

    Long names and codes share one flat namespace across every registered
    file, so both must be unique; :meth:`cli_mappings_add` refuses a file
    that would collide.
    """

    def __init__(self, registry: SectionRegistry, *, single_dash_long: bool = False) -> None:
        super().__init__(single_dash_long=single_dash_long)
        self.registry = registry
        self.code_map: dict[str, str] = {}
        self.owner_map: dict[str, tuple[str, str]] = {}

    def _collision(self, fs: FileSections, section: str, what: str) -> bool:
        logger.warning(
            "CLI %s in '%s' %s is already registered",
            what, fs.config_type or "(global)", section or "(global)",
        )
        return False

    def check_mappings(self, fs: FileSections) -> bool:
        """True if every CLI-enabled name and code of *fs* is still free."""
        return self._new_mappings(fs) is not None

    def _new_mappings(
        self, fs: FileSections
    ) -> tuple[dict[str, str], dict[str, tuple[str, str]]] | None:
        codes: dict[str, str] = {}
        owners: dict[str, tuple[str, str]] = {}
        for sec in fs:
            for name, opt in sec.option_set.items():
                if not opt.cli_enabled:
                    continue
                if name in self.owner_map or name in owners:
                    self._collision(fs, sec.name, f"option '--{name}'")
                    return None
                if opt.code:
                    if opt.code in self.code_map or opt.code in codes:
                        self._collision(fs, sec.name, f"code '-{opt.code}' of '{name}'")
                        return None
                    codes[opt.code] = name
                owners[name] = (fs.config_type, sec.name)
        return codes, owners

    def cli_mappings_add(self, fs: FileSections) -> bool:
        """Map every CLI-enabled option of *fs*, or none of them."""
        mappings = self._new_mappings(fs)
        if mappings is None:
            return False
        codes, owners = mappings
        self.code_map.update(codes)
        self.owner_map.update(owners)
        logger.debug(
            "Mapped %d CLI options of '%s'", len(owners), fs.config_type or "(global)"
        )
        return True

    def owner(self, name: str) -> tuple[str, str] | None:
        """The ``(config type, section)`` owning *name* (long name or code)."""
        return self.owner_map.get(self._long_name(name))

    def _long_name(self, name: str) -> str:
        if len(name) == 1:
            return self.code_map.get(name, "")
        return name

    def _lookup(self, name: str) -> tuple[OptionSet, Option] | None:
        owner = self.owner(name)
        if owner is None:
            return None
        opts = self.registry.find_options(*owner)
        if opts is None:
            return None
        opt = opts.find(self._long_name(name))
        if opt is None:
            return None
        return opts, opt

    def _missing(self, name: str, display: str) -> bool:
        if self.owner(name) is None:
            logger.debug("No owner for CLI option '%s', skipped", display)
            return True
        return super()._missing(name, display)

    def _missing_code(self, code: str) -> bool:
        # an unknown code ends a cluster even though a lone one is skipped
        self._add_error(f"Option '-{code}' not found")
        return False

    def _fixed_options(self) -> OptionSet | None:
        return self.registry.find_options(GLOBAL, GLOBAL)

    def cli_help_text(self, color: bool = False) -> str:
        return self.registry.cli_help_text(color=color)
