from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from .. import log as runlog
from ..options import Option, OptionSet, OptionSource

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"-\d+(?:\.\d*)?(?:[eE][+-]?\d+)?|-\.\d+")
_COMPOUND_RE = re.compile(r"([^:=]*)[:=](.*)", re.DOTALL)

OVERFLOW_LONG = "option"
OVERFLOW_CODE = "o"

FIXED_FLAGS = (
    "description",
    "help",
    "version",
    "inspect",
    "investigate",
    "verbose",
    "quiet",
)


def looks_like_option(token: str) -> bool:
    """True for ``-x``/``--name`` tokens; negative numbers are values."""
    return len(token) > 1 and token[0] == "-" and not _NUMBER_RE.fullmatch(token)


def split_compound(body: str) -> tuple[str, str, bool]:
    """Split ``name=value`` or ``name:value`` at the first separator."""
    m = _COMPOUND_RE.fullmatch(body)
    if m is None:
        return body, "", False
    return m.group(1), m.group(2), True


class Parser:
    """Command-line parser over a single option set.

    The set always holds the stock options.  ``parse`` walks ``argv``
    (skipping ``argv[0]``), sets every recognised option from the command
    line and collects errors instead of raising.
    """

    def __init__(
        self,
        options: OptionSource | None = None,
        filename: str = "",
        section: str = "",
        *,
        single_dash_long: bool = False,
    ) -> None:
        self.option_set = OptionSet(
            options, source_file=filename, source_section=section, stock=True
        )
        if options and self.option_set.has_error:
            logger.warning("Options for %s %s not added", filename, section)
        self.single_dash_long = single_dash_long
        self.requests = runlog.RunState()
        self._errors: list[str] = []

    # -- error state ----------------------------------------------------------

    @property
    def has_error(self) -> bool:
        return bool(self._errors)

    @property
    def error_msg(self) -> str:
        return "\n".join(self._errors)

    def clear_errors(self) -> None:
        self._errors.clear()

    def _add_error(self, msg: str) -> None:
        logger.debug("%s", msg)
        if msg not in self._errors:
            self._errors.append(msg)

    # -- request flags --------------------------------------------------------

    @property
    def help_request(self) -> bool:
        return self.requests.help

    @property
    def version_request(self) -> bool:
        return self.requests.version

    @property
    def verbose_request(self) -> bool:
        return self.requests.verbose

    @property
    def description_request(self) -> bool:
        return self.requests.description

    @property
    def use_log_file(self) -> bool:
        return self.requests.use_log_file

    @property
    def log_file(self) -> str:
        return self.requests.log_file

    # -- option routing -------------------------------------------------------

    def _lookup(self, name: str) -> tuple[OptionSet, Option] | None:
        opt = self.option_set.find(name)
        if opt is None or not opt.cli_enabled:
            return None
        return self.option_set, opt

    def _missing(self, name: str, display: str) -> bool:
        self._add_error(f"Option '{display}' not found")
        return False

    def _missing_code(self, code: str) -> bool:
        return self._missing(code, f"-{code}")

    def _fixed_options(self) -> OptionSet | None:
        return self.option_set

    def _is_boolean(self, name: str) -> bool:
        found = self._lookup(name)
        return found is not None and found[1].is_boolean

    def _apply(self, name: str, value: str, display: str = "") -> bool:
        found = self._lookup(name)
        if found is None:
            return self._missing(name, display or name)
        opts, opt = found
        if opts.change_value(opt.name, value, from_cli=True):
            return True
        if opts.has_error:
            self._add_error(opts.error_message)
            return False
        opt.read_from_cli = True
        return True

    # -- parsing --------------------------------------------------------------

    def _is_overflow(self, token: str) -> bool:
        if token in (f"-{OVERFLOW_CODE}", f"--{OVERFLOW_LONG}"):
            return True
        return self.single_dash_long and token == f"-{OVERFLOW_LONG}"

    def _parse_overflow(self, arg: str) -> bool:
        name, value, compound = split_compound(arg)
        if name == "log" and not compound:
            found = self._lookup("log")
            value = found[1].default if found is not None else ""
        elif not compound and self._is_boolean(name):
            value = "true"
        return self._apply(name, value, arg)

    def _parse_token(self, args: Sequence[str], index: int) -> bool:
        token = args[index]
        boolvalue = True
        if token.startswith("--no-"):
            literal, _, _ = split_compound(token[2:])
            if self._lookup(literal) is not None:
                body, double = token[2:], True
            else:
                body, double, boolvalue = token[5:], True, False
                negated, _, _ = split_compound(body)
                if self._lookup(negated) is not None and not self._is_boolean(negated):
                    self._add_error(f"Option '{token}' negates a non-boolean option")
                    return False
        elif token.startswith("--"):
            body, double = token[2:], True
        else:
            body, double = token[1:], self.single_dash_long

        if not double and len(body) > 1:
            for code in body:
                if self._lookup(code) is None:
                    return self._missing_code(code)
                if not self._apply(code, "true", f"-{code}"):
                    return False
            return True

        name, value, compound = split_compound(body)
        if compound:
            if name in (OVERFLOW_LONG, OVERFLOW_CODE):
                return self._parse_overflow(value)
            return self._apply(name, value, f"{name}={value}")
        if self._is_boolean(name):
            value = "true" if boolvalue else "false"
        elif index + 1 < len(args) and not looks_like_option(args[index + 1]):
            value = args[index + 1]
        return self._apply(name, value, name)

    def parse(self, argv: Sequence[str]) -> bool:
        """Parse *argv*; ``argv[0]`` is the program name.

        Returns ``False`` if any token failed.  The fixed flags (help,
        version, verbose and so on) are read back even then.
        """
        self.clear_errors()
        args = list(argv)
        result = True
        i = 1
        while i < len(args):
            token = args[i]
            if token == "--":
                break
            if token == "-":
                self._add_error("Ill-formed option '-'")
                result = False
                break
            if not looks_like_option(token):
                i += 1
                continue
            if self._is_overflow(token):
                if i + 1 >= len(args) or looks_like_option(args[i + 1]):
                    self._add_error(f"Option '{token}' needs a name[=value] argument")
                    result = False
                    break
                if not self._parse_overflow(args[i + 1]):
                    result = False
                i += 2
                continue
            if not self._parse_token(args, i):
                result = False
            i += 1
        self._read_fixed_options()
        return result and not self.has_error

    def _read_fixed_options(self) -> None:
        opts = self._fixed_options()
        if opts is None:
            return
        for flag in FIXED_FLAGS:
            setattr(self.requests, flag, opts.boolean_value(flag))
        if opts.was_read_from_cli("log"):
            self.requests.use_log_file = True
            self.requests.log_file = opts.value("log") or opts.default_value("log")
        state = runlog.run_state
        for flag in FIXED_FLAGS:
            setattr(state, flag, getattr(self.requests, flag))
        if self.requests.use_log_file:
            state.use_log_file = True
            state.log_file = self.requests.log_file
        runlog.apply_run_state(state)

    def check_option(
        self, argv: Sequence[str], token: str, must_exist: bool = True
    ) -> bool:
        """Report whether *token* (``-x``, ``--name`` or a bare name) is in *argv*."""
        if not token:
            return False
        if token.startswith("-"):
            target = token
            stripped = token[1:] if len(token) == 2 else token[2:]
        else:
            target = ("--" if len(token) > 1 else "-") + token
            stripped = token
        for arg in list(argv)[1:]:
            if arg in ("--", "-"):
                break
            if arg == target:
                return self._lookup(stripped) is not None if must_exist else True
        return False

    def cli_help_text(self, color: bool = False) -> str:
        return self.option_set.cli_help_text(color=color)
