"""Named, typed configuration options.

Every option value is kept as a string; the typed accessors of
:class:`OptionSet` parse it on demand.  Integer and floating options may
encode their valid range in the default string, for example
``"0<=0<=99"`` (closed bounds) or ``"0<5<10"`` (open bounds).
"""

from __future__ import annotations

import io
import logging
import math
import re
import struct
import sys
import textwrap
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

# Single-precision limits used by the range and comparison helpers
FLT_EPSILON = 1.1920928955078125e-07
FLT_MIN = 1.1754943508222875e-38
FLT_MAX = 3.4028234663852886e38
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

# Nominal default of a range string that cannot be parsed
NO_DEFAULT = -99999

HANGING_WIDTH = 25
FIELD_WIDTH = 40
TERMINAL_WIDTH = 78

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class Kind(str, Enum):
    """The value kinds an option can hold."""

    BOOLEAN = "boolean"
    FILENAME = "filename"
    FLOATING = "floating"
    FLOATPAIR = "floatpair"
    INTEGER = "integer"
    INTPAIR = "intpair"
    LIST = "list"
    RECENTS = "recents"
    OVERFLOW = "overflow"
    SECTION = "section"
    STRING = "string"
    DUMMY = "dummy"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, text: str | Kind) -> Kind:
        if isinstance(text, Kind):
            return text
        key = str(text).strip().lower()
        key = _KIND_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown option kind: {text!r}") from None


_KIND_ALIASES = {"bool": "boolean", "int": "integer", "float": "floating"}


@dataclass(frozen=True)
class OptionSpec:
    """Static description of one option."""

    code: str = ""
    kind: Kind | str = Kind.BOOLEAN
    cli_enabled: bool = True
    default: str = ""
    value: str = ""
    read_from_cli: bool = False
    modified: bool = False
    description: str = ""
    built_in: bool = False

    def __post_init__(self) -> None:
        if len(self.code) > 1:
            raise ValueError(f"option code must be a single character: {self.code!r}")
        if self.code == "-" or self.code.isspace():
            raise ValueError(f"invalid option code: {self.code!r}")
        object.__setattr__(self, "kind", Kind.from_string(self.kind))


@dataclass
class Option:
    """A live option owned by exactly one :class:`OptionSet`."""

    name: str
    code: str = ""
    kind: Kind = Kind.BOOLEAN
    cli_enabled: bool = True
    default: str = ""
    value: str = ""
    read_from_cli: bool = False
    modified: bool = False
    description: str = ""
    built_in: bool = False

    @classmethod
    def from_spec(cls, name: str, spec: OptionSpec | Option) -> Option:
        return cls(
            name=name,
            code=spec.code,
            kind=Kind.from_string(spec.kind),
            cli_enabled=spec.cli_enabled,
            default=spec.default,
            value=spec.value,
            read_from_cli=spec.read_from_cli,
            modified=spec.modified,
            description=spec.description,
            built_in=spec.built_in,
        )

    def to_spec(self) -> OptionSpec:
        data = {f.name: getattr(self, f.name) for f in fields(OptionSpec)}
        return OptionSpec(**data)

    @property
    def is_boolean(self) -> bool:
        return self.kind is Kind.BOOLEAN

    @property
    def is_int(self) -> bool:
        # a list starts with its integer item count
        return self.kind in (Kind.INTEGER, Kind.LIST)

    @property
    def is_float(self) -> bool:
        return self.kind is Kind.FLOATING

    @property
    def is_quotable(self) -> bool:
        return self.kind in (Kind.STRING, Kind.FILENAME)

    @property
    def is_overflow(self) -> bool:
        return self.kind is Kind.OVERFLOW

    @property
    def is_section(self) -> bool:
        return self.kind is Kind.SECTION

    @property
    def shows_default(self) -> bool:
        return self.code not in ("h", "v")


OptionSource = Union[
    Mapping[str, OptionSpec],
    Iterable[tuple[str, OptionSpec]],
    "OptionSet",
]


STOCK_OPTIONS: dict[str, OptionSpec] = {
    "description": OptionSpec(
        "", "boolean", True, "false", "false",
        description="Flags application to show more extra information.",
        built_in=True,
    ),
    "help": OptionSpec(
        "h", "boolean", True, "false", "false",
        description="Show this help text.", built_in=True,
    ),
    "inspect": OptionSpec(
        "I", "boolean", True, "false", "false",
        description="This is a trouble-shooting option.", built_in=True,
    ),
    "investigate": OptionSpec(
        "i", "boolean", True, "false", "false",
        description="This is another trouble-shooting option.", built_in=True,
    ),
    "log": OptionSpec(
        "", "string", True, "app.log", "",
        description="Specifies use of a log file.", built_in=True,
    ),
    "option": OptionSpec(
        "o", "overflow", True, "false", "false",
        description="Handles 'overflow' options (no character code).",
        built_in=True,
    ),
    "quiet": OptionSpec(
        "Q", "boolean", True, "false", "false",
        description="Show less information.", built_in=True,
    ),
    "verbose": OptionSpec(
        "V", "boolean", True, "false", "false",
        description="Show extra information.", built_in=True,
    ),
    "version": OptionSpec(
        "v", "boolean", True, "false", "false",
        description="Show version information.", built_in=True,
    ),
}


# ---------------------------------------------------------------------------
# Float comparison
# ---------------------------------------------------------------------------

def _f32(x: float) -> float:
    """Round *x* to single precision."""
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def almost_equal(target: float, source: float, ulp: int = 7) -> bool:
    """Compare two floats within *ulp* units of single-precision epsilon."""
    target, source = _f32(target), _f32(source)
    diff = _f32(abs(source - target))
    total = _f32(abs(source + target))
    limit = _f32(FLT_EPSILON * total * ulp)
    return diff <= limit or diff < FLT_MIN


def approximates(target: float, source: float, precision: float = 0.0) -> bool:
    """Absolute-difference comparison.

    A zero *precision* becomes ``0.001 * max(1, |target|)``.
    """
    target, source = _f32(target), _f32(source)
    diff = _f32(abs(source - target))
    if precision == 0.0:
        precision = _f32(0.001 * max(1.0, abs(target)))
    return diff < precision


# ---------------------------------------------------------------------------
# String conversions
# ---------------------------------------------------------------------------

def string_to_int(text: str, default: int = 0) -> int:
    """Parse the leading integer of *text*, ``atoi`` style."""
    m = _INT_RE.match(text or "")
    return int(m.group(1)) if m else default


def string_to_float(text: str, default: float = 0.0) -> float:
    m = _FLOAT_RE.match(text or "")
    return float(m.group(1)) if m else default


def range_tokens(text: str) -> list[str]:
    cleaned = "".join((text or "").split())
    if not cleaned:
        return []
    return [t for t in cleaned.split("<") if t]


def is_range(text: str) -> bool:
    return "<" in (text or "")


def hanging_word_wrap(
    text: str, hanging: int = HANGING_WIDTH, width: int = TERMINAL_WIDTH
) -> str:
    """Wrap *text* to start at column *hanging* on every continuation line."""
    lines = textwrap.wrap(text, max(width - hanging, 10)) or [""]
    return ("\n" + " " * hanging).join(lines)


def _pair(text: str) -> tuple[str, str]:
    first, _, second = (text or "").partition("x")
    return first, second


# ---------------------------------------------------------------------------
# Option sets
# ---------------------------------------------------------------------------

class OptionSet:
    """A name-ordered mapping of option name to :class:`Option`.

    Failures never raise: mutators return ``False`` and leave a message in
    :attr:`error_message` when there is something to report.
    """

    def __init__(
        self,
        specs: OptionSource | None = None,
        *,
        source_file: str = "",
        source_section: str = "",
        stock: bool = False,
    ) -> None:
        self.source_file = source_file
        self.source_section = source_section
        self._stock = stock
        self._options: dict[str, Option] = {}
        self._error = ""
        if stock:
            self.add_all(STOCK_OPTIONS)
        if specs:
            self.add_all(specs)
        self.initialize()

    # -- container protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._options)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._options))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.option_exists(name)

    def __repr__(self) -> str:
        return (
            f"OptionSet({len(self)} options, file={self.source_file!r}, "
            f"section={self.source_section!r})"
        )

    def empty(self) -> bool:
        return not self._options

    def names(self) -> list[str]:
        return sorted(self._options)

    def items(self) -> Iterator[tuple[str, Option]]:
        for name in sorted(self._options):
            yield name, self._options[name]

    @property
    def stocked(self) -> bool:
        return self._stock

    # -- error state --------------------------------------------------------

    @property
    def has_error(self) -> bool:
        return bool(self._error)

    @property
    def error_message(self) -> str:
        return self._error

    def clear_error(self) -> None:
        self._error = ""

    def _set_error(self, msg: str) -> None:
        self._error = msg
        logger.debug("%s", msg)

    # -- population ---------------------------------------------------------

    @staticmethod
    def _pairs(container: OptionSource) -> list[tuple[str, Any]]:
        if isinstance(container, OptionSet):
            return list(container.items())
        if isinstance(container, Mapping):
            return list(container.items())
        return list(container)

    def add(self, name: str, spec: OptionSpec | Option) -> bool:
        """Insert *spec* under *name* unless the name is already present."""
        if not name:
            return False
        if name in self._options:
            logger.warning("Option '%s' already present, not added", name)
            return False
        if Kind.from_string(spec.kind) is Kind.DUMMY:
            logger.warning("Dummy option '%s' not added", name)
            return False
        self._insert(name, spec)
        return True

    def _insert(self, name: str, spec: OptionSpec | Option) -> None:
        opt = Option.from_spec(name, spec)
        # a spec without a value starts at its default
        if isinstance(spec, OptionSpec) and not opt.value:
            opt.value = opt.default
        self._options[name] = opt

    def add_all(self, container: OptionSource) -> bool:
        """Insert every option of *container*, or none of them."""
        pairs = self._pairs(container)
        if not pairs:
            return False
        seen: set[str] = set()
        for name, spec in pairs:
            problem = ""
            if not name:
                problem = "empty option name"
            elif name in self._options or name in seen:
                problem = f"duplicate option '{name}'"
            elif Kind.from_string(spec.kind) is Kind.DUMMY:
                problem = f"dummy option '{name}'"
            if problem:
                logger.warning("Options not added: %s", problem)
                self._set_error(f"Options not added: {problem}")
                return False
            seen.add(name)
        for name, spec in pairs:
            self._insert(name, spec)
        return True

    def verify(self) -> bool:
        """Check that character codes are unique among CLI-enabled options."""
        codes: dict[str, str] = {}
        result = True
        for name, opt in self.items():
            if not opt.cli_enabled or not opt.code:
                continue
            if opt.code in codes:
                if result:
                    self._set_error(
                        f"Option code '{opt.code}' of '{name}' already "
                        f"used by '{codes[opt.code]}'"
                    )
                result = False
            else:
                codes[opt.code] = name
        return result

    def initialize(self) -> None:
        """Set every value to its default and clear the dirty flags."""
        for opt in self._options.values():
            opt.value = opt.default
            opt.modified = False
            opt.read_from_cli = False

    def reset(self) -> None:
        """Like :meth:`initialize`, restoring missing stock options first."""
        if self._stock:
            for name, spec in STOCK_OPTIONS.items():
                if name not in self._options:
                    self._options[name] = Option.from_spec(name, spec)
        self.clear_error()
        self.initialize()

    def clear(self) -> None:
        self._options.clear()
        self.clear_error()

    # -- lookup -------------------------------------------------------------

    def long_name(self, code: str) -> str:
        """Return the long name for a one-character *code*.

        Longer strings are returned unchanged.
        """
        if len(code) != 1:
            return code
        for name, opt in self.items():
            if opt.code == code:
                return name
        return code if code in self._options else ""

    def find(self, name: str) -> Option | None:
        if not name:
            return None
        longname = self.long_name(name)
        return self._options.get(longname) if longname else None

    def option_exists(self, name: str) -> bool:
        return self.find(name) is not None

    def is_boolean(self, name: str) -> bool:
        opt = self.find(name)
        return opt is not None and opt.is_boolean

    # -- mutation -----------------------------------------------------------

    def _normalized(self, opt: Option, raw: str) -> str | None:
        if opt.is_boolean:
            return "true" if raw == "true" else "false"
        if raw == opt.default:
            return raw
        if opt.is_int:
            default, minimum, maximum = self.integer_value_range(opt.name)
            if raw == "":
                return str(default)
            text = raw.strip()
            if not re.fullmatch(r"[+-]?\d+", text):
                self._set_error(f"'{raw}' is not an integer value for '{opt.name}'")
                return None
            if not minimum <= int(text) <= maximum:
                self._set_error(
                    f"Value {text} of '{opt.name}' is outside the range "
                    f"{minimum} to {maximum}"
                )
                return None
            return text
        if opt.is_float:
            default_f, low, high = self.floating_value_range(opt.name)
            if raw == "":
                return str(default_f)
            text = raw.strip()
            try:
                fv = float(text)
            except ValueError:
                self._set_error(f"'{raw}' is not a floating value for '{opt.name}'")
                return None
            if not low <= fv <= high:
                self._set_error(
                    f"Value {text} of '{opt.name}' is outside the range "
                    f"{low:g} to {high:g}"
                )
                return None
            return text
        return raw

    def set_value(self, name: str, raw: str) -> bool:
        """Store *raw* in option *name* (long name or code).

        Returns ``True`` only when the option exists, the value is accepted
        and the stored string actually changes.
        """
        self.clear_error()
        opt = self.find(name)
        if opt is None:
            return False
        value = self._normalized(opt, raw)
        if value is None or value == opt.value:
            return False
        opt.value = value
        return True

    def change_value(self, name: str, value: str, from_cli: bool = False) -> bool:
        result = self.set_value(name, value)
        if result:
            opt = self.find(name)
            opt.modified = True
            if from_cli:
                opt.read_from_cli = True
        return result

    def modified(self) -> bool:
        return any(opt.modified for opt in self._options.values())

    def was_read_from_cli(self, name: str) -> bool:
        opt = self.find(name)
        return opt is not None and opt.read_from_cli

    def set_read_from_cli(self, name: str, flag: bool = True) -> None:
        opt = self.find(name)
        if opt is not None:
            opt.read_from_cli = flag
            opt.modified = False

    def unmodify(self, name: str) -> None:
        opt = self.find(name)
        if opt is not None:
            opt.modified = False

    def unmodify_all(self) -> None:
        for opt in self._options.values():
            opt.modified = False

    # -- typed accessors ----------------------------------------------------

    def value(self, name: str) -> str:
        opt = self.find(name)
        return opt.value if opt is not None else ""

    def default_value(self, name: str) -> str:
        opt = self.find(name)
        return opt.default if opt is not None else ""

    def boolean_value(self, name: str) -> bool:
        return self.value(name) == "true"

    def integer_value(self, name: str) -> int:
        text = self.value(name)
        if is_range(text):
            return self.integer_value_range(name)[0]
        return string_to_int(text)

    def floating_value(self, name: str) -> float:
        text = self.value(name)
        if is_range(text):
            return self.floating_value_range(name)[0]
        return string_to_float(text)

    def int_pair_value(self, name: str) -> tuple[int, int]:
        first, second = _pair(self.value(name))
        return string_to_int(first), string_to_int(second)

    def float_pair_value(self, name: str) -> tuple[float, float]:
        first, second = _pair(self.value(name))
        return string_to_float(first), string_to_float(second)

    def integer_value_range(self, name: str) -> tuple[int, int, int]:
        """Return ``(default, minimum, maximum)`` from the default string."""
        defstring = self.default_value(name)
        tokens = range_tokens(defstring)
        if len(tokens) == 3:
            minimum = string_to_int(tokens[0])
            if tokens[1].startswith("="):
                default = string_to_int(tokens[1][1:])
            else:
                minimum += 1
                default = string_to_int(tokens[1])
            if tokens[2].startswith("="):
                maximum = string_to_int(tokens[2][1:])
            else:
                maximum = string_to_int(tokens[2]) - 1
            return default, minimum, maximum
        if len(tokens) == 1:
            return string_to_int(defstring), INT_MIN, INT_MAX
        return NO_DEFAULT, INT_MIN, INT_MAX

    def floating_value_range(self, name: str) -> tuple[float, float, float]:
        defstring = self.default_value(name)
        tokens = range_tokens(defstring)
        if len(tokens) == 3:
            minimum = string_to_float(tokens[0])
            if tokens[1].startswith("="):
                default = string_to_float(tokens[1][1:])
            else:
                minimum += FLT_EPSILON
                default = string_to_float(tokens[1])
            if tokens[2].startswith("="):
                maximum = string_to_float(tokens[2][1:])
            else:
                maximum = string_to_float(tokens[2]) - FLT_EPSILON
            return default, minimum, maximum
        if len(tokens) == 1:
            return string_to_float(defstring), -FLT_MAX, FLT_MAX
        return float(NO_DEFAULT), -FLT_MAX, FLT_MAX

    # -- text ---------------------------------------------------------------

    @staticmethod
    def _help_body(opt: Option) -> str:
        name = opt.name
        if not opt.is_boolean:
            name += " x[=]v" if opt.is_overflow else "=v"
        if opt.code:
            head = f" -{opt.code}, --{name:<18}"
        else:
            head = f" --{name:<22}"
        desc = opt.description
        if opt.shows_default:
            desc += f" [{opt.default}]"
        return head + hanging_word_wrap(desc)

    def help_line(self, name: str) -> str:
        """Help line for a CLI-enabled option, empty otherwise."""
        opt = self.find(name)
        if opt is None or not opt.cli_enabled:
            return ""
        return self._help_body(opt)

    def cli_help_text(self, color: bool = False) -> str:
        lines = [self._help_body(opt) for _, opt in self.items() if opt.cli_enabled]
        text = "".join(line + "\n" for line in lines) + "\n"
        return colorize_help(text) if color else text

    def help_text(self) -> str:
        """Help lines for every option, CLI-enabled or not."""
        return "".join(self._help_body(opt) + "\n" for _, opt in self.items())

    def setting_line(self, name: str) -> str:
        opt = self.find(name)
        if opt is None:
            return ""
        if opt.is_section:
            return opt.value
        value = opt.value
        if opt.is_quotable:
            value = f'"{value}"'
        value = f"{opt.name} = {value}"
        show = len(value) < FIELD_WIDTH and len(opt.description) <= FIELD_WIDTH
        line = value.ljust(FIELD_WIDTH)
        if show:
            line += f"# {opt.description}"
        return line.rstrip()

    def settings_text(self) -> str:
        return "".join(self.setting_line(name) + "\n" for name in self)

    @staticmethod
    def _debug_line(opt: Option) -> str:
        value = f'"{opt.value}"'
        line = f"   {opt.name:<16} = {value:<20}"
        if opt.shows_default:
            line += f" [{opt.default}]"
            if opt.modified:
                line += " modified"
        if not opt.cli_enabled:
            line += " CLI-disabled"
        return line

    def debug_line(self, name: str) -> str:
        opt = self.find(name)
        return self._debug_line(opt) if opt is not None else ""

    def debug_text(self, show_builtins: bool = False) -> str:
        if not self._options:
            return "Empty\n"
        return "".join(
            self._debug_line(opt) + "\n"
            for _, opt in self.items()
            if show_builtins or not opt.built_in
        )

    def description(self, name: str) -> str:
        opt = self.find(name)
        return opt.description if opt is not None else ""

    def descriptions(self) -> str:
        text = "".join(
            opt.description + "\n" for _, opt in self.items() if opt.description
        )
        return text + "\n"

    def long_description(self, name: str) -> str:
        """Everything about one option on a single line."""
        opt = self.find(name)
        if opt is None:
            return ""
        value = f'"{opt.value}"'
        line = (
            f"{opt.name:<16}({opt.code or ' '}) = {value:<20}"
            f"[{opt.kind.value:<10}]"
        )
        if opt.shows_default and opt.modified:
            line += " modified"
            if opt.read_from_cli:
                line += " (on CLI)"
        if not opt.cli_enabled:
            line += " non-CLI"
        return line


# ---------------------------------------------------------------------------
# Terminal rendering
# ---------------------------------------------------------------------------

def _styled_help_line(line: str):
    from rich.text import Text

    text = Text()
    stripped = line.lstrip(" ")
    if not stripped.startswith("-"):
        text.append(line)
        return text
    cut = HANGING_WIDTH if len(line) > HANGING_WIDTH else len(line)
    text.append(line[:cut], style="bold cyan")
    rest = line[cut:]
    start = rest.rfind(" [")
    if start >= 0 and rest.endswith("]"):
        text.append(rest[:start])
        text.append(rest[start:], style="dim")
    else:
        text.append(rest)
    return text


def colorize_help(text: str) -> str:
    """Return *text* with ANSI styling for the option columns."""
    from rich.console import Console

    console = Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="standard",
        highlight=False,
        width=TERMINAL_WIDTH + 2,
    )
    with console.capture() as capture:
        for line in text.splitlines():
            console.print(_styled_help_line(line), soft_wrap=True)
    return capture.get()


def print_cli_help(options: OptionSet, stream=None, color: bool | None = None) -> None:
    """Write the CLI help of *options*, colored when *stream* is a terminal."""
    target = stream or sys.stdout
    if color is None:
        color = bool(getattr(target, "isatty", lambda: False)())
    target.write(options.cli_help_text(color=color))
