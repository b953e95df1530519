"""Read and write the configuration file behind a :class:`FileSections`.

A written file looks like::

    # pyinicfg configuration file for an application
    # File: demo.rc
    # Written: 2024-05-01 10:00:00

    [Cfg66]

    config-type = "rc"
    version = 0

    [comments]

    Add your comment block here.

    # Audio settings.
    [audio]

    gain = 1.0                              # Output gain.

Values are parsed with :mod:`configparser`.  The free-text ``[comments]``
block is cut out before parsing because it is not ``key = value`` data.
"""

from __future__ import annotations

import configparser
import logging
import re
from datetime import datetime
from pathlib import Path

from .errors import append_error_message
from .options import string_to_int
from .section import (
    COMMENTS_SECTION,
    GLOBAL,
    MAIN_SECTION,
    strip_section_name,
)
from .sections import FileSections

logger = logging.getLogger(__name__)

app_version_text = "an application"


def _parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        allow_no_value=True,
        delimiters=("=",),
        interpolation=None,
        strict=False,
        default_section="__defaults__",
    )
    parser.optionxform = str  # type: ignore[assignment]
    return parser


_QUOTED_RE = re.compile(r'"(.*?)"\s*(?:#.*)?', re.DOTALL)
_TRAILING_COMMENT_RE = re.compile(r"(?:^|\s+)#.*\Z", re.DOTALL)


def unquote(value: str | None) -> str:
    """Strip the quotes and the trailing ``# description`` of a stored value.

    A quoted value keeps everything up to its closing quote, ``#`` included.
    """
    if value is None:
        return ""
    value = value.strip()
    m = _QUOTED_RE.fullmatch(value)
    if m is not None:
        return m.group(1)
    return _TRAILING_COMMENT_RE.sub("", value)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def date_text(file_name: str, description: str = "") -> str:
    lines = [f"# pyinicfg configuration file for {app_version_text or 'an application'}"]
    if description:
        lines.append(f"# {description}")
    lines.append("#")
    lines.append(f"# File: {file_name}")
    lines.append(f"# Written: {datetime.now():%Y-%m-%d %H:%M:%S}")
    return "\n".join(lines) + "\n"


def main_header_text(config_type: str, version: int | str) -> str:
    return f'\n{MAIN_SECTION}\n\nconfig-type = "{config_type}"\nversion = {version}\n'


def comment_text(comment: str) -> str:
    comment = comment.rstrip("\n")
    return (
        "\n# [comments] holds user documentation for this file. The first empty, hash-\n"
        "# commented, or tag line ends the comment.\n"
        f"\n{COMMENTS_SECTION}\n\n{comment}\n"
    )


def settings_document(fs: FileSections, description: str = "") -> str:
    """Return the full text written for *fs*."""
    parts = [date_text(fs.file_name(), description)]
    parts.append(main_header_text(fs.config_type, fs.version))
    comments = fs.find_options(COMMENTS_SECTION)
    if comments is not None:
        parts.append(comment_text(comments.value("comment")))
    for sec in fs:
        if sec.name in (GLOBAL, MAIN_SECTION, COMMENTS_SECTION):
            continue
        parts.append(sec.settings_text())
    parts.append(f"\n# End of {fs.file_name()}\n")
    return "".join(parts)


def write_file(fs: FileSections, path: str | Path | None = None) -> bool:
    target = Path(path) if path is not None else fs.file_path()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(target.suffix + ".tmp")
        tmp.write_text(settings_document(fs), encoding="utf-8")
        tmp.replace(target)
    except OSError as exc:
        logger.warning("Failed to write config %s: %s", target, exc)
        append_error_message(f"Cannot write '{target}': {exc}")
        return False
    logger.info("Wrote %s", target)
    return True


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def split_comments(text: str) -> tuple[str, str]:
    """Cut the ``[comments]`` block out of *text*.

    Returns the remaining text and the comment.  The comment is the run of
    lines after the tag, ended by an empty, hash-commented or tag line.
    """
    lines = text.splitlines()
    body: list[str] = []
    comment: list[str] = []
    i = 0
    while i < len(lines):
        if lines[i].strip() != COMMENTS_SECTION:
            body.append(lines[i])
            i += 1
            continue
        i += 1
        while i < len(lines) and not lines[i].strip():
            i += 1
        while i < len(lines):
            stripped = lines[i].strip()
            if not stripped or stripped.startswith(("#", "[")):
                break
            comment.append(lines[i])
            i += 1
    body_text = "\n".join(body) + "\n"
    return body_text, "\n".join(comment)


def read_text(fs: FileSections, text: str, source: str = "<string>") -> bool:
    """Apply the settings in *text* to *fs*.

    Values are set without marking the options modified; options already
    given on the command line keep their value.
    """
    body, comment = split_comments(text)
    parser = _parser()
    try:
        parser.read_string(body, source=source)
    except configparser.Error as exc:
        logger.warning("Failed to read config %s: %s", source, exc)
        append_error_message(f"Cannot parse '{source}': {exc}")
        return False

    main = strip_section_name(MAIN_SECTION)
    if parser.has_section(main):
        ctype = unquote(parser.get(main, "config-type", fallback=""))
        if ctype and fs.config_type and ctype != fs.config_type:
            msg = f"'{source}' has config-type '{ctype}', expected '{fs.config_type}'"
            logger.warning("%s", msg)
            append_error_message(msg)
            return False
        fs.version = string_to_int(unquote(parser.get(main, "version", fallback="0")))

    comments = fs.find_options(COMMENTS_SECTION)
    if comment and comments is not None and not comments.was_read_from_cli("comment"):
        comments.set_value("comment", comment)

    ok = True
    for secname in parser.sections():
        opts = fs.find_options(secname)
        if opts is None:
            logger.info("Skipping unknown section [%s] in %s", secname, source)
            continue
        for name, raw in parser.items(secname, raw=True):
            opt = opts.find(name)
            if opt is None or opt.name != name:
                logger.info("Skipping unknown option '%s' in [%s]", name, secname)
                continue
            if opt.read_from_cli:
                continue
            opts.set_value(name, unquote(raw))
            if opts.has_error:
                append_error_message(f"{source} [{secname}]: {opts.error_message}")
                ok = False
    return ok


def read_file(fs: FileSections, path: str | Path | None = None) -> bool:
    target = Path(path) if path is not None else fs.file_path()
    if not target.is_file():
        append_error_message(f"File not found: '{target}'")
        return False
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to read config %s: %s", target, exc)
        append_error_message(f"Cannot read '{target}': {exc}")
        return False
    return read_text(fs, text, source=str(target))
