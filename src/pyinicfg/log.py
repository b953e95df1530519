"""Process-wide run flags and logging setup.

The stock command-line options (``--verbose``, ``--quiet``,
``--investigate`` and friends) end up here after a parse; the package
logger level and the optional log file follow from them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

logger = logging.getLogger("pyinicfg")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class RunState:
    description: bool = False
    help: bool = False
    version: bool = False
    inspect: bool = False
    investigate: bool = False
    verbose: bool = False
    quiet: bool = False
    use_log_file: bool = False
    log_file: str = ""


run_state = RunState()

_file_handler: logging.FileHandler | None = None


def reset_run_state() -> None:
    """Restore every run flag to its default and drop the log file."""
    global _file_handler
    for f in fields(RunState):
        setattr(run_state, f.name, f.default)
    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
    logger.setLevel(logging.NOTSET)


def log_level(state: RunState | None = None) -> int:
    state = state or run_state
    if state.verbose or state.investigate:
        return logging.DEBUG
    if state.quiet:
        return logging.ERROR
    return logging.WARNING


def apply_run_state(state: RunState | None = None) -> None:
    """Set the package logger level and attach the log file if requested."""
    global _file_handler
    state = state or run_state
    logger.setLevel(log_level(state))
    if not state.use_log_file or not state.log_file:
        return
    target = Path(state.log_file).expanduser().resolve()
    if _file_handler is not None:
        if Path(_file_handler.baseFilename) == target:
            return
        logger.removeHandler(_file_handler)
        _file_handler.close()
    target.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.FileHandler(target, encoding="utf-8")
    _file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_file_handler)
    logger.debug("logging to %s", target)
