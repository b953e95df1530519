from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

CONFIG_DIR_ENV = "PYINICFG_CONFIG_DIR"
APP_NAME_ENV = "PYINICFG_APP_NAME"

# ---------------------------------------------------------------------------
# User directories
# ---------------------------------------------------------------------------

def _app_name(default: str) -> str:
    return os.getenv(APP_NAME_ENV, default)

def user_config_dir(app_name: str = "pyinicfg") -> Path:
    env = os.getenv(CONFIG_DIR_ENV)
    if env:
        return Path(env).expanduser().resolve()
    app = _app_name(app_name)
    return Path(_uc(appname=app)).resolve()

def expand_directory(directory: str | Path, app_name: str = "pyinicfg") -> Path:
    """Resolve *directory*, falling back to the user config directory."""
    if not str(directory):
        return user_config_dir(app_name)
    return Path(directory).expanduser().resolve()
