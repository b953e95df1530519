from pathlib import Path

from pyinicfg.paths import expand_directory, user_config_dir


def test_user_config_dir_absolute(monkeypatch) -> None:
    monkeypatch.delenv("PYINICFG_CONFIG_DIR", raising=False)
    assert user_config_dir().is_absolute()


def test_env_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PYINICFG_CONFIG_DIR", str(tmp_path))
    assert user_config_dir("other") == tmp_path.resolve()


def test_app_name_env(monkeypatch) -> None:
    monkeypatch.delenv("PYINICFG_CONFIG_DIR", raising=False)
    monkeypatch.setenv("PYINICFG_APP_NAME", "cfgdemo")
    assert user_config_dir().name == "cfgdemo"


def test_expand_directory(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PYINICFG_CONFIG_DIR", str(tmp_path))
    assert expand_directory("") == tmp_path.resolve()
    assert expand_directory(tmp_path / "x") == (tmp_path / "x").resolve()
    assert expand_directory("~/cfg") == Path("~/cfg").expanduser().resolve()
