import importlib.util
import logging
from pathlib import Path

SRC = Path(__file__).resolve().parents[2] / "src" / "hls_tags"


def _load_module_from_path(module_name: str, path: Path):
    """Load a module from a file path under a custom name.

    Keeps the imported hls_tags.config untouched by the env overrides below.
    """

    spec = importlib.util.spec_from_file_location(module_name, str(path))
    assert spec and spec.loader
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    return mod


def test_config_env_overrides_are_applied(monkeypatch):
    monkeypatch.setenv("LOGGING_LEVEL", "info")
    monkeypatch.setenv("HLS_TAGS_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("HLS_TAGS_STRICT", "Yes")

    cfg = _load_module_from_path("hls_tags_real_config", SRC / "config.py")

    assert cfg.LOGGING_LEVEL == "INFO"
    assert cfg.TIMEZONE == "Europe/Berlin"
    assert cfg.STRICT_LINES is True


def test_config_defaults(monkeypatch):
    monkeypatch.delenv("HLS_TAGS_TIMEZONE", raising=False)
    monkeypatch.setenv("HLS_TAGS_STRICT", "")

    cfg = _load_module_from_path("hls_tags_default_config", SRC / "config.py")

    assert cfg.TIMEZONE == "UTC"
    assert cfg.STRICT_LINES is False


def test_logger_helpers():
    logger_mod = _load_module_from_path("hls_tags_real_logger", SRC / "logger.py")

    log = logger_mod.get_logger()
    assert log is logger_mod.logger
    assert log is logging.getLogger("hls_tags")
