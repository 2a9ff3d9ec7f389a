from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _launcher_data_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Route registry and log writes away from real user data."""

    data_dir = tmp_path_factory.mktemp("launcher_data")
    log_dir = tmp_path_factory.mktemp("launcher_logs")
    monkeypatch.setenv("ESLAUNCHER_DATA_DIR", str(data_dir))
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(log_dir))
    monkeypatch.delenv("ESLAUNCHER_LOG_FILE", raising=False)
    yield data_dir


@pytest.fixture(autouse=True)
def _reset_app_config():
    from app.config import reset_app_config_cache

    reset_app_config_cache()
    yield
    reset_app_config_cache()
