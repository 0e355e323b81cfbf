"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from strata.config import CONFIG_FILE, OVERRIDE_FILE
from strata.storage import LocalFileStore, MemoryFileStore
from strata.store import ConfigStore


@pytest.fixture
def ws_root(tmp_path):
    """Workspace root directory."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def home_dir(tmp_path):
    """Home directory holding the global override."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config_path(ws_root):
    """Path of the base config file."""
    return ws_root / CONFIG_FILE


@pytest.fixture
def ws_override_path(ws_root):
    """Path of the workspace override file."""
    return ws_root / OVERRIDE_FILE


@pytest.fixture
def home_override_path(home_dir):
    """Path of the home override file."""
    return home_dir / OVERRIDE_FILE


@pytest.fixture
def store(ws_root, home_dir):
    """ConfigStore over the local filesystem."""
    return ConfigStore(LocalFileStore(), ws_root, home_dir)


@pytest.fixture
def memory_files():
    """Empty in-memory file store."""
    return MemoryFileStore()


@pytest.fixture
def memory_store(memory_files):
    """ConfigStore over an in-memory file store."""
    return ConfigStore(memory_files, "/ws", "/home/user")


@pytest.fixture
def write_yaml():
    """Factory that dumps data as YAML to a path."""

    def _write_yaml(path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write_yaml


@pytest.fixture
def read_yaml():
    """Factory that loads YAML from a path."""

    def _read_yaml(path: Path):
        return yaml.safe_load(path.read_text(encoding="utf-8"))

    return _read_yaml
