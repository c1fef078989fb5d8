"""
Shared fixtures: a throw-away plugin project with a fake vendor jar,
a built plugin jar and an assets archive.
"""

import logging

import pytest

from hytale_launcher.settings import Settings

SERVER_BYTES = b"PK\x03\x04 vendor server jar"
PLUGIN_BYTES = b"PK\x03\x04 gravestones plugin"


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logging() rewires the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    launcher = logging.getLogger("hytale.launcher")
    for h in list(launcher.handlers):
        launcher.removeHandler(h)
        h.close()


@pytest.fixture
def project(tmp_path):
    vendor = tmp_path / "server" / "Server" / "HytaleServer.jar"
    vendor.parent.mkdir(parents=True)
    vendor.write_bytes(SERVER_BYTES)
    (tmp_path / "server" / "Assets.zip").write_bytes(b"assets")

    libs = tmp_path / "build" / "libs"
    libs.mkdir(parents=True)
    (libs / "gravestones-1.0.0.jar").write_bytes(PLUGIN_BYTES)
    (libs / "gravestones-0.9.0.jar").write_bytes(b"old build")
    (libs / "gravestones-1.0.0-sources.jar").write_bytes(b"sources")
    return tmp_path


@pytest.fixture
def settings(project):
    return Settings(project_root=project, log_dir=None)
