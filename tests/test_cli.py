import json
from unittest.mock import patch

import pytest

from hytale_launcher.cli import main


@pytest.fixture
def env(project, monkeypatch):
    monkeypatch.setenv("PROJECT_ROOT", str(project))
    monkeypatch.setenv("LOG_DIR", "")
    return project


def test_plan_prints_json(env, capsys):
    assert main(["plan", "--assets-path", "server/Assets.zip"]) == 0
    plan = json.loads(capsys.readouterr().out)
    assert plan["ok"] is True
    assert plan["command"][plan["command"].index("--assets") + 1] == str(env / "server" / "Assets.zip")


def test_dry_run_does_not_touch_filesystem(env, capsys):
    assert main(["run-server", "--dry-run", "--bind", "127.0.0.1:6000"]) == 0
    plan = json.loads(capsys.readouterr().out)
    assert plan["command"][-1] == "127.0.0.1:6000"
    assert not (env / ".server").exists()


def test_invalid_bind_is_config_error(env, capsys):
    assert main(["run-server", "--bind", "nope"]) == 78
    assert "bind" in capsys.readouterr().err


def test_missing_executable_exit_code(env):
    (env / "server" / "Server" / "HytaleServer.jar").unlink()
    assert main(["run-server"]) == 66
    assert not (env / ".server").exists()


def test_unknown_log_level_is_config_error(env, monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    assert main(["plan"]) == 78
    assert "log level" in capsys.readouterr().err


def test_version_mismatch_exit_code(env):
    assert main(["run-server", "--plugin-version", "9.9.9"]) == 65


def test_run_server_returns_child_exit_code(env):
    with patch("hytale_launcher.cli.Orchestrator.start_server", return_value=130) as start, \
         patch("hytale_launcher.cli.Orchestrator.build") as build:
        assert main(["run-server"]) == 130
    start.assert_called_once()
    build.assert_not_called()


def test_run_server_with_build(env):
    calls = []
    with patch("hytale_launcher.cli.Orchestrator.start_server", side_effect=lambda: calls.append("start") or 0), \
         patch("hytale_launcher.cli.Orchestrator.build", side_effect=lambda: calls.append("build")):
        assert main(["run-server", "--build"]) == 0
    assert calls == ["build", "start"]


def test_build_failure_exit_code(env, monkeypatch):
    monkeypatch.setenv("BUILD_COMMAND", json.dumps([str(env / "missing-gradlew"), "build"]))
    assert main(["build"]) == 70


def test_log_file_written(env, monkeypatch):
    monkeypatch.setenv("LOG_DIR", "build/launcher-logs")
    main(["run-server", "--plugin-version", "9.9.9"])
    log_file = env / "build" / "launcher-logs" / "launcher.log"
    assert "NoArtifactFound" in log_file.read_text(encoding="utf-8")
