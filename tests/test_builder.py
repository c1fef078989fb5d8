import os
import sys

import pytest

from hytale_launcher.builder import PluginBuilder
from hytale_launcher.errors import BuildFailed
from hytale_launcher.settings import Settings


def _settings(root, cmd):
    return Settings(project_root=root, log_dir=None, build_command=cmd)


def test_build_runs_in_project_root(tmp_path):
    out = tmp_path / "cwd.txt"
    script = f"import os, pathlib; pathlib.Path({str(out)!r}).write_text(os.getcwd())"
    PluginBuilder(_settings(tmp_path, [sys.executable, "-c", script])).build()
    assert os.path.samefile(out.read_text(), tmp_path)


def test_nonzero_exit_fails(tmp_path):
    cmd = [sys.executable, "-c", "import sys; print('compile error', file=sys.stderr); sys.exit(1)"]
    with pytest.raises(BuildFailed, match="rc=1"):
        PluginBuilder(_settings(tmp_path, cmd)).build()


def test_missing_tool_fails(tmp_path):
    with pytest.raises(BuildFailed, match="no-such-gradle"):
        PluginBuilder(_settings(tmp_path, [str(tmp_path / "no-such-gradle"), "build"])).build()


def test_empty_command_fails(tmp_path):
    with pytest.raises(BuildFailed):
        PluginBuilder(_settings(tmp_path, [])).build()
