"""
server.py — Launches the staged Hytale server
---------------------------------------------
Builds the fixed startup parameters for server.jar and runs it in the
foreground inside the runtime directory, with the operator's terminal
attached so console commands reach the server.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional
from .errors import LaunchFailed
from .fs_layout import Layout
from .logging_setup import get_logger
from .process_runner import ProcessRunner
from .settings import Settings

log = get_logger("hytale.launcher.server")


class ServerLauncher:
    def __init__(self, settings: Settings, layout: Optional[Layout] = None,
                 runner: Optional[ProcessRunner] = None):
        self.settings = settings
        self.layout = layout or settings.layout()
        self.runner = runner or ProcessRunner(stop_timeout=settings.stop_timeout)

    def resolve_assets_path(self) -> Path:
        # the server insists on an absolute path and runs from the runtime dir
        assets = self.settings.resolve(self.settings.assets_path)
        if not assets.exists():
            log.warning("Assets not found at %s; the server will likely refuse to start.", assets)
        return assets

    def build_command(self) -> List[str]:
        return [
            self.settings.java_bin,
            *self.settings.jvm_args,
            "-jar", self.layout.server_jar.name,
            "--assets", str(self.resolve_assets_path()),
            "--bind", self.settings.bind_address,
        ] + list(self.settings.server_args)

    def launch(self) -> int:
        """Run the server until it exits and return its exit code."""
        cmd = self.build_command()
        try:
            return self.runner.run_foreground("server", cmd, cwd=self.layout.runtime_dir)
        except OSError as e:
            raise LaunchFailed(
                f"Could not start server with {cmd[0]!r} in {self.layout.runtime_dir}: {e}"
            ) from e
