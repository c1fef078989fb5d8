from __future__ import annotations
import subprocess
from typing import List
from .errors import BuildFailed
from .logging_setup import get_logger
from .settings import Settings

log = get_logger("hytale.launcher.build")

class PluginBuilder:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.cmd: List[str] = list(settings.build_command)

    def build(self) -> None:
        if not self.cmd:
            raise BuildFailed("BUILD_COMMAND is empty")
        cwd = self.settings.root
        log.info("Build: %s (in %s)", " ".join(self.cmd), cwd)
        try:
            proc = subprocess.run(self.cmd, cwd=str(cwd), capture_output=True, text=True)
        except OSError as e:
            raise BuildFailed(f"Could not run build command {self.cmd[0]!r}: {e}") from e
        if proc.returncode != 0:
            if proc.stdout:
                log.error("build stdout: %s", proc.stdout[-4000:])
            if proc.stderr:
                log.error("build stderr: %s", proc.stderr[-4000:])
            raise BuildFailed(f"Build failed (rc={proc.returncode}). See launcher.log for details.")
        if proc.stdout:
            log.debug("build stdout: %s", proc.stdout[-4000:])
        if proc.stderr:
            log.debug("build stderr: %s", proc.stderr[-4000:])
        log.info("Build finished.")
