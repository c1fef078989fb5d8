from __future__ import annotations
import filecmp
from pathlib import Path
from .builder import PluginBuilder
from .errors import StagingError
from .fs_layout import RuntimeLock
from .logging_setup import get_logger
from .planner import Plan, PlanAction
from .process_runner import ProcessRunner
from .server import ServerLauncher
from .settings import Settings
from .stager import EnvironmentStager, stale_plugins

log = get_logger("hytale.launcher.orch")

class Orchestrator:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.layout = settings.layout()
        self.runner = ProcessRunner(stop_timeout=settings.stop_timeout)
        self.stager = EnvironmentStager(settings, self.layout)
        self.server = ServerLauncher(settings, self.layout, self.runner)

    def build(self) -> None:
        PluginBuilder(self.settings).build()

    def stage(self) -> Path:
        self.stager.check_sources()
        with RuntimeLock(self.layout.lock_file):
            return self.stager.stage()

    def start_server(self) -> int:
        # nothing is created under the runtime dir unless both sources resolve
        self.stager.check_sources()
        # the lock is held for the server's lifetime; it reads the staged files at startup
        with RuntimeLock(self.layout.lock_file):
            installed = self.stager.stage()
            log.info("Launching server with plugin %s (version %s)", installed.name, self.settings.plugin_version)
            return self.server.launch()

    def plan(self) -> Plan:
        plan = Plan()
        lay = self.layout

        for d in (lay.runtime_dir, lay.plugins_dir):
            plan.add(PlanAction(
                action="ensure_dir", target=d.name, detail="create if missing",
                paths={"path": str(d)}, will_change=not d.is_dir(),
            ))

        src = self.stager.server_executable
        if src.is_file():
            same = lay.server_jar.is_file() and filecmp.cmp(src, lay.server_jar, shallow=False)
            plan.add(PlanAction(
                action="copy_server", target=lay.server_jar.name, detail="vendor server executable",
                paths={"src": str(src), "dst": str(lay.server_jar)}, will_change=not same,
            ))
        else:
            plan.add(PlanAction(
                action="copy_server", target=lay.server_jar.name, detail=f"server executable not found: {src}",
                paths={"src": str(src), "dst": str(lay.server_jar)}, will_change=False, severity="error",
            ))

        try:
            artifact = self.stager.resolve_artifact()
        except StagingError as e:
            plan.add(PlanAction(
                action="install_plugin", target=f"*{self.settings.plugin_version}.jar", detail=str(e),
                paths={"src": str(self.stager.build_output_dir), "dst": str(lay.plugins_dir)},
                will_change=False, severity="error",
            ))
        else:
            dst = lay.plugins_dir / artifact.name
            same = dst.is_file() and filecmp.cmp(artifact, dst, shallow=False)
            plan.add(PlanAction(
                action="install_plugin", target=artifact.name, detail=f"version {self.settings.plugin_version}",
                paths={"src": str(artifact), "dst": str(dst)}, will_change=not same,
            ))
            stale = stale_plugins(lay.plugins_dir, keep=artifact.name)
            if stale:
                plan.notes.append(
                    "plugins folder already holds other jars which stay in place: "
                    + ", ".join(p.name for p in stale)
                )

        if lay.lock_file.exists():
            plan.notes.append(f"lock file present, another run may be active: {lay.lock_file}")

        plan.command = self.server.build_command()
        plan.add(PlanAction(
            action="launch", target="server", detail=" ".join(plan.command),
            paths={"cwd": str(lay.runtime_dir)}, will_change=False,
        ))
        return plan
