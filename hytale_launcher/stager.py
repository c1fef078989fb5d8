"""
stager.py — Assembles the runtime directory before the server starts
--------------------------------------------------------------------
Copies the vendor server jar under its canonical name and installs the
freshly built plugin jar into the plugins folder. Sources are validated
before anything is created, so a failed run never leaves a half-populated
plugins folder behind.
"""

from __future__ import annotations
import shutil
from pathlib import Path
from typing import List, Tuple
from .errors import AmbiguousArtifact, MissingSourceFile, NoArtifactFound, StagingFailed
from .fs_layout import SERVER_JAR_NAME, Layout, ensure_dirs
from .logging_setup import get_logger
from .settings import Settings

log = get_logger("hytale.launcher.stager")


def ensure_directories(runtime_dir: Path, plugins_dir: Path) -> None:
    ensure_dirs(runtime_dir, plugins_dir)


def _copy(src: Path, dst: Path) -> Path:
    try:
        shutil.copy2(src, dst)
    except OSError as e:
        raise StagingFailed(f"Copying {src} -> {dst} failed: {e}") from e
    return dst


def require_file(path: Path, what: str) -> Path:
    if not path.is_file():
        raise MissingSourceFile(f"{what} not found: {path}")
    return path


def stage_server_executable(src_executable: Path, runtime_dir: Path) -> Path:
    require_file(src_executable, "Server executable")
    dst = runtime_dir / SERVER_JAR_NAME
    log.info("Staging server executable %s -> %s", src_executable, dst)
    return _copy(src_executable, dst)


def find_plugin_artifacts(build_output_dir: Path, version: str) -> List[Path]:
    """Regular files in ``build_output_dir`` whose name ends with ``<version>.jar``, sorted by name."""
    if not build_output_dir.is_dir():
        return []
    suffix = f"{version}.jar"
    return sorted(p for p in build_output_dir.iterdir() if p.is_file() and p.name.endswith(suffix))


def select_plugin_artifact(build_output_dir: Path, version: str) -> Path:
    matches = find_plugin_artifacts(build_output_dir, version)
    if not matches:
        raise NoArtifactFound(
            f"No plugin artifact ending with '{version}.jar' in {build_output_dir} "
            f"(expected version {version}; was the plugin built?)"
        )
    if len(matches) > 1:
        names = ", ".join(p.name for p in matches)
        raise AmbiguousArtifact(
            f"{len(matches)} plugin artifacts match '{version}.jar' in {build_output_dir}: {names}. "
            f"Remove stale builds or set PLUGIN_ARTIFACT explicitly."
        )
    return matches[0]


def stage_plugin_artifact(build_output_dir: Path, version: str, plugins_dir: Path) -> Path:
    artifact = select_plugin_artifact(build_output_dir, version)
    return install_plugin(artifact, plugins_dir)


def install_plugin(artifact: Path, plugins_dir: Path) -> Path:
    dst = plugins_dir / artifact.name
    log.info("Installing plugin %s -> %s", artifact.name, plugins_dir)
    return _copy(artifact, dst)


def stale_plugins(plugins_dir: Path, keep: str) -> List[Path]:
    if not plugins_dir.is_dir():
        return []
    return sorted(p for p in plugins_dir.glob("*.jar") if p.is_file() and p.name != keep)


class EnvironmentStager:
    def __init__(self, settings: Settings, layout: Layout | None = None):
        self.settings = settings
        self.layout = layout or settings.layout()

    @property
    def server_executable(self) -> Path:
        return self.settings.resolve(self.settings.server_executable)

    @property
    def build_output_dir(self) -> Path:
        return self.settings.resolve(self.settings.build_output_dir)

    def resolve_artifact(self) -> Path:
        if self.settings.plugin_artifact is not None:
            return require_file(self.settings.resolve(self.settings.plugin_artifact), "Plugin artifact")
        return select_plugin_artifact(self.build_output_dir, self.settings.plugin_version)

    def check_sources(self) -> Tuple[Path, Path]:
        """Vendor jar and plugin artifact, or the error that would abort staging."""
        return require_file(self.server_executable, "Server executable"), self.resolve_artifact()

    def stage(self) -> Path:
        """Populate the runtime directory; returns the installed plugin path."""
        src, artifact = self.check_sources()

        ensure_directories(self.layout.runtime_dir, self.layout.plugins_dir)
        stage_server_executable(src, self.layout.runtime_dir)

        stale = stale_plugins(self.layout.plugins_dir, keep=artifact.name)
        if stale:
            log.warning("Plugins folder already holds other jars (left in place): %s",
                        [p.name for p in stale])
        installed = install_plugin(artifact, self.layout.plugins_dir)
        log.info("Runtime directory ready: %s", self.layout.runtime_dir)
        return installed
