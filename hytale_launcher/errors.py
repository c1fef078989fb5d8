"""
Error taxonomy of the launcher.

Every error carries an ``exit_code`` that the CLI returns when the run is
aborted before (or instead of) launching the server. The values come from
the sysexits range so they never collide with the exit codes a JVM
normally produces (0, 1, 130, 143).
"""

from __future__ import annotations


class LauncherError(Exception):
    exit_code = 70


class StagingError(LauncherError):
    """Base for everything that aborts a run before the server is launched."""
    exit_code = 73


class MissingSourceFile(StagingError):
    exit_code = 66


class NoArtifactFound(StagingError):
    exit_code = 65


class AmbiguousArtifact(StagingError):
    exit_code = 65


class StagingFailed(StagingError):
    exit_code = 74


class RuntimeDirBusy(StagingError):
    exit_code = 75


class LaunchFailed(LauncherError):
    exit_code = 69


class BuildFailed(LauncherError):
    exit_code = 70


CONFIG_ERROR_EXIT_CODE = 78
