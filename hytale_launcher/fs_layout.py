from __future__ import annotations
import fcntl
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from .errors import RuntimeDirBusy, StagingFailed
from .logging_setup import get_logger

log = get_logger("hytale.launcher.fs")

SERVER_JAR_NAME = "server.jar"
LOCK_FILE_NAME = ".launcher.lock"

@dataclass(frozen=True)
class Layout:
    runtime_dir: Path
    plugins_dir: Path
    server_jar: Path
    lock_file: Path

def build_layout(runtime_dir: Path, plugins_subdir: str = "mods") -> Layout:
    return Layout(
        runtime_dir=runtime_dir,
        plugins_dir=runtime_dir / plugins_subdir,
        server_jar=runtime_dir / SERVER_JAR_NAME,
        lock_file=runtime_dir / LOCK_FILE_NAME,
    )

def ensure_dirs(*dirs: Path) -> None:
    for p in dirs:
        try:
            p.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StagingFailed(f"Could not create directory {p}: {e}") from e


class RuntimeLock:
    """
    Exclusive marker for a runtime directory.

    Two launchers staging into the same directory would let one server read
    a half-copied jar, so a second invocation fails with RuntimeDirBusy
    while the first one holds the lock. The lock is an flock on the open
    file; the kernel drops it when the holder dies, so a file left behind by
    a killed launcher is simply reused.
    """

    def __init__(self, path: Path):
        self.path = path
        self._fd: Optional[int] = None

    def _owner(self) -> Optional[int]:
        try:
            return int(self.path.read_text(encoding="utf-8").strip())
        except (OSError, ValueError):
            return None

    def _open(self) -> int:
        try:
            return os.open(self.path, os.O_CREAT | os.O_RDWR, 0o644)
        except OSError as e:
            raise StagingFailed(f"Could not open lock file {self.path}: {e}") from e

    def acquire(self) -> None:
        ensure_dirs(self.path.parent)
        while True:
            fd = self._open()
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                os.close(fd)
                owner = self._owner()
                raise RuntimeDirBusy(
                    f"Runtime directory {self.path.parent} is in use by pid {owner or 'unknown'} "
                    f"(lock file {self.path}). Concurrent runs are not supported."
                )
            # the previous holder may have unlinked the file between our open and flock
            try:
                current = os.stat(self.path).st_ino
            except FileNotFoundError:
                current = None
            if current != os.fstat(fd).st_ino:
                os.close(fd)
                continue
            break

        previous = self._owner()
        if previous is not None:
            log.warning("Reusing lock %s left behind by pid %s", self.path, previous)
        os.ftruncate(fd, 0)
        os.write(fd, str(os.getpid()).encode("utf-8"))
        self._fd = fd
        log.debug("Acquired runtime lock %s", self.path)

    def release(self) -> None:
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Could not remove lock file %s: %s", self.path, e)
        finally:
            os.close(fd)

    def __enter__(self) -> "RuntimeLock":
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
