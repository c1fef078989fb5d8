from __future__ import annotations
import signal
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from .logging_setup import get_logger

log = get_logger("hytale.launcher.proc")

_FORWARDED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)

@dataclass
class ProcessHandle:
    name: str
    proc: subprocess.Popen

def normalize_returncode(rc: Optional[int]) -> int:
    """Popen reports death by signal N as -N; shells report it as 128 + N."""
    if rc is None:
        return 0
    if rc < 0:
        return 128 - rc
    return rc

class ProcessRunner:
    def __init__(self, stop_timeout: float = 10.0):
        self.handles: List[ProcessHandle] = []
        self.stop_timeout = stop_timeout

    def start(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None,
              env: Optional[dict] = None) -> ProcessHandle:
        log.info("Starting %s: %s", name, " ".join(cmd))
        # stdin/stdout/stderr are inherited so the operator talks to the child directly
        proc = subprocess.Popen(cmd, cwd=str(cwd) if cwd else None, env=env)
        h = ProcessHandle(name=name, proc=proc)
        self.handles.append(h)
        return h

    def run_foreground(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None,
                       env: Optional[dict] = None) -> int:
        """Start ``cmd``, forward termination signals to it and block until it exits."""
        h = self.start(name, cmd, cwd=cwd, env=env)

        def _forward(signum, _frame):
            if h.proc.poll() is None:
                log.info("Forwarding signal %s to %s (pid=%s)", signal.Signals(signum).name, name, h.proc.pid)
                h.proc.send_signal(signum)

        def _interrupt(_signum, _frame):
            # Ctrl-C already reached the child through the terminal's foreground process group
            log.info("Interrupt received; waiting for %s to shut down", name)

        previous = {}
        if threading.current_thread() is threading.main_thread():
            previous[signal.SIGINT] = signal.signal(signal.SIGINT, _interrupt)
            for sig in _FORWARDED_SIGNALS:
                previous[sig] = signal.signal(sig, _forward)
        try:
            rc = h.proc.wait()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
            self.stop_all()
        log.info("%s exited with rc=%s", name, rc)
        return normalize_returncode(rc)

    def stop_all(self, timeout: Optional[float] = None) -> None:
        timeout = self.stop_timeout if timeout is None else timeout
        for h in self.handles:
            if h.proc.poll() is None:
                log.info("Stopping %s (pid=%s)", h.name, h.proc.pid)
                h.proc.terminate()
        for h in self.handles:
            if h.proc.poll() is None:
                try:
                    h.proc.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    log.warning("Killing %s (pid=%s)", h.name, h.proc.pid)
                    h.proc.kill()
                    h.proc.wait()

    def status(self) -> dict:
        return {h.name: {"pid": h.proc.pid, "returncode": h.proc.poll()} for h in self.handles}
