import os
import sys
import threading
from typing import Any, Callable, Dict, Optional, TextIO

from .models import Diagnostic


STATUS_FORMATS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "phase": lambda p: f"PHASE:{p['phase']}",
    "progress": lambda p: f"PROGRESS:{p['current_file']}/{p['total_files']} files",
    "done": lambda p: f"DONE:{p['files']} files, {p['warnings']} warnings",
}


def _open_log(log_file: str) -> TextIO:
    parent = os.path.dirname(os.path.abspath(log_file))
    if parent:
        os.makedirs(parent, exist_ok=True)
    return open(log_file, "a", encoding="utf-8")


class EventEmitter:
    """Diagnostics go to stdout; status, warnings and errors go to stderr.

    Every line is mirrored to ``log_file`` when one is given. Writes are
    serialized so a multi-line diagnostic block is never split by another
    worker's output.
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        self.verbose = verbose
        self._lock = threading.Lock()
        self._log: Optional[TextIO] = _open_log(log_file) if log_file else None

    def _write(self, text: str, *, stderr: bool = False) -> None:
        with self._lock:
            print(text, file=sys.stderr if stderr else sys.stdout, flush=True)
            if self._log is not None:
                self._log.write(f"{text}\n")
                self._log.flush()

    def close(self) -> None:
        log, self._log = self._log, None
        if log is not None:
            log.close()

    def emit(self, event_type: str, **payload: Any) -> None:
        """Status events (phase/progress/done) are only shown when verbose."""
        formatter = STATUS_FORMATS.get(event_type)
        if self.verbose and formatter is not None:
            self._write(formatter(payload), stderr=True)

    def diagnostic(self, warning: Diagnostic) -> None:
        self._write(warning.format())

    def info(self, message: str) -> None:
        if self.verbose:
            self._write(message, stderr=True)

    def warn(self, message: str) -> None:
        self._write(f"WARN: {message}", stderr=True)

    def error(self, message: str) -> None:
        self._write(message, stderr=True)
