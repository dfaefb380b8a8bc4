from __future__ import annotations

from datetime import datetime
from pathlib import Path


class LogSinkError(RuntimeError):
    pass


def default_log_name(now: datetime | None = None) -> str:
    ts = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"av_test_{ts}.log"


class TextLogSink:
    """Append-only, timestamped session log.

    Every write opens the file in append mode so a partially written session
    still leaves a readable log behind.
    """

    def __init__(self, log_dir: str | Path, filename: str | None = None) -> None:
        self.path = self._resolve_log_dir(log_dir) / (filename or default_log_name())

    @staticmethod
    def _resolve_log_dir(raw_path: str | Path) -> Path:
        p = Path(raw_path).expanduser()
        if p.is_absolute():
            return p
        return Path.cwd() / p

    def append_event(self, message: str, when: datetime | None = None) -> None:
        ts = (when or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
        self._write(f"[{ts}] {message}\n")

    def append_block(self, text: str) -> None:
        self._write(text if text.endswith("\n") else text + "\n")

    def _write(self, text: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as exc:
            raise LogSinkError(
                f"Failed to write log {self.path}: {exc.__class__.__name__}: {exc}"
            ) from exc
