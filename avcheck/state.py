from __future__ import annotations

import logging

from avcheck.checks.results import CheckResult, CheckStatus
from avcheck.ops_logic import RunSummary, summarize_results
from avcheck.persistence import LogSinkError, TextLogSink

logger = logging.getLogger(__name__)


class ResultStore:
    """Ordered, append-only sequence of check results for one session."""

    def __init__(self, sink: TextLogSink | None = None) -> None:
        self._results: list[CheckResult] = []
        self._sink = sink
        self.sink_error: str | None = None

    @property
    def sink(self) -> TextLogSink | None:
        return self._sink

    def record(self, name: str, status: CheckStatus, message: str) -> CheckResult:
        res = CheckResult(name=name, status=CheckStatus(status), message=message)
        self._results.append(res)
        self.log_event(f"{name}: {res.status.value.upper()}: {message}")
        return res

    def log_event(self, message: str) -> None:
        if self._sink is None:
            return
        try:
            self._sink.append_event(message)
        except LogSinkError as exc:
            self._detach_sink(exc)

    def log_block(self, text: str) -> bool:
        if self._sink is None:
            return False
        try:
            self._sink.append_block(text)
        except LogSinkError as exc:
            self._detach_sink(exc)
            return False
        return True

    def _detach_sink(self, exc: LogSinkError) -> None:
        # Recorded results stay in memory; only the file is given up.
        logger.error("Log sink disabled: %s", exc)
        self.sink_error = str(exc)
        self._sink = None

    def results(self) -> tuple[CheckResult, ...]:
        return tuple(self._results)

    def summarize(self) -> RunSummary:
        return summarize_results(self._results)
