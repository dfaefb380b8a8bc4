from __future__ import annotations

import logging
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from rich.console import Console

from avcheck.checks.results import CheckResult, CheckStatus
from avcheck.formatting import format_result, styled
from avcheck.models import ProbeSettings
from avcheck.ops_logic import detect_os
from avcheck.probes import GROUPS_BY_NAME, PROBE_GROUPS, ProbeContext, ProbeGroup
from avcheck.reporting import render_report, render_summary_lines
from avcheck.state import ResultStore

logger = logging.getLogger(__name__)


class Session:
    """One interactive checklist run: probes, console output and the session log."""

    def __init__(
        self,
        store: ResultStore,
        probes: ProbeSettings,
        timings: dict[str, float],
        test_dir: Path,
        console: Console | None = None,
        os_name: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.probes = probes
        self.timings = timings
        self.test_dir = Path(test_dir)
        self.console = console or Console()
        self.os_name = os_name or detect_os()
        self._sleep = sleep
        self._sink_error_reported = False

    def say(self, style: str, text: str) -> None:
        self.console.print(styled(style, text), highlight=False)
        self.store.log_event(text)
        self._report_sink_error()

    def record(self, name: str, status: CheckStatus, message: str) -> CheckResult:
        res = self.store.record(name, status, message)
        style, text = format_result(res)
        self.console.print(styled(style, text), highlight=False)
        self._report_sink_error()
        return res

    def _report_sink_error(self) -> None:
        if self.store.sink_error is None or self._sink_error_reported:
            return
        self._sink_error_reported = True
        self.console.print(
            styled("error", f"Log file can no longer be written: {self.store.sink_error}"),
            highlight=False,
        )

    @property
    def sink_failed(self) -> bool:
        return self.store.sink_error is not None

    @property
    def log_path(self) -> Path | None:
        sink = self.store.sink
        return sink.path if sink is not None else None

    def context(self) -> ProbeContext:
        return ProbeContext(
            test_dir=self.test_dir,
            probes=self.probes,
            timings=self.timings,
            record=self.record,
            say=self.say,
            sleep=self._sleep,
        )

    def start(self) -> None:
        self.say("info", "AV Testing Checklist v1.0")
        self.say("warn", "This tool tests common AV features using safe methods")
        self.say("info", f"Detected OS: {self.os_name}")
        self.setup_test_env()

    def setup_test_env(self) -> None:
        self.say("header", "=== Setting up test environment ===")
        if self.test_dir.is_dir():
            self.say("warn", f"Test directory already exists: {self.test_dir}")
            return
        try:
            self.test_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Could not create test directory %s: %s", self.test_dir, exc)
            self.say("error", f"Could not create test directory {self.test_dir}: {exc}")
            return
        self.say("passed", f"Created test directory: {self.test_dir}")

    def run_group(self, group: ProbeGroup) -> None:
        logger.info("Running probe group %s", group.name)
        group.run(self.context())

    def run_groups(self, names: Iterable[str]) -> None:
        for name in names:
            if name == "all":
                self.run_all()
            else:
                self.run_group(GROUPS_BY_NAME[name])

    def run_all(self) -> None:
        self.say("header", "=== Running All AV Tests ===")
        for group in PROBE_GROUPS:
            self.run_group(group)

    def generate_report(self, now: datetime | None = None) -> str:
        self.say("header", "=== Generating Test Report ===")
        summary = self.store.summarize()
        generated_at = (now or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")
        report = render_report(summary=summary, generated_at=generated_at, os_name=self.os_name)

        if self.store.log_block(report):
            self.say("passed", f"Report saved to: {self.log_path}")
        else:
            self._report_sink_error()
            self.console.print(report, markup=False, highlight=False)

        for style, text in render_summary_lines(summary):
            self.say(style, text)
        return report

    def cleanup(self, remove: bool) -> None:
        self.say("header", "=== Cleaning up test files ===")
        if not remove:
            self.say("warn", f"Test files retained in {self.test_dir}")
            return
        try:
            shutil.rmtree(self.test_dir)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove %s: %s", self.test_dir, exc)
            self.say("error", f"Could not remove {self.test_dir}: {exc}")
            return
        self.say("passed", "Test files cleaned up")
