import io
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch

from rich.console import Console

from avcheck.checks.results import CheckStatus
from avcheck.models import ProbeSettings
from avcheck.persistence import LogSinkError, TextLogSink
from avcheck.probes import GROUPS_BY_NAME, ProbeGroup
from avcheck.runner import Session
from avcheck.state import ResultStore

TIMINGS = {"observe_delay_s": 0.0, "quarantine_delay_s": 0.0, "http_timeout_s": 1.0}


def make_session(td: str, sink: TextLogSink | None = None) -> tuple[Session, io.StringIO]:
    out = io.StringIO()
    session = Session(
        store=ResultStore(sink=sink),
        probes=ProbeSettings(),
        timings=dict(TIMINGS),
        test_dir=Path(td) / "av_test_files",
        console=Console(file=out, no_color=True, width=200),
        os_name="linux",
        sleep=Mock(),
    )
    return session, out


class SessionTests(unittest.TestCase):
    def test_start_creates_test_dir_and_logs(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = TextLogSink(td, filename="s.log")
            session, out = make_session(td, sink)
            session.start()

            self.assertTrue(session.test_dir.is_dir())
            log_text = sink.path.read_text()

        self.assertIn("Detected OS: linux", out.getvalue())
        self.assertIn("Created test directory", log_text)

    def test_generate_report_appends_summary_block(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = TextLogSink(td, filename="s.log")
            session, out = make_session(td, sink)
            session.record("file.eicar", CheckStatus.PASSED, "removed")
            session.record("quarantine.eicar", CheckStatus.FAILED, "not quarantined")

            report = session.generate_report(now=datetime(2026, 10, 19, 9, 30, 0))
            log_text = sink.path.read_text()

        self.assertIn("AV TEST SUMMARY REPORT", log_text)
        self.assertIn("- Pass Rate: 50%", log_text)
        self.assertIn("Date: Mon Oct 19 09:30:00 2026", report)
        self.assertIn("Report saved to:", out.getvalue())
        self.assertIn("Failed Tests: 1", out.getvalue())

    def test_report_with_zero_results(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, _ = make_session(td, TextLogSink(td, filename="s.log"))
            report = session.generate_report()

        self.assertIn("- Total Tests Run: 0", report)

    def test_sink_failure_is_reported_and_report_printed(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = TextLogSink(td, filename="s.log")
            session, out = make_session(td, sink)
            session.record("a", CheckStatus.PASSED, "ok")
            with patch.object(sink, "append_event", side_effect=LogSinkError("read-only fs")):
                session.record("b", CheckStatus.FAILED, "bad")
            session.generate_report()

        text = out.getvalue()
        self.assertTrue(session.sink_failed)
        self.assertEqual(text.count("Log file can no longer be written"), 1)
        self.assertIn("AV TEST SUMMARY REPORT", text)
        self.assertEqual(len(session.store.results()), 2)

    def test_run_groups_in_given_order(self) -> None:
        calls = []
        groups = {
            name: ProbeGroup(g.key, g.name, g.title, lambda ctx, n=name: calls.append(n))
            for name, g in GROUPS_BY_NAME.items()
        }
        with tempfile.TemporaryDirectory() as td:
            session, _ = make_session(td)
            with patch.dict("avcheck.runner.GROUPS_BY_NAME", groups), patch(
                "avcheck.runner.PROBE_GROUPS", tuple(groups.values())
            ):
                session.run_groups(["usb", "network"])
                session.run_groups(["all"])

        self.assertEqual(
            calls,
            ["usb", "network", "network", "file", "behavior", "web", "email", "usb", "quarantine"],
        )

    def test_cleanup(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, out = make_session(td)
            session.setup_test_env()
            (session.test_dir / "leftover.txt").write_text("x")

            session.cleanup(False)
            self.assertTrue(session.test_dir.exists())

            session.cleanup(True)
            self.assertFalse(session.test_dir.exists())

        self.assertIn("Test files retained", out.getvalue())
        self.assertIn("Test files cleaned up", out.getvalue())


if __name__ == "__main__":
    unittest.main()
