import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from avcheck.checks.results import CheckStatus
from avcheck.persistence import LogSinkError, TextLogSink, default_log_name
from avcheck.state import ResultStore


class TextLogSinkTests(unittest.TestCase):
    def test_default_log_name_uses_timestamp(self) -> None:
        self.assertEqual(
            default_log_name(datetime(2026, 10, 19, 8, 5, 3)),
            "av_test_20261019_080503.log",
        )

    def test_events_and_blocks_are_appended(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = TextLogSink(td, filename="session.log")
            sink.append_event("first", when=datetime(2026, 10, 19, 12, 0, 0))
            sink.append_event("second", when=datetime(2026, 10, 19, 12, 0, 1))
            sink.append_block("SUMMARY")

            lines = Path(td, "session.log").read_text().splitlines()

        self.assertEqual(
            lines,
            [
                "[2026-10-19 12:00:00] first",
                "[2026-10-19 12:00:01] second",
                "SUMMARY",
            ],
        )

    def test_write_failure_raises_log_sink_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = TextLogSink(td, filename="session.log")
            with patch.object(Path, "open", side_effect=PermissionError("denied")):
                with self.assertRaises(LogSinkError):
                    sink.append_event("x")


class ResultStoreSinkTests(unittest.TestCase):
    def test_records_are_logged_one_line_each(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = ResultStore(sink=TextLogSink(td, filename="s.log"))
            store.record("file.eicar", CheckStatus.FAILED, "EICAR test file was not detected/removed")
            store.record("usb.autorun", CheckStatus.PASSED, "Autorun file was blocked")

            lines = Path(td, "s.log").read_text().splitlines()

        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].endswith("file.eicar: FAILED: EICAR test file was not detected/removed"))
        self.assertTrue(lines[1].endswith("usb.autorun: PASSED: Autorun file was blocked"))

    def test_sink_failure_keeps_in_memory_results(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = TextLogSink(td, filename="s.log")
            store = ResultStore(sink=sink)
            store.record("a", CheckStatus.PASSED, "ok")

            with patch.object(sink, "append_event", side_effect=LogSinkError("disk full")):
                store.record("b", CheckStatus.FAILED, "bad")

            store.record("c", CheckStatus.INCONCLUSIVE, "n/a")

        self.assertEqual([r.name for r in store.results()], ["a", "b", "c"])
        self.assertEqual(store.sink_error, "disk full")
        self.assertIsNone(store.sink)
        self.assertFalse(store.log_block("report"))
        summary = store.summarize()
        self.assertEqual((summary.passed, summary.failed, summary.inconclusive), (1, 1, 1))


if __name__ == "__main__":
    unittest.main()
