import io
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from rich.console import Console

from avcheck.main import build_actions, interactive_loop, main
from avcheck.models import ProbeSettings
from avcheck.runner import Session
from avcheck.state import ResultStore


def scripted(*answers: str):
    it = iter(answers)

    def _ask(*_args, **_kwargs):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    return _ask


class MenuDispatchTests(unittest.TestCase):
    def _session(self, td: str) -> tuple[Session, io.StringIO]:
        out = io.StringIO()
        session = Session(
            store=ResultStore(),
            probes=ProbeSettings(),
            timings={"observe_delay_s": 0, "quarantine_delay_s": 0, "http_timeout_s": 1},
            test_dir=Path(td) / "t",
            console=Console(file=out, no_color=True, width=200),
            os_name="linux",
            sleep=Mock(),
        )
        return session, out

    def test_dispatch_table_keys(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, _ = self._session(td)
            actions = build_actions(session)

        self.assertEqual(sorted(actions), [str(i) for i in range(1, 10)])

    def test_invalid_option_then_report_then_exit(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, out = self._session(td)
            confirm = Mock(return_value=False)
            interactive_loop(
                session,
                session.console,
                ask=scripted("x", "", "9", "", "0"),
                confirm=confirm,
            )

        text = out.getvalue()
        self.assertIn("Invalid option. Please try again.", text)
        self.assertIn("AV TEST SUMMARY REPORT", text)
        self.assertIn("Exiting AV Test Script", text)
        confirm.assert_called_once()

    def test_exit_with_preset_cleanup_skips_question(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, _ = self._session(td)
            session.setup_test_env()
            confirm = Mock()
            interactive_loop(session, session.console, ask=scripted("0"), confirm=confirm, cleanup=True)

            self.assertFalse(session.test_dir.exists())
        confirm.assert_not_called()

    def test_end_of_input_exits(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, out = self._session(td)
            interactive_loop(session, session.console, ask=scripted(), confirm=Mock(side_effect=EOFError))

        self.assertIn("Exiting AV Test Script", out.getvalue())


    def test_end_of_input_after_action_takes_exit_path(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            session, out = self._session(td)
            session.setup_test_env()
            interactive_loop(
                session,
                session.console,
                ask=scripted("x"),
                confirm=Mock(),
                cleanup=True,
            )

            self.assertFalse(session.test_dir.exists())
        self.assertIn("Exiting AV Test Script", out.getvalue())


class MainTests(unittest.TestCase):
    def test_non_interactive_run_writes_report(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with patch("avcheck.runner.Session.run_groups") as run_groups:
                code = main(
                    [
                        "--run",
                        "file",
                        "--log-dir",
                        td,
                        "--test-dir",
                        str(Path(td) / "artifacts"),
                        "--probes-file",
                        str(Path(td) / "none.yml"),
                        "--no-color",
                        "--cleanup",
                    ]
                )

            logs = list(Path(td).glob("av_test_*.log"))
            self.assertEqual(len(logs), 1)
            self.assertIn("AV TEST SUMMARY REPORT", logs[0].read_text())
            self.assertFalse((Path(td) / "artifacts").exists())

        self.assertEqual(code, 0)
        run_groups.assert_called_once_with(["file"])

    def test_settings_file_directory_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            code = main(
                ["--probes-file", td, "--log-dir", td, "--run", "usb", "--keep", "--no-color"]
            )

        self.assertEqual(code, 2)

    def test_invalid_probe_settings_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            bad = Path(td) / "probes.yml"
            bad.write_text("network: [unclosed\n")
            code = main(["--probes-file", str(bad), "--log-dir", td, "--no-color"])

        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
