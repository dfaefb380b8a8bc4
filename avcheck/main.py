"""Entry point for the AV testing checklist."""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.prompt import Confirm, Prompt

from avcheck.config import settings
from avcheck.formatting import styled
from avcheck.persistence import TextLogSink
from avcheck.probes import PROBE_GROUPS
from avcheck.registry import apply_defaults, load_probe_settings
from avcheck.runner import Session
from avcheck.state import ResultStore

logger = logging.getLogger(__name__)

RUN_ALL_KEY = "8"
REPORT_KEY = "9"
EXIT_KEY = "0"


def build_actions(session: Session) -> dict[str, Callable[[], object]]:
    actions: dict[str, Callable[[], object]] = {
        group.key: partial(session.run_group, group) for group in PROBE_GROUPS
    }
    actions[RUN_ALL_KEY] = session.run_all
    actions[REPORT_KEY] = session.generate_report
    return actions


def show_menu(console: Console) -> None:
    console.print()
    console.print(styled("header", "========================================="), highlight=False)
    console.print(styled("header", "       AV Testing Checklist Menu         "), highlight=False)
    console.print(styled("header", "========================================="), highlight=False)
    for group in PROBE_GROUPS:
        console.print(f"{group.key}. {group.title}", highlight=False)
    console.print(f"{RUN_ALL_KEY}. Run All Tests", highlight=False)
    console.print(f"{REPORT_KEY}. Generate Report", highlight=False)
    console.print(f"{EXIT_KEY}. Exit", highlight=False)
    console.print()


def _exit_session(
    session: Session,
    console: Console,
    confirm: Callable[..., bool],
    cleanup: bool | None,
) -> None:
    if cleanup is None:
        try:
            remove = confirm("Do you want to clean up test files?", console=console)
        except EOFError:
            remove = False
    else:
        remove = cleanup
    session.cleanup(remove)
    session.say("passed", f"Exiting AV Test Script. Log saved to: {session.log_path}")


def interactive_loop(
    session: Session,
    console: Console,
    ask: Callable[..., str] = Prompt.ask,
    confirm: Callable[..., bool] = Confirm.ask,
    cleanup: bool | None = None,
) -> None:
    actions = build_actions(session)
    while True:
        show_menu(console)
        try:
            choice = ask("Select an option (0-9)", console=console).strip()
        except EOFError:
            choice = EXIT_KEY

        if choice == EXIT_KEY:
            _exit_session(session, console, confirm, cleanup)
            return

        action = actions.get(choice)
        if action is None:
            session.say("failed", "Invalid option. Please try again.")
        else:
            action()

        try:
            ask("Press Enter to continue", console=console, default="", show_default=False)
        except EOFError:
            _exit_session(session, console, confirm, cleanup)
            return


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exercise common antivirus/EDR detection surfaces with safe probes"
    )
    parser.add_argument(
        "--run",
        action="append",
        choices=[g.name for g in PROBE_GROUPS] + ["all"],
        help="Run probe groups non-interactively, write the report and exit",
    )
    parser.add_argument("--log-dir", default=settings.AVCHECK_LOG_DIR)
    parser.add_argument("--test-dir", default=settings.AVCHECK_TEST_DIR)
    parser.add_argument("--probes-file", default=settings.AVCHECK_PROBES_PATH)
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait before observing a dropped file",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    cleanup = parser.add_mutually_exclusive_group()
    cleanup.add_argument(
        "--cleanup",
        dest="cleanup",
        action="store_const",
        const=True,
        help="Remove the test directory on exit without asking",
    )
    cleanup.add_argument(
        "--keep",
        dest="cleanup",
        action="store_const",
        const=False,
        help="Keep the test directory on exit without asking",
    )
    parser.set_defaults(cleanup=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.AVCHECK_LOG_LEVEL, logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    console = Console(no_color=args.no_color, highlight=False)

    try:
        probes = load_probe_settings(args.probes_file)
    except ValueError as exc:
        console.print(styled("error", f"Invalid probe settings: {exc}"), highlight=False)
        return 2

    timings = apply_defaults(probes)
    if args.delay is not None:
        timings["observe_delay_s"] = max(0.0, args.delay)

    store = ResultStore(sink=TextLogSink(args.log_dir))
    logger.info("Session log: %s", store.sink.path)
    session = Session(
        store=store,
        probes=probes,
        timings=timings,
        test_dir=Path(args.test_dir),
        console=console,
    )
    session.start()

    if args.run:
        session.run_groups(args.run)
        session.generate_report()
        session.cleanup(bool(args.cleanup))
    else:
        interactive_loop(session, console, cleanup=args.cleanup)

    return 1 if session.sink_failed else 0


if __name__ == "__main__":
    sys.exit(main())
