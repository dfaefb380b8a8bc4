from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable

from avcheck.checks.results import CheckResult, CheckStatus


@dataclass(frozen=True)
class RunSummary:
    passed: int = 0
    failed: int = 0
    inconclusive: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.inconclusive

    @property
    def conclusive(self) -> int:
        return self.passed + self.failed

    @property
    def pass_rate(self) -> int:
        return compute_pass_rate(self.passed, self.failed)


def compute_pass_rate(passed: int, failed: int) -> int:
    total = passed + failed
    if total <= 0:
        return 0
    return (passed * 100) // total


def summarize_results(results: Iterable[CheckResult]) -> RunSummary:
    passed = 0
    failed = 0
    inconclusive = 0

    for res in results:
        if res.status is CheckStatus.PASSED:
            passed += 1
        elif res.status is CheckStatus.FAILED:
            failed += 1
        else:
            inconclusive += 1

    return RunSummary(passed=passed, failed=failed, inconclusive=inconclusive)


def detect_os(platform: str | None = None) -> str:
    p = (platform or sys.platform).lower()
    if p.startswith("linux"):
        return "linux"
    if p.startswith("darwin"):
        return "macos"
    if p.startswith(("win32", "cygwin", "msys")):
        return "windows"
    return "unknown"
