from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Child script: create files then rename them to look like encryption output.
RAPID_FILE_OPS_SCRIPT = """
import os, sys
os.chdir(sys.argv[1])
for i in range(1, int(sys.argv[2]) + 1):
    src = "testfile_%d.tmp" % i
    with open(src, "w") as fh:
        fh.write("test data %d\\n" % i)
    try:
        os.replace(src, "testfile_%d.encrypted" % i)
    except OSError:
        pass
"""


@dataclass
class ProcessOutcome:
    started: bool
    timed_out: bool = False
    returncode: int | None = None
    error: str | None = None


def run_rapid_file_ops(directory: Path, count: int, timeout_s: float) -> ProcessOutcome:
    cmd = [sys.executable, "-c", RAPID_FILE_OPS_SCRIPT, str(directory), str(count)]
    return _run(cmd, timeout_s=timeout_s, shell=False)


def run_shell(command: str, timeout_s: float) -> ProcessOutcome:
    return _run(command, timeout_s=timeout_s, shell=True)


def _run(cmd: list[str] | str, timeout_s: float, shell: bool) -> ProcessOutcome:
    try:
        proc = subprocess.run(
            cmd,
            shell=shell,
            capture_output=True,
            timeout=timeout_s,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return ProcessOutcome(started=True, timed_out=True)
    except OSError as e:
        logger.info("Could not start %r: %s", cmd, e)
        return ProcessOutcome(started=False, error=str(e))
    return ProcessOutcome(started=True, returncode=proc.returncode)


def rapid_file_ops_artifacts(directory: Path) -> list[Path]:
    return sorted(directory.glob("testfile_*.tmp")) + sorted(
        directory.glob("testfile_*.encrypted")
    )
