from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


class ArtifactState(str, Enum):
    ABSENT = "absent"
    EMPTY = "empty"
    PRESENT = "present"


@dataclass
class DropOutcome:
    path: Path
    written: bool
    error: str | None = None


def drop_file(path: Path, content: str | bytes) -> DropOutcome:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    except OSError as e:
        # Callers treat a refused write as blocked.
        logger.info("Write of %s refused: %s", path, e)
        return DropOutcome(path=path, written=False, error=str(e))
    return DropOutcome(path=path, written=True)


def observe(path: Path) -> ArtifactState:
    try:
        if not path.is_file():
            return ArtifactState.ABSENT
        if path.stat().st_size == 0:
            return ArtifactState.EMPTY
    except OSError as e:
        # Locked by another process counts as gone.
        logger.info("Stat of %s failed: %s", path, e)
        return ArtifactState.ABSENT
    return ArtifactState.PRESENT


def wait_and_observe(
    paths: Iterable[Path],
    delay_s: float,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[Path, ArtifactState]:
    paths = list(paths)
    if delay_s > 0:
        sleep(delay_s)
    return {p: observe(p) for p in paths}


def remove_quietly(paths: Iterable[Path]) -> int:
    """Best-effort cleanup of probe artifacts. Returns how many were removed."""
    removed = 0
    for p in paths:
        try:
            p.unlink()
            removed += 1
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Could not remove artifact %s: %s", p, e)
    return removed
