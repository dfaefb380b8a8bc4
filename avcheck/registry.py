from __future__ import annotations

import logging
from pathlib import Path
import yaml
from avcheck.config import settings
from avcheck.models import ProbeSettings

logger = logging.getLogger(__name__)


def load_probe_settings(path: Path | str | None = None) -> ProbeSettings:
    path = Path(path or settings.AVCHECK_PROBES_PATH)
    if not path.exists():
        logger.debug("No probe settings at %s, using built-in defaults", path)
        return ProbeSettings()

    try:
        raw = path.read_text()
    except OSError as exc:
        raise ValueError(f"Could not read {path}: {exc}") from exc
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    ps = ProbeSettings.model_validate(data)

    for port in ps.network.scan_ports:
        if not 1 <= port <= 65535:
            raise ValueError(f"Invalid scan port: {port}")

    # Ensure unique artifact names
    seen = set()
    for name in ps.file.suspicious_filenames:
        if name in seen:
            raise ValueError(f"Duplicate suspicious filename: {name}")
        seen.add(name)

    return ps


def apply_defaults(ps: ProbeSettings) -> dict[str, float]:
    """
    Resolve the shared timings, preferring probes.yml over environment settings.
    """
    d = ps.defaults
    return {
        "observe_delay_s": (
            d.observe_delay_s
            if d.observe_delay_s is not None
            else settings.AVCHECK_OBSERVE_DELAY_S
        ),
        "quarantine_delay_s": (
            d.quarantine_delay_s
            if d.quarantine_delay_s is not None
            else settings.AVCHECK_QUARANTINE_DELAY_S
        ),
        "http_timeout_s": (
            d.http_timeout_s
            if d.http_timeout_s is not None
            else settings.AVCHECK_HTTP_TIMEOUT_S
        ),
    }
