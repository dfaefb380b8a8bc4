from __future__ import annotations

from rich.markup import escape

from avcheck.checks.results import CheckResult, CheckStatus

STYLES = {
    "header": "bold blue",
    "info": "blue",
    "warn": "yellow",
    "passed": "green",
    "failed": "red",
    "inconclusive": "yellow",
    "error": "bold red",
}

STATUS_LABELS = {
    CheckStatus.PASSED: "PASSED",
    CheckStatus.FAILED: "FAILED",
    CheckStatus.INCONCLUSIVE: "INFO",
}


def format_result(result: CheckResult) -> tuple[str, str]:
    style = result.status.value
    label = STATUS_LABELS[result.status]
    return style, f"{label}: {result.message}"


def styled(style_key: str, text: str) -> str:
    style = STYLES.get(style_key)
    if style is None:
        return escape(text)
    return f"[{style}]{escape(text)}[/{style}]"
