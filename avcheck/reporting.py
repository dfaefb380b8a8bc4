from __future__ import annotations

from avcheck.ops_logic import RunSummary

REPORT_RULE = "=" * 40

REMEDIATION_ADVICE = (
    "Review AV configuration for failed tests",
    "Ensure real-time protection is enabled",
    "Check AV definition updates",
    "Verify all protection modules are active",
)

HEALTHY_ADVICE = (
    "AV solution appears to be functioning well",
    "Continue regular updates and monitoring",
    "Perform periodic testing",
)

NO_CONCLUSIVE_NOTE = (
    "Note: no conclusive checks were recorded; "
    "the advice above only reflects that nothing failed"
)


def choose_recommendations(summary: RunSummary) -> tuple[str, ...]:
    if summary.failed > 0:
        return REMEDIATION_ADVICE
    return HEALTHY_ADVICE


def render_report(*, summary: RunSummary, generated_at: str, os_name: str) -> str:
    lines: list[str] = []
    lines.append("")
    lines.append(REPORT_RULE)
    lines.append("        AV TEST SUMMARY REPORT")
    lines.append(REPORT_RULE)
    lines.append(f"Date: {generated_at}")
    lines.append(f"OS: {os_name}")
    lines.append("")
    lines.append("Test Results:")
    lines.append(f"- Total Tests Run: {summary.conclusive}")
    lines.append(f"- Passed: {summary.passed}")
    lines.append(f"- Failed: {summary.failed}")
    lines.append(f"- Inconclusive: {summary.inconclusive}")
    lines.append(f"- Pass Rate: {summary.pass_rate}%")
    lines.append("")
    lines.append("Recommendations:")
    for recommendation in choose_recommendations(summary):
        lines.append(f"- {recommendation}")
    if summary.conclusive == 0:
        lines.append(NO_CONCLUSIVE_NOTE)
    return "\n".join(lines) + "\n"


def render_summary_lines(summary: RunSummary) -> list[tuple[str, str]]:
    """Short console summary as (style key, text) pairs."""
    return [
        ("header", "===== Test Summary ====="),
        ("passed", f"Passed Tests: {summary.passed}"),
        ("failed", f"Failed Tests: {summary.failed}"),
        ("inconclusive", f"Inconclusive Tests: {summary.inconclusive}"),
        ("warn", f"Pass Rate: {summary.pass_rate}%"),
    ]
