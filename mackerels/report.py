from typing import List

from .base import AnnotatedWord, MackerelReport
from .engine import OverlapQueryEngine


def _plural(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def render_word(entry: AnnotatedWord, overlap: OverlapQueryEngine) -> str:
    """One-line explanation of a word's M-number."""
    avoided = overlap.non_sharing_states(entry.word.code)
    if entry.result.is_mackerel:
        return f"{entry.text!r} is a mackerel: it shares no letters with {entry.state} only"
    if not avoided:
        return f"{entry.text!r} shares letters with every state (M=0)"
    return f"{entry.text!r} shares no letters with {_plural(len(avoided), 'state')} (M={entry.m}): {', '.join(avoided)}"


def render_report(report: MackerelReport, top: int = 0) -> str:
    """
    Plain-text narrative of a MackerelReport.

    Args:
        report: Result of MackerelSearchEngine.run()
        top: Show only the first `top` tally rows (0 shows all).
    """
    lines: List[str] = [
        f"{_plural(report.word_count, 'word')}, {_plural(report.state_count, 'state')}, "
        f"{_plural(report.mackerel_count, 'mackerel')}",
        "",
    ]
    if report.corpus_sha256:
        lines.insert(1, f"corpus sha256 {report.corpus_sha256}")

    if report.longest:
        lines.append(f"Longest mackerels ({report.longest_length} letters):")
        for entry in report.longest:
            lines.append(f"  {entry.text} ({entry.state})")
    else:
        lines.append("No mackerels found.")
    lines.append("")

    tally = report.tally[:top] if top else report.tally
    if tally:
        lines.append("Mackerels per state:")
        width = max(len(t.state) for t in tally)
        for rank, t in enumerate(tally, 1):
            longest = ", ".join(report.longest_by_state.get(t.state, []))
            lines.append(f"  {rank:>2}. {t.state:<{width}} {t.count:>6}  {longest}")
        lines.append("")

    lines.append(f"States with no mackerels ({len(report.zero_states)}):")
    if report.zero_states:
        lines.append("  " + ", ".join(report.zero_states))
    lines.append("")

    if report.m_histogram:
        lines.append("Words by M-number:")
        for m, count in report.m_histogram.items():
            lines.append(f"  M={m:<3} {count}")

    return "\n".join(lines).rstrip() + "\n"
