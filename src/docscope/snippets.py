"""Extraction of code snippets around search matches."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Snippet:
    """Lines surrounding one matching line."""

    line: int
    """1-based number of the matching line."""

    snippet: str
    """Numbered lines, the matching one marked with ``>``."""

    match: str
    """The matching line, stripped."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def number_lines(lines: list[str], start: int = 1) -> str:
    """Prefix lines with right-aligned line numbers."""
    return "\n".join(f"{i:>4}: {line}" for i, line in enumerate(lines, start=start))


def extract_snippets(content: str, term: str, context_lines: int = 5) -> list[Snippet]:
    """Find every line containing ``term`` (case-insensitive) with its context.

    Args:
        content: File content
        term: Text to look for. An empty term matches nothing.
        context_lines: Lines of context before and after each match

    Returns:
        One snippet per matching line, in file order
    """
    if not term:
        return []
    lines = content.split("\n")
    needle = term.lower()
    snippets: list[Snippet] = []
    for i, line in enumerate(lines):
        if needle not in line.lower():
            continue
        start = max(0, i - context_lines)
        end = min(len(lines), i + context_lines + 1)
        rendered = "\n".join(
            f"{'>' if n == i else ' '}{n + 1:>4}: {lines[n]}" for n in range(start, end)
        )
        snippets.append(Snippet(line=i + 1, snippet=rendered, match=line.strip()))
    return snippets
