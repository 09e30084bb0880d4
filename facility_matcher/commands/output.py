from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..core.filtering import FilterResult
from ..core.similarity import as_percent


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def ok(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "OK", detail).render()


def warning(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "WARNING", detail).render()


def result_line(result: FilterResult, matches: Mapping[int, str]) -> str:
    assigned = matches.get(result.id)
    status = f"-> {assigned}" if assigned else "unmatched"
    line = f"[{result.id}] {result.text}  {status}"
    if result.show_score:
        line += f"  ({as_percent(result.score)}% match)"
    return line


def result_page(results: Sequence[FilterResult], matches: Mapping[int, str], limit: int) -> list[str]:
    if not results:
        return ["No results found for current filters."]
    lines = [result_line(result, matches) for result in results[:limit]]
    remaining = len(results) - limit
    if remaining > 0:
        lines.append(f"... {remaining} more (raise --limit to see them)")
    return lines
