"""
Line-based import and CSV-style export of matching work.

The export deliberately wraps each field in double quotes without escaping
quotes inside the values; downstream consumers rely on that exact layout.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping, Sequence

from .core.models import RawInput

EXPORT_HEADER = "Raw Input,Matched Clean Name"

_LINE_SPLIT = re.compile(r"\r?\n")


def parse_lines(text: str) -> list[str]:
    """Trimmed, non-blank lines of ``text``; an empty source yields an empty list."""
    return [line.strip() for line in _LINE_SPLIT.split(text) if line.strip()]


def parse_raw_inputs(text: str) -> list[RawInput]:
    return [RawInput(id=index, text=line) for index, line in enumerate(parse_lines(text))]


def read_lines(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def export_csv(raw_inputs: Sequence[RawInput], matches: Mapping[int, str]) -> str:
    rows = [EXPORT_HEADER]
    for item in raw_inputs:
        rows.append(f'"{item.text}","{matches.get(item.id) or ""}"')
    return "\n".join(rows)


def write_export(path: Path, raw_inputs: Sequence[RawInput], matches: Mapping[int, str]) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_csv(raw_inputs, matches), encoding="utf-8", newline="")
    return len(raw_inputs)
