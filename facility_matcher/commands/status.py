from __future__ import annotations

from dataclasses import dataclass

from ..session import SessionModel
from .output import ok as ok_line, warning


@dataclass(slots=True)
class StatusReport:
    ok: bool
    lines: list[str]


def run(session: SessionModel) -> StatusReport:
    lines: list[str] = []
    ok = True

    total = len(session.raw_inputs)
    matched = session.assignments.matched_count
    lines.append(ok_line("Raw inputs", f"{total} total"))
    lines.append(ok_line("Clean names", f"{len(session.clean_names)} total"))
    lines.append(ok_line("Matched", f"{matched} of {total}, {session.progress()}% complete"))

    stale = sorted(raw_id for raw_id in session.matches if not 0 <= raw_id < total)
    if stale:
        ok = False
        preview = ", ".join(str(raw_id) for raw_id in stale[:10])
        lines.append(warning("Stale matches", f"{len(stale)} id(s) outside current import: {preview}"))

    known = set(session.clean_names)
    unknown = sorted({name for name in session.matches.values() if name not in known})
    if unknown:
        lines.append(warning("Unlisted clean names", f"{len(unknown)} assigned name(s) not in clean list"))

    if session.last_updated is not None:
        lines.append(ok_line("Last saved", session.last_updated.isoformat()))
    else:
        lines.append(warning("Last saved", "never"))

    return StatusReport(ok=ok, lines=lines)
