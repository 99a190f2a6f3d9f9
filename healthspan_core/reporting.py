# healthspan_core/reporting.py
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from .grading import grade, bar_band
from .question_bank import SYSTEM_LABELS
from .types import Narrative, ScoredResult, ANONYMOUS_USER, is_anonymous

TITLE = "[4-Week Healthspan Project] Assessment result"
NO_NARRATIVE = "AI narrative unavailable for this result."

def format_date(timestamp: str) -> str:
    ts = (timestamp or "").strip()
    try:
        # fromisoformat rejects a trailing Z before 3.11
        return datetime.fromisoformat(ts.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return ts or "-"

def _label(system: str) -> str:
    return SYSTEM_LABELS.get(system, system)

# -------- plain-text export for copy/paste sharing ----------
def render_text(result: ScoredResult, narrative: Optional[Narrative] = None) -> str:
    """
    Deterministic text summary: same result + narrative always gives the same
    string. Shared (anonymized) results never print a real name.
    """
    name = ANONYMOUS_USER.name if is_anonymous(result) else result.identity.name
    lines = [
        TITLE,
        "",
        f"Name: {name}",
        f"Overall score: {result.total_score}/{result.total_max} ({result.overall_percentage}%)",
        f"Health grade: {grade(result.overall_percentage)}",
        "",
        "[Scores by system]",
    ]
    lines += [f"- {_label(s.system)}: {s.score}/{s.max_score} ({s.percentage}%)" for s in result.system_scores]
    lines += ["", "AI health advice"]
    if narrative is not None and narrative.summary:
        lines.append(f'"{narrative.summary}"')
    else:
        lines.append(NO_NARRATIVE)
    lines += ["", f"Assessment date: {format_date(result.timestamp)}"]
    return "\n".join(lines)

# -------- chart series consumed by the front end ----------
def chart_series(result: ScoredResult) -> Dict[str, List[Dict[str, Any]]]:
    radar = [
        {"system": s.system, "label": _label(s.system), "percentage": s.percentage, "fullMark": 100}
        for s in result.system_scores
    ]
    bars = [
        {
            "system": s.system,
            "label": _label(s.system),
            "score": s.score,
            "max": s.max_score,
            "percentage": s.percentage,
            "band": bar_band(s.percentage),
        }
        for s in result.system_scores
    ]
    return {"radar": radar, "bars": bars}

def summarize(result: ScoredResult) -> Dict[str, Any]:
    return {
        "grade": grade(result.overall_percentage),
        "total_score": result.total_score,
        "total_max": result.total_max,
        "overall_percentage": result.overall_percentage,
        "shared": is_anonymous(result),
    }
