from __future__ import annotations
from html import escape
from typing import List, Optional

from .grading import grade, bar_band
from .question_bank import SYSTEM_LABELS
from .reporting import NO_NARRATIVE, format_date
from .types import Narrative, ScoredResult, is_anonymous

def _row(s) -> str:
    label = escape(SYSTEM_LABELS.get(s.system, s.system))
    return (f"<tr><td>{label}</td><td>{s.score}/{s.max_score}</td>"
            f"<td><div class=\"bar {bar_band(s.percentage)}\" style=\"width:{s.percentage}%\"></div></td>"
            f"<td>{s.percentage}%</td></tr>")

def _list(title: str, items) -> str:
    if not items: return ""
    lis = "".join(f"<li>{escape(x)}</li>" for x in items)
    return f"<h4>{escape(title)}</h4><ul>{lis}</ul>"

def _narrative_html(narrative: Optional[Narrative]) -> str:
    if narrative is None or not (narrative.summary or narrative.strengths or narrative.weaknesses or narrative.recommendations):
        return f"<p class=\"muted\">{escape(NO_NARRATIVE)}</p>"
    parts: List[str] = []
    if narrative.summary:
        parts.append(f"<blockquote>{escape(narrative.summary)}</blockquote>")
    parts.append(_list("Strengths", narrative.strengths))
    parts.append(_list("Areas to improve", narrative.weaknesses))
    parts.append(_list("Recommendations", narrative.recommendations))
    return "".join(parts)

def render_report_html(result: ScoredResult, narrative: Optional[Narrative] = None) -> str:
    shared = is_anonymous(result)
    rows = "\n".join(_row(s) for s in result.system_scores)
    who = "" if shared else f"<p><b>{escape(result.identity.name)}</b> · {escape(result.identity.age)} · {escape(result.identity.gender)}</p>"
    banner = ("<div class=\"banner\">Shared result. Name, age, gender and individual answers "
              "are not included in shared links.</div>") if shared else ""
    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<title>Healthspan Assessment</title>
<style>
 body{{font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,'Helvetica Neue',Arial}}
 .wrap{{max-width:960px;margin:40px auto;padding:0 16px}}
 .banner{{background:#eff6ff;border-left:4px solid #3b82f6;padding:12px;margin-bottom:16px}}
 table{{border-collapse:collapse;width:100%}}
 td{{padding:6px;text-align:left}}
 .bar{{height:10px;border-radius:5px}}
 .bar.good{{background:#22c55e}} .bar.fair{{background:#facc15}} .bar.low{{background:#ef4444}}
 .muted{{color:#6b7280}}
</style>
</head>
<body>
<div class="wrap">
  {banner}
  <h1>Healthspan Assessment</h1>
  {who}
  <p><b>Overall:</b> {result.total_score}/{result.total_max} ({result.overall_percentage}%) · <b>Grade:</b> {escape(grade(result.overall_percentage))}</p>
  <table><tbody>
{rows}
  </tbody></table>
  <h3>AI health advice</h3>
  {_narrative_html(narrative)}
  <p class="muted">Assessment date: {escape(format_date(result.timestamp))}</p>
</div>
</body>
</html>"""

def export_report_html(result: ScoredResult, path: str, narrative: Optional[Narrative] = None) -> str:
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_report_html(result, narrative))
    return path
