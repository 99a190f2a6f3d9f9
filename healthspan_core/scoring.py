from __future__ import annotations
from fractions import Fraction
from typing import Tuple, Dict, Any, List, Mapping
import logging
from .config import ANSWER_MAX, ANSWER_MIN, NEUTRAL_ANSWER
from .types import Catalog, Question, ScoredResult, SystemScore, UserInfo
from .validators import validate_answers

log = logging.getLogger(__name__)

def round_half_up(x: Fraction) -> int:
    """Round a non-negative rational to the nearest int, ties going up (12.5 -> 13)."""
    return int((x + Fraction(1, 2)) // 1)

def _is_negative(q: Question) -> bool:
    return str(q.polarity).lower().startswith("neg")

def score_answer(q: Question, value: int) -> Tuple[int, Dict[str, Any]]:
    """
    Returns (points in 1..5, meta). Negative questions ask about symptoms, so the
    scale is mirrored (6 - v) and higher always means healthier.
    """
    v = int(value)
    neg = _is_negative(q)
    pts = (ANSWER_MIN + ANSWER_MAX - v) if neg else v
    meta = {"polarity_neg": neg, "raw": v, "points": pts}
    return pts, meta

def score_system(system: str, questions: List[Question], answers: Mapping[str, int], max_score: int) -> SystemScore:
    raw = 0
    for q in questions:
        pts, _ = score_answer(q, answers.get(q.id, NEUTRAL_ANSWER))
        raw += pts
    raw_max = len(questions) * ANSWER_MAX
    norm = round_half_up(Fraction(raw, raw_max) * max_score)
    pct = round_half_up(Fraction(norm, max_score) * 100)
    log.debug("system %s raw=%d/%d score=%d/%d (%d%%)", system, raw, raw_max, norm, max_score, pct)
    return SystemScore(system=system, score=norm, max_score=max_score, percentage=pct)

def score(raw_answers: Mapping[str, object], identity: UserInfo, catalog: Catalog, timestamp: str) -> ScoredResult:
    """
    Turn 1..5 answers into per-system scores on each system's own ceiling.

    Missing answers default to NEUTRAL_ANSWER. Out-of-range, non-integer or
    unknown-id answers raise InputValidationError; nothing is clamped. The
    catalog is assumed to have passed check_catalog().
    """
    answers = validate_answers(catalog, raw_answers)
    scores: List[SystemScore] = []
    total = 0; total_max = 0
    for system, spec in catalog.systems.items():
        s = score_system(system, catalog.questions_for(system), answers, spec.max_score)
        scores.append(s)
        total += s.score; total_max += spec.max_score
    overall = round_half_up(Fraction(total, total_max) * 100)
    return ScoredResult(
        identity=identity,
        raw_answers=dict(answers),
        system_scores=tuple(scores),
        total_score=total,
        total_max=total_max,
        overall_percentage=overall,
        timestamp=timestamp,
    )
