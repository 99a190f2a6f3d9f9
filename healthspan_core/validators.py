from __future__ import annotations
import logging
from collections import Counter
from typing import Dict, List, Mapping
from .config import ANSWER_MIN, ANSWER_MAX
from .errors import ConfigurationError, InputValidationError
from .types import Catalog, UserInfo

log = logging.getLogger(__name__)

def catalog_problems(catalog: Catalog) -> List[str]:
    problems: List[str] = []
    if not catalog.systems:
        problems.append("no systems configured")
    counts = Counter(q.system for q in catalog.questions)
    for system, spec in catalog.systems.items():
        have = counts.get(system, 0)
        if have == 0:
            problems.append(f"{system} has no questions")
        elif have != spec.question_count:
            problems.append(f"{system} has {have} questions, expected {spec.question_count}")
        if spec.max_score <= 0:
            problems.append(f"{system} max_score must be positive, got {spec.max_score}")
    for system in sorted(set(counts) - set(catalog.systems)):
        problems.append(f"{system} is not a configured system ({counts[system]} questions)")
    dupes = sorted(qid for qid, n in Counter(catalog.ids).items() if n > 1)
    if dupes:
        problems.append(f"duplicate question ids: {', '.join(dupes)}")
    for q in catalog.questions:
        if q.polarity not in ("pos", "neg"):
            problems.append(f"{q.id} has unknown polarity {q.polarity!r}")
    return problems
def check_catalog(catalog: Catalog) -> None:
    problems = catalog_problems(catalog)
    if problems:
        for msg in problems: log.error("catalog check: %s", msg)
        raise ConfigurationError(problems)
def validate_profile(user: UserInfo) -> UserInfo:
    for name in ("name", "age", "gender"):
        v = getattr(user, name)
        if not isinstance(v, str) or not v.strip():
            raise InputValidationError(f"profile field '{name}' is required", field=name)
    return user
def validate_answers(catalog: Catalog, answers: Mapping[str, object]) -> Dict[str, int]:
    known = set(catalog.ids)
    out: Dict[str, int] = {}
    for qid, value in answers.items():
        if qid not in known:
            raise InputValidationError(f"unknown question id {qid!r}", field=qid)
        # bool is an int subclass; a checkbox value is not a Likert answer
        if isinstance(value, bool) or not isinstance(value, int):
            raise InputValidationError(f"answer for {qid} must be an integer, got {value!r}", field=qid)
        if not ANSWER_MIN <= value <= ANSWER_MAX:
            raise InputValidationError(
                f"answer for {qid} must be in [{ANSWER_MIN},{ANSWER_MAX}], got {value}", field=qid
            )
        out[qid] = value
    return out
def unanswered(catalog: Catalog, answers: Mapping[str, object], system: str | None = None) -> List[str]:
    qs = catalog.questions_for(system) if system else list(catalog.questions)
    return [q.id for q in qs if q.id not in answers]
