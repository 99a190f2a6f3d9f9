from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Literal, Tuple
SystemTag = Literal["Assimilation","Defense","Energy","Detox","Transport","Communication","Structural"]
Polarity = Literal["pos","neg"]
@dataclass(frozen=True)
class Question:
    id: str; system: SystemTag; polarity: Polarity; text: str = ""
@dataclass(frozen=True)
class SystemSpec:
    max_score: int; question_count: int
@dataclass(frozen=True)
class Catalog:
    questions: Tuple[Question, ...]
    systems: Dict[str, SystemSpec]
    def questions_for(self, system: str) -> List[Question]:
        return [q for q in self.questions if q.system == system]
    @property
    def ids(self) -> List[str]:
        return [q.id for q in self.questions]
@dataclass(frozen=True)
class UserInfo:
    name: str; age: str; gender: str
@dataclass(frozen=True)
class SystemScore:
    system: SystemTag
    score: int
    max_score: int
    percentage: int
@dataclass(frozen=True)
class ScoredResult:
    identity: UserInfo
    raw_answers: Dict[str, int]
    system_scores: Tuple[SystemScore, ...]
    total_score: int
    total_max: int
    overall_percentage: int
    timestamp: str
    def to_dict(self) -> Dict[str, object]:
        out = asdict(self)
        out["system_scores"] = [asdict(s) for s in self.system_scores]
        return out
@dataclass(frozen=True)
class Narrative:
    summary: str = ""
    strengths: Tuple[str, ...] = field(default_factory=tuple)
    weaknesses: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "recommendations": list(self.recommendations),
        }
# shared views never carry the original profile
ANONYMOUS_USER = UserInfo(name="anonymous user", age="-", gender="-")
def is_anonymous(result: ScoredResult) -> bool:
    return result.identity == ANONYMOUS_USER
