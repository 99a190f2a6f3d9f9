from __future__ import annotations
import itertools, json, logging, threading, time
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Protocol, Tuple
from .config import load_config, get_backend, NARRATIVE_CACHE_SIZE, NARRATIVE_MAX_TOKENS
from .errors import NarrativeUnavailable
from .grading import weakest_systems
from .question_bank import SYSTEM_LABELS
from .types import Narrative, ScoredResult

log = logging.getLogger(__name__)

_SYSTEM_ROLE = ("You are a functional-medicine practitioner reviewing a 4-week healthspan "
                "self-assessment. Reply ONLY with a JSON object. No markdown.")

def build_prompt(result: ScoredResult) -> str:
    scores_text = "\n".join(
        f"- {SYSTEM_LABELS.get(s.system, s.system)}: {s.score}/{s.max_score} ({s.percentage}%)"
        for s in result.system_scores
    )
    weakest = ", ".join(SYSTEM_LABELS.get(s, s) for s in weakest_systems(result.system_scores))
    u = result.identity
    return (
        "User profile:\n"
        f"Name: {u.name}\nAge: {u.age}\nGender: {u.gender}\n\n"
        f"Overall score: {result.total_score}/{result.total_max} ({result.overall_percentage}%)\n\n"
        f"Scores by system:\n{scores_text}\n\n"
        "Write a personalised health report from this data using exactly this JSON shape:\n"
        '{"summary": "two encouraging sentences on overall health",\n'
        ' "strengths": ["strength 1", "strength 2"],\n'
        ' "weaknesses": ["area to improve 1", "area to improve 2"],\n'
        ' "recommendations": ["concrete action 1", "concrete action 2", "concrete action 3"]}\n\n'
        "Tone: professional but easy to follow, warm and encouraging.\n"
        f"Prioritise advice for the lowest-scoring systems: {weakest}."
    )

def _strings(v: Any) -> Tuple[str, ...]:
    if not isinstance(v, list): return ()
    return tuple(x.strip() for x in v if isinstance(x, str) and x.strip())

def parse_reply(text: Optional[str]) -> Narrative:
    """Best-effort parse of the service reply; every field may be missing."""
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.replace("```json", "").replace("```", "").strip()
    if not cleaned:
        raise NarrativeUnavailable("empty reply")
    try:
        data = json.loads(cleaned)
    except ValueError as exc:
        raise NarrativeUnavailable(f"reply is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise NarrativeUnavailable("reply is not a JSON object")
    summary = data.get("summary")
    return Narrative(
        summary=summary.strip() if isinstance(summary, str) else "",
        strengths=_strings(data.get("strengths")),
        weaknesses=_strings(data.get("weaknesses")),
        recommendations=_strings(data.get("recommendations")),
    )

class NarrativeClient(Protocol):
    backend: str
    def complete(self, prompt: str) -> str: ...

class NullNarrativeClient:
    backend = "none"
    def complete(self, prompt: str) -> str:
        raise NarrativeUnavailable("no narrative backend configured")

class AzureNarrativeClient:
    backend = "azure"
    def __init__(self, client=None, deployment: Optional[str] = None):
        from .llm_cfg import azure_client, azure_settings
        self._cli = client or azure_client()
        self._deployment = deployment or azure_settings().deployment
    def complete(self, prompt: str) -> str:
        resp = self._cli.chat.completions.create(
            model=self._deployment,
            messages=[{"role":"system","content":_SYSTEM_ROLE},{"role":"user","content":prompt}],
            temperature=0.4, max_tokens=NARRATIVE_MAX_TOKENS,
            response_format={"type": "json_object"},
        )
        return resp.choices[0].message.content or ""

class GeminiNarrativeClient:
    backend = "gemini"
    def __init__(self, client=None, model: Optional[str] = None):
        from .llm_cfg import gemini_client, gemini_settings
        self._cli = client or gemini_client()
        self._model = model or gemini_settings().model
    def complete(self, prompt: str) -> str:
        resp = self._cli.models.generate_content(
            model=self._model,
            contents=f"{_SYSTEM_ROLE}\n\n{prompt}",
            config={"response_mime_type": "application/json"},
        )
        return resp.text or ""

def client_for(cfg: Optional[dict] = None) -> NarrativeClient:
    backend = get_backend(cfg if cfg is not None else load_config())
    try:
        if backend == "azure": return AzureNarrativeClient()
        if backend == "gemini": return GeminiNarrativeClient()
    except RuntimeError as exc:
        log.warning("narrative backend %s unavailable: %s", backend, exc)
    return NullNarrativeClient()

def generate_narrative(result: ScoredResult, client: Optional[NarrativeClient] = None) -> Optional[Narrative]:
    """One request, no retry. Any failure means no narrative, never an error."""
    cli = client or client_for()
    t0 = time.time()
    try:
        narrative = parse_reply(cli.complete(build_prompt(result)))
    except NarrativeUnavailable as exc:
        log.info("narrative unavailable (%s): %s", getattr(cli, "backend", "?"), exc)
        return None
    except Exception as exc:
        # third-party SDK errors (network, auth, quota) all collapse to "no narrative"
        log.warning("narrative request failed (%s): %s", getattr(cli, "backend", "?"), exc)
        return None
    log.info("narrative ready backend=%s rt_ms=%d", getattr(cli, "backend", "?"), int((time.time()-t0)*1000))
    return narrative

@dataclass(frozen=True)
class NarrativeState:
    status: str = "pending"      # pending | ready | unavailable
    narrative: Optional[Narrative] = None
    ticket: int = 0
    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "narrative": self.narrative.to_dict() if self.narrative else None}

class NarrativeTracker:
    """
    Keeps at most one live request per result. A reply carrying a ticket that is
    no longer current (superseded, cancelled or evicted) is dropped. Holds at
    most ``max_entries`` keys, least recently used evicted first.
    """
    def __init__(self, max_entries: int = NARRATIVE_CACHE_SIZE) -> None:
        self._lock = threading.Lock()
        self._seq = itertools.count(1)
        self._states: "OrderedDict[str, NarrativeState]" = OrderedDict()
        self.max_entries = max(1, max_entries)
    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
    def _put(self, key: str, st: NarrativeState) -> None:
        self._states[key] = st
        self._states.move_to_end(key)
        while len(self._states) > self.max_entries:
            evicted, _ = self._states.popitem(last=False)
            log.debug("evicting narrative for %s", evicted)
    def begin(self, key: str) -> int:
        with self._lock:
            ticket = next(self._seq)
            self._put(key, NarrativeState(ticket=ticket))
            return ticket
    def cancel(self, key: str) -> None:
        with self._lock:
            self._states.pop(key, None)
    def deliver(self, key: str, ticket: int, narrative: Optional[Narrative]) -> bool:
        with self._lock:
            st = self._states.get(key)
            if st is None or st.ticket != ticket:
                log.debug("dropping stale narrative for %s (ticket %d)", key, ticket)
                return False
            status = "ready" if narrative is not None else "unavailable"
            self._states[key] = replace(st, status=status, narrative=narrative)
            return True
    def state(self, key: str) -> Optional[NarrativeState]:
        with self._lock:
            return self._states.get(key)
    def fetch(self, key: str, result: ScoredResult, client: Optional[NarrativeClient] = None,
              force: bool = False) -> NarrativeState:
        """
        Return the settled narrative for ``key``, requesting one only when none
        exists or ``force`` is set. A request already in flight is never doubled:
        callers get the pending state back instead.
        """
        with self._lock:
            st = self._states.get(key)
            if st is not None and (st.status == "pending" or not force):
                self._states.move_to_end(key)
                return st
            ticket = next(self._seq)
            self._put(key, NarrativeState(ticket=ticket))
        self.deliver(key, ticket, generate_narrative(result, client))
        return self.state(key) or NarrativeState(status="unavailable", ticket=ticket)

__all__: List[str] = [
    "build_prompt", "parse_reply", "generate_narrative", "client_for",
    "NarrativeClient", "NullNarrativeClient", "AzureNarrativeClient", "GeminiNarrativeClient",
    "NarrativeTracker", "NarrativeState",
]
