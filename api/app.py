from __future__ import annotations
from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from datetime import datetime, timezone
import uuid, os, logging, typing as t

# ---- Core imports ----
from healthspan_core.config import load_config, SCALE_LABELS
from healthspan_core.errors import InputValidationError, MalformedToken
from healthspan_core.llm_cfg import azure_configured, gemini_configured
from healthspan_core.narrative import NarrativeClient, NarrativeTracker, client_for
from healthspan_core.question_bank import SYSTEM_LABELS, load_catalog
from healthspan_core.report_html import render_report_html
from healthspan_core.reporting import chart_series, render_text, summarize
from healthspan_core.scoring import score
from healthspan_core.share_codec import decode, encode, from_query, share_url
from healthspan_core.dashboard import mock_dashboard
from healthspan_core.types import Narrative, ScoredResult, UserInfo
from healthspan_core.validators import unanswered, validate_profile

log = logging.getLogger(__name__)

# ConfigurationError propagates from here and stops the app from starting.
CATALOG = load_catalog()

RESULTS: dict[str, ScoredResult] = {}
NARRATIVES = NarrativeTracker()

app = FastAPI(title="Healthspan Assessment API")

@app.get("/")
def root():
    return {"status": "ok", "service": "healthspan-assessment-api"}

ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",") if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,  # no cookies, no auth
)

# ---- Schemas ----
class ProfileReq(BaseModel):
    name: str = ""
    age: str | int = ""
    gender: str = ""

class AssessmentReq(BaseModel):
    user: ProfileReq
    answers: dict[str, t.Any] = {}

# ---- Helpers ----
def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def narrative_client() -> NarrativeClient:
    return client_for(load_config())

def _get_result(rid: str) -> ScoredResult:
    res = RESULTS.get(rid)
    if res is None:
        raise HTTPException(404, "result not found")
    return res

def _decode_or_400(token: str) -> ScoredResult:
    try:
        return decode(token)
    except MalformedToken as e:
        raise HTTPException(400, f"invalid share token: {e}")

def _shared_key(res: ScoredResult) -> str:
    # padding and other spellings of one token share a single narrative
    return f"shared:{encode(res)}"

def _ready_narrative(key: str) -> Narrative | None:
    st = NARRATIVES.state(key)
    return st.narrative if st and st.status == "ready" else None

def _serialize(res: ScoredResult, rid: str | None = None) -> dict[str, t.Any]:
    out: dict[str, t.Any] = {"result": res.to_dict(), "summary": summarize(res)}
    if rid: out["id"] = rid
    return out

# ---- Health ----
@app.get("/health")
def health():
    cfg = load_config()
    return {
        "llm_backend": cfg.get("LLM_BACKEND", "none"),
        "use_llm_narrative": bool(cfg.get("USE_LLM_NARRATIVE")),
        "azure_config_present": azure_configured(),
        "gemini_config_present": gemini_configured(),
        "questions": len(CATALOG.questions),
        "total_max": sum(s.max_score for s in CATALOG.systems.values()),
    }

# ---- Questionnaire ----
@app.get("/questions")
def questions():
    return {
        "scale": {str(k): v for k, v in SCALE_LABELS.items()},
        "systems": [
            {
                "system": system,
                "label": SYSTEM_LABELS.get(system, system),
                "max_score": spec.max_score,
                "questions": [{"id": q.id, "text": q.text} for q in CATALOG.questions_for(system)],
            }
            for system, spec in CATALOG.systems.items()
        ],
    }

@app.post("/assessments")
def create_assessment(req: AssessmentReq):
    user = UserInfo(name=req.user.name.strip(), age=str(req.user.age).strip(), gender=req.user.gender.strip())
    try:
        validate_profile(user)
        res = score(req.answers, user, CATALOG, _now_iso())
    except InputValidationError as e:
        raise HTTPException(422, str(e))
    rid = str(uuid.uuid4())
    RESULTS[rid] = res
    log.info("assessment %s scored %d/%d (%d%%)", rid, res.total_score, res.total_max, res.overall_percentage)
    out = _serialize(res, rid)
    out["unanswered"] = unanswered(CATALOG, req.answers)
    return out

# ---- Results ----
@app.get("/results/{rid}")
def get_result(rid: str):
    return _serialize(_get_result(rid), rid)

@app.get("/results/{rid}/charts")
def get_charts(rid: str):
    return chart_series(_get_result(rid))

@app.get("/results/{rid}/text")
def get_text(rid: str):
    return {"text": render_text(_get_result(rid), _ready_narrative(rid))}

@app.get("/results/{rid}/text.txt")
def get_text_plain(rid: str):
    body = render_text(_get_result(rid), _ready_narrative(rid))
    return Response(content=body, media_type="text/plain; charset=utf-8")

@app.get("/results/{rid}/html")
def get_html(rid: str):
    return {"html": render_report_html(_get_result(rid), _ready_narrative(rid))}

@app.post("/results/{rid}/share")
def create_share(rid: str):
    token = encode(_get_result(rid))
    return {"token": token, "url": share_url(token, load_config()["SHARE_BASE_URL"])}

@app.get("/results/{rid}/narrative")
def get_narrative(rid: str, force: bool = Query(False, description="Request a fresh narrative")):
    res = _get_result(rid)
    return NARRATIVES.fetch(rid, res, narrative_client(), force=force).to_dict()

@app.delete("/results/{rid}/narrative")
def cancel_narrative(rid: str):
    _get_result(rid)
    NARRATIVES.cancel(rid)
    return {"ok": True}

# ---- Share links ----
@app.get("/view")
def resolve_view(share: str | None = None):
    res = from_query({"share": share} if share else {})
    if res is None:
        return {"view": "assessment", "shared": False}
    return {"view": "results", "shared": True, **_serialize(res)}

@app.get("/shared/{token}")
def get_shared(token: str):
    return _serialize(_decode_or_400(token))

@app.get("/shared/{token}/text")
def get_shared_text(token: str):
    res = _decode_or_400(token)
    return {"text": render_text(res, _ready_narrative(_shared_key(res)))}

@app.get("/shared/{token}/narrative")
def get_shared_narrative(token: str):
    res = _decode_or_400(token)
    return NARRATIVES.fetch(_shared_key(res), res, narrative_client()).to_dict()

# ---- Admin ----
@app.get("/dashboard")
def dashboard():
    return mock_dashboard()
