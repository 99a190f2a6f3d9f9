from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


ANSWER_MIN: int = 1
ANSWER_MAX: int = 5
# missing answers count as the scale midpoint; golden results depend on it
NEUTRAL_ANSWER: int = 3

SCALE_LABELS: dict[int, str] = {
    1: "Never",
    2: "Rarely",
    3: "Sometimes",
    4: "Often",
    5: "Always / severe",
}

GRADE_BANDS: tuple[tuple[int, str], ...] = (
    (90, "Optimal"),
    (75, "Good"),
    (60, "Moderate"),
)
GRADE_FLOOR_LABEL: str = "Needs Attention"

BAR_BANDS: tuple[tuple[int, str], ...] = ((70, "good"), (40, "fair"))
BAR_FLOOR: str = "low"

SHARE_PARAM: str = "share"
SHARE_BASE_URL: str = "http://localhost:3000/"

NARRATIVE_ENABLED: bool = True
NARRATIVE_TIMEOUT_SEC: int = 30
NARRATIVE_MAX_TOKENS: int = 800
NARRATIVE_CACHE_SIZE: int = 256
GEMINI_MODEL: str = "gemini-2.5-flash"

# // env overrides for staging/ops; defaults remain conservative.
SHARE_BASE_URL = os.getenv("SHARE_BASE_URL", SHARE_BASE_URL)
NARRATIVE_ENABLED = _env_bool("NARRATIVE_ENABLED", NARRATIVE_ENABLED)
NARRATIVE_TIMEOUT_SEC = _env_int("NARRATIVE_TIMEOUT_SEC", NARRATIVE_TIMEOUT_SEC)
NARRATIVE_MAX_TOKENS = _env_int("NARRATIVE_MAX_TOKENS", NARRATIVE_MAX_TOKENS)
NARRATIVE_CACHE_SIZE = _env_int("NARRATIVE_CACHE_SIZE", NARRATIVE_CACHE_SIZE)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", GEMINI_MODEL)

def _env_true(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1","true","yes","on")
def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    e = os.environ
    if e.get("USE_LLM_NARRATIVE"): cfg["USE_LLM_NARRATIVE"] = _env_true("USE_LLM_NARRATIVE")
    if e.get("LLM_BACKEND"): cfg["LLM_BACKEND"] = e.get("LLM_BACKEND")
    for k in ("AZURE_OPENAI_ENDPOINT","AZURE_OPENAI_API_VERSION","AZURE_OPENAI_API_KEY","AZURE_OPENAI_DEPLOYMENT"):
        if e.get(k): cfg[k] = e.get(k)
    for k in ("GEMINI_API_KEY","GEMINI_MODEL"):
        if e.get(k): cfg[k] = e.get(k)
    if e.get("SHARE_BASE_URL"): cfg["SHARE_BASE_URL"] = e.get("SHARE_BASE_URL")
    cfg.setdefault("SHARE_BASE_URL", SHARE_BASE_URL)
    return cfg
def get_backend(cfg: dict) -> str|None:
    if not NARRATIVE_ENABLED or not cfg.get("USE_LLM_NARRATIVE"): return None
    b = (cfg.get("LLM_BACKEND") or "").lower().strip()
    return b if b in ("azure","gemini") else None
