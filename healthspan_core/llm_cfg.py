# healthspan_core/llm_cfg.py
from __future__ import annotations
import os, json, pathlib
from dataclasses import dataclass
from openai import AzureOpenAI
from google import genai
from .config import GEMINI_MODEL, NARRATIVE_TIMEOUT_SEC

AZURE_KEYS = ("AZURE_OPENAI_ENDPOINT","AZURE_OPENAI_API_KEY","AZURE_OPENAI_API_VERSION","AZURE_OPENAI_DEPLOYMENT")

@dataclass(frozen=True)
class AzureSettings:
    endpoint: str
    api_key: str
    deployment: str
    api_version: str

@dataclass(frozen=True)
class GeminiSettings:
    api_key: str
    model: str

def _from_env() -> dict[str, str]:
    return {
        "endpoint":   os.getenv("AZURE_OPENAI_ENDPOINT", ""),
        "api_key":    os.getenv("AZURE_OPENAI_API_KEY", ""),
        "api_version":os.getenv("AZURE_OPENAI_API_VERSION", ""),
        "deployment": os.getenv("AZURE_OPENAI_DEPLOYMENT", ""),
    }

def _from_json(path: str = ".azure_config.json") -> dict[str, str]:
    p = pathlib.Path(path)
    if not p.exists(): return {}
    try:
        j = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return {k: str(j.get(k, "")) for k in ("endpoint","api_key","api_version","deployment")}

def azure_configured() -> bool:
    if all(os.getenv(k) for k in AZURE_KEYS):
        return True
    j = _from_json()
    return bool(j) and all(j.values())

def gemini_configured() -> bool:
    return bool(os.getenv("GEMINI_API_KEY"))

def azure_settings() -> AzureSettings:
    cfg = _from_env()
    if not all(cfg.values()):
        for k, v in _from_json().items():
            if not cfg.get(k): cfg[k] = v
    missing = [k for k,v in cfg.items() if not v]
    if missing:
        raise RuntimeError(f"Azure OpenAI not configured. Missing: {', '.join(missing)}")
    return AzureSettings(**cfg)

def gemini_settings() -> GeminiSettings:
    key = os.getenv("GEMINI_API_KEY", "")
    if not key:
        raise RuntimeError("Gemini not configured. Missing: GEMINI_API_KEY")
    return GeminiSettings(api_key=key, model=os.getenv("GEMINI_MODEL", GEMINI_MODEL))

def azure_client() -> AzureOpenAI:
    s = azure_settings()
    return AzureOpenAI(
        azure_endpoint=s.endpoint,
        api_key=s.api_key,
        api_version=s.api_version,
        timeout=NARRATIVE_TIMEOUT_SEC,
    )

def gemini_client() -> genai.Client:
    return genai.Client(api_key=gemini_settings().api_key)
