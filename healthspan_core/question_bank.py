from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, List, Optional
from .types import Catalog, Question, SystemSpec
from .validators import check_catalog
SYSTEMS = ["Assimilation","Defense","Energy","Detox","Transport","Communication","Structural"]
SYSTEM_CONFIG: Dict[str, SystemSpec] = {
    "Assimilation": SystemSpec(max_score=25, question_count=5),
    "Defense": SystemSpec(max_score=25, question_count=5),
    "Energy": SystemSpec(max_score=25, question_count=5),
    "Detox": SystemSpec(max_score=20, question_count=4),
    "Transport": SystemSpec(max_score=20, question_count=4),
    "Communication": SystemSpec(max_score=25, question_count=5),
    "Structural": SystemSpec(max_score=20, question_count=4),
}
SYSTEM_LABELS: Dict[str, str] = {
    "Assimilation": "Assimilation (digestion)",
    "Defense": "Defense & repair (immunity)",
    "Energy": "Energy",
    "Detox": "Detoxification",
    "Transport": "Transport (circulation)",
    "Communication": "Communication (hormones & nerves)",
    "Structural": "Structural (bones & muscles)",
}
BANK_PATH = Path(__file__).with_name("data") / "bank.json"
def load_bank(path: Optional[Path] = None) -> List[Question]:
    data = (path or BANK_PATH).read_text(encoding="utf-8")
    raw = json.loads(data)
    return [Question(**r) for r in raw]
def build_catalog(questions: List[Question], systems: Optional[Dict[str, SystemSpec]] = None) -> Catalog:
    return Catalog(questions=tuple(questions), systems=dict(systems or SYSTEM_CONFIG))
def load_catalog(path: Optional[Path] = None) -> Catalog:
    """Load the shipped bank and refuse to return it unless it passes the consistency check."""
    catalog = build_catalog(load_bank(path))
    check_catalog(catalog)
    return catalog
