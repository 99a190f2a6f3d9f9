from __future__ import annotations

import base64
import json

import pytest

from healthspan_core.question_bank import SYSTEM_CONFIG, SYSTEMS, build_catalog, load_catalog
from healthspan_core.types import Catalog, Question, SystemSpec, UserInfo


def build_synthetic_catalog(
    *,
    systems: dict[str, SystemSpec] | None = None,
    neg_every: int = 2,
) -> Catalog:
    """Deterministic catalog whose question counts match the given system config."""

    specs = dict(systems or SYSTEM_CONFIG)
    questions: list[Question] = []
    for system, spec in specs.items():
        for idx in range(spec.question_count):
            polarity = "neg" if neg_every and idx % neg_every == 1 else "pos"
            questions.append(
                Question(
                    id=f"{system.lower()}_{idx}",
                    system=system,
                    polarity=polarity,
                    text=f"{system} question #{idx}",
                )
            )
    return build_catalog(questions, specs)


def energy_only_catalog() -> Catalog:
    polarities = {"e1": "neg", "e2": "pos", "e3": "pos", "e4": "neg", "e5": "pos"}
    questions = [Question(id=qid, system="Energy", polarity=pol) for qid, pol in polarities.items()]
    return build_catalog(questions, {"Energy": SystemSpec(max_score=25, question_count=5)})


def raw_token(payload: object) -> str:
    """Encode an arbitrary payload the way share tokens are wrapped."""

    text = json.dumps(payload, separators=(",", ":"))
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def synthetic_catalog() -> Catalog:
    return build_synthetic_catalog()


@pytest.fixture
def user() -> UserInfo:
    return UserInfo(name="Jordan Lee", age="42", gender="Female")


@pytest.fixture
def system_order() -> list[str]:
    return list(SYSTEMS)
