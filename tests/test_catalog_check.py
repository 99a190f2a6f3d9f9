from __future__ import annotations

import json

import pytest

from healthspan_core.errors import ConfigurationError
from healthspan_core.question_bank import SYSTEM_CONFIG, build_catalog, load_catalog
from healthspan_core.types import Question, SystemSpec
from healthspan_core.validators import catalog_problems, check_catalog
from tests.conftest import build_synthetic_catalog


def test_shipped_catalog_is_consistent(catalog):
    assert catalog_problems(catalog) == []
    assert len(catalog.questions) == 32
    assert sum(1 for q in catalog.questions if q.polarity == "neg") == 19
    for system, spec in catalog.systems.items():
        assert len(catalog.questions_for(system)) == spec.question_count


def test_system_with_zero_questions_is_fatal(synthetic_catalog):
    questions = [q for q in synthetic_catalog.questions if q.system != "Detox"]
    broken = build_catalog(questions, SYSTEM_CONFIG)

    with pytest.raises(ConfigurationError) as exc:
        check_catalog(broken)
    assert "Detox has no questions" in exc.value.problems


def test_question_count_mismatch_is_fatal(synthetic_catalog):
    extra = Question(id="energy_extra", system="Energy", polarity="pos")
    broken = build_catalog(list(synthetic_catalog.questions) + [extra], SYSTEM_CONFIG)

    with pytest.raises(ConfigurationError, match="Energy has 6 questions, expected 5"):
        check_catalog(broken)


def test_duplicate_ids_are_fatal():
    specs = {"Energy": SystemSpec(max_score=10, question_count=2)}
    questions = [
        Question(id="dup", system="Energy", polarity="pos"),
        Question(id="dup", system="Energy", polarity="neg"),
    ]
    problems = catalog_problems(build_catalog(questions, specs))
    assert problems == ["duplicate question ids: dup"]


def test_unconfigured_system_and_bad_polarity_are_reported():
    specs = {"Energy": SystemSpec(max_score=5, question_count=1)}
    questions = [
        Question(id="e1", system="Energy", polarity="pos"),
        Question(id="x1", system="Sleep", polarity="sideways"),  # type: ignore[arg-type]
    ]
    problems = catalog_problems(build_catalog(questions, specs))
    assert "Sleep is not a configured system (1 questions)" in problems
    assert "x1 has unknown polarity 'sideways'" in problems


def test_non_positive_ceiling_and_empty_config_are_reported():
    bad_max = build_synthetic_catalog(systems={"Energy": SystemSpec(max_score=0, question_count=2)})
    assert "Energy max_score must be positive, got 0" in catalog_problems(bad_max)

    empty = build_catalog([], {})
    assert catalog_problems(empty) == ["no systems configured"]


def test_load_catalog_refuses_broken_bank(tmp_path):
    bank = [{"id": "a1", "system": "Assimilation", "polarity": "neg", "text": "only one"}]
    path = tmp_path / "bank.json"
    path.write_text(json.dumps(bank), encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_catalog(path)
    assert "Assimilation has 1 questions, expected 5" in exc.value.problems
    assert "Defense has no questions" in exc.value.problems
