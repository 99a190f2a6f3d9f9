from __future__ import annotations

from app_cli import run_assessment
from healthspan_core.narrative import NullNarrativeClient


def _reader(values):
    it = iter(values)
    return lambda prompt="": next(it)


def test_cli_runs_full_assessment(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(run_assessment, "client_for", lambda cfg=None: NullNarrativeClient())
    monkeypatch.setenv("SHARE_BASE_URL", "https://health.example.org/")

    # empty name is refused once, then a bad Likert value is retried
    inputs = ["", "42", "Other", "Sam", "42", "Other", "9", "3"] + ["3"] * 31
    assert run_assessment.main(read=_reader(inputs), out_dir=str(tmp_path)) == 0

    out = capsys.readouterr().out
    assert "profile field 'name' is required" in out
    assert "Enter a number from 1 to 5." in out
    assert "Name: Sam" in out
    assert "Overall score: 96/160 (60%)" in out
    assert "https://health.example.org/?share=" in out
    assert len(list(tmp_path.glob("assessment_*.html"))) == 1
