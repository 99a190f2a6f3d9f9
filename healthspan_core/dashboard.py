"""Illustrative admin dashboard numbers.

These are fixed demo values, not an aggregation of real submissions. Collecting
participant results needs a backend store, which this service does not have;
participants can send their plain-text export instead.
"""
from __future__ import annotations

from typing import Any, Dict

from .question_bank import SYSTEM_CONFIG, SYSTEM_LABELS

_SYSTEM_AVERAGES: Dict[str, int] = {
    "Assimilation": 18,
    "Defense": 16,
    "Energy": 15,
    "Detox": 14,
    "Transport": 16,
    "Communication": 19,
    "Structural": 14,
}


def mock_dashboard() -> Dict[str, Any]:
    return {
        "demo": True,
        "total_participants": 124,
        "completion_rate": 88,
        "average_score": 112,
        "system_averages": [
            {
                "system": system,
                "label": SYSTEM_LABELS[system],
                "score": score,
                "max": SYSTEM_CONFIG[system].max_score,
            }
            for system, score in _SYSTEM_AVERAGES.items()
        ],
        "risk_groups": [
            {"name": "Healthy", "value": 45, "color": "#22c55e"},
            {"name": "Watch", "value": 55, "color": "#eab308"},
            {"name": "At risk", "value": 24, "color": "#ef4444"},
        ],
    }


__all__ = ["mock_dashboard"]
