# healthspan_core/grading.py
from .config import GRADE_BANDS, GRADE_FLOOR_LABEL, BAR_BANDS, BAR_FLOOR

def grade(percentage: float) -> str:
    p = float(percentage)
    for floor, label in GRADE_BANDS:   # >=90 Optimal, >=75 Good, >=60 Moderate
        if p >= floor: return label
    return GRADE_FLOOR_LABEL

def bar_band(percentage: float) -> str:
    p = float(percentage)
    for floor, label in BAR_BANDS:     # strictly above: 70 is still "fair"
        if p > floor: return label
    return BAR_FLOOR

def weakest_systems(system_scores, n: int = 2) -> list[str]:
    ranked = sorted(system_scores, key=lambda s: (s.percentage, s.system))
    return [s.system for s in ranked[:n]]
