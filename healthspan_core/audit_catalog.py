from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path
from typing import Iterable

from .question_bank import build_catalog, load_bank
from .types import Catalog
from .validators import catalog_problems

AUDIT_PATH = Path("/tmp/catalog_audit.json")


def audit_items(catalog: Catalog) -> dict[str, object]:
    coverage: dict[str, dict[str, int]] = {
        system: {"pos": 0, "neg": 0, "expected": spec.question_count, "max_score": spec.max_score}
        for system, spec in catalog.systems.items()
    }
    for q in catalog.questions:
        row = coverage.setdefault(q.system, {"pos": 0, "neg": 0, "expected": 0, "max_score": 0})
        if q.polarity in ("pos", "neg"):
            row[q.polarity] += 1

    totals = Counter(q.polarity for q in catalog.questions)
    summary = {
        "coverage": coverage,
        "warnings": catalog_problems(catalog),
        "totals": {
            "questions": len(catalog.questions),
            "pos": totals.get("pos", 0),
            "neg": totals.get("neg", 0),
            "total_max": sum(spec.max_score for spec in catalog.systems.values()),
        },
    }
    return summary


def _format_row(system: str, data: dict[str, int]) -> str:
    n = data["pos"] + data["neg"]
    mark = "" if n == data["expected"] else "  <-- mismatch"
    return f"{system:<14} n={n:2d}/{data['expected']:2d}  pos={data['pos']:2d}  neg={data['neg']:2d}  max={data['max_score']:3d}{mark}"


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, dict[str, int]] = summary["coverage"]  # type: ignore[assignment]
    print("=== Catalog Coverage ===")
    for system, data in coverage.items():
        print("  " + _format_row(system, data))

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    print("\nTotals:", summary["totals"])


def write_summary(summary: dict[str, object], path: Path | None = None) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    (path or AUDIT_PATH).write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: Iterable[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    bank_path = Path(args[0]) if args else None
    catalog = build_catalog(load_bank(bank_path))
    summary = audit_items(catalog)
    print_report(summary)
    write_summary(summary)
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
