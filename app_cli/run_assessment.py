from __future__ import annotations
import os, datetime, logging, sys
from healthspan_core.config import SCALE_LABELS, load_config
from healthspan_core.errors import InputValidationError
from healthspan_core.narrative import generate_narrative, client_for
from healthspan_core.question_bank import load_catalog, SYSTEM_LABELS
from healthspan_core.report_html import export_report_html
from healthspan_core.reporting import render_text
from healthspan_core.scoring import score
from healthspan_core.share_codec import encode, share_url
from healthspan_core.types import UserInfo
from healthspan_core.validators import validate_profile
def ask(prompt: str, read=input) -> str:
    return read(prompt + " ").strip()
def ask_likert(text: str, read=input) -> int:
    scale = "  ".join(f"{k}={v}" for k, v in SCALE_LABELS.items())
    while True:
        v = ask(f"{text}\n  [{scale}]", read)
        if v.isdigit() and int(v) in SCALE_LABELS: return int(v)
        print("Enter a number from 1 to 5.")
def ask_profile(read=input) -> UserInfo:
    while True:
        user = UserInfo(name=ask("Name:", read), age=ask("Age:", read), gender=ask("Gender (Male/Female/Other):", read))
        try: return validate_profile(user)
        except InputValidationError as e: print(f"{e}. Please try again.")
def main(read=input, out_dir: str = "reports") -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    catalog = load_catalog()
    print("Healthspan Self-Assessment")
    print(f"{len(catalog.questions)} questions across {len(catalog.systems)} body systems. "
          "Answer 1 (never) to 5 (always / severe).\n")
    user = ask_profile(read)
    answers: dict[str, int] = {}
    for system in catalog.systems:
        print(f"\n== {SYSTEM_LABELS.get(system, system)} ==")
        for q in catalog.questions_for(system):
            answers[q.id] = ask_likert(q.text, read)
    res = score(answers, user, catalog, datetime.datetime.now(datetime.timezone.utc).isoformat())
    cfg = load_config()
    narrative = generate_narrative(res, client_for(cfg))
    print("\n" + render_text(res, narrative))
    print("\nShare link (no personal details):", share_url(encode(res), cfg["SHARE_BASE_URL"]))
    os.makedirs(out_dir, exist_ok=True)
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    path = export_report_html(res, os.path.join(out_dir, f"assessment_{ts}.html"), narrative)
    print(f"Done. Report saved to: {path}")
    return 0
if __name__ == "__main__": sys.exit(main())
