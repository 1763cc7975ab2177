"""Ingest .jsonl: normalise options/answer labels, validate domain; bulk UPSERT into questions."""
import json
import argparse
import logging
from pathlib import Path
from uuid import uuid5, NAMESPACE_DNS

from db import get_supabase_uncached, upsert_questions_bulk, delete_questions_by_source
from engine import OPTION_LABELS
from src.models import Question

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "jsonl_import"

# Topic names seen in question packs that do not match a domain value directly
DOMAIN_ALIASES = {
    "quant": "aptitude",
    "quantitative_aptitude": "aptitude",
    "logical_reasoning": "reasoning",
    "english": "verbal",
    "verbal_ability": "verbal",
    "gk": "general_knowledge",
    "general_awareness": "general_knowledge",
    "computer_science": "technical",
}


def normalise_domain(raw: str) -> str:
    d = (raw or "").strip().lower().replace("-", "_").replace(" ", "_")
    return DOMAIN_ALIASES.get(d, d)


def normalise_answer(raw) -> str:
    """Accept 'A'-'D' (any case) or a 0-based index. Anything else is kept verbatim."""
    if isinstance(raw, int) and not isinstance(raw, bool) and 0 <= raw < len(OPTION_LABELS):
        return OPTION_LABELS[raw]
    if isinstance(raw, str) and raw.strip().upper() in OPTION_LABELS:
        return raw.strip().upper()
    return str(raw) if raw is not None else ""


def parse_line(line: str, source: str = DEFAULT_SOURCE) -> dict | None:
    """Parse one JSONL line into a questions row. Returns None if invalid/skip."""
    line = line.strip()
    if not line:
        return None
    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        return None
    external_id = raw.get("question_id") or raw.get("id")
    if not external_id:
        return None

    options = raw.get("options")
    if isinstance(options, list):
        if len(options) != len(OPTION_LABELS):
            return None
        by_label = dict(zip(OPTION_LABELS, options))
    else:
        by_label = {label: raw.get(f"option_{label.lower()}") for label in OPTION_LABELS}
    if not all(by_label.values()):
        return None

    answer = raw.get("correct_answer")
    if answer is None:
        answer = raw.get("correct_option")

    row = {
        "id": str(uuid5(NAMESPACE_DNS, str(external_id))),
        "question_text": raw.get("question_text") or raw.get("text") or "",
        "option_a": by_label["A"],
        "option_b": by_label["B"],
        "option_c": by_label["C"],
        "option_d": by_label["D"],
        "correct_answer": normalise_answer(answer),
        "explanation": raw.get("explanation") or "",
        "domain": normalise_domain(raw.get("domain") or raw.get("topic")),
        "sub_topic": (raw.get("sub_topic") or raw.get("topic") or "").strip() or "general",
        "source": source,
    }
    try:
        Question.from_row(row)
    except ValueError as e:
        logger.debug(f"Skipping {external_id}: {e}")
        return None
    if row["correct_answer"] not in OPTION_LABELS:
        logger.warning(f"Question {external_id} has answer label {row['correct_answer']!r}; it can never be answered correctly")
    return row


def load_and_transform(path: Path, source: str = DEFAULT_SOURCE):
    """Read JSONL and yield transformed question rows."""
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            row = parse_line(line, source)
            if row:
                yield row


def run_import(jsonl_path: Path, source: str = DEFAULT_SOURCE, chunk_size: int = 200, dry_run: bool = False, replace: bool = False):
    if not jsonl_path.exists():
        raise FileNotFoundError(f"JSONL not found: {jsonl_path}")
    rows = list(load_and_transform(jsonl_path, source))
    if dry_run:
        print(f"Dry run: would upsert {len(rows)} questions from {jsonl_path}")
        if rows:
            print("Sample row:", rows[0])
        return rows
    client = get_supabase_uncached()
    if replace:
        delete_questions_by_source(client, source)
        print(f"Deleted existing {source} questions")
    upsert_questions_bulk(client, rows, chunk_size=chunk_size)
    print(f"Upserted {len(rows)} questions from {jsonl_path}")
    return rows


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Import question JSONL into Supabase questions.")
    parser.add_argument("jsonl", help="Path to .jsonl")
    parser.add_argument("--source", default=DEFAULT_SOURCE, help=f"Source tag stored on each row (default {DEFAULT_SOURCE})")
    parser.add_argument("--chunk-size", type=int, default=200, help="Upsert chunk size (default 200)")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, do not upsert")
    parser.add_argument("--replace", action="store_true", help="Delete existing questions with this source, then upsert")
    args = parser.parse_args()
    run_import(Path(args.jsonl), source=args.source, chunk_size=args.chunk_size, dry_run=args.dry_run, replace=args.replace)
