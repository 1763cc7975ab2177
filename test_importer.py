"""JSONL question import parsing."""
import json

from importer import load_and_transform, parse_line


def line(**fields):
    base = {
        "question_id": "pack-1",
        "question_text": "If 20% of x is 8, what is x?",
        "options": ["16", "40", "80", "160"],
        "correct_answer": "b",
        "explanation": "x = 8 / 0.2",
        "domain": "Aptitude",
        "sub_topic": "percentages",
    }
    base.update(fields)
    return json.dumps(base)


def test_parse_line_normalises_row():
    row = parse_line(line())
    assert row["option_b"] == "40"
    assert row["correct_answer"] == "B"
    assert row["domain"] == "aptitude"
    assert row["source"] == "jsonl_import"
    assert parse_line(line())["id"] == row["id"]


def test_index_answer_and_domain_alias():
    row = parse_line(line(correct_answer=None, correct_option=3, domain="logical reasoning"))
    assert row["correct_answer"] == "D"
    assert row["domain"] == "reasoning"


def test_unknown_domain_is_skipped():
    assert parse_line(line(domain="cooking")) is None


def test_wrong_option_count_is_skipped():
    assert parse_line(line(options=["a", "b", "c"])) is None


def test_blank_and_broken_lines_are_skipped():
    assert parse_line("") is None
    assert parse_line("{not json") is None
    assert parse_line(line(question_id=None)) is None


def test_load_and_transform(tmp_path):
    path = tmp_path / "pack.jsonl"
    path.write_text("\n".join([line(), "", line(question_id="pack-2", domain="gk")]), encoding="utf-8")
    rows = list(load_and_transform(path, source="pack"))
    assert [r["domain"] for r in rows] == ["aptitude", "general_knowledge"]
    assert {r["source"] for r in rows} == {"pack"}
