from services.prompt_builder import (
    BARE_SCHEMA,
    DEFAULT_RUBRIC,
    build_evaluation_prompt,
    build_strict_prompt,
    format_answers,
)
from tests.fakes import SAMPLE_ANSWERS


def test_answers_numbered_in_order():
    text = format_answers(SAMPLE_ANSWERS)
    assert text.startswith("Q1:\nI enjoy reading.")
    assert text.index("Q2:") < text.index("Q3:") < text.index("Q4:")


def test_evaluation_prompt_uses_default_rubric():
    prompt = build_evaluation_prompt(SAMPLE_ANSWERS)
    assert DEFAULT_RUBRIC in prompt
    assert '"Near-native"' in prompt
    for answer in SAMPLE_ANSWERS:
        assert answer in prompt


def test_rubric_is_a_parameter():
    prompt = build_evaluation_prompt(SAMPLE_ANSWERS, rubric="Grade harshly.")
    assert "Grade harshly." in prompt
    assert DEFAULT_RUBRIC not in prompt


def test_strict_prompt_is_short_and_rubric_free():
    strict = build_strict_prompt(SAMPLE_ANSWERS)
    assert strict.startswith(f"Schema: {BARE_SCHEMA}")
    assert "Penalize" not in strict
    assert len(strict) < len(build_evaluation_prompt(SAMPLE_ANSWERS))
    assert SAMPLE_ANSWERS[3] in strict
