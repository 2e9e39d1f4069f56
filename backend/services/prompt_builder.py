"""Prompt templates for the assessment calls."""

from models.responses import LEVELS

SYSTEM_PROMPT = "You are a calibrated linguistics examiner."
STRICT_SYSTEM_PROMPT = "Output STRICT JSON only. No preamble, no extra words."

_LEVELS = "|".join(f'"{level}"' for level in LEVELS)

DEFAULT_RUBRIC = """Scoring:
0-2 basic; 3-4 limited; 5-6 functional; 7-8 strong; 9 near-native; 10 native-like.
Penalize canned/memorized text. Consider grammar, vocabulary range, collocations, coherence, register, naturalness."""

BARE_SCHEMA = (
    '{"score":number,"level":' + _LEVELS + ',"reasons":string,"suggestions":string[]}'
)


def format_answers(answers: list[str] | tuple[str, ...]) -> str:
    """Number the answers Q1..Q4, one block each."""
    return "\n\n".join(f"Q{i}:\n{answer}" for i, answer in enumerate(answers, start=1))


def build_evaluation_prompt(answers: list[str] | tuple[str, ...], rubric: str | None = None) -> str:
    """Full prompt: schema, rubric and the four answers."""
    return f"""Return ONLY a JSON object with this exact schema and nothing else:

{{
  "score": number,            // integer 0-10
  "level": {_LEVELS},
  "reasons": string,          // 1-2 sentences
  "suggestions": string[]     // 3 concise tips, specific to these answers
}}

{rubric if rubric is not None else DEFAULT_RUBRIC}

Evaluate these four answers:

{format_answers(answers)}"""


def build_strict_prompt(answers: list[str] | tuple[str, ...]) -> str:
    """Short retry prompt: bare schema, no rubric.

    Used after a model has already replied with something that was not JSON.
    """
    return f"Schema: {BARE_SCHEMA}\n\nEvaluate:\n{format_answers(answers)}"
