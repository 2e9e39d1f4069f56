from typing import Literal, get_args

from pydantic import BaseModel, Field, field_validator, model_validator

Level = Literal["Beginner", "Intermediate", "Advanced", "Near-native", "Native-like"]
LEVELS: tuple[str, ...] = get_args(Level)

# (minimum score, level), checked top-down
LEVEL_THRESHOLDS: tuple[tuple[int, Level], ...] = (
    (10, "Native-like"),
    (9, "Near-native"),
    (7, "Advanced"),
    (5, "Intermediate"),
)

MAX_SUGGESTIONS = 6


def level_for_score(score: int) -> Level:
    """Map a 0-10 score to its level. Authoritative over any model-claimed level."""
    for minimum, level in LEVEL_THRESHOLDS:
        if score >= minimum:
            return level
    return "Beginner"


def suggestion_key(text: str) -> str:
    """Comparison key for suggestions: lowercased, whitespace collapsed."""
    return " ".join(text.split()).lower()


class AssessmentResult(BaseModel):
    """The output contract returned for every successful assessment."""
    score: int = Field(..., ge=0, le=10, strict=True)
    level: Level
    reasons: str = Field(..., min_length=1)
    suggestions: list[str] = Field(..., min_length=1, max_length=MAX_SUGGESTIONS)

    @field_validator("reasons")
    @classmethod
    def _reasons_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("reasons must not be blank")
        return value

    @field_validator("suggestions")
    @classmethod
    def _suggestions_distinct(cls, value: list[str]) -> list[str]:
        keys = [suggestion_key(s) for s in value]
        if any(not k for k in keys):
            raise ValueError("suggestions must not be blank")
        if len(set(keys)) != len(keys):
            raise ValueError("suggestions must be distinct")
        return value

    @model_validator(mode="after")
    def _level_matches_score(self) -> "AssessmentResult":
        expected = level_for_score(self.score)
        if self.level != expected:
            raise ValueError(f"level {self.level!r} inconsistent with score {self.score} (expected {expected!r})")
        return self


class AssessmentFailure(BaseModel):
    error: str = "Assessment failed"
    model: str = ""
    status: int | None = None
    detail: str = ""
    attempts: list[dict] | None = None
    raw: list[str] | None = None


class ModelInfo(BaseModel):
    provider: str
    model: str
    fallback_models: list[str] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    provider: str = ""
    model: str = ""
    api_key_configured: bool = False
