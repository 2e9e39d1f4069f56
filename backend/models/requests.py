from pydantic import BaseModel, ConfigDict, Field, field_validator

ANSWER_COUNT = 4


class AssessRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    answers: tuple[str, ...] = Field(..., description="Exactly four free-text answers, in question order")

    @field_validator("answers")
    @classmethod
    def _check_answers(cls, answers: tuple[str, ...]) -> tuple[str, ...]:
        if len(answers) != ANSWER_COUNT:
            raise ValueError(f"need exactly {ANSWER_COUNT} answers")
        for answer in answers:
            if not answer.strip():
                raise ValueError("answer cannot be empty")
        return answers


class ModelOverrideRequest(BaseModel):
    model: str = Field(..., min_length=1, max_length=200, description="Model identifier to use as primary")
