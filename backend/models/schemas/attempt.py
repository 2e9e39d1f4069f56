"""One entry of the fallback orchestrator's ordered attempt list."""

from pydantic import BaseModel, ConfigDict


class ModelAttempt(BaseModel):
    """A (model, strictness mode, token budget) triple.

    ``strict`` asks the provider for schema-constrained (JSON) decoding.
    Some free-tier providers reject that flag, so every model is also
    listed once in relaxed mode right after its strict entry.
    """
    model_config = ConfigDict(frozen=True)

    model: str
    strict: bool = True
    max_tokens: int = 700

    @property
    def mode(self) -> str:
        return "strict" if self.strict else "relaxed"
