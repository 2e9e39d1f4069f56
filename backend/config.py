import json
import os
from dataclasses import dataclass

from pydantic import field_validator
from pydantic_settings import BaseSettings


def _parse_list(raw: str | None) -> list[str] | None:
    """Parse a comma-separated string or JSON list."""
    if not raw:
        return None
    raw = raw.strip()
    if raw.startswith("["):
        return [str(item).strip() for item in json.loads(raw) if str(item).strip()]
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ALLOW_ORIGIN env var as comma-separated string or JSON list."""
    return _parse_list(os.environ.get("CORS_ALLOW_ORIGIN"))


class Settings(BaseSettings):
    # "openrouter" (OpenAI-compatible chat completions) | "gemini"
    llm_provider: str = "openrouter"

    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "mistralai/mistral-7b-instruct:free"

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Tried in order after the primary model, each strict then relaxed
    fallback_models: str = ""

    max_tokens: int = 700
    # Scoring rubric sent with the full prompt; empty uses the built-in one
    rubric: str = ""
    request_timeout_s: float = 60.0
    assessment_deadline_s: float = 90.0
    assess_rate_limit: str = "20/minute"

    cors_origins: list[str] = ["*"]
    admin_token: str = ""
    debug: bool = False
    log_level: str = "INFO"
    port: int = 8787

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "protected_namespaces": ("settings_",),
    }

    @field_validator("llm_provider")
    @classmethod
    def _check_provider(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("openrouter", "gemini"):
            raise ValueError(f"Unsupported LLM provider: {value}")
        return value

    @property
    def primary_model(self) -> str:
        if self.llm_provider == "gemini":
            return self.gemini_model
        return self.openrouter_model

    @property
    def api_key_configured(self) -> bool:
        if self.llm_provider == "gemini":
            return bool(self.gemini_api_key)
        return bool(self.openrouter_api_key)

    @property
    def fallback_model_list(self) -> list[str]:
        return _parse_list(self.fallback_models) or []


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable pipeline configuration, built once at startup.

    The orchestrator and requesters only ever see this value; they never
    read ``settings`` directly.
    """

    provider: str
    primary_model: str
    fallback_models: tuple[str, ...] = ()
    max_tokens: int = 700
    request_timeout_s: float = 60.0
    deadline_s: float | None = 90.0
    rubric: str | None = None
    debug: bool = False


def build_pipeline_config(source: Settings) -> PipelineConfig:
    return PipelineConfig(
        provider=source.llm_provider,
        primary_model=source.primary_model,
        fallback_models=tuple(m for m in source.fallback_model_list if m != source.primary_model),
        max_tokens=source.max_tokens,
        request_timeout_s=source.request_timeout_s,
        deadline_s=source.assessment_deadline_s or None,
        rubric=source.rubric or None,
        debug=source.debug,
    )


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
