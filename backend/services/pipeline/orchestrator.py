"""Fallback orchestrator: drives completion attempts until one yields a result.

Flow:
    answers
      ├─ build_evaluation_prompt()               (once)
      └─ for (model, mode) in build_attempts():   (strictly sequential)
           ├─ client.complete()     UpstreamError          → next attempt
           │                        ParameterRejectedError → same model, relaxed
           ├─ extract_json()        ValueError → next attempt, short strict prompt
           └─ normalize_result()    never fails → AssessmentResult, stop
    all attempts failed or overall deadline hit → AssessmentExhaustedError
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import asdict, dataclass

from config import PipelineConfig
from models.responses import AssessmentResult
from models.schemas.attempt import ModelAttempt
from services.json_extractor import extract_json
from services.pipeline.base import CompletionClient, ParameterRejectedError, UpstreamError
from services.prompt_builder import (
    STRICT_SYSTEM_PROMPT,
    SYSTEM_PROMPT,
    build_evaluation_prompt,
    build_strict_prompt,
)
from services.result_normalizer import normalize_result, validate_result

logger = logging.getLogger(__name__)

RAW_TEXT_LIMIT = 500


@dataclass
class AttemptRecord:
    model: str
    mode: str
    stage: str  # "upstream" | "extraction" | "deadline"
    message: str
    status: int | None = None


class AssessmentExhaustedError(Exception):
    """Every configured (model, mode) attempt failed."""

    def __init__(
        self,
        attempts: list[AttemptRecord],
        status_code: int | None = None,
        raw_texts: list[str] | None = None,
    ) -> None:
        last = attempts[-1].message if attempts else "no attempts configured"
        super().__init__(f"All {len(attempts)} attempts failed; last error: {last}")
        self.attempts = attempts
        self.status_code = status_code
        self.raw_texts = raw_texts or []

    @property
    def detail(self) -> str:
        return self.attempts[-1].message if self.attempts else "no attempts configured"

    def attempts_as_dicts(self) -> list[dict]:
        return [asdict(a) for a in self.attempts]


def _deadline_record(attempt: ModelAttempt, config: PipelineConfig) -> AttemptRecord:
    return AttemptRecord(
        attempt.model,
        attempt.mode,
        "deadline",
        f"overall deadline of {config.deadline_s:g}s exceeded",
    )


def build_attempts(config: PipelineConfig) -> list[ModelAttempt]:
    """Primary strict, primary relaxed, then each fallback strict then relaxed."""
    models: list[str] = []
    for model in (config.primary_model, *config.fallback_models):
        if model and model not in models:
            models.append(model)

    return [
        ModelAttempt(model=model, strict=strict, max_tokens=config.max_tokens)
        for model in models
        for strict in (True, False)
    ]


async def run_assessment(
    answers: list[str] | tuple[str, ...],
    config: PipelineConfig,
    client: CompletionClient,
) -> AssessmentResult:
    """Return the first normalized result any attempt produces.

    Raises AssessmentExhaustedError when every attempt fails or the overall
    deadline (config.deadline_s) runs out; either way the records collected
    so far are kept.
    """
    full_prompt = build_evaluation_prompt(answers, config.rubric)
    short_prompt: str | None = None

    records: list[AttemptRecord] = []
    raw_texts: deque[str] = deque(maxlen=2)
    last_status: int | None = None

    deadline = time.monotonic() + config.deadline_s if config.deadline_s else None

    attempts = build_attempts(config)
    for index, attempt in enumerate(attempts, start=1):
        timeout = config.request_timeout_s
        cut_by_deadline = False
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                records.append(_deadline_record(attempt, config))
                break
            if remaining < timeout:
                timeout, cut_by_deadline = remaining, True

        if short_prompt is None:
            system, user = SYSTEM_PROMPT, full_prompt
        else:
            system, user = STRICT_SYSTEM_PROMPT, short_prompt

        logger.info(
            "Attempt %d/%d: model=%s mode=%s",
            index, len(attempts), attempt.model, attempt.mode,
        )
        started = time.perf_counter()
        try:
            raw = await asyncio.wait_for(
                client.complete(
                    model=attempt.model,
                    system=system,
                    user=user,
                    max_tokens=attempt.max_tokens,
                    strict=attempt.strict,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            if cut_by_deadline:
                logger.error("Attempt %d (%s, %s) cut off by overall deadline", index, attempt.model, attempt.mode)
                records.append(_deadline_record(attempt, config))
                break
            message = f"timed out after {config.request_timeout_s:g}s"
            logger.warning("Attempt %d (%s, %s) %s", index, attempt.model, attempt.mode, message)
            records.append(AttemptRecord(attempt.model, attempt.mode, "upstream", message))
            continue
        except ParameterRejectedError as e:
            logger.warning(
                "Attempt %d: %s rejected JSON mode (%s); retrying relaxed",
                index, attempt.model, e.status_code,
            )
            last_status = e.status_code
            records.append(AttemptRecord(attempt.model, attempt.mode, "upstream", e.message, e.status_code))
            continue
        except UpstreamError as e:
            logger.warning(
                "Attempt %d (%s, %s) upstream error %s: %s",
                index, attempt.model, attempt.mode, e.status_code, e.message,
            )
            if e.status_code is not None:
                last_status = e.status_code
            records.append(AttemptRecord(attempt.model, attempt.mode, "upstream", e.message, e.status_code))
            continue

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("Attempt %d completed in %.0f ms (%d chars)", index, elapsed_ms, len(raw))
        raw_texts.append(raw[:RAW_TEXT_LIMIT])

        try:
            payload = extract_json(raw)
        except ValueError as e:
            logger.warning("Attempt %d: no parseable JSON (%s); switching to strict prompt", index, e)
            records.append(AttemptRecord(attempt.model, attempt.mode, "extraction", str(e)))
            short_prompt = build_strict_prompt(answers)
            continue

        return validate_result(normalize_result(payload))

    logger.error("Assessment exhausted after %d attempts", len(records))
    raise AssessmentExhaustedError(
        records,
        status_code=last_status,
        raw_texts=list(raw_texts) if config.debug else None,
    )
