"""Assessment entry point: mock short-circuit in front of the fallback orchestrator.

Pipeline:
1. Mock mode returns a fixed result (no provider call)
2. Fallback orchestrator runs the (model, mode) attempts
3. The orchestrator bounds the whole run by PipelineConfig.deadline_s; expiry
   cancels the in-flight attempt and is reported as exhaustion
"""

import logging

from config import PipelineConfig
from models.responses import AssessmentResult
from services.pipeline.base import CompletionClient
from services.pipeline.orchestrator import run_assessment

logger = logging.getLogger(__name__)

MOCK_RESULT = AssessmentResult(
    score=7,
    level="Advanced",
    reasons="Mostly natural phrasing with minor non-native choices.",
    suggestions=[
        "Vary sentence openings to avoid repetition.",
        "Use idiomatic connectors (e.g., “that said”).",
        "Tighten article usage in complex sentences.",
    ],
)


def mock_result() -> AssessmentResult:
    """Deterministic result for integration tests; no upstream cost."""
    return MOCK_RESULT.model_copy(deep=True)


async def assess(
    answers: list[str] | tuple[str, ...],
    config: PipelineConfig,
    client: CompletionClient,
    mock: bool = False,
) -> AssessmentResult:
    """Run one assessment. Raises AssessmentExhaustedError on failure."""
    if mock:
        logger.info("Mock mode: skipping provider call")
        return mock_result()

    return await run_assessment(answers, config, client)
