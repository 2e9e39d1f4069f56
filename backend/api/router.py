import dataclasses
import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_completion_client, get_pipeline_config
from config import PipelineConfig, settings
from models.requests import AssessRequest, ModelOverrideRequest
from models.responses import AssessmentFailure, AssessmentResult, HealthResponse, ModelInfo
from services import assessor
from services.pipeline.base import CompletionClient
from services.pipeline.orchestrator import AssessmentExhaustedError

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _assess_rate_limit() -> str:
    return settings.assess_rate_limit


def _model_info(config: PipelineConfig) -> ModelInfo:
    return ModelInfo(
        provider=config.provider,
        model=config.primary_model,
        fallback_models=list(config.fallback_models),
    )


@router.api_route("/", methods=["GET", "HEAD"], response_class=PlainTextResponse)
async def liveness():
    return "OK"


@router.get("/health", response_model=HealthResponse)
async def health(config: PipelineConfig = Depends(get_pipeline_config)):
    return HealthResponse(
        status="ok",
        provider=config.provider,
        model=config.primary_model,
        api_key_configured=settings.api_key_configured,
    )


@router.post("/assess", response_model=AssessmentResult)
@limiter.limit(_assess_rate_limit)
async def assess(
    request: Request,
    body: AssessRequest,
    mock: str | None = Query(None, description="Set to 1 for a fixed mock result"),
    config: PipelineConfig = Depends(get_pipeline_config),
    client: CompletionClient = Depends(get_completion_client),
):
    is_mock = mock in ("1", "true")
    logger.info("POST /assess mock=%s model=%s", is_mock, config.primary_model)

    try:
        return await assessor.assess(body.answers, config, client, mock=is_mock)
    except AssessmentExhaustedError as e:
        failure = AssessmentFailure(
            model=config.primary_model,
            status=e.status_code,
            detail=e.detail,
        )
        if config.debug:
            failure.attempts = e.attempts_as_dicts()
            failure.raw = e.raw_texts
        return JSONResponse(status_code=502, content=failure.model_dump(exclude_none=True))


@router.get("/model", response_model=ModelInfo)
async def get_model(config: PipelineConfig = Depends(get_pipeline_config)):
    return _model_info(config)


@router.put("/model", response_model=ModelInfo)
async def override_model(
    request: Request,
    body: ModelOverrideRequest,
    x_admin_token: str | None = Header(None),
    config: PipelineConfig = Depends(get_pipeline_config),
):
    if not settings.admin_token:
        raise HTTPException(status_code=403, detail="Model override is disabled")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.admin_token):
        raise HTTPException(status_code=403, detail="Invalid admin token")

    model = body.model.strip()
    if not model:
        raise HTTPException(status_code=400, detail="Model identifier cannot be blank")

    updated = dataclasses.replace(
        config,
        primary_model=model,
        fallback_models=tuple(m for m in config.fallback_models if m != model),
    )
    request.app.state.pipeline_config = updated
    logger.warning("Primary model overridden: %s -> %s", config.primary_model, model)
    return _model_info(updated)
