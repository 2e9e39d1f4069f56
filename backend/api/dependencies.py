"""Shared dependencies for API routes."""

from fastapi import Depends, Request

from config import PipelineConfig, settings
from services.pipeline import client_registry
from services.pipeline.base import CompletionClient


def get_pipeline_config(request: Request) -> PipelineConfig:
    return request.app.state.pipeline_config


def get_completion_client(config: PipelineConfig = Depends(get_pipeline_config)) -> CompletionClient:
    if config.provider == "gemini":
        return client_registry.get_client(
            "gemini",
            api_key=settings.gemini_api_key,
            timeout_s=settings.request_timeout_s,
        )
    return client_registry.get_client(
        "openrouter",
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        timeout_s=settings.request_timeout_s,
    )
