import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import build_pipeline_config, settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Native-like English Check API",
    description="LLM-scored native-likeness assessment of four short answers",
    version="1.0.0",
)

app.state.pipeline_config = build_pipeline_config(settings)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Model"],
)


@app.exception_handler(RequestValidationError)
async def bad_input_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Bad input", "detail": jsonable_encoder(exc.errors())},
    )


@app.middleware("http")
async def advertise_model(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Model"] = request.app.state.pipeline_config.primary_model
    return response


app.include_router(router)

_config = app.state.pipeline_config
logger.info("Provider: %s", _config.provider)
logger.info("Model: %s", _config.primary_model)
if _config.fallback_models:
    logger.info("Fallback models: %s", ", ".join(_config.fallback_models))
if _config.provider == "openrouter":
    logger.info("Base URL: %s", settings.openrouter_base_url)
logger.info("CORS allow: %s", ", ".join(settings.cors_origins))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
