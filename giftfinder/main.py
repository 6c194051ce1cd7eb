# giftfinder/main.py - Gift recommendation API

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from . import __version__, config
from .config_store import (
    AVAILABLE_MODELS,
    PROVIDERS,
    ConfigStore,
    api_key_preview,
    default_model,
    get_available_models,
)
from .errors import ConfigError
from .models import (
    ConfigResponse,
    ConfigUpdateRequest,
    ErrorResponse,
    HealthResponse,
    ModelsResponse,
    RecommendRequest,
    RecommendResponse,
    SafeConfig,
    to_wire,
)
from .recommender import recommend_gifts, validate_description
from .resolvers import available_sources
from .resolvers.google_shopping import is_configured as google_shopping_configured

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger("api")

app = FastAPI(
    title="GiftFinder",
    version=__version__,
    description="AI gift recommendations with shoppable product links"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-wide settings, replaceable in tests through dependency_overrides
config_store = ConfigStore()


def get_config_store() -> ConfigStore:
    return config_store


def error_response(status_code: int, error: str, message: str, details: str = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=to_wire(body))


def safe_config(store: ConfigStore) -> SafeConfig:
    # Never send the full API key to the client
    settings = store.get()
    return SafeConfig(
        provider=settings.provider,
        model=settings.model,
        product_source=settings.product_source or "multi-store",
        api_key_configured=store.is_configured(),
        api_key_preview=api_key_preview(settings.api_key),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return error_response(400, "Invalid request", "Request body must be a JSON object with valid fields.")


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "GiftFinder API",
        "docs": "/docs",
        "health": "/api/health",
        "endpoints": {
            "recommend": "/api/recommend",
            "config": "/api/config",
            "models": "/api/models/{provider}"
        },
        "productSources": available_sources()
    }


@app.get("/api/health", response_model=HealthResponse)
def health(store: ConfigStore = Depends(get_config_store)):
    product_source = store.get().product_source
    result = HealthResponse(
        message="Gift recommendation API is healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        product_source=product_source,
        google_shopping_configured=google_shopping_configured(),
        legacy_mock_mode=product_source == "mock",
    )
    return JSONResponse(content=to_wire(result))


@app.post("/api/recommend", response_model=RecommendResponse)
async def recommend(request: RecommendRequest, store: ConfigStore = Depends(get_config_store)):
    """
    Generate personalized gift recommendations from a description of the recipient.
    """
    invalid = validate_description(request.description)
    if invalid:
        error, message = invalid
        logger.info(f"Rejected recommend request: {error}")
        return error_response(400, error, message)

    description = request.description.strip()
    settings = store.get()
    logger.info(f"Using provider={settings.provider} model={settings.model} source={settings.product_source}")

    try:
        data = await recommend_gifts(description, settings)
    except Exception as e:
        logger.error(f"Gift recommendation failed: {str(e)}", exc_info=True)
        return error_response(
            500,
            "Internal server error",
            "Failed to generate gift recommendations. Please try again.",
            details=str(e) if config.APP_ENV == "development" else None,
        )

    result = RecommendResponse(message="Gift recommendations generated successfully", data=data)
    return JSONResponse(content=to_wire(result))


@app.get("/api/config", response_model=ConfigResponse)
def get_current_config(store: ConfigStore = Depends(get_config_store)):
    result = ConfigResponse(config=safe_config(store), available_models=AVAILABLE_MODELS)
    return JSONResponse(content=to_wire(result))


@app.post("/api/config", response_model=ConfigResponse)
def update_config(request: ConfigUpdateRequest, store: ConfigStore = Depends(get_config_store)):
    """
    Update the AI provider, API key, model and product source.
    """
    if not request.provider:
        return error_response(400, "Invalid configuration", "Provider is required")

    if not request.api_key or not request.api_key.strip():
        return error_response(400, "Invalid configuration", "API key is required")

    try:
        settings = store.update(
            provider=request.provider,
            api_key=request.api_key,
            model=request.model or default_model(request.provider),
            product_source=request.product_source or "multi-store",
        )
    except ConfigError as e:
        logger.warning(f"Rejected configuration update: {e}")
        return error_response(400, "Invalid configuration", str(e))

    logger.info(
        f"Configuration updated: provider={settings.provider}, model={settings.model}, "
        f"productSource={settings.product_source}"
    )
    result = ConfigResponse(message="Configuration updated successfully", config=safe_config(store))
    return JSONResponse(content=to_wire(result))


@app.get("/api/models/{provider}", response_model=ModelsResponse)
def get_models(provider: str):
    if provider not in PROVIDERS:
        return error_response(400, "Invalid provider", 'Invalid provider. Must be "gemini" or "groq"')

    result = ModelsResponse(provider=provider, models=get_available_models(provider))
    return JSONResponse(content=to_wire(result))
