# giftfinder/config_store.py - Runtime AI/product-source settings

import logging
import threading
from typing import Dict, List, Optional

from .errors import ConfigError
from .models import Configuration, ModelInfo
from . import config

logger = logging.getLogger(__name__)

PROVIDERS = ["gemini", "groq"]

# Sources the settings endpoint may select
PRODUCT_SOURCES = ["multi-store", "google-shopping"]

# Also accepted from PRODUCT_SOURCE at startup
LEGACY_PRODUCT_SOURCES = ["mock", "ebay-scraping"]

AVAILABLE_MODELS: Dict[str, List[ModelInfo]] = {
    "gemini": [
        ModelInfo(id="gemini-2.5-flash-lite", name="Gemini 2.5 Flash Lite (Main)", is_main=True),
        ModelInfo(id="gemini-2.0-flash", name="Gemini 2.0 Flash"),
        ModelInfo(id="gemini-2.0-flash-lite", name="Gemini 2.0 Flash Lite"),
    ],
    "groq": [
        ModelInfo(id="llama-3.3-70b-versatile", name="Llama 3.3 70B Versatile (Main)", is_main=True),
        ModelInfo(id="meta-llama/llama-4-scout-17b-16e-instruct", name="Llama 4 Scout 17B"),
        ModelInfo(id="openai/gpt-oss-120b", name="GPT OSS 120B"),
    ],
}


def get_available_models(provider: str) -> List[ModelInfo]:
    return list(AVAILABLE_MODELS.get(provider, []))


def default_model(provider: str) -> str:
    models = AVAILABLE_MODELS.get(provider, [])
    for m in models:
        if m.is_main:
            return m.id
    return models[0].id if models else ""


class ConfigStore:
    """
    Owns the process-wide configuration record.

    Reads return copies, and updates are validated in full before any field
    is applied, so a rejected update never leaves a partial change behind.
    """

    def __init__(self, initial: Optional[Configuration] = None):
        self._lock = threading.Lock()
        self._config = initial.model_copy() if initial else self._from_env()

    @staticmethod
    def _from_env() -> Configuration:
        provider = config.AI_PROVIDER if config.AI_PROVIDER in PROVIDERS else "gemini"
        model = config.AI_MODEL
        if model not in [m.id for m in AVAILABLE_MODELS[provider]]:
            model = default_model(provider)

        source = config.PRODUCT_SOURCE
        if source not in PRODUCT_SOURCES + LEGACY_PRODUCT_SOURCES:
            logger.warning(f"Unknown PRODUCT_SOURCE '{source}', using multi-store")
            source = "multi-store"

        return Configuration(
            provider=provider,
            api_key=config.GEMINI_API_KEY,
            model=model,
            product_source=source,
        )

    def get(self) -> Configuration:
        with self._lock:
            return self._config.model_copy()

    def update(
        self,
        provider: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        product_source: Optional[str] = None,
    ) -> Configuration:
        """
        Validate and merge a partial update.

        Args:
            provider: 'gemini' or 'groq'
            api_key: API key for the provider (an empty string clears it)
            model: Model ID, checked against the new or current provider's catalog
            product_source: 'multi-store' or 'google-shopping'

        Returns:
            Configuration: copy of the updated configuration

        Raises:
            ConfigError: if any field is invalid; nothing is changed
        """
        with self._lock:
            changes = {}

            if provider:
                if provider not in PROVIDERS:
                    raise ConfigError('Invalid provider. Must be "gemini" or "groq"')
                changes["provider"] = provider

            if api_key is not None:
                changes["api_key"] = api_key

            if model:
                target = changes.get("provider", self._config.provider)
                valid_models = [m.id for m in AVAILABLE_MODELS[target]]
                if model not in valid_models:
                    raise ConfigError(
                        f"Invalid model for {target}. Must be one of: {', '.join(valid_models)}"
                    )
                changes["model"] = model
            elif "provider" in changes:
                # Keep the model consistent with a provider switch
                valid_models = [m.id for m in AVAILABLE_MODELS[changes["provider"]]]
                if self._config.model not in valid_models:
                    changes["model"] = default_model(changes["provider"])

            if product_source:
                if product_source not in PRODUCT_SOURCES:
                    raise ConfigError('Invalid product source. Must be "multi-store" or "google-shopping"')
                changes["product_source"] = product_source

            self._config = self._config.model_copy(update=changes)
            return self._config.model_copy()

    def is_configured(self) -> bool:
        with self._lock:
            return bool(self._config.api_key and self._config.api_key.strip())


def api_key_preview(api_key: str) -> str:
    return f"{api_key[:8]}..." if api_key else ""
