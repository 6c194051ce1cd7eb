# giftfinder/models.py - Data models for the gift recommendation API

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class CamelModel(BaseModel):
    """Base model that accepts both snake_case and the camelCase wire names."""
    model_config = ConfigDict(populate_by_name=True)


# AI output
class GiftQuery(BaseModel):
    query: str
    reason: str


class GenerationResult(BaseModel):
    queries: List[GiftQuery]
    used_fallback: bool = False
    provider: Optional[str] = None
    model: Optional[str] = None
    error: Optional[str] = None


# Product models
class PlatformLinks(BaseModel):
    amazon: str
    ebay: str
    etsy: str
    walmart: str
    target: str


class Gift(CamelModel):
    title: str
    price: str
    image: str
    link: str
    reason: str = ""
    search_query: str = Field("", alias="searchQuery")
    source: str  # Which product source resolved this gift
    category: Optional[str] = None
    platform_links: Optional[PlatformLinks] = Field(None, alias="platformLinks")
    snippet: Optional[str] = None
    error: Optional[str] = None


# Settings models
class Configuration(CamelModel):
    provider: str
    api_key: str = Field("", alias="apiKey")
    model: str
    product_source: str = Field("multi-store", alias="productSource")


class ModelInfo(CamelModel):
    id: str
    name: str
    is_main: bool = Field(False, alias="isMain")


class SafeConfig(CamelModel):
    provider: str
    model: str
    product_source: str = Field(alias="productSource")
    api_key_configured: bool = Field(alias="apiKeyConfigured")
    api_key_preview: str = Field(alias="apiKeyPreview")


# Request models
class RecommendRequest(BaseModel):
    description: Optional[str] = None


class ConfigUpdateRequest(CamelModel):
    provider: Optional[str] = None
    api_key: Optional[str] = Field(None, alias="apiKey")
    model: Optional[str] = None
    product_source: Optional[str] = Field(None, alias="productSource")


# Response models
class RecommendData(CamelModel):
    description: str
    total_results: int = Field(alias="totalResults")
    gifts: List[Gift]
    ai_fallback: bool = Field(False, alias="aiFallback")


class RecommendResponse(BaseModel):
    success: bool = True
    message: str
    data: RecommendData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    details: Optional[str] = None


class HealthResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: str
    product_source: str = Field(alias="productSource")
    google_shopping_configured: bool = Field(alias="googleShoppingConfigured")
    legacy_mock_mode: bool = Field(alias="legacyMockMode")


class ConfigResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    config: SafeConfig
    available_models: Optional[Dict[str, List[ModelInfo]]] = Field(None, alias="availableModels")


class ModelsResponse(BaseModel):
    success: bool = True
    provider: str
    models: List[ModelInfo]


def to_wire(model: BaseModel) -> Dict[str, Any]:
    """Serialize a model with camelCase keys and without unset optionals."""
    return model.model_dump(by_alias=True, exclude_none=True)
