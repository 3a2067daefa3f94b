"""AI provider configuration API.

Any number of configs per provider; one of them is "active" and serves the
/api/ai features. Keys never leave this module unmasked: every response goes
through to_public().
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_config_store
from models import AIConfig, AIConfigCreate, AIConfigUpdate, AIProvider
from services.ai_providers import provider_catalog
from services.config_store import AIConfigStore

router = APIRouter(prefix="/api/config", tags=["ai-config"])
logger = logging.getLogger("lph.api.ai_config")

MASK_PREFIX = "***"

VALID_PROVIDERS = {p.value for p in AIProvider}

# Fields that cannot be cleared with null on update
_NON_NULLABLE = ("provider", "name", "api_key", "is_active", "enabled")


def mask_api_key(key: str | None) -> str:
    """'sk-abcdef1234' → '***1234'; keys of 4 chars or fewer → '***'."""
    if key and len(key) > 4:
        return MASK_PREFIX + key[-4:]
    return MASK_PREFIX


def to_public(config: AIConfig) -> AIConfig:
    return config.model_copy(update={"api_key": mask_api_key(config.api_key)})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@router.get("/ai", response_model=list[AIConfig], response_model_exclude_none=True)
async def list_configs(store: AIConfigStore = Depends(get_config_store)):
    return [to_public(c) for c in await store.list()]


@router.get("/ai-providers")
async def list_providers():
    return provider_catalog()


@router.get("/ai/{config_id}", response_model=AIConfig, response_model_exclude_none=True)
async def get_config(config_id: str, store: AIConfigStore = Depends(get_config_store)):
    config = await store.get_by_id(config_id)
    if not config:
        raise HTTPException(404, "Configuration not found")
    return to_public(config)


@router.post(
    "/ai", response_model=AIConfig, response_model_exclude_none=True, status_code=201,
)
async def create_config(
    data: AIConfigCreate,
    store: AIConfigStore = Depends(get_config_store),
):
    if not data.provider or not data.name or not data.api_key:
        raise HTTPException(400, "Provider, name, and API key are required")
    if data.provider not in VALID_PROVIDERS:
        raise HTTPException(400, "Invalid provider")

    config = await store.create(
        provider=data.provider,
        name=data.name,
        api_key=data.api_key,
        base_url=data.base_url,
        model=data.model,
        is_active=data.is_active,
        enabled=data.enabled,
        config=data.config,
    )
    logger.info(
        "AI provider saved: %s (%s), key=%s",
        config.name, config.provider.value, mask_api_key(config.api_key),
    )
    return to_public(config)


@router.put("/ai/{config_id}", response_model=AIConfig, response_model_exclude_none=True)
async def update_config(
    config_id: str,
    data: AIConfigUpdate,
    store: AIConfigStore = Depends(get_config_store),
):
    existing = await store.get_by_id(config_id)
    if not existing:
        raise HTTPException(404, "Configuration not found")

    fields = data.model_dump(exclude_unset=True)
    for key in _NON_NULLABLE:
        if key in fields and fields[key] is None:
            del fields[key]
    # the frontend echoes back the masked key when it was not edited
    if fields.get("api_key", "").startswith(MASK_PREFIX):
        del fields["api_key"]
    if "provider" in fields and fields["provider"] not in VALID_PROVIDERS:
        raise HTTPException(400, "Invalid provider")

    updated = await store.update(config_id, **fields)
    if not updated:
        raise HTTPException(404, "Configuration not found")
    return to_public(updated)


@router.delete("/ai/{config_id}")
async def delete_config(config_id: str, store: AIConfigStore = Depends(get_config_store)):
    if not await store.delete(config_id):
        raise HTTPException(404, "Configuration not found")
    return {"message": "Configuration deleted successfully"}


@router.post(
    "/ai/{config_id}/activate", response_model=AIConfig, response_model_exclude_none=True,
)
async def activate_config(config_id: str, store: AIConfigStore = Depends(get_config_store)):
    activated = await store.set_active(config_id)
    if not activated:
        raise HTTPException(404, "Configuration not found or disabled")
    return to_public(activated)
