"""AI-assisted helpers backed by the active provider config.

503 when no provider is active (see ProviderUnconfiguredError).
"""
from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_ai_features
from models import (
    AliasSuggestion,
    CommandSearchResult,
    ExplainPackageRequest,
    SearchCommandsRequest,
    SuggestAliasRequest,
)
from services.ai_features import AIFeatures

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/explain-package")
async def explain_package(
    data: ExplainPackageRequest,
    features: AIFeatures = Depends(get_ai_features),
):
    if not data.package_name:
        raise HTTPException(400, "Package name is required")
    explanation = await features.explain_package(data.package_name)
    return {"explanation": explanation}


@router.post("/search-commands", response_model=list[CommandSearchResult])
async def search_commands(
    data: SearchCommandsRequest,
    features: AIFeatures = Depends(get_ai_features),
):
    if not data.query:
        raise HTTPException(400, "Search query is required")
    return await features.search_commands(data.query)


@router.post("/suggest-alias", response_model=AliasSuggestion)
async def suggest_alias(
    data: SuggestAliasRequest,
    features: AIFeatures = Depends(get_ai_features),
):
    if not data.command:
        raise HTTPException(400, "Command is required")
    return await features.suggest_alias(data.command)
