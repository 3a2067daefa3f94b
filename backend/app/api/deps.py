"""Request-scoped accessors for the services created in main.lifespan()."""
from fastapi import Request

from services.ai_features import AIFeatures
from services.alias_store import AliasStore
from services.config_store import AIConfigStore


def get_config_store(request: Request) -> AIConfigStore:
    return request.app.state.config_store


def get_alias_store(request: Request) -> AliasStore:
    return request.app.state.alias_store


def get_ai_features(request: Request) -> AIFeatures:
    return request.app.state.ai_features
