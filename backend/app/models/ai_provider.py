"""AI provider configuration records.

Stored in ai_configs.json as ``{"configs": [...]}``. Any number of records
per provider; at most one has isActive=true. Keys are stored as plain text,
the API layer masks them on the way out.
"""
import enum
import json
from typing import Any

from models.base import CamelModel


class AIProvider(str, enum.Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    VOLCENGINE = "volcengine"
    ANTHROPIC = "anthropic"


class AIConfig(CamelModel):
    id: str
    provider: AIProvider
    name: str
    api_key: str = ""
    base_url: str | None = None
    model: str | None = None
    is_active: bool = False
    enabled: bool = True
    config: Any = None           # opaque provider extras (httpReferer, appName, ...)
    created_at: str | None = None
    updated_at: str | None = None

    def extra(self, key: str, default: str = "") -> str:
        """Read a value from the opaque ``config`` field (dict or JSON string)."""
        data = self.config
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                return default
        if isinstance(data, dict):
            value = data.get(key)
            if value:
                return str(value)
        return default


class AIConfigCreate(CamelModel):
    provider: str | None = None
    name: str | None = None
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    is_active: bool = False
    enabled: bool = True
    config: Any = None


class AIConfigUpdate(CamelModel):
    provider: str | None = None
    name: str | None = None
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    is_active: bool | None = None
    enabled: bool | None = None
    config: Any = None
