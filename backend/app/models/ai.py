from pydantic import BaseModel

from models.base import CamelModel


class AIResponse(BaseModel):
    """Normalized result of one provider call. Never persisted."""
    text: str = ""
    error: str | None = None


class GenerationOptions(BaseModel):
    temperature: float = 0.7
    max_tokens: int = 2048
    system_prompt: str | None = None


class CommandSearchResult(CamelModel):
    command: str = ""
    package: str = ""
    description: str = ""
    usage: str = ""


class AliasSuggestion(CamelModel):
    alias: str = ""
    description: str = ""


# --- request bodies for /api/ai ---

class ExplainPackageRequest(CamelModel):
    package_name: str | None = None


class SearchCommandsRequest(CamelModel):
    query: str | None = None


class SuggestAliasRequest(CamelModel):
    command: str | None = None
