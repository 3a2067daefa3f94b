from models.base import CamelModel, id_timestamp, new_id, now_iso
from models.ai_provider import AIConfig, AIConfigCreate, AIConfigUpdate, AIProvider
from models.alias import Alias, AliasCreate, AliasUpdate
from models.package import (
    Package,
    PackageManagerStatus,
    PackageManagerType,
    SystemInfo,
    SystemStats,
)
from models.ai import (
    AIResponse,
    AliasSuggestion,
    CommandSearchResult,
    ExplainPackageRequest,
    GenerationOptions,
    SearchCommandsRequest,
    SuggestAliasRequest,
)

__all__ = [
    "CamelModel",
    "id_timestamp",
    "new_id",
    "now_iso",
    "AIConfig",
    "AIConfigCreate",
    "AIConfigUpdate",
    "AIProvider",
    "Alias",
    "AliasCreate",
    "AliasUpdate",
    "Package",
    "PackageManagerStatus",
    "PackageManagerType",
    "SystemInfo",
    "SystemStats",
    "AIResponse",
    "AliasSuggestion",
    "CommandSearchResult",
    "ExplainPackageRequest",
    "GenerationOptions",
    "SearchCommandsRequest",
    "SuggestAliasRequest",
]
