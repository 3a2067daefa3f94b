"""AI features: explain a package, suggest commands, suggest an alias.

All three need an active, enabled provider config and raise
ProviderUnconfiguredError without one. After that they differ on purpose:
explain_package() raises UpstreamProviderError when the provider fails,
search_commands() and suggest_alias() fall back to empty results.
"""
import logging

import httpx

from core.errors import ProviderUnconfiguredError, UpstreamProviderError
from models import AliasSuggestion, CommandSearchResult
from services.ai_providers import AIProviderAdapter
from services.config_store import AIConfigStore

logger = logging.getLogger("lph.ai_features")

EXPLAIN_PACKAGE_PROMPT = (
    'Explain what the Linux package "{name}" is, its primary use cases, '
    "and give 3 common command examples. Format in clear sections."
)

SEARCH_COMMANDS_PROMPT = """The user is looking for a Linux command or tool to do: "{query}". Suggest 3 relevant packages/commands, describe them briefly, and provide the command syntax. Return ONLY a valid JSON array with this exact structure:
[
  {{
    "command": "command_name",
    "package": "package_name",
    "description": "brief description",
    "usage": "example usage command"
  }}
]"""

SUGGEST_ALIAS_PROMPT = """Suggest a short, intuitive terminal alias name and a brief description for this complex command: "{command}". Return ONLY a valid JSON object with this exact structure:
{{
  "alias": "short_alias_name",
  "description": "brief description of what it does"
}}"""

COMMAND_LIST_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "command": {"type": "string"},
            "package": {"type": "string"},
            "description": {"type": "string"},
            "usage": {"type": "string"},
        },
    },
}

ALIAS_SCHEMA = {
    "type": "object",
    "properties": {
        "alias": {"type": "string"},
        "description": {"type": "string"},
    },
}


def _text(value) -> str:
    return value if isinstance(value, str) else ""


class AIFeatures:

    def __init__(
        self,
        config_store: AIConfigStore,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config_store = config_store
        self.transport = transport

    async def _adapter(self) -> AIProviderAdapter:
        config = await self.config_store.get_active()
        if config is None:
            raise ProviderUnconfiguredError()
        return AIProviderAdapter(config, transport=self.transport)

    async def explain_package(self, name: str) -> str:
        adapter = await self._adapter()
        response = await adapter.generate_text(EXPLAIN_PACKAGE_PROMPT.format(name=name))
        if response.error:
            logger.error("Error explaining package %s: %s", name, response.error)
            raise UpstreamProviderError(response.error)
        return response.text

    async def search_commands(self, query: str) -> list[CommandSearchResult]:
        adapter = await self._adapter()
        try:
            result = await adapter.generate_json(
                SEARCH_COMMANDS_PROMPT.format(query=query), COMMAND_LIST_SCHEMA,
            )
        except Exception as e:
            logger.error("Error searching commands: %s", e, exc_info=True)
            return []

        if not isinstance(result, list):
            return []
        return [
            CommandSearchResult(
                command=_text(item.get("command")),
                package=_text(item.get("package")),
                description=_text(item.get("description")),
                usage=_text(item.get("usage")),
            )
            for item in result
            if isinstance(item, dict)
        ]

    async def suggest_alias(self, command: str) -> AliasSuggestion:
        adapter = await self._adapter()
        try:
            result = await adapter.generate_json(
                SUGGEST_ALIAS_PROMPT.format(command=command), ALIAS_SCHEMA,
            )
        except Exception as e:
            logger.error("Error suggesting alias: %s", e, exc_info=True)
            return AliasSuggestion()

        if not isinstance(result, dict):
            return AliasSuggestion()
        return AliasSuggestion(
            alias=_text(result.get("alias")),
            description=_text(result.get("description")),
        )
