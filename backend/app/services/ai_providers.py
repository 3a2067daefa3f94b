"""AI provider adapter: one interface over five chat-completion APIs.

    adapter = AIProviderAdapter(config)
    response = await adapter.generate_text("Explain vim")
    data = await adapter.generate_json("Suggest an alias ...")

Providers are table-driven (PROVIDERS) and served by three request styles:
  * OpenAI-compatible (openai, openrouter, volcengine) via the openai SDK
  * Anthropic Messages API via httpx
  * Gemini generateContent via httpx

No retries, no streaming. Failures never raise out of generate_text():
they come back as AIResponse(text="", error=...).
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable

import httpx
from openai import APIStatusError, AsyncOpenAI

from config import settings
from models import AIConfig, AIProvider, AIResponse, GenerationOptions

logger = logging.getLogger("lph.ai_providers")

ANTHROPIC_VERSION = "2023-06-01"

JSON_INSTRUCTION = "Please respond with valid JSON only, no markdown formatting."


def _openrouter_headers(config: AIConfig) -> dict[str, str]:
    return {
        "HTTP-Referer": config.extra("httpReferer", "http://localhost:5173"),
        "X-Title": config.extra("appName", "Linux Package Hub"),
    }


# ---------------------------------------------------------------------------
# Provider registry
# ---------------------------------------------------------------------------
PROVIDERS: dict[AIProvider, dict[str, Any]] = {
    AIProvider.GEMINI: {
        "label": "Gemini",
        "style": "gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "catalog_base_url": "",   # SDK-style provider, no user-facing base URL
        "default_model": "gemini-1.5-flash",
    },
    AIProvider.OPENAI: {
        "label": "Openai",
        "style": "openai",
        "base_url": "https://api.openai.com/v1",
        "default_model": "gpt-3.5-turbo",
    },
    AIProvider.OPENROUTER: {
        "label": "Openrouter",
        "style": "openai",
        "base_url": "https://openrouter.ai/api/v1",
        "default_model": "openai/gpt-3.5-turbo",
        "extra_headers": _openrouter_headers,
    },
    AIProvider.VOLCENGINE: {
        "label": "Volcengine",
        "style": "openai",
        "base_url": "https://ark.cn-beijing.volces.com/api/v3",
        "default_model": "ep-xxx",   # VolcEngine expects an endpoint id here
    },
    AIProvider.ANTHROPIC: {
        "label": "Anthropic",
        "style": "anthropic",
        "base_url": "https://api.anthropic.com/v1",
        "default_model": "claude-3-haiku-20240307",
    },
}


def provider_catalog() -> dict:
    """Static metadata for the settings screen."""
    return {
        "providers": [
            {
                "value": provider.value,
                "label": meta["label"],
                "defaultBaseUrl": meta.get("catalog_base_url", meta["base_url"]),
                "defaultModel": meta["default_model"],
            }
            for provider, meta in PROVIDERS.items()
        ]
    }


def _error_message(resp: httpx.Response) -> str:
    """Provider's error.message from a non-2xx body, else 'HTTP <status>'."""
    try:
        err = resp.json().get("error")
    except (ValueError, AttributeError):
        err = None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str) and err:
        return err
    return f"HTTP {resp.status_code}"


def _with_system_prompt(prompt: str, options: GenerationOptions) -> str:
    if options.system_prompt:
        return f"{options.system_prompt}\n\n{prompt}"
    return prompt


# ---------------------------------------------------------------------------
# Request styles
# ---------------------------------------------------------------------------
class BaseProvider(ABC):

    def __init__(
        self,
        config: AIConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.config = config
        self.meta = PROVIDERS[config.provider]
        self.label = self.meta["label"]
        self.base_url = (config.base_url or self.meta["base_url"]).rstrip("/")
        self.model = config.model or self.meta["default_model"]
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT

    @abstractmethod
    async def generate(self, prompt: str, options: GenerationOptions) -> AIResponse: ...

    def headers(self) -> dict[str, str]:
        extra: Callable[[AIConfig], dict] | None = self.meta.get("extra_headers")
        return extra(self.config) if extra else {}

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)


class OpenAICompatibleProvider(BaseProvider):
    """openai / openrouter / volcengine: POST {base}/chat/completions, Bearer auth."""

    async def generate(self, prompt: str, options: GenerationOptions) -> AIResponse:
        messages = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            async with self._http() as http:
                client = AsyncOpenAI(
                    api_key=self.config.api_key,
                    base_url=self.base_url,
                    timeout=self.timeout,
                    max_retries=0,
                    default_headers=self.headers(),
                    http_client=http,
                )
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                )
        except APIStatusError as e:
            body = e.body if isinstance(e.body, dict) else {}
            message = body.get("message") or f"HTTP {e.status_code}"
            logger.warning("%s API error %s: %s", self.label, e.status_code, message)
            return AIResponse(text="", error=message)
        except Exception as e:
            logger.warning("%s request failed: %s", self.label, e)
            return AIResponse(text="", error=str(e) or f"{self.label} API error")

        if not response.choices:
            return AIResponse(text="")
        return AIResponse(text=response.choices[0].message.content or "")


class AnthropicProvider(BaseProvider):
    """Anthropic Messages API: x-api-key + anthropic-version, no system role used."""

    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
            **super().headers(),
        }

    async def generate(self, prompt: str, options: GenerationOptions) -> AIResponse:
        body = {
            "model": self.model,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "messages": [
                {"role": "user", "content": _with_system_prompt(prompt, options)},
            ],
        }
        try:
            async with self._http() as http:
                resp = await http.post(
                    f"{self.base_url}/messages", headers=self.headers(), json=body,
                )
        except Exception as e:
            logger.warning("%s request failed: %s", self.label, e)
            return AIResponse(text="", error=str(e) or f"{self.label} API error")

        if not resp.is_success:
            message = _error_message(resp)
            logger.warning("%s API error %s: %s", self.label, resp.status_code, message)
            return AIResponse(text="", error=message)

        try:
            blocks = resp.json().get("content") or [{}]
            text = blocks[0].get("text") or ""
        except (ValueError, AttributeError, IndexError, TypeError) as e:
            logger.warning("%s returned an unreadable body: %s", self.label, e)
            return AIResponse(text="", error=f"Invalid response from {self.label} API")
        return AIResponse(text=text)


class GeminiProvider(BaseProvider):
    """Gemini generateContent: x-goog-api-key header, system prompt inlined."""

    def headers(self) -> dict[str, str]:
        # header rather than ?key= so the key never shows up in httpx request logs
        return {"x-goog-api-key": self.config.api_key, **super().headers()}

    async def generate(self, prompt: str, options: GenerationOptions) -> AIResponse:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": _with_system_prompt(prompt, options)}]}],
            "generationConfig": {
                "temperature": options.temperature,
                "maxOutputTokens": options.max_tokens,
            },
        }
        try:
            async with self._http() as http:
                resp = await http.post(url, headers=self.headers(), json=body)
        except Exception as e:
            logger.warning("%s request failed: %s", self.label, e)
            return AIResponse(text="", error=str(e) or f"{self.label} API error")

        if not resp.is_success:
            message = _error_message(resp)
            logger.warning("%s API error %s: %s", self.label, resp.status_code, message)
            return AIResponse(text="", error=message)

        try:
            data = resp.json()
            candidates = data.get("candidates") or []
            if not candidates:
                reason = (data.get("promptFeedback") or {}).get("blockReason")
                message = f"Response blocked: {reason}" if reason else f"Empty response from {self.label} API"
                logger.warning("%s: %s", self.label, message)
                return AIResponse(text="", error=message)
            parts = (candidates[0].get("content") or {}).get("parts") or []
            text = "".join(p.get("text") or "" for p in parts)
        except (ValueError, AttributeError, IndexError, TypeError) as e:
            logger.warning("%s returned an unreadable body: %s", self.label, e)
            return AIResponse(text="", error=f"Invalid response from {self.label} API")
        return AIResponse(text=text)


STYLES: dict[str, type[BaseProvider]] = {
    "openai": OpenAICompatibleProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}


def _make_provider(config: AIConfig, **kwargs) -> BaseProvider | None:
    meta = PROVIDERS.get(config.provider)
    if meta is None:
        return None
    return STYLES[meta["style"]](config, **kwargs)


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------
_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_SPAN_RE = re.compile(r"\{[\s\S]*\}|\[[\s\S]*\]")


def extract_json(text: str) -> Any | None:
    """Parse JSON out of model output.

    Candidate order: fenced code block body, then the widest {...} or [...]
    span, then the raw text. Only the first candidate found is parsed.
    """
    match = _FENCED_RE.search(text)
    if match:
        candidate = match.group(1)
    else:
        match = _SPAN_RE.search(text)
        candidate = match.group(0) if match else text
    try:
        return json.loads(candidate)
    except ValueError as e:
        logger.warning("Failed to parse JSON response: %s", e)
        return None


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------
class AIProviderAdapter:
    """Bound to one AIConfig; dispatches to that provider's request style."""

    def __init__(
        self,
        config: AIConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.config = config
        self.provider = _make_provider(config, transport=transport, timeout=timeout)

    async def generate_text(
        self,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> AIResponse:
        if self.provider is None:
            return AIResponse(text="", error=f"Unsupported provider: {self.config.provider}")
        options = options or GenerationOptions()
        logger.debug(
            "Sending %d chars to %s (%s)",
            len(prompt), self.provider.label, self.provider.model,
        )
        return await self.provider.generate(prompt, options)

    async def generate_json(
        self,
        prompt: str,
        schema: dict | None = None,
        options: GenerationOptions | None = None,
    ) -> Any | None:
        """Ask for raw JSON and parse it; None on provider error or bad JSON.

        ``schema`` documents the expected shape for callers and is not enforced.
        """
        response = await self.generate_text(f"{prompt}\n\n{JSON_INSTRUCTION}", options)
        if response.error:
            return None
        return extract_json(response.text)
