"""
AI Providers

Text-generation backends behind one interface: ``generate(prompt, max_tokens)``.
Each backend is a LangChain chat model built on demand from settings; the
registry below maps provider ids to their display name, model setting,
credential and chat-model builder. A provider is enabled when its
credential is configured.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from config.settings import Settings, settings as default_settings
from models.schemas import ProviderDescriptor
from utils.errors import ProviderCallError

logger = logging.getLogger(__name__)


class TextGenerationProvider(ABC):
    """A backend able to turn one prompt into one text reply."""

    def __init__(self, descriptor: ProviderDescriptor):
        self.descriptor = descriptor

    @property
    def name(self) -> str:
        return self.descriptor.display_name

    @property
    def model(self) -> str:
        return self.descriptor.model_name

    @abstractmethod
    def generate(self, prompt: str, max_tokens: int) -> str:
        """
        Generate a reply for ``prompt``.

        Raises:
            ProviderCallError: If the backend cannot produce a reply
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.descriptor.id!r}, model={self.model!r})"


def _message_text(message: Any) -> str:
    """Extract plain text from a LangChain message (str or content blocks)."""
    content = getattr(message, "content", message)

    if isinstance(content, str):
        return content

    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)

    return str(content or "")


class LangChainProvider(TextGenerationProvider):
    """Provider adapter over a LangChain chat model."""

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        chat_model_factory: Callable[[int], Any]
    ):
        super().__init__(descriptor)
        self._chat_model_factory = chat_model_factory

    def generate(self, prompt: str, max_tokens: int) -> str:
        try:
            llm = self._chat_model_factory(max_tokens)
            response = llm.invoke(prompt)
            return _message_text(response)
        except Exception as e:
            raise ProviderCallError(self.name, str(e)) from e


# ============================================================================
# Chat model builders
# ============================================================================

def _build_openai(config: Settings, max_tokens: int):
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=config.CHATGPT_MODEL,
        openai_api_key=config.OPENAI_API_KEY,
        temperature=config.TEMPERATURE,
        max_tokens=max_tokens,
        timeout=config.PROVIDER_TIMEOUT
    )


def _build_anthropic(config: Settings, max_tokens: int):
    from langchain_anthropic import ChatAnthropic

    return ChatAnthropic(
        model=config.CLAUDE_MODEL,
        anthropic_api_key=config.ANTHROPIC_API_KEY,
        temperature=config.TEMPERATURE,
        max_tokens=max_tokens,
        timeout=config.PROVIDER_TIMEOUT
    )


def _build_google(config: Settings, max_tokens: int):
    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=config.GEMINI_MODEL,
        google_api_key=config.google_api_key,
        temperature=config.TEMPERATURE,
        max_output_tokens=max_tokens,
        timeout=config.PROVIDER_TIMEOUT
    )


def _build_perplexity(config: Settings, max_tokens: int):
    """Perplexity exposes an OpenAI-compatible chat completions API."""
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=config.PERPLEXITY_MODEL,
        openai_api_key=config.PERPLEXITY_API_KEY,
        openai_api_base=config.PERPLEXITY_BASE_URL,
        temperature=config.TEMPERATURE,
        max_tokens=max_tokens,
        timeout=config.PROVIDER_TIMEOUT
    )


@dataclass(frozen=True)
class ProviderSpec:
    id: str
    display_name: str
    model_name: Callable[[Settings], str]
    api_key: Callable[[Settings], Optional[str]]
    builder: Callable[[Settings, int], Any]


PROVIDER_REGISTRY: Dict[str, ProviderSpec] = {
    "openai": ProviderSpec(
        id="openai",
        display_name="ChatGPT",
        model_name=lambda s: s.CHATGPT_MODEL,
        api_key=lambda s: s.OPENAI_API_KEY,
        builder=_build_openai
    ),
    "anthropic": ProviderSpec(
        id="anthropic",
        display_name="Claude",
        model_name=lambda s: s.CLAUDE_MODEL,
        api_key=lambda s: s.ANTHROPIC_API_KEY,
        builder=_build_anthropic
    ),
    "google": ProviderSpec(
        id="google",
        display_name="Gemini",
        model_name=lambda s: s.GEMINI_MODEL,
        api_key=lambda s: s.google_api_key,
        builder=_build_google
    ),
    "perplexity": ProviderSpec(
        id="perplexity",
        display_name="Perplexity",
        model_name=lambda s: s.PERPLEXITY_MODEL,
        api_key=lambda s: s.PERPLEXITY_API_KEY,
        builder=_build_perplexity
    ),
}


def _is_selected(provider_id: str, config: Settings) -> bool:
    allowed = [p.lower() for p in config.ENABLED_PROVIDERS]
    return not allowed or provider_id in allowed


def _describe(entry: ProviderSpec, config: Settings) -> ProviderDescriptor:
    return ProviderDescriptor(
        id=entry.id,
        display_name=entry.display_name,
        model_name=entry.model_name(config),
        enabled=bool(entry.api_key(config)) and _is_selected(entry.id, config)
    )


def get_provider_descriptors(config: Optional[Settings] = None) -> List[ProviderDescriptor]:
    """
    Describe every registered provider.

    Args:
        config: Settings to read credentials from (default: global settings)

    Returns:
        List of ProviderDescriptor in registry order
    """
    config = config or default_settings

    return [_describe(entry, config) for entry in PROVIDER_REGISTRY.values()]


def create_provider(provider_id: str, config: Optional[Settings] = None) -> TextGenerationProvider:
    """
    Build the adapter for one registered provider.

    Raises:
        ValueError: If the provider id is unknown
    """
    config = config or default_settings
    entry = PROVIDER_REGISTRY.get(provider_id)
    if entry is None:
        raise ValueError(f"Unknown provider: {provider_id}")

    return LangChainProvider(
        _describe(entry, config),
        chat_model_factory=lambda max_tokens: entry.builder(config, max_tokens)
    )


def get_enabled_providers(config: Optional[Settings] = None) -> List[TextGenerationProvider]:
    """Build adapters for every provider whose credentials are configured."""
    config = config or default_settings

    providers = [
        create_provider(descriptor.id, config)
        for descriptor in get_provider_descriptors(config)
        if descriptor.enabled
    ]

    if providers:
        logger.info(f"Enabled providers: {', '.join(p.name for p in providers)}")
    else:
        logger.info("No AI providers configured")

    return providers
