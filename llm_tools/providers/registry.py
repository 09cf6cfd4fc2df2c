"""Provider registry: loads providers from YAML and routes requests by model id."""

import logging
import os
from dataclasses import replace
from typing import Dict, Optional, Tuple

import yaml

from ..errors import BackendError, ConfigurationError
from .base import (
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    ModelBackend,
    ModelType,
    ProviderConfig,
)
from .ollama import OllamaProvider
from .openai_compat import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDER_TYPES = {
    "openai": OpenAIProvider,
    "custom_openai": OpenAIProvider,
    "ollama": OllamaProvider,
}


class ProviderRegistry(ModelBackend):
    """
    Registry for managing LLM providers.

    The registry is itself a ModelBackend: a model id of the form
    ``"provider:model"`` is routed to that provider, a bare model name goes to
    the default provider.
    """

    def __init__(self, default_provider: str = "openai"):
        super().__init__(ProviderConfig(provider_id="registry"))
        self.default_provider = default_provider
        self._providers: Dict[str, ModelBackend] = {}
        self._provider_configs: Dict[str, ProviderConfig] = {}

    @property
    def model_type(self) -> ModelType:
        provider = self._providers.get(self.default_provider)
        return provider.model_type if provider else ModelType.OPENAI

    def load_providers(self, config_path: str = "config/providers.yaml") -> None:
        """
        Load provider configurations from YAML file.

        Each top-level key is a provider id. Supported fields: ``type``
        (defaults to the id), ``api_key_env``, ``base_url``, ``model``,
        ``timeout``, ``max_retries``, ``temperature``, ``max_tokens``,
        ``enabled``, ``default``.

        Args:
            config_path: Path to providers.yaml

        Raises:
            ConfigurationError: If the file is unreadable or names an unknown provider type
        """
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                configs = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"failed to load providers from {config_path}: {e}") from e

        for provider_id, config_data in configs.items():
            config_data = config_data or {}
            config = ProviderConfig(
                provider_id=provider_id,
                api_key=os.getenv(config_data.get("api_key_env", "")) or None,
                base_url=config_data.get("base_url"),
                model=config_data.get("model", "gpt-3.5-turbo"),
                timeout=float(config_data.get("timeout", 30.0)),
                max_retries=int(config_data.get("max_retries", 3)),
                temperature=float(config_data.get("temperature", 0.7)),
                max_tokens=int(config_data.get("max_tokens", 1000)),
                enabled=bool(config_data.get("enabled", True)),
            )
            self._provider_configs[provider_id] = config

            if not config.enabled:
                logger.info(f"Provider {provider_id} disabled (skipping)")
                continue

            provider = self._create_provider(config_data.get("type", provider_id), config)
            if provider.validate_key():
                self.register(provider_id, provider)
                if config_data.get("default"):
                    self.default_provider = provider_id
            else:
                logger.warning(f"Provider {provider_id} failed validation (skipping)")

    def _create_provider(self, provider_type: str, config: ProviderConfig) -> ModelBackend:
        provider_class = PROVIDER_TYPES.get(provider_type)
        if not provider_class:
            raise ConfigurationError(f"Unknown provider type: {provider_type}")
        return provider_class(config)

    def register(self, provider_id: str, provider: ModelBackend) -> None:
        self._providers[provider_id] = provider
        self._provider_configs[provider_id] = provider.config
        logger.info(f"Loaded provider: {provider_id}")

    def get_provider(self, provider_id: str) -> Optional[ModelBackend]:
        return self._providers.get(provider_id)

    def get_all_providers(self) -> Dict[str, ModelBackend]:
        return self._providers.copy()

    def parse_model_id(self, model_id: str) -> Tuple[str, str]:
        """
        Split ``"provider:model"`` into (provider_id, model_name).

        A bare model name (or one whose prefix is not a loaded provider, such
        as ``"llama3:70b"``) belongs to the default provider.
        """
        if ":" in model_id:
            prefix, name = model_id.split(":", 1)
            if prefix in self._providers:
                return prefix, name
        return self.default_provider, model_id

    def _resolve(self, model_id: str) -> Tuple[ModelBackend, str]:
        provider_id, model_name = self.parse_model_id(model_id or "")
        provider = self.get_provider(provider_id)
        if provider is None:
            raise BackendError(f"Provider not loaded: {provider_id}")
        return provider, model_name or provider.config.model

    async def chat(self, request: ChatRequest) -> ChatResponse:
        provider, model_name = self._resolve(request.model)
        return await provider.chat(replace(request, model=model_name))

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        provider, model_name = self._resolve(request.model)
        return await provider.complete(replace(request, model=model_name))

    def validate_key(self) -> bool:
        return bool(self._providers)
