from typing import ClassVar

from causelist.classification.base import BaseRecordClassifier
from causelist.classification.classifier import RecordClassifier
from causelist.classification.example_client_adapter import ExampleClientAdapter
from causelist.classification.identifiers import RecordIdFactory
from causelist.classification.openai_client_adapter import OpenAIClientAdapter
from causelist.config.settings import Settings


class ClassifierFactory:
    """Creates the configured page classifier."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        id_factory: RecordIdFactory | None = None,
    ) -> BaseRecordClassifier:
        """Create a configured classifier from application settings."""
        provider = settings.classifier_provider.lower()
        if provider == "example":
            return RecordClassifier(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                id_factory=id_factory,
            )
        client = OpenAIClientAdapter(
            api_key=settings.classifier_api_key,
            timeout_seconds=settings.classifier_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return RecordClassifier(
            client=client,
            model=settings.classifier_model_name,
            temperature=settings.classifier_temperature,
            id_factory=id_factory,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = (settings.classifier_base_url or "").strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "classifier_base_url is required for "
                    "classifier_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown classifier provider '{provider}'. Choose from: {supported}"
        )
