"""
Chat model factory for note summaries.

The provider is picked from settings (LLM_PROVIDER=gemini | openai | groq);
provider packages are imported lazily so only the configured one has to be
installed.
"""

import logging

from langchain_core.language_models import BaseChatModel

from rememberly.config import Settings, get_settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("gemini", "openai", "groq")


def _model_options(settings: Settings) -> dict:
    """Options every provider's chat model accepts."""
    return {
        "model": settings.LLM_MODEL,
        "temperature": settings.LLM_TEMPERATURE,
        "timeout": float(settings.LLM_TIMEOUT),
        "max_retries": settings.LLM_MAX_RETRIES,
    }


def create_llm(settings: Settings | None = None) -> BaseChatModel:
    """Chat model used by the summarizer.

    Raises:
        ValueError: If the provider is not supported.
    """
    settings = settings or get_settings()
    provider = settings.LLM_PROVIDER.lower()
    options = _model_options(settings)

    match provider:
        case "gemini":
            from langchain_google_genai import ChatGoogleGenerativeAI
            llm = ChatGoogleGenerativeAI(google_api_key=settings.LLM_API_KEY, **options)

        case "openai":
            from langchain_openai import ChatOpenAI
            llm = ChatOpenAI(api_key=settings.LLM_API_KEY, **options)

        case "groq":
            from langchain_groq import ChatGroq
            llm = ChatGroq(api_key=settings.LLM_API_KEY, **options)

        case _:
            raise ValueError(
                f"Unknown LLM provider: '{settings.LLM_PROVIDER}'. "
                f"Supported: {', '.join(SUPPORTED_PROVIDERS)}"
            )

    logger.info(f"🤖 Summaries by {provider}:{settings.LLM_MODEL}")
    return llm
