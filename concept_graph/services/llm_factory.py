from functools import lru_cache

from langchain_groq import ChatGroq

from concept_graph.core.config import Settings, settings
from concept_graph.core.exceptions import MissingAPIKeyError
from concept_graph.core.logging import get_logger

logger = get_logger(__name__)


def build_llm(config: Settings, temperature: float = 0.0) -> ChatGroq:
    """
    Build a ChatGroq client from the given settings.

    Timeout and retries live on the client; the graph engine itself never
    retries an extraction call.

    Raises:
        MissingAPIKeyError: If groq_api_key is not configured.
    """
    if not config.groq_api_key:
        raise MissingAPIKeyError("GROQ_API_KEY")

    logger.info(f"Initialising LLM: {config.groq_model} (temp={temperature})")
    return ChatGroq(
        model=config.groq_model,
        temperature=temperature,
        api_key=config.groq_api_key,
        request_timeout=config.llm_request_timeout,
        max_retries=config.llm_max_retries,
    )


@lru_cache
def get_llm(temperature: float = 0.0) -> ChatGroq:
    """Singleton ChatGroq built from the process-wide settings."""
    return build_llm(settings, temperature)
