import logging
from typing import Optional

from app.core.config import get_ollama_base_url, get_ollama_model

logger = logging.getLogger(__name__)


def get_ollama_llm(temperature: float = 0, model: Optional[str] = None):
    """Create an Ollama LLM instance.

    Centralizes LLM creation so all modules share the same config.
    """
    from langchain_ollama import ChatOllama

    model_name = model or get_ollama_model()
    return ChatOllama(model=model_name, temperature=temperature, base_url=get_ollama_base_url())
