"""LLM package initialization."""

from taskzen.llm.factory import LLMFactory
from taskzen.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
