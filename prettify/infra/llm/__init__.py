"""LLM infrastructure package."""

from .gemini_client import GeminiClient

__all__ = ["GeminiClient"]
