"""
Application ports - abstract interfaces for external dependencies.

The prettify service only talks to the generative model through this
contract, so the Gemini adapter can be swapped for a fake in tests.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator


class ModelClientPort(ABC):
    """Abstract interface for a generative-language model client."""

    @abstractmethod
    async def generate(self, prompt: str, model: str) -> str:
        """Return the complete model response for ``prompt``."""
        pass

    @abstractmethod
    def stream(self, prompt: str, model: str) -> AsyncIterator[str]:
        """Yield the model response for ``prompt`` chunk by chunk."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release underlying connections. Must be safe to call twice."""
        pass
