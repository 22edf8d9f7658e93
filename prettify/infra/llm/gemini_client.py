"""
Gemini client built on LangChain's chat-model interface.

Pure infrastructure: it knows nothing about prompts or the prettify flow.
Every SDK failure is re-raised as an UpstreamError subclass so callers only
handle one exception family.
"""

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI

from prettify.application.ports import ModelClientPort
from prettify.domain.exceptions import (
    MissingApiKeyError,
    UpstreamAuthError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamRateLimitError,
)
from prettify.infra.config.logging_config import get_logger


class GeminiClient(ModelClientPort):
    """Shared, concurrency-safe handle to the Gemini API.

    One LangChain chat model is built lazily per model name and reused by
    every request. Calls issued after ``aclose`` fail with UpstreamError.
    """

    def __init__(
        self,
        api_key: str,
        temperature: Optional[float] = None,
        **kwargs: Any,
    ):
        if not api_key or not api_key.strip():
            raise MissingApiKeyError()

        self._api_key = api_key
        self._temperature = temperature
        self._llm_kwargs = kwargs
        self._models: Dict[str, BaseChatModel] = {}
        self._text_parser = StrOutputParser()
        self._closed = False
        self._log = get_logger("infra.llm")

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_model(self, model: str) -> BaseChatModel:
        if self._closed:
            raise UpstreamError("client is closed")

        llm = self._models.get(model)
        if llm is None:
            llm_kwargs = {"model": model, "google_api_key": self._api_key, **self._llm_kwargs}
            if self._temperature is not None:
                llm_kwargs["temperature"] = self._temperature
            llm = ChatGoogleGenerativeAI(**llm_kwargs)
            self._models[model] = llm
            self._log.info("llm.model.created", model=model)
        return llm

    @staticmethod
    def _messages(prompt: str) -> List[BaseMessage]:
        return [HumanMessage(content=prompt)]

    async def generate(self, prompt: str, model: str) -> str:
        llm = self._get_model(model)
        try:
            response = await llm.ainvoke(self._messages(prompt))
        except Exception as exc:
            raise _to_upstream_error(exc) from exc

        self._log.info("llm.invoke.text", model=model)
        return self._text_parser.invoke(response)

    async def stream(self, prompt: str, model: str) -> AsyncIterator[str]:
        llm = self._get_model(model)
        chunks = 0
        try:
            async for chunk in llm.astream(self._messages(prompt)):
                text = _content_text(chunk.content)
                if text:
                    chunks += 1
                    yield text
        except (asyncio.CancelledError, GeneratorExit):
            self._log.info("llm.stream.closed", model=model, chunks=chunks)
            raise
        except Exception as exc:
            raise _to_upstream_error(exc) from exc
        self._log.info("llm.stream.end", model=model, chunks=chunks)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._models.clear()
        self._log.info("llm.client.closed")


def _content_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text") or "")
    return "".join(parts)


def _status_code(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _to_upstream_error(exc: Exception) -> UpstreamError:
    """Classify an SDK exception, walking the cause chain for a status code."""
    if isinstance(exc, UpstreamError):
        return exc

    message = str(exc) or type(exc).__name__
    current: Optional[BaseException] = exc
    while current is not None:
        status = _status_code(current)
        if status in (401, 403):
            return UpstreamAuthError(message, status)
        if status == 429:
            return UpstreamRateLimitError(message, status)
        if status is not None:
            return UpstreamError(message, status)
        if isinstance(current, (ConnectionError, TimeoutError)):
            return UpstreamConnectionError(message)
        current = current.__cause__
    return UpstreamError(message)
