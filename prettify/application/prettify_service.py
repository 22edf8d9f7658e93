"""
Prettify orchestration: template substitution plus the model call.
"""

from contextlib import aclosing
from typing import AsyncIterator, Optional

from prettify.application.ports import ModelClientPort
from prettify.application.results import GenerationResult
from prettify.infra.assets.prompt_template import PromptTemplate
from prettify.infra.config.logging_config import get_logger

EMPTY_JSON = "{}"
DEFAULT_MODEL = "gemini-2.5-flash"


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


class PrettifyService:
    """Prettifies text or code through a generative model.

    The service owns the model client and closes it in ``aclose`` (or when
    used as an async context manager). Apart from the immutable template it
    keeps no state, so one instance serves all concurrent requests.
    """

    def __init__(
        self,
        client: ModelClientPort,
        template: PromptTemplate,
        model: str = DEFAULT_MODEL,
    ):
        self._client = client
        self._template = template
        self._model = model
        self._closed = False
        self._log = get_logger("application.prettify")

    @property
    def model(self) -> str:
        return self._model

    async def prettify(self, text: Optional[str]) -> str:
        """Return the model's JSON response, or ``"{}"`` when anything fails."""
        if is_blank(text):
            return EMPTY_JSON

        result = await self._generate(self._template.render(text))
        if not result.ok:
            self._log.warning(
                "prettify.fallback",
                error_kind=result.error_kind,
                error=str(result.error),
            )
        return result.text_or(EMPTY_JSON)

    async def prettify_stream(self, text: Optional[str]) -> AsyncIterator[str]:
        """Yield non-empty response chunks in the order the model produces them.

        Upstream failures propagate to the caller. Closing this generator
        closes the upstream stream as well.
        """
        if is_blank(text):
            return

        prompt = self._template.render(text)
        async with aclosing(self._client.stream(prompt, self._model)) as chunks:
            async for chunk in chunks:
                if chunk:
                    yield chunk

    async def _generate(self, prompt: str) -> GenerationResult:
        try:
            response = await self._client.generate(prompt, self._model)
        except Exception as exc:
            return GenerationResult.failure(exc)
        return GenerationResult.success(response)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()
        self._log.info("prettify.service.closed")

    async def __aenter__(self) -> "PrettifyService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
