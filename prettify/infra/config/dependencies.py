"""
Construction of process-wide services and FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from prettify.application.prettify_service import PrettifyService
from prettify.domain.exceptions import MissingApiKeyError
from prettify.infra.assets.prompt_template import load_prompt_template
from prettify.infra.config.settings import Settings
from prettify.infra.llm.gemini_client import GeminiClient


def build_prettify_service(settings: Settings) -> PrettifyService:
    """Create the shared service. Raises ConfigurationError on bad settings."""
    if not settings.gemini_api_key.strip():
        raise MissingApiKeyError()

    template = load_prompt_template(settings.prompt_path)
    client = GeminiClient(
        api_key=settings.gemini_api_key,
        temperature=settings.gemini_temperature,
    )
    return PrettifyService(client, template, model=settings.gemini_model)


def get_prettify_service(request: Request) -> PrettifyService:
    """Dependency returning the service created in the application lifespan."""
    return request.app.state.prettify_service


PrettifyServiceDep = Annotated[PrettifyService, Depends(get_prettify_service)]
