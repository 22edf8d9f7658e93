from typing import Optional


class PrettifyError(Exception):
    pass


class ConfigurationError(PrettifyError):
    pass


class MissingApiKeyError(ConfigurationError):
    def __init__(self, setting: str = "GEMINI_API_KEY") -> None:
        super().__init__(f"Gemini API key is missing or invalid ({setting}).")
        self.setting = setting


class PromptTemplateNotFoundError(ConfigurationError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Prompt template file not found: {path}")
        self.path = path


class EmptyInputError(PrettifyError):
    def __init__(self) -> None:
        super().__init__("Input cannot be empty.")


class UpstreamError(PrettifyError):
    """Raised when the generative model API call fails."""

    kind = "upstream"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Model API error: {message}")
        self.status_code = status_code


class UpstreamAuthError(UpstreamError):
    kind = "auth"


class UpstreamRateLimitError(UpstreamError):
    kind = "rate_limit"


class UpstreamConnectionError(UpstreamError):
    kind = "network"
