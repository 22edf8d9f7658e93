from dataclasses import dataclass
from typing import Optional

from prettify.domain.exceptions import UpstreamError


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a single-shot model call: either text or the failure."""

    text: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, error: Exception) -> "GenerationResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[str]:
        if self.error is None:
            return None
        if isinstance(self.error, UpstreamError):
            return self.error.kind
        return "unexpected"

    def text_or(self, default: str) -> str:
        return self.text if self.ok and self.text is not None else default
