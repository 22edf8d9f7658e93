"""
Prompt template loading.

The template is read once at startup and substituted per request with plain
string replacement, so JSON examples with braces inside the prompt survive
untouched.
"""

from dataclasses import dataclass
from pathlib import Path

from prettify.domain.exceptions import PromptTemplateNotFoundError
from prettify.infra.config.logging_config import get_logger

INPUT_PLACEHOLDER = "{input}"

logger = get_logger("infra.assets")


@dataclass(frozen=True)
class PromptTemplate:
    text: str

    def render(self, user_input: str) -> str:
        """Replace every ``{input}`` marker with ``user_input``."""
        return self.text.replace(INPUT_PLACEHOLDER, user_input)

    @property
    def placeholder_count(self) -> int:
        return self.text.count(INPUT_PLACEHOLDER)


def load_prompt_template(path: str) -> PromptTemplate:
    """Read a UTF-8 prompt template from ``path``."""
    template_path = Path(path)
    if not template_path.is_file():
        raise PromptTemplateNotFoundError(str(template_path))

    template = PromptTemplate(template_path.read_text(encoding="utf-8"))
    if template.placeholder_count != 1:
        logger.warning(
            "prompt_template.placeholder_count",
            path=str(template_path),
            count=template.placeholder_count,
        )
    logger.info("prompt_template.loaded", path=str(template_path))
    return template
