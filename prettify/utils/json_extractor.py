"""
Best-effort extraction of the ``output`` field from model responses.

Streamed model output arrives as an ever-growing JSON fragment that usually
cannot be parsed until generation finishes. Callers re-run the extraction on
every chunk, so this never raises: anything unusable resolves to ``None``.
"""

from __future__ import annotations

import json
import re
from typing import Optional

OUTPUT_FIELD = "output"

_OUTPUT_MARKER_RE = re.compile(re.escape(f'"{OUTPUT_FIELD}":'), re.IGNORECASE)


def extract_output(text: Optional[str]) -> Optional[str]:
    """Return the string value of ``output`` from ``text``, or None.

    Well-formed JSON is read strictly. Only when parsing fails is the text
    scanned heuristically: the value starts after the first quote following
    the ``"output":`` marker and ends at the last quote in the whole text.
    Only ``\\n`` and ``\\"`` are decoded in that case.
    Input nested too deeply to parse is treated as malformed.
    """
    if not text or not text.strip():
        return None

    try:
        document = json.loads(text)
    except (ValueError, RecursionError):
        return _scan_truncated(text)

    if isinstance(document, dict):
        value = document.get(OUTPUT_FIELD)
        if isinstance(value, str):
            return value
    return None


def _scan_truncated(text: str) -> Optional[str]:
    marker = _OUTPUT_MARKER_RE.search(text)
    if marker is None:
        return None

    open_quote = text.find('"', marker.end())
    if open_quote < 0:
        return None

    start = open_quote + 1
    end = text.rfind('"')
    if end <= start:
        return None

    return text[start:end].replace("\\n", "\n").replace('\\"', '"')
