"""Standalone helpers for consumers of raw model output."""

from .json_extractor import extract_output

__all__ = ["extract_output"]
