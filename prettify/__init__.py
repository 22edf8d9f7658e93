"""Prettify API: relays text or code to a generative model and returns structured JSON."""

__version__ = "1.0.0"
