"""Application layer: ports and the prettify orchestration service."""
