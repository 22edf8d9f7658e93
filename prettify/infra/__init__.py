"""Infrastructure adapters: configuration, logging, LLM access and assets."""
