"""Domain layer: exceptions shared across the service."""
