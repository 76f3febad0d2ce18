"""Infrastructure layer: external processes."""
