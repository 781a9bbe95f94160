"""Core engine: registry, toolset selection and catalog loading."""
