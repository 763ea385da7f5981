"""GUI-agnostic outline engine: models, queries, session and services."""
