"""Domain models and conventions.

- Plain, strict data structures (Pydantic v2) and the date convention.
- The domain knows nothing about HTTP or the CLI.
"""
