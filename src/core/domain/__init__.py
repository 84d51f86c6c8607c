"""Domain models and value objects.

Why:
- Pure, strict data structures (Pydantic v2 / frozen dataclasses) live here.
- The domain knows nothing about the remote client, the CLI or logging.
"""
