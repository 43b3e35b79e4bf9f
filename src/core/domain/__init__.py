"""Domain models, outcomes and errors.

Why:
- Pure data structures (Pydantic v2, dataclasses) and the error taxonomy.
- The domain knows nothing about HTTP, the CLI or httpx.
"""
