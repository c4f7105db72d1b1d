"""Domain models, entities and errors.

Pure, strict data structures (Pydantic v2) and the error taxonomy.
The domain knows nothing about HTTP or the CLI.
"""
