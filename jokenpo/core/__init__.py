"""Core gameplay primitives (moves, outcomes, captions, commentary, round events).

Kept free of FastAPI and audio concerns so it can be reused by the API routes, the CLI, and tests.
"""
