"""Domain layer — contact models, classification rules, layout and dedup.

This layer depends only on stdlib, pydantic, networkx and rapidfuzz.
It must never import from services, infrastructure, commands, or config.
"""
