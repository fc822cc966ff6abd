"""Domain layer: entity models, identifiers, validation rules, ordering.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
