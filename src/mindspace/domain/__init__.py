"""Domain layer — graph state engine, geometry, and snapshot migrations.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
