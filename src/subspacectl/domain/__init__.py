"""Domain layer — project records, partitioning and the rewrite rule.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
