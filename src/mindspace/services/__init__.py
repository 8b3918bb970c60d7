"""Service layer — user-facing operations returning ServiceResult.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
