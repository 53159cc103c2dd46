"""Service layer — rules, session gate, lint orchestration.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
