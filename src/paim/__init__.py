"""
PAIM - local-first hybrid memory for conversational agents.

Package structure:
- core: Config, logging, errors, shared types
- memory: Sensory buffer, strategies, engine, consolidation loop
- storage: SQLite-backed log, graph and vector collaborators
"""

__version__ = "0.1.0"
