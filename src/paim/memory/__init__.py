"""
Memory module - hybrid memory engine.

Layers:
- buffer: Sensory buffer (volatile, bounded, TTL)
- distill / embedding: Pluggable strategies
- base: Log, graph and vector port contracts
- engine: Observe / Recall / Consolidate orchestration
- consolidation: Periodic consolidation task

Storage: SQLite (see paim.storage)
"""

from paim.memory.buffer import SensoryBuffer
from paim.memory.engine import MemoryEngine

__all__ = ["SensoryBuffer", "MemoryEngine"]
