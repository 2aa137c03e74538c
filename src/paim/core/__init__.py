"""
Core module - configuration, logging, errors, shared types.

Components:
- config: Settings management via pydantic-settings
- types: Shared data structures (Observation, Fact, etc.)
- errors: Typed error hierarchy with pipeline stages
- logging: Structured logging setup
"""

from paim.core.config import Settings
from paim.core.types import Fact, Observation

__all__ = ["Settings", "Observation", "Fact"]
