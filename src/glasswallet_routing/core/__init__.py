"""Configuration and router wiring."""

from .config import RoutingConfig, RoutingConfigManager, build_router, agent_source_for

__all__ = [
    "RoutingConfig",
    "RoutingConfigManager",
    "build_router",
    "agent_source_for",
]
