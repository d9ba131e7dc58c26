"""Routing configuration and router construction."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Callable

from ..routing.registry import AgentRegistry, policy_for_mode
from ..routing.router import IntelligentRouter
from ..routing.sources import AgentSource, MockAgentSource, JsonAgentSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".glasswallet" / "routing_config.json"

WORKING_HOURS_MODES = ("fixed", "schedule", "always")
AGENT_SOURCES = ("mock", "json")


@dataclass
class RoutingConfig:
    """Routing settings."""

    # "fixed" checks a shared local-hour window and ignores agent schedules,
    # "schedule" uses each agent's weekly schedule and timezone
    working_hours_mode: str = "fixed"
    working_hours_start: int = 9
    working_hours_end: int = 17  # inclusive

    max_alternatives: int = 3

    # Where the initial roster comes from
    agent_source: str = "mock"
    roster_path: Optional[str] = None

    updated_at: datetime = field(default_factory=datetime.now)


class RoutingConfigManager:
    """Manage and persist routing configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager."""
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.config = self._load_config()

    def _load_config(self) -> RoutingConfig:
        """Load configuration from file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                    return RoutingConfig(
                        working_hours_mode=data.get("working_hours_mode", "fixed"),
                        working_hours_start=data.get("working_hours_start", 9),
                        working_hours_end=data.get("working_hours_end", 17),
                        max_alternatives=data.get("max_alternatives", 3),
                        agent_source=data.get("agent_source", "mock"),
                        roster_path=data.get("roster_path"),
                    )
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading routing config: {e}")

        return RoutingConfig()

    def save_config(self):
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "working_hours_mode": self.config.working_hours_mode,
            "working_hours_start": self.config.working_hours_start,
            "working_hours_end": self.config.working_hours_end,
            "max_alternatives": self.config.max_alternatives,
            "agent_source": self.config.agent_source,
            "roster_path": self.config.roster_path,
            "updated_at": self.config.updated_at.isoformat(),
        }
        with open(self.config_path, 'w') as f:
            json.dump(data, f, indent=2)

    def update_working_hours(self, mode: str, start: Optional[int] = None, end: Optional[int] = None):
        """Change how working hours are checked."""
        if mode not in WORKING_HOURS_MODES:
            raise ValueError(f"Working hours mode must be one of: {', '.join(WORKING_HOURS_MODES)}")

        start = self.config.working_hours_start if start is None else start
        end = self.config.working_hours_end if end is None else end
        if not 0 <= start <= end <= 23:
            raise ValueError("Working hours must satisfy 0 <= start <= end <= 23")

        self.config.working_hours_mode = mode
        self.config.working_hours_start = start
        self.config.working_hours_end = end
        self.config.updated_at = datetime.now()
        self.save_config()

    def set_agent_source(self, source: str, roster_path: Optional[str] = None):
        """Select where the roster is loaded from."""
        if source not in AGENT_SOURCES:
            raise ValueError(f"Agent source must be one of: {', '.join(AGENT_SOURCES)}")
        if source == "json" and not roster_path:
            raise ValueError("A roster path is required for the json agent source")

        self.config.agent_source = source
        self.config.roster_path = roster_path
        self.config.updated_at = datetime.now()
        self.save_config()


def agent_source_for(config: RoutingConfig) -> AgentSource:
    """Build the agent source named by the config."""
    if config.agent_source == "mock":
        return MockAgentSource()
    if config.agent_source == "json":
        if not config.roster_path:
            raise ValueError("roster_path is required for the json agent source")
        return JsonAgentSource(Path(config.roster_path))
    raise ValueError(f"Unknown agent source: {config.agent_source}")


def build_router(
    config: Optional[RoutingConfig] = None,
    source: Optional[AgentSource] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> IntelligentRouter:
    """Construct a registry and router from configuration."""
    config = config or RoutingConfig()
    source = source or agent_source_for(config)

    registry = AgentRegistry(
        agents=source.load_agents(),
        working_hours=policy_for_mode(
            config.working_hours_mode,
            config.working_hours_start,
            config.working_hours_end,
        ),
        clock=clock,
    )
    logger.info(f"Router ready with {len(registry)} agents from {source.name} source")

    return IntelligentRouter(registry, max_alternatives=config.max_alternatives)
