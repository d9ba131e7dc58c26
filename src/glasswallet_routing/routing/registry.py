"""In-memory agent registry and working-hours policies."""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, time
from typing import Optional, List, Dict, Callable, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import Agent, AgentStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class WorkingHoursPolicy(ABC):
    """Decides whether an agent is currently working."""

    @abstractmethod
    def is_working(self, agent: Agent, now: datetime) -> bool:
        """Return True if the agent is within working hours at ``now``."""
        pass


class FixedWindowPolicy(WorkingHoursPolicy):
    """Fixed local-hour window shared by every agent.

    Ignores each agent's configured schedule and timezone; the end hour is
    inclusive, so 17:59 still counts as working for the default 9-17 window.
    """

    def __init__(self, start_hour: int = 9, end_hour: int = 17):
        self.start_hour = start_hour
        self.end_hour = end_hour

    def is_working(self, agent: Agent, now: datetime) -> bool:
        return self.start_hour <= now.hour <= self.end_hour


class ScheduleWindowPolicy(WorkingHoursPolicy):
    """Honor each agent's weekly schedule in the agent's own timezone."""

    def is_working(self, agent: Agent, now: datetime) -> bool:
        try:
            tz = ZoneInfo(agent.availability.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                f"Unknown timezone {agent.availability.timezone!r} for agent {agent.id}, using UTC"
            )
            tz = ZoneInfo("UTC")

        local = now.astimezone(tz)
        day_name = local.strftime("%A").lower()
        current = local.time()

        for slot in agent.availability.schedule:
            if slot.day.lower() != day_name:
                continue
            if time.fromisoformat(slot.start_time) <= current < time.fromisoformat(slot.end_time):
                return True
        return False


class AlwaysOpenPolicy(WorkingHoursPolicy):
    """Treat every agent as always within working hours."""

    def is_working(self, agent: Agent, now: datetime) -> bool:
        return True


class AgentRegistry:
    """Hold the set of agents eligible for routing."""

    def __init__(
        self,
        agents: Optional[List[Agent]] = None,
        working_hours: Optional[WorkingHoursPolicy] = None,
        clock: Clock = datetime.now,
    ):
        """Initialize registry, optionally seeded with agents."""
        self.working_hours = working_hours or FixedWindowPolicy()
        self.clock = clock
        self._agents: Dict[str, Agent] = {}
        self._lock = threading.RLock()

        for agent in agents or []:
            self.add_agent(agent)

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, agent_id: str) -> bool:
        return agent_id in self._agents

    def add_agent(self, agent: Agent):
        """Add or replace an agent."""
        with self._lock:
            replaced = agent.id in self._agents
            self._agents[agent.id] = agent
        logger.debug(f"{'Updated' if replaced else 'Added'} agent {agent.id}")

    def remove_agent(self, agent_id: str) -> bool:
        """Remove an agent. Returns whether it was registered."""
        with self._lock:
            if agent_id in self._agents:
                del self._agents[agent_id]
                logger.info(f"Removed agent {agent_id}")
                return True
        return False

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        return self._agents.get(agent_id)

    def update_agent_availability(
        self,
        agent_id: str,
        status: Union[AgentStatus, str]
    ) -> bool:
        """Set an agent's availability status and touch last_active."""
        if not isinstance(status, AgentStatus):
            status = AgentStatus(status)

        with self._lock:
            agent = self._agents.get(agent_id)
            if not agent:
                logger.warning(f"Cannot update availability for unknown agent {agent_id}")
                return False
            agent.availability.status = status
            agent.last_active = self.clock()

        logger.info(f"Agent {agent_id} is now {status.value}")
        return True

    def get_all_agents(self) -> List[Agent]:
        with self._lock:
            return list(self._agents.values())

    def get_available_agents(self) -> List[Agent]:
        """Agents that are available, have spare capacity and are working now."""
        now = self.clock()
        with self._lock:
            return [
                agent for agent in self._agents.values()
                if agent.status == AgentStatus.AVAILABLE
                and agent.performance.has_capacity
                and self.working_hours.is_working(agent, now)
            ]


def policy_for_mode(mode: str, start_hour: int = 9, end_hour: int = 17) -> WorkingHoursPolicy:
    """Build the working-hours policy named by a config mode."""
    if mode == "fixed":
        return FixedWindowPolicy(start_hour, end_hour)
    if mode == "schedule":
        return ScheduleWindowPolicy()
    if mode == "always":
        return AlwaysOpenPolicy()
    raise ValueError(f"Unknown working hours mode: {mode}")
