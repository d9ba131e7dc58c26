"""Agent roster sources."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from .errors import AgentSourceError
from .models import (
    Agent,
    AgentPerformance,
    AgentAvailability,
    AgentPreferences,
    AgentSkills,
    ScheduleSlot,
    WorkloadLevel,
)

logger = logging.getLogger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


class AgentSource(ABC):
    """Supplies the agents a registry starts with."""

    name: str = "base"

    @abstractmethod
    def load_agents(self) -> List[Agent]:
        """Return the roster."""
        pass


def _weekday_schedule(start: str, end: str) -> List[ScheduleSlot]:
    return [ScheduleSlot(day=day, start_time=start, end_time=end) for day in WEEKDAYS]


class MockAgentSource(AgentSource):
    """Built-in demo roster of three agents."""

    name = "mock"

    def load_agents(self) -> List[Agent]:
        return [
            Agent(
                id="agent-1",
                name="Sarah Mitchell",
                email="sarah@glasswallet.com",
                specializations=["high_value_deals", "credit_repair"],
                performance=AgentPerformance(
                    conversion_rate=0.85,
                    avg_response_time=12,
                    avg_deal_value=8500,
                    satisfaction_score=4.8,
                    active_leads=8,
                    max_leads=15,
                ),
                availability=AgentAvailability(
                    schedule=_weekday_schedule("09:00", "17:00"),
                    timezone="America/New_York",
                ),
                preferences=AgentPreferences(
                    lead_types=["high_income", "excellent_credit"],
                    communication_channels=["phone", "email"],
                    workload_level=WorkloadLevel.MODERATE,
                ),
                skills=AgentSkills(
                    credit_specialist=True,
                    high_value_deals=True,
                    closing_expert=True,
                ),
            ),
            Agent(
                id="agent-2",
                name="Michael Rodriguez",
                email="michael@glasswallet.com",
                specializations=["new_leads", "digital_marketing"],
                performance=AgentPerformance(
                    conversion_rate=0.72,
                    avg_response_time=8,
                    avg_deal_value=6200,
                    satisfaction_score=4.6,
                    active_leads=12,
                    max_leads=18,
                ),
                availability=AgentAvailability(
                    schedule=_weekday_schedule("08:00", "16:00"),
                    timezone="America/New_York",
                ),
                preferences=AgentPreferences(
                    lead_types=["digital_leads", "social_media", "new_applicant"],
                    communication_channels=["phone", "sms", "email"],
                    workload_level=WorkloadLevel.HEAVY,
                ),
                skills=AgentSkills(new_lead_expert=True),
            ),
            Agent(
                id="agent-3",
                name="Jennifer Chen",
                email="jennifer@glasswallet.com",
                specializations=["difficult_cases", "credit_challenges"],
                performance=AgentPerformance(
                    conversion_rate=0.68,
                    avg_response_time=25,
                    avg_deal_value=5800,
                    satisfaction_score=4.9,
                    active_leads=6,
                    max_leads=12,
                ),
                availability=AgentAvailability(
                    schedule=_weekday_schedule("10:00", "18:00"),
                    timezone="America/New_York",
                ),
                preferences=AgentPreferences(
                    lead_types=["credit_repair", "difficult_case", "low_credit"],
                    communication_channels=["phone", "email"],
                    workload_level=WorkloadLevel.LIGHT,
                ),
                skills=AgentSkills(
                    credit_specialist=True,
                    difficult_cases=True,
                ),
            ),
        ]


class JsonAgentSource(AgentSource):
    """Roster stored as a JSON file of camelCase agent entries."""

    name = "json"

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_agents(self) -> List[Agent]:
        if not self.path.exists():
            logger.warning(f"Agent roster {self.path} not found, starting with no agents")
            return []

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise AgentSourceError(f"Invalid agent roster {self.path}: {e}") from e

        entries = data.get("agents", []) if isinstance(data, dict) else data

        agents = []
        for entry in entries:
            try:
                agents.append(Agent.from_dict(entry))
            except (KeyError, ValueError) as e:
                raise AgentSourceError(f"Invalid agent entry in {self.path}: {e}") from e

        logger.info(f"Loaded {len(agents)} agents from {self.path}")
        return agents


def save_roster(path: Path, agents: List[Agent]):
    """Write agents to a JSON roster file readable by JsonAgentSource."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump({"agents": [a.to_dict() for a in agents]}, f, indent=2)
