"""Lead-to-agent routing."""

from .models import (
    Agent,
    AgentStatus,
    AgentPerformance,
    AgentAvailability,
    AgentPreferences,
    AgentSkills,
    ScheduleSlot,
    RoutingContext,
    TimeConstraints,
    RoutingDecision,
    UrgencyLevel,
)
from .errors import RoutingError, NoAgentsAvailableError, NoSuitableAgentError, AgentSourceError
from .registry import AgentRegistry, FixedWindowPolicy, ScheduleWindowPolicy, AlwaysOpenPolicy
from .rules import RoutingRule, default_rules, apply_routing_rules
from .scorer import RoutingScorer
from .sources import AgentSource, MockAgentSource, JsonAgentSource
from .router import IntelligentRouter

__all__ = [
    "Agent",
    "AgentStatus",
    "AgentPerformance",
    "AgentAvailability",
    "AgentPreferences",
    "AgentSkills",
    "ScheduleSlot",
    "RoutingContext",
    "TimeConstraints",
    "RoutingDecision",
    "UrgencyLevel",
    "RoutingError",
    "NoAgentsAvailableError",
    "NoSuitableAgentError",
    "AgentSourceError",
    "AgentRegistry",
    "FixedWindowPolicy",
    "ScheduleWindowPolicy",
    "AlwaysOpenPolicy",
    "RoutingRule",
    "default_rules",
    "apply_routing_rules",
    "RoutingScorer",
    "AgentSource",
    "MockAgentSource",
    "JsonAgentSource",
    "IntelligentRouter",
]
