"""Intelligent lead routing: rule filtering, agent scoring and decision assembly."""

import logging
from typing import Optional, List, Dict, Any, Union

from .errors import NoAgentsAvailableError, NoSuitableAgentError
from .models import (
    Agent,
    AgentStatus,
    RoutingContext,
    RoutingDecision,
    AlternativeOption,
)
from .registry import AgentRegistry
from .rules import RoutingRule, default_rules, apply_routing_rules
from .scorer import RoutingScorer
from .strategy import (
    determine_urgency,
    estimate_response_time,
    generate_follow_up_strategy,
    round_half_up,
)

logger = logging.getLogger(__name__)


class IntelligentRouter:
    """Route leads to the best-matching available agent."""

    def __init__(
        self,
        registry: AgentRegistry,
        rules: Optional[List[RoutingRule]] = None,
        scorer: Optional[RoutingScorer] = None,
        max_alternatives: int = 3,
    ):
        """Initialize router around an explicitly constructed registry."""
        self.registry = registry
        self.rules = list(rules) if rules is not None else default_rules()
        self.scorer = scorer or RoutingScorer(clock=registry.clock)
        self.max_alternatives = max_alternatives

    def route_lead(self, context: RoutingContext) -> RoutingDecision:
        """Pick an agent for a lead.

        Raises NoAgentsAvailableError when nobody is available at all and
        NoSuitableAgentError when filtering leaves no candidate.
        """
        available = self.registry.get_available_agents()
        if not available:
            logger.warning(f"No agents available to route lead {context.lead_id}")
            raise NoAgentsAvailableError()

        eligible = apply_routing_rules(available, context, self.rules)
        ranked = self.scorer.rank(eligible, context)
        if not ranked:
            logger.warning(f"No suitable agent for lead {context.lead_id}")
            raise NoSuitableAgentError(context.lead_id)

        best = ranked[0]
        alternatives = [
            AlternativeOption(agent=s.agent, confidence=s.score, reasoning=s.reasoning)
            for s in ranked[1:1 + self.max_alternatives]
        ]

        urgency = determine_urgency(context, self.registry.clock())
        decision = RoutingDecision(
            recommended_agent=best.agent,
            confidence=best.score,
            reasoning=best.reasoning_points,
            alternative_options=alternatives,
            urgency_level=urgency,
            estimated_response_time=estimate_response_time(best.agent, urgency),
            follow_up_strategy=generate_follow_up_strategy(context, urgency),
        )

        logger.info(
            f"Routed lead {context.lead_id} to {best.agent.id} "
            f"(confidence {best.score:.2f}, urgency {urgency.value}, "
            f"ai_enhanced={context.ai_score is not None})"
        )
        return decision

    # Administration

    def add_agent(self, agent: Agent):
        self.registry.add_agent(agent)

    def remove_agent(self, agent_id: str) -> bool:
        return self.registry.remove_agent(agent_id)

    def update_agent_availability(self, agent_id: str, status: Union[AgentStatus, str]) -> bool:
        return self.registry.update_agent_availability(agent_id, status)

    def get_all_agents(self) -> List[Agent]:
        return self.registry.get_all_agents()

    def add_rule(self, rule: RoutingRule):
        """Register an extra routing rule."""
        self.rules.append(rule)
        logger.info(f"Added routing rule {rule.id} (priority {rule.priority})")

    # Reporting

    def get_agent_statistics(
        self,
        status: Optional[Union[AgentStatus, str]] = None,
        include_performance: bool = False
    ) -> Dict[str, Any]:
        """Workload and performance summary across agents."""
        all_agents = self.registry.get_all_agents()
        agents = all_agents
        if status is not None:
            status = AgentStatus(status) if not isinstance(status, AgentStatus) else status
            agents = [a for a in agents if a.status == status]

        count = len(agents)
        stats: Dict[str, Any] = {
            "total_agents": len(all_agents),
            "available_agents": len([a for a in agents if a.status == AgentStatus.AVAILABLE]),
            "average_workload": round_half_up(
                sum(a.performance.workload_ratio for a in agents) / count * 100
            ) if count else 0,
            "total_capacity": sum(a.performance.max_leads for a in agents),
            "current_load": sum(a.performance.active_leads for a in agents),
        }

        if include_performance:
            if count:
                stats["performance"] = {
                    "average_conversion_rate": round_half_up(
                        sum(a.performance.conversion_rate for a in agents) / count * 100
                    ),
                    "average_response_time": round_half_up(
                        sum(a.performance.avg_response_time for a in agents) / count
                    ),
                    "average_deal_value": round_half_up(
                        sum(a.performance.avg_deal_value for a in agents) / count
                    ),
                    "average_satisfaction_score": round_half_up(
                        sum(a.performance.satisfaction_score for a in agents) / count * 10
                    ) / 10,
                }
            else:
                stats["performance"] = {
                    "average_conversion_rate": 0,
                    "average_response_time": 0,
                    "average_deal_value": 0,
                    "average_satisfaction_score": 0.0,
                }

        return stats

    @staticmethod
    def summarize(decision: RoutingDecision) -> Dict[str, Any]:
        """Short summary of a decision for dashboards and logs."""
        agent = decision.recommended_agent
        return {
            "agent_match": {
                "name": agent.name,
                "id": agent.id,
                "confidence": round_half_up(decision.confidence * 100),
                "specializations": list(agent.specializations),
            },
            "response_expectation": {
                "estimated_time": decision.estimated_response_time,
                "urgency_level": decision.urgency_level.value,
                "primary_channel": decision.follow_up_strategy.primary_channel,
            },
            "alternatives": len(decision.alternative_options),
        }
