"""Routing rules that narrow the candidate agent list before scoring."""

import logging
from dataclasses import dataclass
from typing import List, Callable

from .models import Agent, RoutingContext, UrgencyLevel

logger = logging.getLogger(__name__)

Condition = Callable[[RoutingContext], bool]
AgentSelector = Callable[[List[Agent], RoutingContext], List[Agent]]


@dataclass
class RoutingRule:
    """A condition paired with an agent selector."""

    id: str
    condition: Condition
    agent_selector: AgentSelector
    priority: int  # Higher = applied first


def _top_performers(agents: List[Agent], context: RoutingContext) -> List[Agent]:
    return sorted(
        [a for a in agents if a.performance.conversion_rate >= 0.8],
        key=lambda a: a.performance.conversion_rate,
        reverse=True,
    )


def _by_workload(agents: List[Agent], context: RoutingContext) -> List[Agent]:
    return sorted(agents, key=lambda a: a.performance.workload_ratio)


def default_rules() -> List[RoutingRule]:
    """Built-in routing rules."""
    return [
        RoutingRule(
            id="high-priority-to-top-performers",
            condition=lambda ctx: ctx.priority in (UrgencyLevel.URGENT, UrgencyLevel.HIGH),
            agent_selector=_top_performers,
            priority=95,
        ),
        RoutingRule(
            id="credit-specialists",
            condition=lambda ctx: "creditScore" in ctx.features,
            agent_selector=lambda agents, ctx: [a for a in agents if a.skills.credit_specialist],
            priority=80,
        ),
        RoutingRule(
            id="new-lead-experts",
            condition=lambda ctx: ctx.is_new_lead,
            agent_selector=lambda agents, ctx: [a for a in agents if a.skills.new_lead_expert],
            priority=75,
        ),
        RoutingRule(
            id="high-value-specialists",
            condition=lambda ctx: ctx.income >= 75000,
            agent_selector=lambda agents, ctx: [a for a in agents if a.skills.high_value_deals],
            priority=85,
        ),
        # Reorders only, never removes
        RoutingRule(
            id="workload-balancing",
            condition=lambda ctx: True,
            agent_selector=_by_workload,
            priority=50,
        ),
    ]


def apply_routing_rules(
    agents: List[Agent],
    context: RoutingContext,
    rules: List[RoutingRule]
) -> List[Agent]:
    """Narrow agents through rules in descending priority.

    Each matching rule replaces the working list with its selection; a rule
    whose selection comes back empty is skipped, so the list never empties
    once it starts non-empty. Later rules may reorder what earlier rules sorted.
    """
    eligible = list(agents)

    for rule in sorted(rules, key=lambda r: r.priority, reverse=True):
        if not rule.condition(context):
            continue

        selected = rule.agent_selector(list(eligible), context)
        if selected:
            eligible = selected
            logger.debug(f"Rule {rule.id} kept {len(eligible)} agents for lead {context.lead_id}")
        else:
            logger.debug(f"Rule {rule.id} matched no agents for lead {context.lead_id}, skipped")

    return eligible
