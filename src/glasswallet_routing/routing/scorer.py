"""Agent scoring for lead routing.

Each agent receives a score in [0, 1] built from four weighted terms:

* performance (0.4): conversion, response speed, deal size, satisfaction and
  spare capacity. The inner blend already carries its own 0.4 conversion
  weight and the whole blend is scaled by 0.4 again.
* lead matching (0.3): credit, income and tag fit against agent skills.
* AI score (0.2): closing and new-lead expertise, only when an AI score exists.
* availability (0.1): fast responders and spare capacity for hot leads.

The score ranks candidates; it is not a calibrated probability. Weights are
provisional and kept as-is until there is conversion data to fit them against.
"""

import logging
from datetime import datetime
from typing import Optional, List, Callable

from .models import Agent, RoutingContext, ScoredAgent, UrgencyLevel
from .strategy import determine_urgency, round_half_up

logger = logging.getLogger(__name__)

PERFORMANCE_WEIGHT = 0.4
MATCHING_WEIGHT = 0.3
AI_WEIGHT = 0.2
AVAILABILITY_WEIGHT = 0.1

DEFAULT_REASONING = "Standard agent matching applied"


class RoutingScorer:
    """Score and rank agents for a single lead."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def score_agent(
        self,
        agent: Agent,
        context: RoutingContext,
        urgency: Optional[UrgencyLevel] = None
    ) -> ScoredAgent:
        """Score one agent against a lead."""
        if urgency is None:
            urgency = determine_urgency(context, self.clock())

        points: List[str] = []
        perf = agent.performance
        workload = perf.workload_ratio

        performance_score = (
            perf.conversion_rate * 0.4
            + (5 - perf.avg_response_time / 60) * 0.1
            + (perf.avg_deal_value / 10000) * 0.2
            + perf.satisfaction_score * 0.1
            + (1 - workload) * 0.2
        ) * PERFORMANCE_WEIGHT
        total = performance_score
        points.append(f"Performance score: {round_half_up(performance_score * 100)}%")

        total += self._matching_score(agent, context, points) * MATCHING_WEIGHT
        total += self._ai_score(agent, context, points) * AI_WEIGHT

        availability = 0.0
        if urgency == UrgencyLevel.URGENT and perf.avg_response_time <= 30:
            availability += 0.08
            points.append("Fast responder for urgent lead")
        if urgency in (UrgencyLevel.HIGH, UrgencyLevel.URGENT):
            availability += (1 - workload) * 0.05
            points.append(f"Low workload ({round_half_up(workload * 100)}% capacity)")
        total += availability * AVAILABILITY_WEIGHT

        score = min(1.0, max(0.0, total))
        reasoning = "; ".join(points) if points else DEFAULT_REASONING

        return ScoredAgent(agent=agent, score=score, reasoning=reasoning, reasoning_points=points)

    def _matching_score(self, agent: Agent, context: RoutingContext, points: List[str]) -> float:
        score = 0.0

        credit_score = context.credit_score
        if credit_score:
            if credit_score >= 750 and agent.skills.credit_specialist:
                score += 0.15
                points.append("Matches credit specialist for high credit score lead")
            elif credit_score < 600 and agent.skills.difficult_cases:
                score += 0.12
                points.append("Matches difficult cases specialist for challenging credit")

        if context.income >= 75000 and agent.skills.high_value_deals:
            score += 0.1
            points.append("Matches high-value deal specialist")

        if context.tags:
            lead_types = [t.lower() for t in agent.preferences.lead_types]
            relevant = [
                tag for tag in context.tags
                if any(lead_type in tag.lower() for lead_type in lead_types)
            ]
            if relevant:
                score += len(relevant) * 0.05
                points.append(f"Matches {len(relevant)} lead type preferences")

        return score

    def _ai_score(self, agent: Agent, context: RoutingContext, points: List[str]) -> float:
        if context.ai_score is None:
            return 0.0

        score = 0.0
        if context.conversion_probability >= 0.8 and agent.skills.closing_expert:
            score += 0.15
            points.append("Closing expert for high-probability conversion")

        if context.is_new_lead and agent.skills.new_lead_expert:
            score += 0.1
            points.append("New lead expert for first-time applicant")

        return score

    def rank(self, agents: List[Agent], context: RoutingContext) -> List[ScoredAgent]:
        """Score all agents and sort best first. Ties keep input order."""
        urgency = determine_urgency(context, self.clock())
        scored = [self.score_agent(agent, context, urgency) for agent in agents]
        scored.sort(key=lambda s: s.score, reverse=True)

        if scored:
            logger.debug(
                f"Ranked {len(scored)} agents for lead {context.lead_id}, "
                f"top {scored[0].agent.id} at {scored[0].score:.3f}"
            )
        return scored
