"""Urgency, response time and follow-up planning for routing decisions."""

import math
from datetime import datetime
from typing import Optional, List

from .models import (
    Agent,
    RoutingContext,
    RoutingDecision,
    UrgencyLevel,
    FollowUpStrategy,
    ActionItem,
)

QUALITY_TAGS = ("high_quality", "excellent_credit")

RESPONSE_TIME_CAPS = {
    UrgencyLevel.URGENT: 15,
    UrgencyLevel.HIGH: 60,
    UrgencyLevel.MEDIUM: 120,
}

FOLLOW_UP_TIMING = {
    UrgencyLevel.URGENT: "immediate (within 15 minutes)",
    UrgencyLevel.HIGH: "within 1 hour",
    UrgencyLevel.MEDIUM: "within 4 hours",
    UrgencyLevel.LOW: "within 24 hours",
}

DEFAULT_FALLBACK_ACTIONS = [
    "Send personalized email if no phone response",
    "Schedule follow-up call for next business day",
    "Add to automated nurture sequence",
]

VERIFY_LEAD_ACTION = "Verify lead information before contact"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values."""
    return int(math.floor(value + 0.5))


def _hours_until(deadline: datetime, now: datetime) -> float:
    if deadline.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    elif deadline.tzinfo is None and now.tzinfo is not None:
        deadline = deadline.astimezone(now.tzinfo)
    return (deadline - now).total_seconds() / 3600


def determine_urgency(context: RoutingContext, now: Optional[datetime] = None) -> UrgencyLevel:
    """Derive the urgency tier for a lead.

    An explicit priority always wins. A contact deadline can only raise the
    tier computed from lead signals, never lower it. The deadline is checked
    after the high-value signals, so a lead that is HIGH on income or credit
    becomes URGENT when it must be contacted within two hours.
    """
    if context.priority:
        return context.priority

    probability = context.conversion_probability
    if probability >= 0.9 or context.anomaly_flagged:
        return UrgencyLevel.URGENT

    level = None
    credit_score = context.credit_score
    if (
        probability >= 0.8
        or context.income >= 100000
        or (credit_score is not None and credit_score >= 800)
    ):
        level = UrgencyLevel.HIGH

    constraints = context.time_constraints
    if constraints and constraints.must_contact_before:
        hours = _hours_until(constraints.must_contact_before, now or datetime.now())
        if hours <= 2:
            return UrgencyLevel.URGENT
        if hours <= 6:
            level = UrgencyLevel.HIGH

    if level:
        return level

    if context.tags and any(tag in context.tags for tag in QUALITY_TAGS):
        return UrgencyLevel.MEDIUM

    return UrgencyLevel.LOW


def estimate_response_time(agent: Agent, urgency: UrgencyLevel) -> int:
    """Expected minutes until first contact, inflated by current workload."""
    base_time = agent.performance.avg_response_time
    cap = RESPONSE_TIME_CAPS.get(urgency)
    if cap is not None:
        base_time = min(base_time, cap)

    return round_half_up(base_time * (1 + agent.performance.workload_ratio))


def generate_follow_up_strategy(context: RoutingContext, urgency: UrgencyLevel) -> FollowUpStrategy:
    """Pick the contact channel, timing and fallback steps."""
    if context.preferred_contact_method:
        channel = context.preferred_contact_method
    elif context.features.get("deviceType") == "mobile":
        channel = "sms"
    else:
        # High-probability leads get phone calls, as does everyone else
        channel = "phone"

    fallback_actions = list(DEFAULT_FALLBACK_ACTIONS)
    if context.anomaly_flagged:
        fallback_actions.insert(0, VERIFY_LEAD_ACTION)

    return FollowUpStrategy(
        primary_channel=channel,
        timing=FOLLOW_UP_TIMING[urgency],
        fallback_actions=fallback_actions,
    )


def generate_action_items(decision: RoutingDecision, context: RoutingContext) -> List[ActionItem]:
    """Turn a routing decision into tasks for the assigned agent."""
    assignee = decision.recommended_agent.id
    strategy = decision.follow_up_strategy

    items = [
        ActionItem(
            action=f"Contact lead via {strategy.primary_channel}",
            assignee=assignee,
            priority=decision.urgency_level,
            deadline=strategy.timing,
            notes="; ".join(decision.reasoning),
        )
    ]

    for index, fallback in enumerate(strategy.fallback_actions):
        items.append(ActionItem(
            action=fallback,
            assignee=assignee,
            priority=UrgencyLevel.MEDIUM if index == 0 else UrgencyLevel.LOW,
            deadline="if no initial response within 2 hours" if index == 0 else "as backup plan",
            notes="Automated fallback action",
        ))

    if context.anomaly_flagged:
        explanation = context.anomaly_detection.get("explanation", "unspecified")
        items.insert(0, ActionItem(
            action="Verify lead information and conduct fraud checks",
            assignee=assignee,
            priority=UrgencyLevel.URGENT,
            deadline="before initial contact",
            notes=f"Anomaly detected: {explanation}",
        ))

    return items
