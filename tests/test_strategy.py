"""Tests for urgency, response time and follow-up planning."""

import pytest
from datetime import datetime, timedelta

from glasswallet_routing.routing import (
    Agent,
    AgentPerformance,
    RoutingContext,
    TimeConstraints,
    UrgencyLevel,
    MockAgentSource,
)
from glasswallet_routing.routing.models import FollowUpStrategy, RoutingDecision
from glasswallet_routing.routing.strategy import (
    determine_urgency,
    estimate_response_time,
    generate_follow_up_strategy,
    generate_action_items,
    round_half_up,
)


NOW = datetime(2026, 10, 19, 10, 0)


def agent_with(response_time, active, max_leads):
    return Agent(
        id="a1",
        name="Agent One",
        email="a1@example.com",
        performance=AgentPerformance(
            avg_response_time=response_time,
            active_leads=active,
            max_leads=max_leads,
        ),
    )


def deadline_in(hours):
    return TimeConstraints(must_contact_before=NOW + timedelta(hours=hours))


class TestDetermineUrgency:
    """Tests for urgency tiers."""

    def test_explicit_priority_wins(self):
        context = RoutingContext(
            lead_id="l1",
            ai_score={"conversionProbability": 0.95},
            priority=UrgencyLevel.LOW,
        )
        assert determine_urgency(context, NOW) == UrgencyLevel.LOW

    @pytest.mark.parametrize("context,expected", [
        (RoutingContext(lead_id="l", ai_score={"conversionProbability": 0.9}), UrgencyLevel.URGENT),
        (RoutingContext(lead_id="l", anomaly_detection={"flagged": True}), UrgencyLevel.URGENT),
        (RoutingContext(lead_id="l", ai_score={"conversionProbability": 0.8}), UrgencyLevel.HIGH),
        (RoutingContext(lead_id="l", features={"income": 100000}), UrgencyLevel.HIGH),
        (RoutingContext(lead_id="l", features={"creditScore": 800}), UrgencyLevel.HIGH),
        (RoutingContext(lead_id="l", tags=["high_quality"]), UrgencyLevel.MEDIUM),
        (RoutingContext(lead_id="l", tags=["excellent_credit"]), UrgencyLevel.MEDIUM),
        (RoutingContext(lead_id="l", features={"income": 99999, "creditScore": 799}), UrgencyLevel.LOW),
        (RoutingContext(lead_id="l", anomaly_detection={"flagged": False}), UrgencyLevel.LOW),
    ])
    def test_signal_tiers(self, context, expected):
        assert determine_urgency(context, NOW) == expected

    def test_anomaly_beats_high_value(self):
        context = RoutingContext(
            lead_id="l1",
            features={"income": 150000},
            anomaly_detection={"flagged": True},
        )
        assert determine_urgency(context, NOW) == UrgencyLevel.URGENT

    def test_deadline_within_two_hours(self):
        context = RoutingContext(lead_id="l1", time_constraints=deadline_in(1.5))
        assert determine_urgency(context, NOW) == UrgencyLevel.URGENT

    def test_deadline_within_six_hours(self):
        context = RoutingContext(lead_id="l1", time_constraints=deadline_in(5))
        assert determine_urgency(context, NOW) == UrgencyLevel.HIGH

    def test_distant_deadline_ignored(self):
        context = RoutingContext(lead_id="l1", time_constraints=deadline_in(12))
        assert determine_urgency(context, NOW) == UrgencyLevel.LOW

    def test_deadline_raises_high_to_urgent(self):
        context = RoutingContext(
            lead_id="l1",
            features={"income": 150000},
            time_constraints=deadline_in(1),
        )
        assert determine_urgency(context, NOW) == UrgencyLevel.URGENT

    def test_deadline_beats_quality_tags(self):
        context = RoutingContext(lead_id="l1", tags=["high_quality"], time_constraints=deadline_in(4))
        assert determine_urgency(context, NOW) == UrgencyLevel.HIGH

    def test_urgency_rank_order(self):
        ranks = [u.rank for u in (UrgencyLevel.LOW, UrgencyLevel.MEDIUM, UrgencyLevel.HIGH, UrgencyLevel.URGENT)]
        assert ranks == [0, 1, 2, 3]


class TestEstimateResponseTime:
    """Tests for response time estimates."""

    @pytest.mark.parametrize("urgency,expected", [
        (UrgencyLevel.URGENT, 23),  # 15 * 1.5 = 22.5
        (UrgencyLevel.HIGH, 90),
        (UrgencyLevel.MEDIUM, 180),
        (UrgencyLevel.LOW, 300),
    ])
    def test_caps_by_urgency(self, urgency, expected):
        assert estimate_response_time(agent_with(200, 5, 10), urgency) == expected

    def test_fast_agent_not_capped(self):
        sarah = MockAgentSource().load_agents()[0]
        # 12 * (1 + 8/15) = 18.4
        assert estimate_response_time(sarah, UrgencyLevel.URGENT) == 18

    def test_idle_agent(self):
        assert estimate_response_time(agent_with(40, 0, 10), UrgencyLevel.LOW) == 40

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(4.5) == 5
        assert round_half_up(4.49) == 4


class TestFollowUpStrategy:
    """Tests for follow-up plans."""

    def test_preferred_channel_wins(self):
        context = RoutingContext(
            lead_id="l1",
            features={"deviceType": "mobile"},
            preferred_contact_method="email",
        )
        strategy = generate_follow_up_strategy(context, UrgencyLevel.LOW)
        assert strategy.primary_channel == "email"

    def test_mobile_gets_sms(self):
        context = RoutingContext(lead_id="l1", features={"deviceType": "mobile"})
        assert generate_follow_up_strategy(context, UrgencyLevel.LOW).primary_channel == "sms"

    def test_default_phone(self):
        context = RoutingContext(lead_id="l1", features={"deviceType": "desktop"})
        assert generate_follow_up_strategy(context, UrgencyLevel.LOW).primary_channel == "phone"

    @pytest.mark.parametrize("urgency,timing", [
        (UrgencyLevel.URGENT, "immediate (within 15 minutes)"),
        (UrgencyLevel.HIGH, "within 1 hour"),
        (UrgencyLevel.MEDIUM, "within 4 hours"),
        (UrgencyLevel.LOW, "within 24 hours"),
    ])
    def test_timing(self, urgency, timing):
        strategy = generate_follow_up_strategy(RoutingContext(lead_id="l1"), urgency)
        assert strategy.timing == timing

    def test_fallback_actions(self):
        strategy = generate_follow_up_strategy(RoutingContext(lead_id="l1"), UrgencyLevel.LOW)
        assert strategy.fallback_actions == [
            "Send personalized email if no phone response",
            "Schedule follow-up call for next business day",
            "Add to automated nurture sequence",
        ]

    def test_anomaly_prepends_verification(self):
        context = RoutingContext(lead_id="l1", anomaly_detection={"flagged": True})
        strategy = generate_follow_up_strategy(context, UrgencyLevel.URGENT)
        assert strategy.fallback_actions[0] == "Verify lead information before contact"
        assert len(strategy.fallback_actions) == 4


class TestActionItems:
    """Tests for action item generation."""

    def _decision(self, context, urgency):
        return RoutingDecision(
            recommended_agent=MockAgentSource().load_agents()[0],
            confidence=0.7,
            reasoning=["Performance score: 63%", "Matches high-value deal specialist"],
            alternative_options=[],
            urgency_level=urgency,
            estimated_response_time=18,
            follow_up_strategy=generate_follow_up_strategy(context, urgency),
        )

    def test_primary_and_fallback_items(self):
        context = RoutingContext(lead_id="l1")
        items = generate_action_items(self._decision(context, UrgencyLevel.HIGH), context)

        assert len(items) == 4
        assert items[0].action == "Contact lead via phone"
        assert items[0].priority == UrgencyLevel.HIGH
        assert items[0].deadline == "within 1 hour"
        assert items[0].notes == "Performance score: 63%; Matches high-value deal specialist"
        assert items[1].priority == UrgencyLevel.MEDIUM
        assert items[1].deadline == "if no initial response within 2 hours"
        assert all(i.priority == UrgencyLevel.LOW for i in items[2:])
        assert all(i.assignee == "agent-1" for i in items)

    def test_anomaly_adds_fraud_check_first(self):
        context = RoutingContext(
            lead_id="l1",
            anomaly_detection={"flagged": True, "explanation": "income mismatch"},
        )
        items = generate_action_items(self._decision(context, UrgencyLevel.URGENT), context)

        assert len(items) == 6
        assert items[0].action == "Verify lead information and conduct fraud checks"
        assert items[0].priority == UrgencyLevel.URGENT
        assert items[0].notes == "Anomaly detected: income mismatch"
        assert items[1].action == "Contact lead via phone"
