"""Pydantic models and serializers for routing requests and responses."""

from datetime import datetime
from typing import Optional, Dict, Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from ...routing.models import (
    Agent,
    RoutingContext,
    RoutingDecision,
    TimeConstraints,
    UrgencyLevel,
    ActionItem,
)

Priority = Literal["low", "medium", "high", "urgent"]
ContactChannel = Literal["phone", "email", "sms", "video_call"]
AgentStatusValue = Literal["available", "busy", "offline", "break"]


class TimeConstraintsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    must_contact_before: Optional[datetime] = Field(None, alias="mustContactBefore")
    preferred_contact_time: Optional[str] = Field(None, alias="preferredContactTime")


class RouteLeadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lead_id: str = Field(..., alias="leadId")
    features: Dict[str, Any]
    priority: Optional[Priority] = None
    preferred_contact_method: Optional[ContactChannel] = Field(None, alias="preferredContactMethod")
    time_constraints: Optional[TimeConstraintsIn] = Field(None, alias="timeConstraints")
    ai_score: Optional[Dict[str, Any]] = Field(None, alias="aiScore")
    tags: Optional[List[str]] = None
    anomaly_detection: Optional[Dict[str, Any]] = Field(None, alias="anomalyDetection")

    def to_context(self) -> RoutingContext:
        constraints = None
        if self.time_constraints:
            constraints = TimeConstraints(
                must_contact_before=self.time_constraints.must_contact_before,
                preferred_contact_time=self.time_constraints.preferred_contact_time,
            )

        return RoutingContext(
            lead_id=self.lead_id,
            features=self.features,
            ai_score=self.ai_score,
            tags=self.tags,
            anomaly_detection=self.anomaly_detection,
            priority=UrgencyLevel(self.priority) if self.priority else None,
            preferred_contact_method=self.preferred_contact_method,
            time_constraints=constraints,
        )


class AgentStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(..., alias="agentId")
    status: AgentStatusValue


def error_detail(code: str, message: str) -> Dict[str, Any]:
    """Error envelope used in HTTPException details."""
    return {"success": False, "error": {"code": code, "message": message}}


def serialize_action_item(item: ActionItem) -> Dict[str, Any]:
    return {
        "action": item.action,
        "assignee": item.assignee,
        "priority": item.priority.value,
        "deadline": item.deadline,
        "notes": item.notes,
    }


def serialize_decision(decision: RoutingDecision) -> Dict[str, Any]:
    """Routing block of a route-lead response."""
    agent = decision.recommended_agent
    agent_data = agent.to_dict()
    return {
        "routing": {
            "recommendedAgent": {
                "id": agent.id,
                "name": agent.name,
                "email": agent.email,
                "specializations": agent_data["specializations"],
                "performance": agent_data["performance"],
            },
            "confidence": decision.confidence,
            "reasoning": decision.reasoning,
            "urgencyLevel": decision.urgency_level.value,
            "estimatedResponseTime": decision.estimated_response_time,
        },
        "followUpStrategy": {
            "primaryChannel": decision.follow_up_strategy.primary_channel,
            "timing": decision.follow_up_strategy.timing,
            "fallbackActions": decision.follow_up_strategy.fallback_actions,
        },
        "alternativeOptions": [
            {
                "agent": {
                    "id": alt.agent.id,
                    "name": alt.agent.name,
                    "specializations": list(alt.agent.specializations),
                },
                "confidence": alt.confidence,
                "reasoning": alt.reasoning,
            }
            for alt in decision.alternative_options
        ],
    }


def serialize_agent(agent: Agent, include_performance: bool) -> Dict[str, Any]:
    data = agent.to_dict()
    perf = agent.performance
    return {
        "id": agent.id,
        "name": agent.name,
        "email": agent.email,
        "specializations": data["specializations"],
        "availability": data["availability"],
        "performance": data["performance"] if include_performance else {
            "activeLeads": perf.active_leads,
            "maxLeads": perf.max_leads,
            "status": "available" if perf.has_capacity else "at_capacity",
        },
        "skills": data["skills"],
        "lastActive": data["lastActive"],
    }
