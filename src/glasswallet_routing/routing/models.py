"""Agent, routing context and routing decision models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class AgentStatus(Enum):
    """Agent availability status."""
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"
    BREAK = "break"


class UrgencyLevel(Enum):
    """Coarse lead priority tier."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return _URGENCY_ORDER.index(self)


_URGENCY_ORDER = [UrgencyLevel.LOW, UrgencyLevel.MEDIUM, UrgencyLevel.HIGH, UrgencyLevel.URGENT]


class WorkloadLevel(Enum):
    """Preferred workload for an agent."""
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


@dataclass
class AgentPerformance:
    """Performance metrics used for scoring."""

    conversion_rate: float = 0.0  # 0-1
    avg_response_time: float = 0.0  # minutes
    avg_deal_value: float = 0.0
    satisfaction_score: float = 0.0  # 1-5
    active_leads: int = 0
    max_leads: int = 0

    @property
    def workload_ratio(self) -> float:
        """Share of capacity in use; an agent without capacity counts as full."""
        if self.max_leads <= 0:
            return 1.0
        return self.active_leads / self.max_leads

    @property
    def has_capacity(self) -> bool:
        return self.active_leads < self.max_leads


@dataclass
class ScheduleSlot:
    """A weekly working window, e.g. Monday 09:00-17:00."""

    day: str
    start_time: str
    end_time: str


@dataclass
class AgentAvailability:
    """Availability status and working schedule."""

    status: AgentStatus = AgentStatus.AVAILABLE
    schedule: List[ScheduleSlot] = field(default_factory=list)
    timezone: str = "UTC"


@dataclass
class AgentPreferences:
    """Lead types and channels an agent prefers."""

    lead_types: List[str] = field(default_factory=list)
    communication_channels: List[str] = field(default_factory=list)
    workload_level: WorkloadLevel = WorkloadLevel.MODERATE


@dataclass
class AgentSkills:
    """Skill flags matched against lead characteristics."""

    credit_specialist: bool = False
    high_value_deals: bool = False
    difficult_cases: bool = False
    new_lead_expert: bool = False
    closing_expert: bool = False


@dataclass
class Agent:
    """Sales representative eligible to receive leads."""

    id: str
    name: str
    email: str
    specializations: List[str] = field(default_factory=list)
    performance: AgentPerformance = field(default_factory=AgentPerformance)
    availability: AgentAvailability = field(default_factory=AgentAvailability)
    preferences: AgentPreferences = field(default_factory=AgentPreferences)
    skills: AgentSkills = field(default_factory=AgentSkills)
    created: datetime = field(default_factory=datetime.now)
    last_active: datetime = field(default_factory=datetime.now)

    @property
    def status(self) -> AgentStatus:
        return self.availability.status

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase roster format."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "specializations": list(self.specializations),
            "performance": {
                "conversionRate": self.performance.conversion_rate,
                "avgResponseTime": self.performance.avg_response_time,
                "avgDealValue": self.performance.avg_deal_value,
                "satisfactionScore": self.performance.satisfaction_score,
                "activeLeads": self.performance.active_leads,
                "maxLeads": self.performance.max_leads,
            },
            "availability": {
                "status": self.availability.status.value,
                "schedule": [
                    {"day": s.day, "startTime": s.start_time, "endTime": s.end_time}
                    for s in self.availability.schedule
                ],
                "timezone": self.availability.timezone,
            },
            "preferences": {
                "leadTypes": list(self.preferences.lead_types),
                "communicationChannels": list(self.preferences.communication_channels),
                "workloadLevel": self.preferences.workload_level.value,
            },
            "skills": {
                "creditSpecialist": self.skills.credit_specialist,
                "highValueDeals": self.skills.high_value_deals,
                "difficultCases": self.skills.difficult_cases,
                "newLeadExpert": self.skills.new_lead_expert,
                "closingExpert": self.skills.closing_expert,
            },
            "created": self.created.isoformat(),
            "lastActive": self.last_active.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agent":
        """Build an agent from a camelCase roster entry."""
        perf = data.get("performance", {})
        avail = data.get("availability", {})
        prefs = data.get("preferences", {})
        skills = data.get("skills", {})

        agent = cls(
            id=data["id"],
            name=data["name"],
            email=data.get("email", ""),
            specializations=data.get("specializations", []),
            performance=AgentPerformance(
                conversion_rate=perf.get("conversionRate", 0.0),
                avg_response_time=perf.get("avgResponseTime", 0.0),
                avg_deal_value=perf.get("avgDealValue", 0.0),
                satisfaction_score=perf.get("satisfactionScore", 0.0),
                active_leads=perf.get("activeLeads", 0),
                max_leads=perf.get("maxLeads", 0),
            ),
            availability=AgentAvailability(
                status=AgentStatus(avail.get("status", "available")),
                schedule=[
                    ScheduleSlot(day=s["day"], start_time=s["startTime"], end_time=s["endTime"])
                    for s in avail.get("schedule", [])
                ],
                timezone=avail.get("timezone", "UTC"),
            ),
            preferences=AgentPreferences(
                lead_types=prefs.get("leadTypes", []),
                communication_channels=prefs.get("communicationChannels", []),
                workload_level=WorkloadLevel(prefs.get("workloadLevel", "moderate")),
            ),
            skills=AgentSkills(
                credit_specialist=skills.get("creditSpecialist", False),
                high_value_deals=skills.get("highValueDeals", False),
                difficult_cases=skills.get("difficultCases", False),
                new_lead_expert=skills.get("newLeadExpert", False),
                closing_expert=skills.get("closingExpert", False),
            ),
        )
        if data.get("created"):
            agent.created = datetime.fromisoformat(data["created"])
        if data.get("lastActive"):
            agent.last_active = datetime.fromisoformat(data["lastActive"])
        return agent


@dataclass
class TimeConstraints:
    """Contact deadline and preferred time for a lead."""

    must_contact_before: Optional[datetime] = None
    preferred_contact_time: Optional[str] = None


@dataclass
class RoutingContext:
    """Per-lead input to routing."""

    lead_id: str
    features: Dict[str, Any] = field(default_factory=dict)
    ai_score: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    anomaly_detection: Optional[Dict[str, Any]] = None
    priority: Optional[UrgencyLevel] = None
    preferred_contact_method: Optional[str] = None
    time_constraints: Optional[TimeConstraints] = None

    @property
    def credit_score(self) -> Optional[float]:
        return self.features.get("creditScore")

    @property
    def income(self) -> float:
        return self.features.get("income") or 0

    @property
    def is_new_lead(self) -> bool:
        """True when the lead has no previous applications."""
        return not self.features.get("previousApplications")

    @property
    def conversion_probability(self) -> float:
        if not self.ai_score:
            return 0.0
        return self.ai_score.get("conversionProbability") or 0.0

    @property
    def anomaly_flagged(self) -> bool:
        return bool(self.anomaly_detection and self.anomaly_detection.get("flagged"))


@dataclass
class ScoredAgent:
    """An agent with its routing score and reasoning trail."""

    agent: Agent
    score: float
    reasoning: str
    reasoning_points: List[str] = field(default_factory=list)


@dataclass
class AlternativeOption:
    """A runner-up agent."""

    agent: Agent
    confidence: float
    reasoning: str


@dataclass
class FollowUpStrategy:
    """How and when the lead should be contacted."""

    primary_channel: str
    timing: str
    fallback_actions: List[str] = field(default_factory=list)


@dataclass
class ActionItem:
    """A concrete follow-up task for the assigned agent."""

    action: str
    assignee: str
    priority: UrgencyLevel
    deadline: str
    notes: str = ""


@dataclass
class RoutingDecision:
    """Result of routing a lead."""

    recommended_agent: Agent
    confidence: float
    reasoning: List[str]
    alternative_options: List[AlternativeOption]
    urgency_level: UrgencyLevel
    estimated_response_time: int  # minutes
    follow_up_strategy: FollowUpStrategy
