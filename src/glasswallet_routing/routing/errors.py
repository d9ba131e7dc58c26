"""Routing exceptions."""


class RoutingError(Exception):
    """Base class for failures to route a lead."""


class NoAgentsAvailableError(RoutingError):
    """No agent is available, has spare capacity and is within working hours."""

    def __init__(self, message: str = "No agents available for routing"):
        super().__init__(message)


class NoSuitableAgentError(RoutingError):
    """Rule filtering and scoring produced no candidate."""

    def __init__(self, lead_id: str = ""):
        self.lead_id = lead_id
        message = "No suitable agent found for lead"
        if lead_id:
            message = f"{message} {lead_id}"
        super().__init__(message)


class AgentSourceError(Exception):
    """An agent roster could not be loaded."""
