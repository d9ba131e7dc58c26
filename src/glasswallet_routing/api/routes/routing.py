"""Lead routing and agent administration routes."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from ...routing.errors import RoutingError
from ...routing.router import IntelligentRouter
from ...routing.strategy import generate_action_items
from ..schemas.routing import (
    RouteLeadRequest,
    AgentStatusUpdate,
    error_detail,
    serialize_decision,
    serialize_agent,
    serialize_action_item,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/routing", tags=["routing"])

VALID_STATUSES = ["available", "busy", "offline", "break"]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_router(request: Request) -> IntelligentRouter:
    return request.app.state.router


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail=error_detail("INVALID_REQUEST", "Invalid JSON body"))
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail=error_detail("INVALID_REQUEST", "Body must be a JSON object"))
    return body


@router.post("/route")
async def route_lead(request: Request):
    """Route a lead to the best-matching agent."""
    body = await _json_body(request)

    if not body.get("leadId") or not body.get("features"):
        raise HTTPException(
            status_code=400,
            detail=error_detail("INVALID_REQUEST", "Lead ID and features are required"),
        )

    try:
        payload = RouteLeadRequest.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=error_detail("INVALID_REQUEST", str(e)))

    context = payload.to_context()
    routing = _get_router(request)

    try:
        decision = routing.route_lead(context)
    except RoutingError as e:
        logger.warning(f"Routing failed for lead {context.lead_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail=error_detail("ROUTING_ERROR", "Failed to route lead intelligently"),
        )
    except Exception:
        logger.exception(f"Unexpected error routing lead {context.lead_id}")
        raise HTTPException(
            status_code=500,
            detail=error_detail("ROUTING_ERROR", "Failed to route lead intelligently"),
        )

    summary = routing.summarize(decision)
    ai_enhanced = context.ai_score is not None
    processing_steps = ["agent_scoring", "intelligent_matching"]
    if ai_enhanced:
        processing_steps.insert(0, "ai_analysis")

    data = serialize_decision(decision)
    data["routingSummary"] = {
        "agentMatch": summary["agent_match"],
        "responseExpectation": {
            "estimatedTime": summary["response_expectation"]["estimated_time"],
            "urgencyLevel": summary["response_expectation"]["urgency_level"],
            "primaryChannel": summary["response_expectation"]["primary_channel"],
        },
        "alternatives": summary["alternatives"],
        "aiEnhanced": ai_enhanced,
    }
    data["actionItems"] = [serialize_action_item(i) for i in generate_action_items(decision, context)]

    return {
        "success": True,
        "data": data,
        "meta": {
            "timestamp": _now_iso(),
            "leadId": context.lead_id,
            "processingSteps": processing_steps,
        },
    }


@router.get("/agents")
async def list_agents(
    request: Request,
    status: Optional[str] = None,
    includePerformance: bool = False,
):
    """List agents with workload statistics."""
    if status is not None and status not in VALID_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=error_detail("INVALID_STATUS", f"Status must be one of: {', '.join(VALID_STATUSES)}"),
        )

    routing = _get_router(request)
    agents = routing.get_all_agents()
    if status:
        agents = [a for a in agents if a.status.value == status]

    stats = routing.get_agent_statistics(status=status, include_performance=includePerformance)
    performance = None
    if includePerformance:
        perf = stats["performance"]
        performance = {
            "averageConversionRate": perf["average_conversion_rate"],
            "averageResponseTime": perf["average_response_time"],
            "averageDealValue": perf["average_deal_value"],
            "averageSatisfactionScore": perf["average_satisfaction_score"],
        }

    return {
        "success": True,
        "data": {
            "agents": [serialize_agent(a, includePerformance) for a in agents],
            "statistics": {
                "totalAgents": stats["total_agents"],
                "availableAgents": stats["available_agents"],
                "averageWorkload": stats["average_workload"],
                "totalCapacity": stats["total_capacity"],
                "currentLoad": stats["current_load"],
            },
            "performanceMetrics": performance,
        },
        "meta": {
            "timestamp": _now_iso(),
            "filters": {"status": status},
            "includePerformance": includePerformance,
        },
    }


@router.put("/agents/status")
async def update_agent_status(request: Request):
    """Change an agent's availability status."""
    body = await _json_body(request)

    if not body.get("agentId") or not body.get("status"):
        raise HTTPException(
            status_code=400,
            detail=error_detail("INVALID_REQUEST", "Agent ID and status are required"),
        )
    if body["status"] not in VALID_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=error_detail("INVALID_STATUS", f"Status must be one of: {', '.join(VALID_STATUSES)}"),
        )

    try:
        update = AgentStatusUpdate.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=error_detail("INVALID_REQUEST", str(e)))

    if not _get_router(request).update_agent_availability(update.agent_id, update.status):
        raise HTTPException(status_code=404, detail=error_detail("AGENT_NOT_FOUND", "Agent not found"))

    return {
        "success": True,
        "data": {
            "agentId": update.agent_id,
            "newStatus": update.status,
            "updatedAt": _now_iso(),
            "message": "Agent status updated successfully",
        },
    }
