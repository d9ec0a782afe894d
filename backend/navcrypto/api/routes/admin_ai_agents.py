"""
Admin AI Agent API Routes

Agents are a fixed catalog; their state is derived from ai_tasks rows.

Endpoints:
- GET /api/admin/ai-agents: Agents with task rollups, recent activity, stats
- POST /api/admin/ai-agents/tasks: Assign a task to an agent
- POST /api/admin/ai-agents/{agent_type}/toggle: Pause an active agent / resume an idle one
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from supabase import Client

from ...auth.session import CurrentUser, require_admin
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...models import AgentType
from ...services import ai_tasks
from .schemas import (
    AgentToggleResponse,
    AgentsOverviewResponse,
    AssignTaskRequest,
    ErrorResponse,
    TaskDetailResponse,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/admin/ai-agents",
    tags=["admin-ai-agents"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get("", response_model=AgentsOverviewResponse)
async def list_agents(
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> AgentsOverviewResponse:
    try:
        return AgentsOverviewResponse(**ai_tasks.agents_overview(client))

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading agents: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load agents"
        )


@router.post(
    "/tasks",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Task description missing"}},
)
async def assign_task(
    request_data: AssignTaskRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> TaskDetailResponse:
    """Create a pending task labelled with the agent type. Nothing is executed."""
    try:
        task = ai_tasks.assign_task(client, request_data.agent_type, request_data.task_description, admin.id)
        return TaskDetailResponse(task=task)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error assigning task: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to assign task. Please try again."
        )


@router.post(
    "/{agent_type}/toggle",
    response_model=AgentToggleResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown agent"}},
)
async def toggle_agent(
    agent_type: AgentType,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> AgentToggleResponse:
    """
    Pause or resume an agent.

    Active (some task in_progress): every in_progress task goes back to
    pending. Idle: the newest pending task moves to in_progress.
    """
    try:
        return AgentToggleResponse(**ai_tasks.toggle_agent(client, agent_type))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error toggling agent status: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update agent"
        )
