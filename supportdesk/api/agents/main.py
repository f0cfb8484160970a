# supportdesk/api/agents/main.py
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from ...db.engine import get_session
from ...schemas.ticket import AgentRead
from ...services.agent_service import AgentService

router = APIRouter()


async def get_agent_service(session: AsyncSession = Depends(get_session)) -> AgentService:
    return AgentService(session)


@router.get("/agents", response_model=List[AgentRead])
async def list_agents(service: AgentService = Depends(get_agent_service)):
    return await service.list_agents()
