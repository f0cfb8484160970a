# supportdesk/services/agent_service.py
import logging
from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.constants import AGENT_EMAIL_MAX_LENGTH, AGENT_NAME_MAX_LENGTH
from ..core.exceptions import ValidationError
from ..models.agent import Agent
from ..schemas.ticket import AgentRead

logger = logging.getLogger(__name__)


class AgentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_agents(self) -> List[AgentRead]:
        result = await self.session.exec(select(Agent).order_by(Agent.name))
        return [AgentRead.model_validate(a) for a in result.all()]

    async def create_agent(self, name: str, email: Optional[str] = None) -> AgentRead:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Agent name is required.")
        if len(name) > AGENT_NAME_MAX_LENGTH:
            raise ValidationError(f"Agent name must be at most {AGENT_NAME_MAX_LENGTH} characters.")

        email = email.strip() if email else None
        if email and len(email) > AGENT_EMAIL_MAX_LENGTH:
            raise ValidationError(f"Agent email must be at most {AGENT_EMAIL_MAX_LENGTH} characters.")

        agent = Agent(name=name, email=email or None)
        self.session.add(agent)
        await self.session.commit()
        await self.session.refresh(agent)
        logger.info(f"Agent {agent.id} ({agent.name}) created")
        return AgentRead.model_validate(agent)
