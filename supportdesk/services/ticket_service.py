# supportdesk/services/ticket_service.py
import logging
import uuid as uuid_pkg
from typing import List, Optional, Protocol, Union, Any, Dict

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, desc, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.constants import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TicketPriority,
    TicketStatus,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..models.agent import Agent
from ..models.ticket import Ticket, as_utc, utcnow
from ..schemas.ticket import TicketFilter, TicketRead

logger = logging.getLogger(__name__)


class TicketBroadcaster(Protocol):
    async def publish_ticket(self, snapshot: Dict[str, Any]) -> None: ...


def clean_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title is required.")
    if len(cleaned) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters.")
    return cleaned


def clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    cleaned = description.strip()
    if len(cleaned) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters."
        )
    return cleaned


def _coerce(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {allowed}.")


class TicketService:
    """
    Validation, filtering and mutations for tickets.

    Every successful mutation commits, then publishes exactly one snapshot to
    the broadcaster, then returns that same snapshot.
    """

    def __init__(self, session: AsyncSession, broadcaster: TicketBroadcaster):
        self.session = session
        self.broadcaster = broadcaster

    async def list_tickets(self, filters: Optional[TicketFilter] = None) -> List[TicketRead]:
        """Tickets matching every set filter field, most recently updated first."""
        filters = filters or TicketFilter()
        statement = select(Ticket)

        if filters.status:
            statement = statement.where(Ticket.status == filters.status)
        if filters.priority:
            statement = statement.where(Ticket.priority == filters.priority)
        if filters.assigned_to:
            statement = statement.where(Ticket.assigned_agent_id == filters.assigned_to)
        if filters.search and filters.search.strip():
            term = filters.search.lower()
            statement = statement.where(
                or_(
                    func.lower(col(Ticket.title)).contains(term, autoescape=True),
                    func.lower(func.coalesce(col(Ticket.description), "")).contains(
                        term, autoescape=True
                    ),
                )
            )

        statement = statement.order_by(desc(Ticket.updated_at))
        result = await self.session.exec(statement)
        return [TicketRead.model_validate(t) for t in result.all()]

    async def get_ticket(self, ticket_id: uuid_pkg.UUID) -> TicketRead:
        return TicketRead.model_validate(await self._get_or_404(ticket_id))

    async def create_ticket(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        priority: Union[TicketPriority, str] = TicketPriority.MEDIUM,
    ) -> TicketRead:
        now = utcnow()
        ticket = Ticket(
            title=clean_title(title),
            description=clean_description(description),
            priority=_coerce(TicketPriority, priority, "priority"),
            status=TicketStatus.OPEN,
            created_at=now,
            updated_at=now,
        )
        snapshot = await self._commit_and_publish(ticket)
        logger.info(f"Ticket {snapshot.id} created ({snapshot.priority.value})")
        return snapshot

    async def update_ticket(
        self,
        ticket_id: uuid_pkg.UUID,
        title: Optional[str],
        description: Optional[str],
        priority: Union[TicketPriority, str],
        status: Union[TicketStatus, str],
        assigned_agent_id: Optional[uuid_pkg.UUID] = None,
    ) -> TicketRead:
        """Overwrites every mutable field. No version check: last write wins."""
        ticket = await self._get_or_404(ticket_id)

        new_title = clean_title(title)
        new_description = clean_description(description)
        new_priority = _coerce(TicketPriority, priority, "priority")
        new_status = _coerce(TicketStatus, status, "status")
        if assigned_agent_id is not None:
            await self._get_agent_or_error(assigned_agent_id)

        ticket.title = new_title
        ticket.description = new_description
        ticket.priority = new_priority
        ticket.status = new_status
        ticket.assigned_agent_id = assigned_agent_id
        self._touch(ticket)

        snapshot = await self._commit_and_publish(ticket)
        logger.info(f"Ticket {snapshot.id} updated")
        return snapshot

    async def set_status(
        self, ticket_id: uuid_pkg.UUID, status: Union[TicketStatus, str]
    ) -> TicketRead:
        ticket = await self._get_or_404(ticket_id)
        ticket.status = _coerce(TicketStatus, status, "status")
        self._touch(ticket)

        snapshot = await self._commit_and_publish(ticket)
        logger.info(f"Ticket {snapshot.id} moved to {snapshot.status.value}")
        return snapshot

    async def assign(self, ticket_id: uuid_pkg.UUID, agent_id: uuid_pkg.UUID) -> TicketRead:
        ticket = await self._get_or_404(ticket_id)
        agent = await self._get_agent_or_error(agent_id)

        ticket.assigned_agent_id = agent.id
        self._touch(ticket)

        snapshot = await self._commit_and_publish(ticket)
        logger.info(f"Ticket {snapshot.id} assigned to agent {agent.id}")
        return snapshot

    # --- Helpers ---

    async def _get_or_404(self, ticket_id: uuid_pkg.UUID) -> Ticket:
        ticket = await self.session.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket {ticket_id} not found.")
        return ticket

    async def _get_agent_or_error(self, agent_id: uuid_pkg.UUID) -> Agent:
        agent = await self.session.get(Agent, agent_id)
        if not agent:
            raise ValidationError("Agent not found.")
        return agent

    @staticmethod
    def _touch(ticket: Ticket):
        # updated_at never moves backwards, even if the wall clock does
        ticket.updated_at = max(utcnow(), as_utc(ticket.updated_at))

    async def _commit_and_publish(self, ticket: Ticket) -> TicketRead:
        try:
            self.session.add(ticket)
            await self.session.commit()
            await self.session.refresh(ticket)
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        snapshot = TicketRead.model_validate(ticket)
        await self.broadcaster.publish_ticket(snapshot.to_wire())
        return snapshot
