# supportdesk/db/seed.py
"""Sample data for a fresh database. Each table is only seeded while empty."""

import logging

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.constants import TicketPriority, TicketStatus
from ..models.agent import Agent
from ..models.ticket import Ticket, utcnow

logger = logging.getLogger(__name__)

DEFAULT_AGENT = {"name": "Default Agent", "email": "agent@example.com"}

SAMPLE_TICKETS = [
    {
        "title": "Can’t login",
        "description": "User reports invalid credentials.",
        "priority": TicketPriority.HIGH,
        "status": TicketStatus.OPEN,
        "assigned": True,
    },
    {
        "title": "Payment failed",
        "description": "Stripe webhook error.",
        "priority": TicketPriority.CRITICAL,
        "status": TicketStatus.IN_PROGRESS,
        "assigned": True,
    },
    {
        "title": "Feature request: dark mode",
        "description": "Customer asks for dark theme.",
        "priority": TicketPriority.LOW,
        "status": TicketStatus.OPEN,
        "assigned": False,
    },
]


async def seed_data(session: AsyncSession) -> bool:
    """Returns True if anything was inserted."""
    inserted = False

    agent = (await session.exec(select(Agent))).first()
    if agent is None:
        agent = Agent(**DEFAULT_AGENT)
        session.add(agent)
        await session.commit()
        await session.refresh(agent)
        inserted = True
        logger.info("Seeded default agent")

    if (await session.exec(select(Ticket))).first() is None:
        now = utcnow()
        for sample in SAMPLE_TICKETS:
            session.add(
                Ticket(
                    title=sample["title"],
                    description=sample["description"],
                    priority=sample["priority"],
                    status=sample["status"],
                    assigned_agent_id=agent.id if sample["assigned"] else None,
                    created_at=now,
                    updated_at=now,
                )
            )
        await session.commit()
        inserted = True
        logger.info(f"Seeded {len(SAMPLE_TICKETS)} sample tickets")

    return inserted
