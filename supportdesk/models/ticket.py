# supportdesk/models/ticket.py
"""
Ticket table. Rows are never deleted; every mutation bumps `updated_at`.
"""

import uuid as uuid_pkg
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from ..core.constants import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TicketPriority,
    TicketStatus,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back without tzinfo; they were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Ticket(SQLModel, table=True):
    __tablename__ = "tickets"

    id: uuid_pkg.UUID = Field(default_factory=uuid_pkg.uuid4, primary_key=True)
    title: str = Field(nullable=False, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    priority: TicketPriority = Field(default=TicketPriority.MEDIUM, index=True)
    status: TicketStatus = Field(default=TicketStatus.OPEN, index=True)

    assigned_agent_id: Optional[uuid_pkg.UUID] = Field(
        default=None, foreign_key="agents.id", index=True
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
