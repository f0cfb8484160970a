# supportdesk/schemas/ticket.py
"""
Wire models. Snapshots use camelCase keys and enum names, e.g.
{"id", "title", "description", "priority", "status", "assignedAgentId", "createdAt", "updatedAt"}.
"""

import uuid as uuid_pkg
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..core.constants import TicketPriority, TicketStatus
from ..models.ticket import as_utc


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys, as sent over HTTP and the WebSocket."""
        return self.model_dump(mode="json", by_alias=True)


class TicketRead(WireModel):
    """Full ticket snapshot. Used both as API response and broadcast payload."""

    id: uuid_pkg.UUID
    title: str
    description: Optional[str] = None
    priority: TicketPriority
    status: TicketStatus
    assigned_agent_id: Optional[uuid_pkg.UUID] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class AgentRead(WireModel):
    id: uuid_pkg.UUID
    name: str
    email: Optional[str] = None


# --- Request bodies ---
# Title is optional at the schema level so a missing title reaches the
# service and fails with the same message as a blank one.

class TicketCreate(WireModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM


class TicketUpdate(WireModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: TicketPriority
    status: TicketStatus
    assigned_agent_id: Optional[uuid_pkg.UUID] = None


class TicketStatusUpdate(WireModel):
    status: TicketStatus


class TicketFilter(WireModel):
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    search: Optional[str] = None
    assigned_to: Optional[uuid_pkg.UUID] = None

    def to_query_params(self) -> Dict[str, str]:
        """Only the set fields, keyed as the list endpoint expects."""
        return {k: v for k, v in self.to_wire().items() if v not in (None, "")}
