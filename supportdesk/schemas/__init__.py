"""Pydantic schemas package"""
from .ticket import (
    AgentRead,
    TicketCreate,
    TicketFilter,
    TicketRead,
    TicketStatusUpdate,
    TicketUpdate,
)

__all__ = [
    "AgentRead",
    "TicketCreate",
    "TicketFilter",
    "TicketRead",
    "TicketStatusUpdate",
    "TicketUpdate",
]
