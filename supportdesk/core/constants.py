"""
Centralized enums for ticket fields and real-time events.
Values are the wire names, so `TicketStatus("InProgress")` parses a snapshot directly.
"""

from enum import Enum, unique


@unique
class TicketStatus(str, Enum):
    """Lifecycle states of a ticket (dashboard columns)."""

    OPEN = "Open"
    IN_PROGRESS = "InProgress"
    RESOLVED = "Resolved"


@unique
class TicketPriority(str, Enum):
    """Ticket priorities, lowest first."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@unique
class EventType(str, Enum):
    """Events pushed over the real-time channel."""

    TICKET_UPDATED = "ticketUpdated"


TITLE_MAX_LENGTH = 140
DESCRIPTION_MAX_LENGTH = 4000
AGENT_NAME_MAX_LENGTH = 100
AGENT_EMAIL_MAX_LENGTH = 200
