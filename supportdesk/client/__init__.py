"""Client-side pieces a dashboard builds on."""
from .api import SupportDeskClient
from .cache import TicketCache
from .realtime import TicketFeed

__all__ = ["SupportDeskClient", "TicketCache", "TicketFeed"]
