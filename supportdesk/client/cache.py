# supportdesk/client/cache.py
"""
Client-side state container mirroring tickets and agents for a dashboard.

Mutation entry points: load_all, apply_filters, create/update/status/assign,
and the broadcast merge. `grouped_by_status` and `stats` feed the status
columns. Server snapshots are the source of truth; nothing is
applied optimistically.
"""

import asyncio
import logging
import uuid as uuid_pkg
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
from pydantic import ValidationError as SchemaError

from ..core.constants import EventType, TicketPriority, TicketStatus
from ..core.exceptions import NotFoundError, SupportDeskError
from ..schemas.ticket import AgentRead, TicketFilter, TicketRead
from .api import SupportDeskClient
from .realtime import TicketFeed

logger = logging.getLogger(__name__)

Listener = Callable[["TicketCache"], None]


def feed_url_for(base_url: str) -> str:
    """`http://host:port/api` -> `ws://host:port/ws/tickets`."""
    url = httpx.URL(base_url)
    scheme = "wss" if url.scheme == "https" else "ws"
    netloc = url.host if url.port is None else f"{url.host}:{url.port}"
    return f"{scheme}://{netloc}/ws/tickets"


class TicketCache:
    def __init__(self, api: SupportDeskClient, feed: TicketFeed):
        self.api = api
        self.feed = feed

        self.tickets: List[TicketRead] = []
        self.agents: List[AgentRead] = []
        self.filters = TicketFilter()
        self.loading = False
        self.error: Optional[str] = None
        # Local edit buffers keyed by ticket id; broadcasts never touch them
        self.edits: Dict[uuid_pkg.UUID, TicketRead] = {}

        self._listeners: List[Listener] = []
        self._subscribed = False

    @classmethod
    def for_server(cls, base_url: str, feed_url: Optional[str] = None) -> "TicketCache":
        return cls(SupportDeskClient(base_url), TicketFeed(feed_url or feed_url_for(base_url)))

    async def __aenter__(self) -> "TicketCache":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self.feed.stop()
        await self.api.aclose()

    # --- Listeners ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Calls `listener(cache)` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in self._listeners[:]:
            listener(self)

    # --- Loading & filters ---

    async def load_all(self):
        """Replaces tickets (server-filtered) and agents, then ensures the feed is running."""
        self.loading = True
        self.error = None
        self._notify()
        try:
            tickets, agents = await asyncio.gather(
                self.api.list_tickets(self.filters), self.api.list_agents()
            )
            self.tickets = list(tickets)
            self.agents = list(agents)

            if not self._subscribed:
                self.feed.on(EventType.TICKET_UPDATED.value, self._on_ticket_updated)
                self._subscribed = True
            if not self.feed.running:
                await self.feed.start()
        except SupportDeskError as e:
            logger.warning(f"Loading tickets failed: {e.message}")
            self.error = e.message
        finally:
            self.loading = False
            self._notify()

    def apply_filters(self, **partial: Any) -> TicketFilter:
        """
        Merges `partial` (status, priority, search, assigned_to) into the
        filter state. Call `load_all` afterwards to fetch the filtered list.
        """
        self.filters = TicketFilter.model_validate({**self.filters.model_dump(), **partial})
        self._notify()
        return self.filters

    # --- Canonical list ---

    def get(self, ticket_id: uuid_pkg.UUID) -> Optional[TicketRead]:
        return next((t for t in self.tickets if t.id == ticket_id), None)

    def grouped_by_status(self) -> Dict[TicketStatus, List[TicketRead]]:
        """One column per status, in TicketStatus order. Empty columns are kept."""
        columns: Dict[TicketStatus, List[TicketRead]] = {status: [] for status in TicketStatus}
        for ticket in self.tickets:
            columns[ticket.status].append(ticket)
        return columns

    def stats(self) -> Dict[TicketStatus, int]:
        return {status: len(tickets) for status, tickets in self.grouped_by_status().items()}

    def merge(self, ticket: TicketRead):
        """Replace in place when known, otherwise prepend. Idempotent for equal snapshots."""
        for idx, existing in enumerate(self.tickets):
            if existing.id == ticket.id:
                self.tickets[idx] = ticket
                break
        else:
            self.tickets.insert(0, ticket)
        self._notify()

    def _on_ticket_updated(self, data: Any):
        try:
            ticket = TicketRead.model_validate(data)
        except SchemaError as e:
            logger.warning(f"Ignoring malformed ticket snapshot: {e}")
            return
        self.merge(ticket)

    # --- Server mutations ---

    async def create_ticket(
        self,
        title: str,
        description: Optional[str] = None,
        priority: Union[TicketPriority, str] = TicketPriority.MEDIUM,
    ) -> TicketRead:
        ticket = await self.api.create_ticket(title, description, priority)
        self.merge(ticket)
        return ticket

    async def update_ticket(self, ticket: TicketRead) -> TicketRead:
        updated = await self.api.update_ticket(ticket)
        self.merge(updated)
        return updated

    async def set_status(
        self, ticket_id: uuid_pkg.UUID, status: Union[TicketStatus, str]
    ) -> TicketRead:
        updated = await self.api.set_status(ticket_id, status)
        self.merge(updated)
        return updated

    async def assign(self, ticket_id: uuid_pkg.UUID, agent_id: uuid_pkg.UUID) -> TicketRead:
        updated = await self.api.assign(ticket_id, agent_id)
        self.merge(updated)
        return updated

    # --- Edit buffers ---

    def begin_edit(self, ticket_id: uuid_pkg.UUID) -> TicketRead:
        ticket = self.get(ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket {ticket_id} is not loaded.")
        self.edits[ticket_id] = ticket.model_copy()
        return self.edits[ticket_id]

    def edit(self, ticket_id: uuid_pkg.UUID, **changes: Any) -> TicketRead:
        if ticket_id not in self.edits:
            raise NotFoundError(f"Ticket {ticket_id} is not being edited.")
        current = self.edits[ticket_id]
        self.edits[ticket_id] = TicketRead.model_validate({**current.model_dump(), **changes})
        return self.edits[ticket_id]

    async def save_edit(self, ticket_id: uuid_pkg.UUID) -> TicketRead:
        """Sends the buffer to the server. The buffer survives a rejected save."""
        if ticket_id not in self.edits:
            raise NotFoundError(f"Ticket {ticket_id} is not being edited.")
        updated = await self.update_ticket(self.edits[ticket_id])
        del self.edits[ticket_id]
        return updated

    def discard_edit(self, ticket_id: uuid_pkg.UUID):
        self.edits.pop(ticket_id, None)
