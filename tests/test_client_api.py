"""
Tests for SupportDeskClient against the real app (ASGI transport, no network).
"""

import uuid

import httpx
import pytest

from supportdesk.client.api import SupportDeskClient
from supportdesk.core.constants import TicketPriority, TicketStatus
from supportdesk.core.exceptions import NotFoundError, SupportDeskError, ValidationError
from supportdesk.schemas.ticket import TicketFilter


@pytest.fixture
def client(api_client) -> SupportDeskClient:
    return SupportDeskClient(http_client=api_client)


@pytest.mark.asyncio
async def test_create_and_fetch(client, broadcaster):
    created = await client.create_ticket("Can't login", "Invalid credentials", TicketPriority.HIGH)

    assert created.status == TicketStatus.OPEN
    assert created.priority == TicketPriority.HIGH
    assert await client.get_ticket(created.id) == created
    assert broadcaster.events == [created.to_wire()]


@pytest.mark.asyncio
async def test_list_with_filters(client):
    login = await client.create_ticket("Can't login")
    payment = await client.create_ticket("Payment failed", priority="Critical")

    assert {t.id for t in await client.list_tickets()} == {login.id, payment.id}
    assert [t.id for t in await client.list_tickets(TicketFilter(search="login"))] == [login.id]
    assert [
        t.id for t in await client.list_tickets(TicketFilter(priority=TicketPriority.CRITICAL))
    ] == [payment.id]


@pytest.mark.asyncio
async def test_update_status_and_assign(client, agent):
    ticket = await client.create_ticket("Printer jam")

    moved = await client.set_status(ticket.id, TicketStatus.IN_PROGRESS)
    assert moved.status == TicketStatus.IN_PROGRESS

    assigned = await client.assign(ticket.id, agent.id)
    assert assigned.assigned_agent_id == agent.id

    edited = assigned.model_copy(update={"title": "Printer jam, floor 3", "status": TicketStatus.RESOLVED})
    updated = await client.update_ticket(edited)
    assert updated.title == "Printer jam, floor 3"
    assert updated.status == TicketStatus.RESOLVED
    assert updated.assigned_agent_id == agent.id


@pytest.mark.asyncio
async def test_errors_map_to_exceptions(client):
    with pytest.raises(ValidationError, match="Title is required"):
        await client.create_ticket("   ")

    with pytest.raises(NotFoundError):
        await client.get_ticket(uuid.uuid4())

    ticket = await client.create_ticket("Orphan")
    with pytest.raises(ValidationError, match="Agent not found"):
        await client.assign(ticket.id, uuid.uuid4())


@pytest.mark.asyncio
async def test_list_agents(client, agent):
    agents = await client.list_agents()
    assert [a.id for a in agents] == [agent.id]


@pytest.mark.asyncio
async def test_other_failures_raise_base_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "maintenance"})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    client = SupportDeskClient(http_client=http_client)

    with pytest.raises(SupportDeskError, match="maintenance") as exc_info:
        await client.list_agents()
    assert not isinstance(exc_info.value, (ValidationError, NotFoundError))
    await http_client.aclose()


@pytest.mark.asyncio
async def test_transport_failure_raises_base_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    client = SupportDeskClient(http_client=http_client)

    with pytest.raises(SupportDeskError, match="connection refused"):
        await client.list_tickets()
    await http_client.aclose()
