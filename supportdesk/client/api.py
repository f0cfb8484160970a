# supportdesk/client/api.py
"""Async HTTP client for the SupportDesk REST API."""

import logging
import uuid as uuid_pkg
from typing import Any, List, Optional, Union

import httpx

from ..core.constants import TicketPriority, TicketStatus
from ..core.exceptions import NotFoundError, SupportDeskError, ValidationError
from ..schemas.ticket import AgentRead, TicketFilter, TicketRead, TicketUpdate

logger = logging.getLogger(__name__)


class SupportDeskClient:
    """
    Thin wrapper over `httpx.AsyncClient`.

    400 responses raise `ValidationError`, 404 raise `NotFoundError`, and any
    other failure raises `SupportDeskError`, each carrying the server's detail.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5182",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @property
    def base_url(self) -> httpx.URL:
        return self._client.base_url

    async def list_tickets(self, filters: Optional[TicketFilter] = None) -> List[TicketRead]:
        params = filters.to_query_params() if filters else {}
        data = await self._request("GET", "/tickets", params=params)
        return [TicketRead.model_validate(item) for item in data]

    async def get_ticket(self, ticket_id: uuid_pkg.UUID) -> TicketRead:
        return TicketRead.model_validate(await self._request("GET", f"/tickets/{ticket_id}"))

    async def create_ticket(
        self,
        title: str,
        description: Optional[str] = None,
        priority: Union[TicketPriority, str] = TicketPriority.MEDIUM,
    ) -> TicketRead:
        body = {"title": title, "description": description, "priority": TicketPriority(priority).value}
        return TicketRead.model_validate(await self._request("POST", "/tickets", json=body))

    async def update_ticket(self, ticket: TicketRead) -> TicketRead:
        body = TicketUpdate(
            title=ticket.title,
            description=ticket.description,
            priority=ticket.priority,
            status=ticket.status,
            assigned_agent_id=ticket.assigned_agent_id,
        ).to_wire()
        data = await self._request("PUT", f"/tickets/{ticket.id}", json=body)
        return TicketRead.model_validate(data)

    async def set_status(
        self, ticket_id: uuid_pkg.UUID, status: Union[TicketStatus, str]
    ) -> TicketRead:
        body = {"status": TicketStatus(status).value}
        data = await self._request("POST", f"/tickets/{ticket_id}/status", json=body)
        return TicketRead.model_validate(data)

    async def assign(self, ticket_id: uuid_pkg.UUID, agent_id: uuid_pkg.UUID) -> TicketRead:
        data = await self._request("POST", f"/tickets/{ticket_id}/assign/{agent_id}")
        return TicketRead.model_validate(data)

    async def list_agents(self) -> List[AgentRead]:
        data = await self._request("GET", "/agents")
        return [AgentRead.model_validate(item) for item in data]

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise SupportDeskError(f"Request to {path} failed: {e}") from e

        if response.is_success:
            return response.json()

        detail = self._detail(response)
        if response.status_code == 400:
            raise ValidationError(detail)
        if response.status_code == 404:
            raise NotFoundError(detail)
        logger.warning(f"{method} {path} returned {response.status_code}: {detail}")
        raise SupportDeskError(detail)

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = None
        return str(detail) if detail else f"HTTP {response.status_code}"
