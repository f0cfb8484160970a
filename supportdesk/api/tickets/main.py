# supportdesk/api/tickets/main.py
import uuid as uuid_pkg
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from ...core.constants import TicketPriority, TicketStatus
from ...core.exceptions import NotFoundError, ValidationError
from ...core.websockets import ConnectionManager, get_broadcaster
from ...db.engine import get_session
from ...schemas.ticket import (
    TicketCreate,
    TicketFilter,
    TicketRead,
    TicketStatusUpdate,
    TicketUpdate,
)
from ...services.ticket_service import TicketService

router = APIRouter()


# --- Service dependency ---
async def get_ticket_service(
    session: AsyncSession = Depends(get_session),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> TicketService:
    return TicketService(session, broadcaster)


# --- Endpoints ---

@router.get("/tickets", response_model=List[TicketRead])
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    priority: Optional[TicketPriority] = None,
    search: Optional[str] = None,
    assigned_to: Optional[uuid_pkg.UUID] = Query(None, alias="assignedTo"),
    service: TicketService = Depends(get_ticket_service),
):
    filters = TicketFilter(
        status=status_filter, priority=priority, search=search, assigned_to=assigned_to
    )
    return await service.list_tickets(filters)


@router.get("/tickets/{ticket_id}", response_model=TicketRead)
async def get_ticket(
    ticket_id: uuid_pkg.UUID,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        return await service.get_ticket(ticket_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/tickets", response_model=TicketRead, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    ticket_in: TicketCreate,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        return await service.create_ticket(
            ticket_in.title, ticket_in.description, ticket_in.priority
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.put("/tickets/{ticket_id}", response_model=TicketRead)
async def update_ticket(
    ticket_id: uuid_pkg.UUID,
    ticket_in: TicketUpdate,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        return await service.update_ticket(
            ticket_id,
            ticket_in.title,
            ticket_in.description,
            ticket_in.priority,
            ticket_in.status,
            ticket_in.assigned_agent_id,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/tickets/{ticket_id}/status", response_model=TicketRead)
async def set_ticket_status(
    ticket_id: uuid_pkg.UUID,
    status_in: TicketStatusUpdate,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        return await service.set_status(ticket_id, status_in.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/tickets/{ticket_id}/assign/{agent_id}", response_model=TicketRead)
async def assign_ticket(
    ticket_id: uuid_pkg.UUID,
    agent_id: uuid_pkg.UUID,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        return await service.assign(ticket_id, agent_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
