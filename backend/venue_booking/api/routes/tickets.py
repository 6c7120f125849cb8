"""
Ticket endpoints.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.db.session import get_db
from venue_booking.models.user import User
from venue_booking.schemas.ticket import TicketCreate, TicketCreatedResponse, TicketResponse, TicketWithEvent
from venue_booking.services.ticket_service import create_ticket, delete_ticket, get_user_tickets, list_tickets
from venue_booking.core.security import get_current_user
from venue_booking.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("", response_model=TicketCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket_endpoint(
    ticket_data: TicketCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ticket = await create_ticket(db, ticket_data, user)
    return TicketCreatedResponse(ticket=TicketResponse.model_validate(ticket))


@router.get("/user/{user_id}", response_model=list[TicketWithEvent])
async def user_tickets(user_id: int, db: AsyncSession = Depends(get_db)):
    """Tickets of a user, each with its event."""
    return await get_user_tickets(db, user_id)


@router.get("/{ticket_id}", response_model=list[TicketResponse])
async def tickets_endpoint(ticket_id: int, db: AsyncSession = Depends(get_db)):
    """
    Lists every ticket. ``ticket_id`` is accepted but not used; clients
    depend on the list-all response of this route.
    """
    logger.debug("tickets_list_all", requested_id=ticket_id)
    return await list_tickets(db)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket_endpoint(ticket_id: int, db: AsyncSession = Depends(get_db)):
    await delete_ticket(db, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
