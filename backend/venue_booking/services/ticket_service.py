"""
Ticket service.

Tickets store purchase-time snapshots of the event and ticket pricing.
The snapshots are written once at creation and never updated.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.models.event import Event
from venue_booking.models.ticket import Ticket, TicketStatus
from venue_booking.models.user import User
from venue_booking.schemas.ticket import TicketCreate
from venue_booking.core.errors import NotFound
from venue_booking.core.logging import get_logger

logger = get_logger(__name__)


async def create_ticket(db: AsyncSession, ticket_data: TicketCreate, caller: User) -> Ticket:
    user_id = ticket_data.user_id if ticket_data.user_id is not None else caller.id

    if await db.get(Event, ticket_data.event_id) is None:
        raise NotFound(f"Event {ticket_data.event_id} not found")
    if user_id != caller.id and await db.get(User, user_id) is None:
        raise NotFound(f"User {user_id} not found")

    ticket = Ticket(
        user_id=user_id,
        event_id=ticket_data.event_id,
        quantity=ticket_data.quantity,
        total_amount=ticket_data.total_amount,
        event_details=ticket_data.event_details.model_dump(mode="json"),
        ticket_details=ticket_data.ticket_details.model_dump(mode="json"),
        qr_code=ticket_data.qr_code,
        status=TicketStatus.ACTIVE.value,
    )
    db.add(ticket)
    await db.flush()
    await db.refresh(ticket)

    logger.info(
        "ticket_created",
        ticket_id=ticket.id,
        user_id=user_id,
        event_id=ticket.event_id,
        quantity=ticket.quantity,
    )
    return ticket


async def list_tickets(db: AsyncSession) -> list[Ticket]:
    result = await db.execute(select(Ticket).order_by(Ticket.id).execution_options(populate_existing=True))
    return list(result.scalars().all())


async def get_user_tickets(db: AsyncSession, user_id: int) -> list[Ticket]:
    """Tickets of a user with their events loaded, newest first."""
    result = await db.execute(
        select(Ticket)
        .where(Ticket.user_id == user_id)
        .order_by(Ticket.created_at.desc(), Ticket.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def delete_ticket(db: AsyncSession, ticket_id: int) -> None:
    ticket = await db.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFound(f"Ticket {ticket_id} not found")

    await db.delete(ticket)
    await db.flush()
    logger.info("ticket_deleted", ticket_id=ticket_id, user_id=ticket.user_id)
