# support_desk/ticket/services.py
import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import structlog
from pydantic import ValidationError

from support_desk.core.errors import TicketNotFoundError
from support_desk.core.store import RedisRestClient, StoreError
from support_desk.ticket.models import Response, Ticket, TicketStatus
from support_desk.ticket.schemas import TicketCreate

logger = structlog.get_logger()

TICKETS_KEY = "tickets"


def ticket_key(ticket_id: str) -> str:
    return f"ticket:{ticket_id}"


def _utcnow() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _isoformat(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_ts(s: str) -> datetime:
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _touch(ticket: Ticket) -> None:
    """Refresh updatedAt, always moving it forward."""
    now = _utcnow()
    previous = _parse_ts(ticket.updated_at)
    if now <= previous:
        now = previous + timedelta(milliseconds=1)
    ticket.updated_at = _isoformat(now)


async def _save(store: RedisRestClient, ticket: Ticket) -> None:
    await store.set_json(ticket_key(ticket.id), ticket.model_dump(by_alias=True))


async def create_ticket(store: RedisRestClient, payload: TicketCreate) -> Ticket:
    now = _utcnow()
    ticket = Ticket(
        id=str(uuid.uuid4()),
        title=payload.title,
        description=payload.description,
        status=payload.status,
        created_at=_isoformat(now),
        updated_at=_isoformat(now),
        responses=[],
    )
    # Record first, then index entry; no transaction spans the two
    await _save(store, ticket)
    await store.zadd(TICKETS_KEY, int(now.timestamp() * 1000), ticket.id)
    logger.info("Ticket created", ticket_id=ticket.id, status=ticket.status)
    return ticket


async def get_ticket(store: RedisRestClient, ticket_id: str) -> Ticket | None:
    data = await store.get_json(ticket_key(ticket_id))
    if data is None:
        return None
    try:
        return Ticket.model_validate(data)
    except ValidationError as e:
        raise StoreError(f"Malformed ticket record {ticket_id}") from e


async def _get_ticket_or_none(store: RedisRestClient, ticket_id: str) -> Ticket | None:
    try:
        ticket = await get_ticket(store, ticket_id)
    except StoreError as e:
        logger.error("Error processing ticket", ticket_id=ticket_id, error=str(e))
        return None
    if ticket is None:
        logger.warning("Indexed ticket has no record", ticket_id=ticket_id)
    return ticket


async def get_tickets(store: RedisRestClient, start: int = 0, end: int = -1) -> list[Ticket]:
    """Newest first. Tickets that fail to load are dropped, not fatal."""
    ids = await store.zrange(TICKETS_KEY, start, end, rev=True)
    if not ids:
        return []

    tickets = await asyncio.gather(*(_get_ticket_or_none(store, tid) for tid in ids))
    return [t for t in tickets if t is not None]


async def delete_ticket(store: RedisRestClient, ticket_id: str) -> None:
    await store.delete(ticket_key(ticket_id))
    await store.zrem(TICKETS_KEY, ticket_id)
    logger.info("Ticket deleted", ticket_id=ticket_id)


async def add_response(store: RedisRestClient, ticket_id: str, content: str) -> Response:
    ticket = await get_ticket(store, ticket_id)
    if not ticket:
        raise TicketNotFoundError(ticket_id)

    response = Response(
        id=str(uuid.uuid4()),
        content=content,
        created_at=_isoformat(_utcnow()),
    )
    ticket.responses.append(response)
    _touch(ticket)

    await _save(store, ticket)
    logger.info("Response added", ticket_id=ticket_id, response_id=response.id)
    return response


async def update_ticket_status(store: RedisRestClient, ticket_id: str, status: TicketStatus) -> Ticket:
    ticket = await get_ticket(store, ticket_id)
    if not ticket:
        raise TicketNotFoundError(ticket_id)

    ticket.status = status
    _touch(ticket)

    await _save(store, ticket)
    logger.info("Ticket status updated", ticket_id=ticket_id, status=status)
    return ticket


async def prune_index(store: RedisRestClient) -> list[str]:
    """
    Remove index entries whose ticket record is gone.

    Safe to run repeatedly; returns the ids that were removed.
    """
    ids = await store.zrange(TICKETS_KEY, 0, -1)
    if not ids:
        return []

    records = await asyncio.gather(*(store.get(ticket_key(tid)) for tid in ids))
    orphans = [tid for tid, raw in zip(ids, records) if raw is None]
    if orphans:
        await store.zrem(TICKETS_KEY, *orphans)
        logger.info("Pruned orphaned index entries", count=len(orphans), ticket_ids=orphans)
    return orphans
