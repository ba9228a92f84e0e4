# support_desk/ticket/routes.py
from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, Query
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from support_desk.core.store import RedisRestClient, get_store
from support_desk.ticket import services as ticket_service
from support_desk.ticket.models import Response, Ticket, TicketStatus
from support_desk.ticket.schemas import ResponseCreate, StatusUpdate, TicketCreate

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])

Schema = TypeVar("Schema", bound=BaseModel)


def _parse_body(schema: type[Schema], body: dict[str, Any]) -> Schema:
    try:
        return schema.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors()], body=body
        ) from e


@router.post("", response_model=Ticket, status_code=201)
async def create(ticket: TicketCreate, store: RedisRestClient = Depends(get_store)):
    return await ticket_service.create_ticket(store, ticket)


@router.get("", response_model=list[Ticket])
async def list_all(
    start: int = Query(default=0, description="First index position, newest first"),
    end: int = Query(default=-1, description="Last index position (inclusive), -1 for all"),
    status: TicketStatus | None = Query(default=None, description="Filter by status"),
    store: RedisRestClient = Depends(get_store),
):
    items = await ticket_service.get_tickets(store, start, end)
    if status:
        items = [t for t in items if t.status == status]
    return items


@router.get("/{ticket_id}", response_model=Ticket)
async def get(ticket_id: str, store: RedisRestClient = Depends(get_store)):
    ticket = await ticket_service.get_ticket(store, ticket_id)
    if not ticket:
        return JSONResponse(status_code=404, content={"error": "Ticket not found"})
    return ticket


@router.delete("/{ticket_id}", status_code=204)
async def delete(ticket_id: str, store: RedisRestClient = Depends(get_store)):
    await ticket_service.delete_ticket(store, ticket_id)


@router.patch("/{ticket_id}", response_model=Ticket | Response)
async def update(
    ticket_id: str,
    body: dict[str, Any] = Body(...),
    store: RedisRestClient = Depends(get_store),
):
    # `status` wins when both keys are present
    if "status" in body:
        payload = _parse_body(StatusUpdate, body)
        return await ticket_service.update_ticket_status(store, ticket_id, payload.status)

    if "content" in body:
        payload = _parse_body(ResponseCreate, body)
        return await ticket_service.add_response(store, ticket_id, payload.content)

    return JSONResponse(status_code=400, content={"error": "Invalid request body"})
