# support_desk/ticket/schemas.py
from pydantic import BaseModel, Field

from support_desk.ticket.models import TicketStatus


class TicketBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)


class TicketCreate(TicketBase):
    status: TicketStatus = "open"


class StatusUpdate(BaseModel):
    status: TicketStatus


class ResponseCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
