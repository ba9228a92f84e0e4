# support_desk/ticket/models.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TicketStatus = Literal["open", "in-progress", "closed"]


class StoredModel(BaseModel):
    # Records are kept in the store with camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Response(StoredModel):
    id: str
    content: str
    created_at: str


class Ticket(StoredModel):
    id: str
    title: str
    description: str
    status: TicketStatus = "open"
    created_at: str
    updated_at: str
    responses: list[Response] = Field(default_factory=list)
