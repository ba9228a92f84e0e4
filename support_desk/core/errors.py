# support_desk/core/errors.py
import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from support_desk.core.store import StoreError

logger = structlog.get_logger()

INTERNAL_ERROR = {"error": "Internal Server Error"}


class TicketNotFoundError(Exception):
    def __init__(self, ticket_id: str):
        super().__init__("Ticket not found")
        self.ticket_id = ticket_id


def _validation_issues(exc: RequestValidationError) -> list:
    # ctx may carry exception instances that are not JSON serializable
    return jsonable_encoder(exc.errors(), custom_encoder={Exception: str})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_issues(exc)})


async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure", method=request.method, path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content=INTERNAL_ERROR)


async def ticket_not_found_handler(request: Request, exc: TicketNotFoundError):
    # Mutations on a missing ticket are reported like any downstream failure
    logger.warning("Ticket not found", method=request.method, ticket_id=exc.ticket_id)
    return JSONResponse(status_code=500, content=INTERNAL_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", method=request.method, path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(TicketNotFoundError, ticket_not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
