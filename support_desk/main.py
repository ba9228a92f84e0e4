# support_desk/main.py
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from support_desk.core.config import get_settings
from support_desk.core.errors import register_exception_handlers
from support_desk.core.logging import configure_logging
from support_desk.core.store import create_store
from support_desk.ticket.routes import router as ticket_router

# Fails fast when the store URL or token is missing
settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store client once for the process lifetime"""
    app.state.store = create_store(settings)
    logger.info("Store client ready", url=app.state.store.url)
    yield
    await app.state.store.aclose()
    logger.info("Store client closed")


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(ticket_router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


def run():
    uvicorn.run("support_desk.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
