# forms_api/main.py
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from sqlalchemy import text

from forms_api.config import AUTO_CREATE_TABLES, DEBUG, LOG_LEVEL
from forms_api.database import Base, engine
from forms_api.logging import bind_request, setup_logging
from forms_api.models import form, question, response, session, user  # noqa: F401
from forms_api.routes.forms import router as forms_router
from forms_api.routes.questions import router as questions_router
from forms_api.routes.responses import router as responses_router
from forms_api.routes.rpc import install_error_handlers
from forms_api.routes.sessions import router as sessions_router
from forms_api.routes.users import router as users_router

setup_logging(DEBUG, LOG_LEVEL)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    logger.info("forms_api_started")
    yield


app = FastAPI(title="Forms RPC Server", version="1.0.0", lifespan=lifespan)

install_error_handlers(app)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    bind_request(request_id, request.url.path.lstrip("/"))
    reply = await call_next(request)
    reply.headers["X-Request-ID"] = request_id
    return reply


app.include_router(forms_router)
app.include_router(questions_router)
app.include_router(responses_router)
app.include_router(users_router)
app.include_router(sessions_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/db-ping")
def db_ping() -> dict:
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "select_1": result}
