# supportdesk/main.py
from dotenv import load_dotenv

# Load .env BEFORE anything reads settings
load_dotenv()

import logging

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import get_settings
from .core.log_config import setup_logging
from .core.websockets import manager
from .db.engine import async_session_maker, create_db_and_tables
from .db.seed import seed_data

from .api import health
from .api.agents import main as agents_api
from .api.tickets import main as tickets_api

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="SupportDesk", version=__version__)


# --- Database Initialization ---
@app.on_event("startup")
async def on_startup():
    """Create tables and, when enabled, seed sample data."""
    await create_db_and_tables()
    logger.info("Database tables initialized")
    if settings.seed_data:
        async with async_session_maker() as session:
            await seed_data(session)


# ============================================================================
# --- CORS (dashboard dev server) ---
# ============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# --- GLOBAL EXCEPTION HANDLERS ---
# ============================================================================
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and bad enum/UUID values are plain bad requests here
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(status_code=400, content={"detail": "; ".join(problems)})


# ============================================================================
# --- REAL-TIME CHANNEL ---
# ============================================================================
@app.websocket("/ws/tickets")
async def websocket_tickets(websocket: WebSocket):
    """
    Dashboards connect once and receive a `ticketUpdated` frame after every
    successful mutation. Nothing is replayed on connect.
    """
    await manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)


# ============================================================================
# --- ROUTERS INCLUSION ---
# ============================================================================
def include_routers(application: FastAPI, prefix: str = ""):
    application.include_router(health.router, prefix=prefix)
    application.include_router(tickets_api.router, prefix=prefix, tags=["Tickets"])
    application.include_router(agents_api.router, prefix=prefix, tags=["Agents"])


include_routers(app, settings.api_prefix)
