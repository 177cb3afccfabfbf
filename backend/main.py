from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pathlib import Path
import os
import logging
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).parent / ".env")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from app.errors import AuthorizationError, CollaboratorError, TimesheetAppError
from app.routers.auth import router as auth_router
from app.routers.timesheets import router as timesheets_router
from app.routers.projects import router as projects_router
from app.routers.users import router as users_router
from app.routers.analytics import router as analytics_router, team_router

app = FastAPI(title="Timesheet Tracker API")

app.include_router(auth_router)
app.include_router(timesheets_router)
app.include_router(projects_router)
app.include_router(users_router)
app.include_router(analytics_router)
app.include_router(team_router)


@app.exception_handler(TimesheetAppError)
def handle_domain_error(request: Request, exc: TimesheetAppError):
    if isinstance(exc, AuthorizationError):
        logger.warning("Denied %s %s: %s", request.method, request.url.path, exc.message)
    elif isinstance(exc, CollaboratorError):
        logger.error("Backend failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in CORS_ORIGINS],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True}
