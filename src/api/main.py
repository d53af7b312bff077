"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Must be called before importing modules that read env vars at import time
load_dotenv()

# main.py is at <root>/src/api/main.py, src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.errors import http_exception_handler, request_validation_handler
from api.routes import auth, health, tasks
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Task Manager API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: ensure MongoDB indexes on startup."""
    client = get_mongodb_client()
    if client:
        db = client[DATABASE_NAME]
        if ensure_all_indexes(db):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Personal task list API: accounts, sessions and ordered tasks",
    version=VERSION,
    lifespan=lifespan,
)

# The browser client sends the token in x-auth-token, not as a cookie,
# so a wildcard origin is usable without credentials.
cors_origins_env = os.getenv("CORS_ORIGINS", "*")

if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"status": "OK", "message": "Task Manager API running"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 3000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
