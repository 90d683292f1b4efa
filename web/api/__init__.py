"""FastAPI backend for the Crazy Eights web UI."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.api.routes import games
from web.api.session_manager import session_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - stop pending bot turns on shutdown."""
    logger.info(f"Starting Crazy Eights API (bot delay {session_manager.bot_delay}s)")
    yield
    for session in session_manager.list_sessions():
        session_manager.delete_session(session["id"])
    logger.info("Crazy Eights API stopped")


app = FastAPI(
    title="Crazy Eights API",
    description="API for playing Crazy Eights against two bots",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
cors_origins = [
    "http://localhost:5173",
    "http://localhost:3000",
]

# Add production frontend URL if set
prod_url = os.environ.get("FRONTEND_URL")
if prod_url:
    cors_origins.append(prod_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(games.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
