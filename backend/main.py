"""
Receipt Splitter Backend API

A FastAPI backend for splitting an itemized receipt between contributors.
This module sets up the app and mounts routers - all endpoint logic is in routers/.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from exceptions import SplitError

# Import routers
from routers import receipts, assignments, breakdown


logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Receipt Splitter API",
    description="API for assigning receipt items to contributors and computing who owes what",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SplitError)
async def split_error_handler(request: Request, exc: SplitError):
    """Errors from the splitting core that a router did not translate itself."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.get("/health")
def health():
    return {"status": "ok"}


# Include routers
app.include_router(receipts.router)
app.include_router(assignments.router)
app.include_router(breakdown.router)
