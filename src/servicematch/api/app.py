"""
FastAPI application for ServiceMatch.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

# Configure logging to show INFO from servicematch modules
logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")
logging.getLogger("servicematch").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware

from ..core.config import default_config
from .routes import router

app = FastAPI(
    title="ServiceMatch",
    description="Adaptive questionnaire that recommends services with match scores",
    version="0.1.0",
)

# CORS for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(router)

# Resolve thresholds from the environment once, before the first request
default_config()


@app.get("/")
async def root():
    return {"message": "ServiceMatch API", "docs": "/docs"}
