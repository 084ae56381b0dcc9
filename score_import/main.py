from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from score_import.auth_router import router as auth_router
from score_import.config import settings
from score_import.database import close_database, init_database
from score_import.exception_handlers import register_exception_handlers
from score_import.imports.router import router as imports_router
from score_import.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="Score Import",
    description="Score import pipeline: conversion, sessions, PBs, stats, goals and milestones",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(imports_router, prefix="/api/v1/imports", tags=["imports"])


@app.get("/api/v1/health")
async def health():
    from score_import.database import check_health

    await check_health()
    return {"status": "healthy"}
