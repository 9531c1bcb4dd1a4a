import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from fabric_catalog.config import Config
from fabric_catalog.db.database import db
from fabric_catalog.routers import fabrics, health, uploads
from fabric_catalog.exceptions import AppException, app_exception_handler, generic_exception_handler

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.connect()
    yield
    await db.disconnect()


app = FastAPI(
    title="Fabric Catalog API",
    version="1.0.0",
    description="Manage fabric designs and their color/pattern variants",
    lifespan=lifespan
)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(fabrics.router)
app.include_router(uploads.router)
