import os
import logfire

from dotenv import load_dotenv

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import PlainTextResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from contextlib import asynccontextmanager

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from models.users import Account
from models.catalog import Category, Service

from routers import auth, users, categories, services
from routers.admin import users as admin_users
from routers.admin import categories as admin_categories
from routers.admin import services as admin_services

from security.config import get_security_settings

from utils.logger import configure_logging, instrument_libraries


# Load environment variables first
load_dotenv()

# Configure logfire BEFORE creating FastAPI app
configure_logging()

SERVER_NAME = os.getenv("SERVER_NAME", "localhost")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logfire.info("Starting catalog site API...")

    get_security_settings()  # * Fail fast when a secret is missing
    instrument_libraries()

    client = AsyncIOMotorClient(
        os.getenv("DATABASE_CONNECTION_STRING")
    )  # * Connect to MongoDB

    await init_beanie(
        database=client[os.getenv("DATABASE_NAME")],
        document_models=[Account, Category, Service],
    )
    logfire.info("Database initialized successfully")

    yield

    logfire.info("Shutting down catalog site API...")
    client.close()
    logfire.info("Application shutdown complete")


app = FastAPI(
    title="Catalog Site API",
    description="Public catalog of categories and services, with an admin API for managing the catalog and user accounts.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip() for origin in os.getenv("CORS_ORIGIN", "").split(",") if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["127.0.0.1"])
app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(categories.router)
app.include_router(services.router)
app.include_router(admin_users.router)
app.include_router(admin_categories.router)
app.include_router(admin_services.router)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return f"Server is running on {SERVER_NAME}"
