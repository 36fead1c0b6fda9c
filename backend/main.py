from contextlib import asynccontextmanager

from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()
from fastapi.middleware.cors import CORSMiddleware
from database import Base, engine
import models  # noqa: F401  registers every table on Base.metadata
import os
import routers.account_groups as account_groups
import routers.app_config as app_config
import routers.business_partners as business_partners
import routers.categories as categories
import routers.documents as documents
import routers.financial_reports as financial_reports
import routers.ledger as ledger
import routers.transactions as transactions
import logging
from fastapi.openapi.utils import get_openapi
from utils.exceptions import register_exception_handlers
from utils.logging_config import configure_logging

configure_logging()

# Get a logger for this module (app.main)
logger = logging.getLogger(__name__)
logger.info("Application starting up...")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(lifespan=lifespan)

allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',')]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Business Ledger API",
        version="1.0.0",
        description="Double-entry ledger and transaction posting for small business documents",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "TenantHeader": {
            "type": "apiKey",
            "in": "header",
            "name": "X-Tenant-ID",
        }
    }
    # Every endpoint is scoped by tenant
    openapi_schema["security"] = [{"TenantHeader": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


app.include_router(account_groups.router)
app.include_router(business_partners.router)
for document_router in documents.DOCUMENT_ROUTERS:
    app.include_router(document_router)
app.include_router(categories.income_categories_router)
app.include_router(categories.expense_categories_router)
app.include_router(ledger.router)
app.include_router(financial_reports.router)
app.include_router(transactions.router)
app.include_router(app_config.router)

@app.get("/")
async def test_route():
    return {"message": "Welcome to the Business Ledger API!"}
