# Ledgerly backend entrypoint: invoicing, sharing and expense tracking API.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledgerly.app.api import clients
from ledgerly.app.api import expenses
from ledgerly.app.api import invoices
from ledgerly.app.api import line_item_templates
from ledgerly.app.api import login
from ledgerly.app.api import mileage
from ledgerly.app.api import public
from ledgerly.app.api import register
from ledgerly.app.api import reports
from ledgerly.app.api import settings as business_settings
from ledgerly.app.core.logging_config import configure_logging
from ledgerly.app.core.settings import get_settings
from ledgerly.app.db.base import Base
from ledgerly.app.db.session import engine

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(business_settings.router)
app.include_router(clients.router)
app.include_router(line_item_templates.router)
app.include_router(invoices.router)
app.include_router(public.router)
app.include_router(expenses.router)
app.include_router(mileage.router)
app.include_router(reports.router)


@app.get("/")
def read_root():
    return {"app": "Ledgerly backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
