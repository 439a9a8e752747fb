"""
Invoice Dashboard API Server
Core functionality: dashboard overview queries, paginated invoice table, invoice form actions
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_dashboard import __version__
from invoice_dashboard.config.settings import ALLOWED_ORIGINS, INVOICES_PATH
from invoice_dashboard.database.connection import init_database, close_database
from invoice_dashboard.api.routes import health, dashboard, customers, invoices
from invoice_dashboard.utils.error_handling import setup_error_handling

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    await init_database()
    yield
    await close_database()

# FastAPI app initialization
app = FastAPI(
    title="Invoice Dashboard Backend",
    description="Backend API for the invoices and customers dashboard",
    version=__version__,
    lifespan=lifespan
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["ETag", "X-Trace-ID"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include API routes
app.include_router(health.router, tags=["Health"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(invoices.router, prefix=INVOICES_PATH, tags=["Invoices"])

# Server startup is handled by main.py at the project root
