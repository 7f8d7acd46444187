"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carwash.config import get_settings
from carwash.database import init_db
from carwash.errors import register_exception_handlers
from carwash.routers import (
    admins,
    bonuses,
    check_ins,
    customers,
    expenses,
    inventory,
    materials,
    milestone_achievements,
    milestones,
    payment_requests,
    reports,
    sales,
    services,
    tools,
    washers,
    worker,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Creates missing tables on startup.
    """
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## Car Wash Management System API

    ### Entities:
    * **Customers and vehicles**, **check-ins** and the **service catalog**
    * **Inventory** and **sales**
    * **Washers**, **admins**, **tools**, **materials** and **payment requests**
    * **Expenses**
    * **Bonuses**, **milestones** and **achievements**
    * **Reports**: financial, payment and dashboard metrics
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for router in (
    services.router,
    customers.router,
    # before check_ins so "assign-materials" is not read as a check-in id
    materials.check_in_materials_router,
    check_ins.router,
    inventory.router,
    sales.router,
    bonuses.router,
    milestones.router,
    milestone_achievements.router,
    washers.router,
    admins.router,
    tools.tool_charges_router,
    tools.worker_tools_router,
    tools.washer_tools_router,
    materials.washer_materials_router,
    materials.deductions_router,
    expenses.router,
    payment_requests.router,
    reports.router,
    worker.router,
):
    app.include_router(router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "success": True,
        "message": "Welcome to Car Wash Management System API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "success": True,
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "carwash.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
