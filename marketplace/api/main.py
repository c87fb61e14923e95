"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Optional
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.api.endpoints.admin import admin_api
from marketplace.api.endpoints.balances import balances_api
from marketplace.api.endpoints.contracts import contracts_api
from marketplace.api.endpoints.jobs import jobs_api
from marketplace.database.store import MarketplaceDB
from marketplace.error_handler import ErrorHandler
from marketplace.errors import MarketplaceError
from marketplace.services.contracts import ContractsController
from marketplace.services.deposits import DepositEngine
from marketplace.services.payments import PaymentEngine
from marketplace.services.reports import ReportsService
from marketplace.utils.config_loader import AppConfig, load_app_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()


def _load_config() -> AppConfig:
    try:
        return load_app_config()
    except FileNotFoundError as e:
        logger.warning("%s; falling back to built-in defaults", e)
        return AppConfig()


def _describe_db_target(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme.startswith("sqlite"):
        return f"scheme={parsed.scheme} path={parsed.path or ':memory:'}"
    return "scheme=%s host=%s port=%s db=%s" % (
        parsed.scheme,
        parsed.hostname,
        parsed.port or 5432,
        (parsed.path or "").lstrip("/"),
    )


def create_app(db: Optional[MarketplaceDB] = None, config: Optional[AppConfig] = None) -> FastAPI:
    config = config or _load_config()
    if db is None:
        db = MarketplaceDB(
            config.database.url,
            pool_size=config.database.pool_size,
            max_overflow=config.database.max_overflow,
            sqlite_timeout=config.database.sqlite_timeout,
            echo=config.database.echo,
        )

    app = FastAPI(
        title="Freelance Marketplace API",
        description="Profiles, contracts, job payments, deposits and admin reports",
        version="1.0.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================================================
    # DEPENDENCY INJECTION
    # ============================================================================
    app.state.config = config
    app.state.db = db
    app.state.payments = PaymentEngine(db, retries=config.payments.conflict_retries)
    app.state.deposits = DepositEngine(
        db,
        max_ratio=config.payments.deposit_max_ratio,
        retries=config.payments.conflict_retries,
    )
    app.state.contracts = ContractsController(db)
    app.state.reports = ReportsService(db, default_limit=config.reports.best_clients_limit)

    app.include_router(contracts_api)
    app.include_router(jobs_api)
    app.include_router(balances_api)
    app.include_router(admin_api)

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        status_code, payload = error_handler.handle_domain_error(
            exc, context={"method": request.method, "path": request.url.path}
        )
        return JSONResponse(status_code=status_code, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        status_code, payload = error_handler.handle_exception(
            exc, context={"method": request.method, "path": request.url.path}
        )
        return JSONResponse(status_code=status_code, content=payload)

    @app.get("/health", tags=["Health"])
    def health():
        ok = app.state.db.ping()
        return {"status": "healthy" if ok else "degraded", "database": "connected" if ok else "unreachable"}

    # ============================================================================
    # STARTUP/SHUTDOWN EVENTS
    # ============================================================================
    @app.on_event("startup")
    async def startup_event():
        """Initialize on startup"""
        logger.info("Starting Freelance Marketplace API...")
        try:
            logger.info("Database target: %s", _describe_db_target(config.database.url))
        except Exception as e:
            logger.warning("Could not parse database URL for startup logging: %s", e)

        # Create database tables if they don't exist
        try:
            app.state.db.create_tables()
            logger.info("Database tables initialized")
        except Exception as e:
            logger.error(f"Error initializing database: {str(e)}")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown"""
        logger.info("Shutting down Freelance Marketplace API...")
        app.state.db.dispose()

    return app


app = create_app()
