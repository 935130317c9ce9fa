"""
Medicine Stock Tracker API.

ARCHITECTURE:
- Two in-memory stores per process: main pharmacy and secondary branch
- Stores are created empty at startup and discarded at shutdown (no persistence)
- Every store guards its own operations with a lock, so concurrent requests are safe
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medstock import __version__
from medstock.api.routes import branch, inventory
from medstock.core.config import settings
from medstock.models.store import MedicineStore
from medstock.services.seed_service import branch_add_sample, populate_sample_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: optionally seed both stores with the sample medicines.
    Shutdown: stores are dropped with the process.
    """
    if settings.SEED_SAMPLE_DATA:
        populate_sample_data(app.state.main_store)
        branch_add_sample(app.state.branch_store)
        logger.info("Seeded main and branch stores with sample data")
    logger.info(
        f"Stores ready: main {len(app.state.main_store)}/{app.state.main_store.capacity}, "
        f"branch {len(app.state.branch_store)}/{app.state.branch_store.capacity}"
    )
    yield
    logger.info("Shutting down; in-memory stores discarded")


def create_app(main_capacity: int = None, branch_capacity: int = None) -> FastAPI:
    app = FastAPI(
        title="Medicine Stock Tracker API",
        description="In-memory pharmacy stock, expiry reminders and branch merge.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.main_store = MedicineStore(main_capacity or settings.MAX_MEDICINES, label="main")
    app.state.branch_store = MedicineStore(branch_capacity or settings.MAX_BRANCH, label="branch")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    app.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
    app.include_router(branch.router, prefix="/branch", tags=["branch"])

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "main_count": len(app.state.main_store),
            "branch_count": len(app.state.branch_store),
        }

    return app


app = create_app()
