import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from feeledger.api.v1.dashboard.router import router as dashboard_router
from feeledger.api.v1.fees.router import router as fees_router
from feeledger.api.v1.payments.router import router as payments_router
from feeledger.api.v1.students.router import profile_router
from feeledger.api.v1.students.router import router as students_router
from feeledger.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The ledger store is unavailable. Please try again."},
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Fee Ledger")

    # CORS: allow the student and admin front-ends to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Routers
    app.include_router(fees_router)
    app.include_router(payments_router)
    app.include_router(dashboard_router)
    app.include_router(students_router)
    app.include_router(profile_router)

    return app


app = create_app()
