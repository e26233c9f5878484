# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request Desk Service
====================
Typed internal requests: creation, routing to recipients or type handlers,
status tracking and comments.

Every read of a request is gated by the request type's visibility policy:
    ADMIN_ONLY           admins, creator, recipient, assignee
    DIRECT_PARTICIPANTS  admins, creator, recipient
    ADMIN_AND_HANDLERS   admins, creator, assignee, any handler of the type
    TEAM_PUBLIC          admins, creator, members of the request's team

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from request_desk.controllers import (
    assignment_controller,
    request_controller,
    request_type_controller,
    system_controller,
    user_controller,
)
from request_desk.core.config import settings
from request_desk.core.dependencies import get_container
from request_desk.core.errors import RequestDeskError
from request_desk.core.logging import get_logger
from request_desk.middleware import MetricsMiddleware, RequestIDMiddleware
from request_desk.models.tables import metadata

logger = get_logger(settings.SERVICE_NAME)


@asynccontextmanager
async def lifespan(application: FastAPI):
    container = get_container()
    if settings.AUTO_CREATE_SCHEMA:
        metadata.create_all(container.engine)
        logger.info("Database schema ensured")
    yield
    container.engine.dispose()
    logger.info("Shutting down, connection pool disposed")


app = FastAPI(
    title="Request Desk Service",
    description="Typed internal requests with per-type visibility and handler assignment.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(RequestDeskError)
async def domain_exception_handler(request: Request, exc: RequestDeskError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(request_controller.router)
app.include_router(request_type_controller.router)
app.include_router(assignment_controller.router)
app.include_router(user_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8005)
