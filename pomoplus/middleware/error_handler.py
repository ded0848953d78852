import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pomoplus.errors import (
    DuplicateTag,
    EmptyTagName,
    InvalidTag,
    ProtectedTag,
    StoreError,
    UnknownTag,
)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "type": type(exc).__name__},
    )


def register_error_handlers(app: FastAPI):
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        sentry_sdk.capture_exception(exc)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    @app.exception_handler(UnknownTag)
    async def unknown_tag_handler(request: Request, exc: UnknownTag):
        return _error(404, exc)

    @app.exception_handler(EmptyTagName)
    async def empty_tag_handler(request: Request, exc: EmptyTagName):
        return _error(422, exc)

    @app.exception_handler(DuplicateTag)
    @app.exception_handler(ProtectedTag)
    @app.exception_handler(InvalidTag)
    async def conflict_handler(request: Request, exc: Exception):
        return _error(409, exc)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        sentry_sdk.capture_exception(exc)
        return _error(503, exc)
