# app/core/exceptions.py

"""
전역 예외 처리기를 등록하는 모듈입니다.

도메인 코드는 HTTPException을 발생시키고, 이 모듈의 처리기가 예외 종류에 따라
HTTP 상태 코드와 오류 코드를 결정하여 공통 오류 응답 봉투로 변환합니다.

- HTTPException              -> 예외의 상태 코드 (오류 코드는 상태 코드별 매핑)
- RequestValidationError     -> 400 VALIDATION_ERROR
- jose.JWTError              -> 401 JWT_AUTHENTICATION_ERROR
- IntegrityError (unique)    -> 409 UNIQUE_CONSTRAINT_VIOLATION
- IntegrityError (FK)        -> 400 FOREIGN_KEY_VIOLATION
- IntegrityError (그 외)      -> 400 VALIDATION_ERROR (NOT NULL, CHECK 등)
- NoResultFound              -> 404 RECORD_NOT_FOUND
- 그 외 Exception            -> 500 SERVER_ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import JWTError
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.responses import error_body

logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "JWT_AUTHENTICATION_ERROR",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
    429: "TOO_MANY_REQUESTS",
    500: "SERVER_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else None
    details = None if isinstance(exc.detail, str) else jsonable_encoder(exc.detail)
    code = ERROR_CODES.get(exc.status_code, "ERROR")
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, code, message, details),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s -> validation failed", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(400, "VALIDATION_ERROR", "Validation failed", jsonable_encoder(exc.errors())),
    )


async def jwt_exception_handler(request: Request, exc: JWTError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_body(401, "JWT_AUTHENTICATION_ERROR", str(exc) or None),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    raw = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    details = str(exc.orig) if settings.DEBUG_MODE else None
    logger.warning("%s %s -> integrity error: %s", request.method, request.url.path, exc.orig)
    if "foreign key" in raw:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(400, "FOREIGN_KEY_VIOLATION", "Related record does not exist", details),
        )
    if "unique" in raw or "duplicate" in raw:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body(409, "UNIQUE_CONSTRAINT_VIOLATION", "A record with the same unique value already exists", details),
        )
    # NOT NULL, CHECK 등 나머지 제약 위반은 잘못된 입력으로 취급합니다.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(400, "VALIDATION_ERROR", "A database constraint was violated", details),
    )


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body(404, "RECORD_NOT_FOUND", "Record not found"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception in %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    details = {"error_type": type(exc).__name__, "error": str(exc)} if settings.DEBUG_MODE else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(500, "SERVER_ERROR", None, details),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """FastAPI 애플리케이션에 전역 예외 처리기를 등록합니다."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(JWTError, jwt_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
