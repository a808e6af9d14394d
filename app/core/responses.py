# app/core/responses.py

"""
모든 API 엔드포인트가 공통으로 사용하는 응답 봉투(envelope) 모듈입니다.

성공 응답: {"success": true, "message": "...", "content": ...}
오류 응답: {"success": false, "message": "...", "error": {"code": "...", "details": ...}}
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi import Response, status
from pydantic import BaseModel

T = TypeVar("T")

# HTTP 상태 코드별 기본 메시지
DEFAULT_MESSAGES: Dict[int, str] = {
    200: "Success",
    201: "Successfully created",
    204: "No content",
    400: "Bad request",
    401: "Unauthorized access",
    403: "Forbidden",
    404: "Not found",
    409: "Conflict",
    422: "Unprocessable entity",
    429: "Too many requests",
    500: "Internal server error",
    502: "Bad gateway",
    503: "Service unavailable",
}


class ApiResponse(BaseModel, Generic[T]):
    """성공 응답 봉투"""
    success: bool = True
    message: str = DEFAULT_MESSAGES[status.HTTP_200_OK]
    content: Optional[T] = None


class ErrorDetail(BaseModel):
    code: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """오류 응답 봉투"""
    success: bool = False
    message: str
    error: ErrorDetail


class Page(BaseModel, Generic[T]):
    """페이지 단위 목록 조회 결과"""
    data: List[T]
    total: int
    page: int
    page_size: int


def http200(content: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    return {"success": True, "message": message or DEFAULT_MESSAGES[status.HTTP_200_OK], "content": content}


def http201(content: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    return {"success": True, "message": message or DEFAULT_MESSAGES[status.HTTP_201_CREATED], "content": content}


def http204() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def error_body(status_code: int, code: str, message: Optional[str] = None, details: Any = None) -> Dict[str, Any]:
    """오류 응답 본문을 생성합니다. message가 없으면 상태 코드의 기본 메시지를 사용합니다."""
    return ErrorResponse(
        message=message or DEFAULT_MESSAGES.get(status_code, "Error"),
        error=ErrorDetail(code=code, details=details),
    ).model_dump()
