# tests/test_main.py

"""
FastAPI 애플리케이션의 메인 엔드포인트와 공통 응답 봉투에 대한 통합 테스트 모듈입니다.

- 애플리케이션의 루트 경로 (`/`) 응답을 테스트합니다.
- 데이터베이스 연결 헬스 체크 엔드포인트 (`/health-check`)를 테스트합니다.
- 오류 응답 봉투 (`success`, `message`, `error.code`) 형식을 테스트합니다.
- 데이터베이스 무결성 오류의 상태 코드 분류를 테스트합니다.
"""

import json

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

from app.core.config import settings
from app.core.exceptions import integrity_error_handler


@pytest.mark.asyncio
async def test_read_root(client: AsyncClient):
    """(성공) 루트 엔드포인트가 환영 메시지를 반환"""
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {
        "message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."
    }


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """(성공) 헬스 체크 엔드포인트가 데이터베이스 연결 상태를 반환"""
    response = await client.get("/health-check")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database_connection": "successful"}


@pytest.mark.asyncio
async def test_unauthenticated_request_uses_error_envelope(client: AsyncClient):
    """(실패) 인증 없이 관리자 경로 호출 시 401과 오류 봉투 반환"""
    response = await client.get("/api/v1/admin/goods/products/list")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "JWT_AUTHENTICATION_ERROR"


@pytest.mark.asyncio
async def test_validation_error_is_400(admin_client: AsyncClient):
    """(실패) 요청 본문 검증 실패 시 400 VALIDATION_ERROR 반환"""
    response = await admin_client.post("/api/v1/admin/goods/origins/save", json={})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_invalid_filters_json_is_rejected(admin_client: AsyncClient):
    """(실패) filters 파라미터가 JSON 객체가 아니면 400 반환"""
    response = await admin_client.get("/api/v1/admin/goods/origins/", params={"filters": "not-json"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid filters: must be a JSON object"


def _http_request() -> Request:
    return Request({
        "type": "http",
        "method": "PUT",
        "path": "/api/v1/admin/test",
        "raw_path": b"/api/v1/admin/test",
        "query_string": b"",
        "headers": [],
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
    })


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message, status_code, code",
    [
        ("UNIQUE constraint failed: warehouses.name", 409, "UNIQUE_CONSTRAINT_VIOLATION"),
        ('duplicate key value violates unique constraint "products_sku_key"', 409, "UNIQUE_CONSTRAINT_VIOLATION"),
        ("FOREIGN KEY constraint failed", 400, "FOREIGN_KEY_VIOLATION"),
        ("NOT NULL constraint failed: inventories.is_active", 400, "VALIDATION_ERROR"),
        ("CHECK constraint failed: quantity_positive", 400, "VALIDATION_ERROR"),
    ],
)
async def test_integrity_error_classification(message: str, status_code: int, code: str):
    """(실패) 무결성 오류는 제약 종류에 따라 409 또는 400으로 변환"""
    exc = IntegrityError("UPDATE ...", {}, Exception(message))
    response = await integrity_error_handler(_http_request(), exc)
    assert response.status_code == status_code
    body = json.loads(response.body)
    assert body["success"] is False
    assert body["error"]["code"] == code
