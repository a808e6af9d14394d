# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 현재 인증된 사용자 정보 획득 (get_current_user_from_token, get_current_active_user).
- 사용자 프로필 기반 권한 부여 (require_profiles, get_current_admin_user).
- 요청 헤더로부터 클라이언트 정보 추출 (get_client_info, user-agent 파싱은 user-agents 라이브러리).
- 페이지 목록 조회 공통 쿼리 파라미터 (PageQuery).
"""

from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Query, Request
from sqlmodel.ext.asyncio.session import AsyncSession
from user_agents import parse as parse_ua
from user_agents.parsers import UserAgent

from app.core.config import settings
from app.core.filters import parse_filters

# 실제 데이터베이스 세션 제너레이터 임포트
from app.core.database import get_session as get_main_app_session

# flake8: noqa
from app.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    oauth2_scheme,  # OAuth2PasswordBearer 인스턴스
    get_current_user_from_token,  # 토큰에서 사용자 정보를 가져오는 함수
    get_current_active_user,  # 활성 사용자 확인 함수
    require_profiles,  # 프로필 기반 권한 검사 의존성 생성 함수
    get_current_admin_user,  # 관리자 프로필 확인 함수
)

UNKNOWN = "unknown"


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


def _known(value: Optional[str]) -> str:
    """user-agent 파서가 알아내지 못한 값("Other", 빈 값)은 "unknown"으로 통일합니다."""
    if not value or value == "Other":
        return UNKNOWN
    return value


def _device_type(agent: UserAgent) -> str:
    if agent.is_bot:
        return "bot"
    if agent.is_tablet:
        return "tablet"
    if agent.is_mobile:
        return "smartphone"
    if agent.is_pc:
        return "desktop"
    return UNKNOWN


def parse_user_agent(user_agent: str) -> Dict[str, str]:
    """
    user-agent 문자열에서 기기/OS/클라이언트 정보를 추출합니다.
    알 수 없는 항목은 "unknown"으로 기록합니다.
    """
    agent = parse_ua(user_agent)
    if agent.is_bot:
        client_type = "bot"
    elif agent.browser.family != "Other":
        client_type = "browser"
    else:
        client_type = UNKNOWN
    return {
        "device_type": _device_type(agent),
        "device_brand": _known(agent.device.brand),
        "device_model": _known(agent.device.model),
        "os_name": _known(agent.os.family),
        "os_version": _known(agent.os.version_string),
        "client_name": _known(agent.browser.family),
        "client_type": client_type,
        "client_version": _known(agent.browser.version_string),
    }


def get_client_info(request: Request) -> Dict[str, Optional[str]]:
    """
    로그인 세션(토큰 패밀리)에 기록할 클라이언트 정보를 요청에서 추출합니다.
    IP는 x-forwarded-for 헤더의 첫 번째 값, 없으면 접속 호스트를 사용하고
    기기/OS/클라이언트 세부 정보는 user-agent 헤더를 파싱하여 채웁니다.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else UNKNOWN

    user_agent = request.headers.get("user-agent", UNKNOWN)
    return {
        "ip_address": ip_address,
        "user_agent": user_agent,
        "accept_lang": request.headers.get("accept-language", UNKNOWN),
        **parse_user_agent(user_agent),
    }


class PageQuery:
    """
    페이지 목록 조회 엔드포인트의 공통 쿼리 파라미터입니다.
    filters는 JSON 객체 문자열로 받아 dict로 변환합니다.
    """
    def __init__(
        self,
        page: int = Query(1, ge=1, description="페이지 번호 (1부터 시작)"),
        page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100, description="페이지 크기"),
        filters: Optional[str] = Query(None, description='필터 JSON 객체, 예: {"name": "pepper"}'),
    ):
        self.page = page
        self.page_size = page_size
        self.filters: Dict[str, Any] = parse_filters(filters)
