# app/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

'usr' 도메인은 관리자/사용자 계정, 프로필 기반 권한(RBAC), 그리고
리프레시 토큰 패밀리를 이용한 로그인 세션 관리를 담당합니다.

주요 서브모듈:
- `models.py`: users, token_families, refresh_tokens 테이블의 SQLModel 정의.
- `schemas.py`: 사용자 및 토큰 관련 Pydantic 모델.
- `crud.py`: 사용자 CRUD 및 비밀번호 인증 로직.
- `services.py`: 로그인, 토큰 재발급(rotation), 로그아웃, 세션 제한 로직.
- `tasks.py`: 폐기/만료된 리프레시 토큰 정리 백그라운드 작업 (ARQ).
- `routers.py`: /auth/admin 및 /admin/users API 엔드포인트 정의.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "Catalog User Domain"
__description__ = "Manages users, profiles and refresh-token based admin sessions."
__version__ = "0.1.0"
__all__ = []
