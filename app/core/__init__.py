# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`, `filters.py`: 공통 CRUD 및 동적 WHERE 조건 생성.
- `responses.py`, `exceptions.py`: API 응답 봉투(envelope)와 예외 처리기.
- `security.py`, `dependencies.py`: 인증/권한 및 의존성 주입 함수.
- `tasks.py`: ARQ 워커가 실행하는 공통 태스크.
"""

__title__ = "Catalog Admin Core"
__version__ = "0.1.0"
__all__ = []
