# app/domains/shared/__init__.py

"""
FastAPI 애플리케이션의 'shared' 도메인 패키지입니다.

여러 도메인이 공통으로 사용하는 모델 구성 요소를 제공합니다.

주요 서브모듈:
- `models.py`: 타임스탬프 믹스인(TimestampMixin)과 노출 상태 Enum(Visibility).
- `schemas.py`: NOT NULL 필드의 명시적 null을 거부하는 수정 스키마 기반 클래스(NonNullableUpdate).
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "Catalog Shared Domain"
__description__ = "Provides shared model mixins, enums and update schema bases."
__version__ = "0.1.0"
__all__ = []
