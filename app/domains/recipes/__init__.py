# app/domains/recipes/__init__.py

"""
FastAPI 애플리케이션의 'recipes' 도메인 패키지입니다.

'recipes' 도메인은 레시피(구성, compositions)를 관리합니다. 레시피 카테고리와
레시피-카테고리 연결, 레시피, 재료(상품과 측정 단위 참조), 조리 단계를 포함합니다.

주요 서브모듈:
- `models.py`: 레시피 관련 테이블의 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (재료/단계/카테고리를 포함한 상세 응답 포함).
- `crud.py`: 참조 무결성 및 중복 검사를 포함한 비동기 CRUD 로직.
- `routers.py`: /admin/compositions 하위의 API 엔드포인트 정의.
"""

__title__ = "Catalog Recipes Domain"
__description__ = "Manages recipes, recipe categories, ingredients and steps."
__version__ = "0.1.0"
__all__ = []
