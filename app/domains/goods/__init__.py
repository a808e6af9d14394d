# app/domains/goods/__init__.py

"""
FastAPI 애플리케이션의 'goods' 도메인 패키지입니다.

'goods' 도메인은 상품 카탈로그를 관리합니다. 원산지, 상품 카테고리와 하위 카테고리,
공급업체, 마진 등급, 상품 태그, 그리고 SKU와 판매가가 자동 계산되는 상품을 포함합니다.

주요 서브모듈:
- `models.py`: 카탈로그 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 비동기 CRUD 로직, SKU 생성 및 판매가 계산.
- `routers.py`: /admin/goods 하위의 API 엔드포인트 정의.
"""

__title__ = "Catalog Goods Domain"
__description__ = "Manages origins, categories, suppliers, margin levels, tags and products."
__version__ = "0.1.0"
__all__ = []
