# app/domains/conversion/__init__.py

"""
FastAPI 애플리케이션의 'conversion' 도메인 패키지입니다.

'conversion' 도메인은 측정 단위(UnitOfMeasure)와 상품별 부피-무게 환산
(VolumeConversion) 데이터를 관리하고, 외부 레시피 사이트의 레시피를 가져옵니다.

주요 서브모듈:
- `models.py`: units_of_measure, volume_conversions 테이블의 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 표준 단위 연결 및 평균 측정값 계산을 포함한 CRUD 로직.
- `services.py`: 허용된 외부 사이트에서 레시피를 가져오는 RecipeImportService.
- `routers.py`: /admin/conversion 하위의 API 엔드포인트 정의.
"""

__title__ = "Catalog Conversion Domain"
__description__ = "Manages units of measure and volume to weight conversions."
__version__ = "0.1.0"
__all__ = []
