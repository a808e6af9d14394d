# tests/__init__.py

"""
Catalog Admin API의 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트용 인메모리 DB, 로그인된 AsyncClient, 공통 도메인 데이터 픽스처
- `test_main.py`: 루트/헬스 체크와 공통 응답 봉투
- `domains/`: 도메인별(usr, goods, conversion, recipes, stock) 통합 테스트
"""

__title__ = "Catalog Admin API Tests"
__description__ = "Test suite for the Catalog Admin FastAPI application."
__version__ = "0.1.0"
__all__ = []
