# tests/domains/__init__.py

"""
도메인별 테스트 모듈 패키지입니다.

- `test_auth_n.py`: 'usr' 도메인 (관리자 인증, 토큰 패밀리, 사용자 관리)
- `test_goods_n.py`: 'goods' 도메인 (원산지, 카테고리, 공급업체, 마진, 태그, 상품)
- `test_conversion_n.py`: 'conversion' 도메인 (측정 단위, 부피 환산)
- `test_recipes_n.py`: 'recipes' 도메인 (레시피, 카테고리, 재료, 조리 단계)
- `test_stock_n.py`: 'stock' 도메인 (창고, 재고, 재고 이동 엔진)
"""

__title__ = "Catalog Admin Domain Tests"
__description__ = "Categorized tests for each business domain in the Catalog Admin API."
__version__ = "0.1.0"
__all__ = []
