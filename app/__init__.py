# app/__init__.py

"""
레시피/상품 카탈로그 관리자 API의 메인 패키지입니다.

FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 보안 관련 유틸리티를 담는 core 서브패키지,
그리고 각 비즈니스 도메인(usr, goods, recipes, conversion, stock)을 대표하는
domains 서브패키지로 구성됩니다.
"""

APP_NAME = "Catalog Admin API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)
ADMIN_PREFIX = f"{API_PREFIX}/admin"  # 관리자 모듈 라우트 접두사

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Admin backend for a recipe / ingredient / product catalog with warehouse stock tracking."
__license__ = "MIT"
__all__ = []
