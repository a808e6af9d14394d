# app/services/__init__.py

"""
여러 도메인에 걸친 서비스 계층 패키지입니다.

각 도메인의 `crud.py` / `services.py`가 자기 도메인의 데이터를 다루는 반면,
이 패키지는 여러 도메인의 모델을 함께 다루는 상위 수준의 작업을 담당합니다.

- `seed_service.py`: 표준 단위, 기본 창고, 기본 사용자 등 초기 데이터 준비
"""

__title__ = "Catalog Services"
__description__ = "Cross-domain services for the Catalog Admin API."
__version__ = "0.1.0"
__all__ = []
