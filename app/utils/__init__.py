# app/utils/__init__.py

"""
특정 비즈니스 도메인에 속하지 않는 범용 유틸리티 패키지입니다.

주요 서브모듈:
- `strings.py`: slug 및 코드 추출 등 문자열 유틸리티.
- `dates.py`: UTC 기준 현재 시각 및 timezone 보정 유틸리티.
"""

# flake8: noqa
from . import dates, strings

__title__ = "Catalog Admin Utilities"
__version__ = "0.1.0"
__all__ = ["dates", "strings"]
