# app/core/filters.py

"""
목록 조회 API에서 사용하는 동적 WHERE 조건 생성 유틸리티 모듈입니다.

- `generate_where_conditions`: 허용된 필드 목록에 포함된 필터들을 OR 조건으로 묶습니다.
  문자열은 대소문자 구분 없는 부분 일치(contains), 숫자는 동등 비교로 처리합니다.
- `generate_where_condition`: 단일 허용 필드에 대한 동등 비교 조건을 만듭니다.
- `parse_filters`: 쿼리스트링의 `filters` JSON 문자열을 dict로 변환합니다.
"""

import json
from typing import Any, Dict, Iterable, Optional, Type

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel


def parse_filters(raw: Optional[str]) -> Dict[str, Any]:
    """`filters` 쿼리 파라미터(JSON 객체 문자열)를 dict로 변환합니다."""
    if raw is None or raw.strip() == "":
        return {}
    try:
        filters = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filters: must be a JSON object")
    if not isinstance(filters, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filters: must be a JSON object")
    return filters


def generate_where_conditions(
    model: Type[SQLModel], filters: Dict[str, Any], fields: Iterable[str]
) -> Optional[ColumnElement]:
    """
    허용된 필드에 대한 필터들을 OR 조건 하나로 합칩니다.
    적용할 조건이 없으면 None을 반환합니다.
    """
    accepted = set(fields)
    conditions = []

    for field, value in filters.items():
        if value is None or field not in accepted or not hasattr(model, field):
            continue
        column = getattr(model, field)
        # bool은 int의 하위 클래스이므로 먼저 걸러냅니다.
        if isinstance(value, bool):
            continue
        if isinstance(value, str):
            if value.strip() == "":
                continue
            conditions.append(func.lower(column).contains(value.strip().lower()))
        elif isinstance(value, (int, float)):
            conditions.append(column == value)

    if not conditions:
        return None
    return or_(*conditions)


def generate_where_condition(
    model: Type[SQLModel], filters: Dict[str, Any], accepted_field: str
) -> Optional[ColumnElement]:
    """단일 허용 필드에 대한 동등 비교 조건을 만듭니다."""
    for field, value in filters.items():
        if field == accepted_field and value is not None and hasattr(model, field):
            return getattr(model, field) == value
    return None
