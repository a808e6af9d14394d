# app/domains/shared/schemas.py

"""
여러 도메인의 수정(Update) 스키마가 공통으로 사용하는 Pydantic 구성 요소를 정의하는 모듈입니다.
"""
from typing import ClassVar, Tuple

from pydantic import model_validator
from sqlmodel import SQLModel


class NonNullableUpdate(SQLModel):
    """
    부분 수정 스키마의 기반 클래스입니다.

    수정 스키마의 필드는 모두 Optional이지만, `non_nullable_fields`에 나열된 필드는
    값을 생략할 수만 있고 명시적인 null은 허용하지 않습니다 (DB 컬럼이 NOT NULL).
    """
    non_nullable_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = [
            name for name in self.non_nullable_fields
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self
