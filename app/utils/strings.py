# app/utils/strings.py

import re
from typing import Any


def generate_slug(title: str) -> str:
    """
    URL에 사용할 수 있는 slug를 생성합니다.
    예: "Poivre noir moulu 50g !" -> "poivre-noir-moulu-50g"
    """
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower()).strip()
    return re.sub(r"\s+", "-", slug)


def extract_code(value: Any, length: int, fallback: str) -> str:
    """
    이름에서 SKU 등에 쓰일 대문자 코드를 추출합니다 (slug 기준, 하이픈 제외).
    값이 비어 있으면 fallback을 반환합니다.
    """
    if not isinstance(value, str) or value.strip() == "":
        return fallback
    code = generate_slug(value).replace("-", "")[:length].upper()
    return code or fallback
