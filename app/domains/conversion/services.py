# app/domains/conversion/services.py

"""
외부 레시피 사이트에서 레시피를 가져오는 서비스 모듈입니다.

허용된 사이트(allrecipes.com, cooking.nytimes.com, simplyrecipes.com)의 페이지를
httpx로 내려받고, 사이트별 CSS 선택자 설정에 따라 BeautifulSoup으로 제목, 설명,
인분, 조리 시간, 재료, 조리 단계를 추출합니다.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional

import httpx
from bs4 import BeautifulSoup, Tag
from fastapi import HTTPException, status

from app.core.config import settings

logger = logging.getLogger(__name__)

INVALID_SITE_MESSAGE = "Invalid URL. Please provide a valid URL from allowed sites."

# 사이트별 CSS 선택자 설정
SITE_SELECTORS: Dict[str, Dict[str, Any]] = {
    "cooking.nytimes.com": {
        "title": ".pantry--title-display",
        "description": ".topnote_topnoteParagraphs__A3OtF",
        "ingredients": {
            "list": ".ingredient_ingredient__rfjvs",
            "quantity": ".ingredient_quantity__Z_Mvw",
            "unit": "span:not([class])",
            "name": "span:not([class])",
        },
        "steps": {
            "list": ".preparation_step__nzZHP",
            "description": ".preparation_stepContent__CFrQM",
        },
        "times": {"label": ".stats_cookingTimeTable__b0moV dt", "next": "dd"},
        "servings": ".ingredients_recipeYield__DN65p > span:last-child",
    },
    "allrecipes.com": {
        "title": "h1.article-heading",
        "description": ".article-subheading",
        "ingredients": {
            "list": ".mm-recipes-structured-ingredients__list-item",
            "quantity": 'p > span[data-ingredient-quantity="true"]',
            "unit": 'p > span[data-ingredient-unit="true"]',
            "name": 'p > span[data-ingredient-name="true"]',
        },
        "steps": {
            "list": ".recipeScTemplate .mm-recipes-steps .mntl-sc-block-group--OL > .mntl-sc-block-group--LI",
            "description": ".comp.mntl-sc-block.mntl-sc-block-html",
        },
        "times": {"label": ".mm-recipes-details__label", "next": ".mm-recipes-details__value"},
        "servings": ".mm-recipes-serving-size-adjuster__meta",
    },
    "simplyrecipes.com": {
        "title": "h2.comp.recipe-block__header.text-block",
        "description": ".comp.article__header--project.mntl-sc-page.mntl-block.article-intro.text-passage.structured-content",
        "ingredients": {
            "list": ".structured-ingredients__list-item",
            "quantity": 'p > span[data-ingredient-quantity="true"]',
            "unit": 'p > span[data-ingredient-unit="true"]',
            "name": 'p > span[data-ingredient-name="true"]',
        },
        "steps": {
            "list": ".comp.mntl-sc-block.mntl-sc-block-startgroup.mntl-sc-block-group--LI",
            "description": ".comp.mntl-sc-block.mntl-sc-block-html",
        },
        "times": {"label": ".project-meta__times-container .meta-text__label", "next": ".meta-text__data"},
        "servings": ".recipe-serving.project-meta__recipe-serving .meta-text__data",
    },
}

ALLOWED_SITES = frozenset(SITE_SELECTORS)

FRACTIONS: Dict[str, float] = {
    "½": 1 / 2, "⅓": 1 / 3, "⅔": 2 / 3, "¼": 1 / 4, "¾": 3 / 4,
    "⅕": 1 / 5, "⅖": 2 / 5, "⅗": 3 / 5, "⅘": 4 / 5, "⅙": 1 / 6,
    "⅚": 5 / 6, "⅛": 1 / 8, "⅜": 3 / 8, "⅝": 5 / 8, "⅞": 7 / 8,
}

_DOMAIN_RE = re.compile(r"^(?:https?://)?(?:www\.)?([^/:?#]+)", re.IGNORECASE)
_TIME_RE = re.compile(r"(\d+)\s*(hour|hr|minute|min|second|sec)", re.IGNORECASE)
_SERVINGS_RE = re.compile(r"(\d+)\s*(?:(?:to|-)\s*(\d+))?")


# =============================================================================
# 1. 파싱 유틸리티
# =============================================================================
def extract_domain(url: str) -> Optional[str]:
    """URL에서 www.를 제외한 호스트명을 추출합니다."""
    match = _DOMAIN_RE.match(url.strip())
    return match.group(1).lower() if match else None


def fraction_to_float(value: Optional[str]) -> Optional[float]:
    """'½', '1/2', '1.5' 형태의 수량을 실수로 변환합니다. 해석할 수 없으면 None."""
    if not value:
        return None
    value = value.strip()
    if value in FRACTIONS:
        return FRACTIONS[value]
    if "/" in value:
        numerator, _, denominator = value.partition("/")
        try:
            return float(numerator) / float(denominator)
        except (ValueError, ZeroDivisionError):
            return None
    try:
        return float(value)
    except ValueError:
        return None


def normalize_quantity(value: str) -> Optional[float]:
    """
    재료 수량 문자열을 실수로 변환합니다.
    '1 ½', '1½' 같은 대분수는 합산하고, '½ to 1', '2-3' 같은 범위는 평균을 사용합니다.
    """
    for symbol in FRACTIONS:
        value = value.replace(symbol, f" {symbol}")
    parts = re.split(r"\s+to\s+|\s*[-–]\s*", value.strip())

    amounts = []
    for part in parts:
        tokens = [fraction_to_float(token) for token in part.split()]
        if not tokens or any(token is None for token in tokens):
            return None
        amounts.append(sum(tokens))
    amount = sum(amounts) / len(amounts)
    return None if math.isnan(amount) else amount


def clean_unit(value: str) -> Optional[str]:
    unit = value.strip().rstrip(".").lower()
    return unit or None


def convert_time_to_minutes(value: str) -> Optional[float]:
    """'1 hour 20 minutes' 형태의 시간을 분 단위로 변환합니다. 숫자가 없으면 None."""
    matches = _TIME_RE.findall(value)
    if not matches:
        return None
    minutes = 0.0
    for amount, unit in matches:
        unit = unit.lower()
        if unit.startswith("h"):
            minutes += float(amount) * 60
        elif unit.startswith("s"):
            minutes += float(amount) / 60
        else:
            minutes += float(amount)
    return minutes


def parse_servings(value: str) -> Optional[Dict[str, int]]:
    """'4 servings', '4 to 6' 형태의 인분을 {min, max}로 변환합니다."""
    match = _SERVINGS_RE.search(value)
    if not match:
        return None
    minimum = int(match.group(1))
    maximum = int(match.group(2)) if match.group(2) else minimum
    return {"min": minimum, "max": maximum}


def _text(nodes: List[Tag]) -> str:
    return "".join(node.get_text() for node in nodes).strip()


# =============================================================================
# 2. 레시피 가져오기 서비스
# =============================================================================
class RecipeImportService:
    """
    허용된 레시피 사이트의 페이지를 가져와 구조화된 레시피 데이터로 변환합니다.
    `client`를 주입하지 않으면 요청마다 httpx.AsyncClient를 생성합니다.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client

    @staticmethod
    def check_url(url: str) -> str:
        domain = extract_domain(url)
        if not domain or domain not in ALLOWED_SITES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_SITE_MESSAGE)
        return domain

    async def _fetch(self, url: str) -> str:
        headers = {"User-Agent": settings.RECIPE_IMPORT_USER_AGENT}
        try:
            if self.client is not None:
                response = await self.client.get(url, headers=headers, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=settings.RECIPE_IMPORT_TIMEOUT) as client:
                    response = await client.get(url, headers=headers, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch recipe page %s: %s", url, exc)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Scraping Error: {exc}")
        return response.text

    async def extract_recipe_data(self, url: str) -> Dict[str, Any]:
        domain = self.check_url(url)
        logger.debug("Importing recipe from %s", url)
        html = await self._fetch(url)
        return self.parse(html, SITE_SELECTORS[domain])

    def parse(self, html: str, config: Dict[str, Any]) -> Dict[str, Any]:
        soup = BeautifulSoup(html, "html.parser")
        servings_text = _text(soup.select(config["servings"]))
        return {
            "title": _text(soup.select(config["title"])),
            "description": _text(soup.select(config["description"])),
            "servings": parse_servings(servings_text) if servings_text else None,
            "times": self._extract_times(soup, config["times"]),
            "ingredients": self._extract_ingredients(soup, config["ingredients"]),
            "steps": self._extract_steps(soup, config["steps"]),
        }

    @staticmethod
    def _extract_times(soup: BeautifulSoup, config: Dict[str, str]) -> Dict[str, Optional[float]]:
        times: Dict[str, Optional[float]] = {}
        for label_node in soup.select(config["label"]):
            label = label_node.get_text().strip()
            sibling = label_node.find_next_sibling()
            if sibling is None or not sibling.css.match(config["next"]):
                continue
            value = sibling.get_text().strip()
            if label and value:
                times[label] = convert_time_to_minutes(value)
        return times

    @staticmethod
    def _extract_ingredients(soup: BeautifulSoup, config: Dict[str, str]) -> List[Dict[str, Any]]:
        ingredients = []
        for item in soup.select(config["list"]):
            quantity = _text(item.select(config["quantity"]))
            ingredients.append({
                "quantity": normalize_quantity(quantity) if quantity else None,
                "unit": clean_unit(_text(item.select(config["unit"]))),
                "name": _text(item.select(config["name"])),
            })
        return ingredients

    @staticmethod
    def _extract_steps(soup: BeautifulSoup, config: Dict[str, str]) -> Dict[str, str]:
        steps: Dict[str, str] = {}
        for index, item in enumerate(soup.select(config["list"]), start=1):
            steps[f"Step {index}"] = _text(item.select(config["description"]))
        return steps
