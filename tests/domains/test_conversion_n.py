# tests/domains/test_conversion_n.py

"""
'conversion' 도메인 (측정 단위, 부피 환산) API에 대한 통합 테스트 모듈입니다.
"""

from contextlib import asynccontextmanager
from typing import Callable, List

import httpx
import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.main import app as main_app
from app.domains.goods import models as goods_models
from app.domains.conversion import models as conversion_models
from app.domains.conversion import routers as conversion_routers
from app.domains.conversion import services as conversion_services

CONVERSION_URL = "/api/v1/admin/conversion"


# =================================================================================
# 1. 측정 단위 (UnitOfMeasure) 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_weight_unit_links_to_gram(
    admin_client: AsyncClient, standard_units: List[conversion_models.UnitOfMeasure]
):
    """(성공) 비표준 무게 단위는 Gram에 연결됨"""
    gram, _ = standard_units
    response = await admin_client.post(
        f"{CONVERSION_URL}/unit-of-measure/save",
        json={"name": "Kilogram", "symbol": "kg", "type": "WEIGHT", "factor": 1000},
    )
    assert response.status_code == 201
    assert response.json()["content"]["standard_unit_id"] == gram.id


@pytest.mark.asyncio
async def test_volume_unit_links_to_tablespoon(
    admin_client: AsyncClient, standard_units: List[conversion_models.UnitOfMeasure]
):
    """(성공) 비표준 부피 단위는 Tablespoon에 연결됨"""
    _, tablespoon = standard_units
    response = await admin_client.post(
        f"{CONVERSION_URL}/unit-of-measure/save",
        json={"name": "Teaspoon", "symbol": "tsp", "type": "VOLUME", "factor": 0.333},
    )
    assert response.status_code == 201
    assert response.json()["content"]["standard_unit_id"] == tablespoon.id


@pytest.mark.asyncio
async def test_unit_without_standard_unit(admin_client: AsyncClient):
    """(실패) 표준 단위가 등록되지 않았으면 404"""
    response = await admin_client.post(
        f"{CONVERSION_URL}/unit-of-measure/save", json={"name": "Ounce", "type": "WEIGHT", "factor": 28.35}
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Standard unit 'Gram' not found"


@pytest.mark.asyncio
async def test_standard_unit_has_no_link(admin_client: AsyncClient):
    """(성공) 표준 단위로 생성하면 연결 대상이 없음"""
    response = await admin_client.post(
        f"{CONVERSION_URL}/unit-of-measure/save", json={"name": "Gram", "type": "WEIGHT", "is_standard": True}
    )
    assert response.status_code == 201
    assert response.json()["content"]["standard_unit_id"] is None


@pytest.mark.asyncio
async def test_standard_unit_cannot_reference_itself(
    admin_client: AsyncClient, standard_units: List[conversion_models.UnitOfMeasure]
):
    """(실패) 표준 단위를 비표준으로 바꾸면 자기 자신을 참조하게 되므로 400"""
    gram, _ = standard_units
    response = await admin_client.put(f"{CONVERSION_URL}/unit-of-measure/update/{gram.id}", json={"is_standard": False})
    assert response.status_code == 400
    assert response.json()["message"] == "A standard unit cannot reference itself"


@pytest.mark.asyncio
async def test_unit_duplicate_name(admin_client: AsyncClient, standard_units: List[conversion_models.UnitOfMeasure]):
    """(실패) 같은 이름의 단위 생성 시 409"""
    response = await admin_client.post(
        f"{CONVERSION_URL}/unit-of-measure/save", json={"name": "Gram", "type": "WEIGHT", "is_standard": True}
    )
    assert response.status_code == 409


# =================================================================================
# 2. 부피 환산 (VolumeConversion) 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_volume_conversion_defaults(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(성공) 표준 부피 단위 기본값(Tablespoon)과 평균 측정값 계산"""
    _, tablespoon = standard_units
    response = await admin_client.post(
        f"{CONVERSION_URL}/volume/save",
        json={"product_id": test_product.id, "measure1": 6, "measure2": 7, "measure3": 8},
    )
    assert response.status_code == 201
    content = response.json()["content"]
    assert content["std_vol_id"] == tablespoon.id
    assert content["avg_measure"] == pytest.approx(7.0)


@pytest.mark.asyncio
async def test_volume_conversion_duplicate_product(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(실패) 같은 상품의 부피 환산을 두 번 만들면 409"""
    payload = {"product_id": test_product.id, "measure1": 1, "measure2": 1, "measure3": 1}
    await admin_client.post(f"{CONVERSION_URL}/volume/save", json=payload)

    response = await admin_client.post(f"{CONVERSION_URL}/volume/save", json=payload)
    assert response.status_code == 409
    assert response.json()["message"] == "Volume conversion for this product already exists"


@pytest.mark.asyncio
async def test_volume_conversion_unknown_product(
    admin_client: AsyncClient, standard_units: List[conversion_models.UnitOfMeasure]
):
    """(실패) 존재하지 않는 상품의 부피 환산 생성 시 404"""
    response = await admin_client.post(
        f"{CONVERSION_URL}/volume/save", json={"product_id": 999, "measure1": 1, "measure2": 2, "measure3": 3}
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Product not found"


@pytest.mark.asyncio
async def test_volume_conversion_update_recomputes_average(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(성공) 측정값 하나만 수정해도 평균이 다시 계산됨"""
    created = (
        await admin_client.post(
            f"{CONVERSION_URL}/volume/save",
            json={"product_id": test_product.id, "measure1": 3, "measure2": 3, "measure3": 3},
        )
    ).json()["content"]

    response = await admin_client.put(f"{CONVERSION_URL}/volume/update/{created['id']}", json={"measure3": 9})
    assert response.status_code == 200
    assert response.json()["content"]["avg_measure"] == pytest.approx(5.0)


@pytest.mark.asyncio
async def test_volume_conversion_empty_update(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(실패) 빈 본문으로 수정 요청 시 검증 오류(400)"""
    created = (
        await admin_client.post(
            f"{CONVERSION_URL}/volume/save",
            json={"product_id": test_product.id, "measure1": 3, "measure2": 3, "measure3": 3},
        )
    ).json()["content"]

    response = await admin_client.put(f"{CONVERSION_URL}/volume/update/{created['id']}", json={})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_volume_conversion_update_rejects_null_measure(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(실패) 측정값에 null을 보내면 400 VALIDATION_ERROR"""
    created = (
        await admin_client.post(
            f"{CONVERSION_URL}/volume/save",
            json={"product_id": test_product.id, "measure1": 3, "measure2": 3, "measure3": 3},
        )
    ).json()["content"]

    response = await admin_client.put(f"{CONVERSION_URL}/volume/update/{created['id']}", json={"measure2": None})
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert "Fields cannot be null: measure2" in str(body["error"]["details"])


# =================================================================================
# 3. 외부 레시피 가져오기 테스트
# =================================================================================
ALLRECIPES_URL = "https://www.allrecipes.com/recipe/21014/classic-pancakes/"

ALLRECIPES_HTML = """
<html><body>
  <h1 class="article-heading">Classic Pancakes</h1>
  <p class="article-subheading">Fluffy weekend pancakes.</p>
  <div class="mm-recipes-details__item">
    <div class="mm-recipes-details__label">Prep Time:</div><div class="mm-recipes-details__value">10 mins</div>
  </div>
  <div class="mm-recipes-details__item">
    <div class="mm-recipes-details__label">Total Time:</div><div class="mm-recipes-details__value">1 hr 5 mins</div>
  </div>
  <div class="mm-recipes-serving-size-adjuster__meta">4 to 6 servings</div>
  <ul>
    <li class="mm-recipes-structured-ingredients__list-item"><p>
      <span data-ingredient-quantity="true">1 ½</span>
      <span data-ingredient-unit="true">cups</span>
      <span data-ingredient-name="true">all-purpose flour</span>
    </p></li>
    <li class="mm-recipes-structured-ingredients__list-item"><p>
      <span data-ingredient-quantity="true">2</span>
      <span data-ingredient-unit="true">Tbsp.</span>
      <span data-ingredient-name="true">sugar</span>
    </p></li>
    <li class="mm-recipes-structured-ingredients__list-item"><p>
      <span data-ingredient-quantity="true"></span>
      <span data-ingredient-unit="true"></span>
      <span data-ingredient-name="true">salt to taste</span>
    </p></li>
  </ul>
  <div class="recipeScTemplate"><div class="mm-recipes-steps">
    <ol class="mntl-sc-block-group--OL">
      <li class="mntl-sc-block-group--LI"><p class="comp mntl-sc-block mntl-sc-block-html">Whisk the dry ingredients.</p></li>
      <li class="mntl-sc-block-group--LI"><p class="comp mntl-sc-block mntl-sc-block-html">Cook on a hot griddle.</p></li>
    </ol>
  </div></div>
</body></html>
"""


@asynccontextmanager
async def _mocked_recipe_service(handler: Callable[[httpx.Request], httpx.Response]):
    """모의 전송 계층을 쓰는 RecipeImportService를 라우터 의존성에 주입합니다."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        service = conversion_services.RecipeImportService(client=http_client)
        main_app.dependency_overrides[conversion_routers.get_recipe_import_service] = lambda: service
        try:
            yield
        finally:
            main_app.dependency_overrides.pop(conversion_routers.get_recipe_import_service, None)


@pytest.mark.asyncio
async def test_import_recipe_from_allowed_site(admin_client: AsyncClient):
    """(성공) 허용된 사이트의 페이지에서 레시피를 추출"""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=ALLRECIPES_HTML)

    async with _mocked_recipe_service(handler):
        response = await admin_client.get(f"{CONVERSION_URL}/recipe", params={"url": ALLRECIPES_URL})

    assert response.status_code == 200, response.text
    assert str(requests[0].url) == ALLRECIPES_URL
    assert requests[0].headers["user-agent"] == settings.RECIPE_IMPORT_USER_AGENT

    recipe = response.json()["content"]
    assert recipe["title"] == "Classic Pancakes"
    assert recipe["description"] == "Fluffy weekend pancakes."
    assert recipe["servings"] == {"min": 4, "max": 6}
    assert recipe["times"] == {"Prep Time:": 10, "Total Time:": 65}
    assert recipe["ingredients"] == [
        {"quantity": 1.5, "unit": "cups", "name": "all-purpose flour"},
        {"quantity": 2, "unit": "tbsp", "name": "sugar"},
        {"quantity": None, "unit": None, "name": "salt to taste"},
    ]
    assert recipe["steps"] == {"Step 1": "Whisk the dry ingredients.", "Step 2": "Cook on a hot griddle."}


@pytest.mark.asyncio
async def test_import_recipe_rejects_unlisted_site(admin_client: AsyncClient):
    """(실패) 허용 목록에 없는 사이트는 요청 없이 400"""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="<html></html>")

    async with _mocked_recipe_service(handler):
        response = await admin_client.get(f"{CONVERSION_URL}/recipe", params={"url": "https://example.com/pancakes"})

    assert response.status_code == 400
    assert response.json()["message"] == conversion_services.INVALID_SITE_MESSAGE
    assert requests == []


@pytest.mark.asyncio
async def test_import_recipe_upstream_error(admin_client: AsyncClient):
    """(실패) 레시피 사이트가 오류를 반환하면 502"""
    async with _mocked_recipe_service(lambda request: httpx.Response(404, text="gone")):
        response = await admin_client.get(f"{CONVERSION_URL}/recipe", params={"url": ALLRECIPES_URL})

    assert response.status_code == 502
    body = response.json()
    assert body["error"]["code"] == "BAD_GATEWAY"
    assert body["message"].startswith("Scraping Error:")


@pytest.mark.asyncio
async def test_import_recipe_invalid_url(admin_client: AsyncClient):
    """(실패) URL 형식이 아니면 400 VALIDATION_ERROR"""
    response = await admin_client.get(f"{CONVERSION_URL}/recipe", params={"url": "not-a-url"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_import_recipe_forbidden_for_customer(authorized_client: AsyncClient):
    """(실패) 일반 사용자는 레시피 가져오기 불가 (403)"""
    response = await authorized_client.get(f"{CONVERSION_URL}/recipe", params={"url": ALLRECIPES_URL})
    assert response.status_code == 403


@pytest.mark.parametrize(
    "raw, expected",
    [("½", 0.5), ("1 ½", 1.5), ("1½", 1.5), ("1/4", 0.25), ("½ to 1", 0.75), ("2-3", 2.5), ("a pinch", None)],
)
def test_normalize_quantity(raw, expected):
    """(성공) 분수, 대분수, 범위 수량을 실수로 변환"""
    assert conversion_services.normalize_quantity(raw) == (pytest.approx(expected) if expected is not None else None)


def test_recipe_text_helpers():
    """(성공) 도메인, 조리 시간, 인분 파싱"""
    assert conversion_services.extract_domain("https://www.simplyrecipes.com/recipes/x") == "simplyrecipes.com"
    assert conversion_services.extract_domain("cooking.nytimes.com/recipes/1") == "cooking.nytimes.com"
    assert conversion_services.convert_time_to_minutes("1 hour 20 minutes") == 80
    assert conversion_services.convert_time_to_minutes("overnight") is None
    assert conversion_services.parse_servings("Serves 4") == {"min": 4, "max": 4}
    assert conversion_services.parse_servings("no count") is None
