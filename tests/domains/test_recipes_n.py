# tests/domains/test_recipes_n.py

"""
'recipes' 도메인 (레시피, 레시피 카테고리, 재료, 조리 단계) API에 대한 통합 테스트 모듈입니다.
"""

from typing import List

import pytest
from httpx import AsyncClient

from app.domains.usr import models as usr_models
from app.domains.goods import models as goods_models
from app.domains.conversion import models as conversion_models

RECIPES_URL = "/api/v1/admin/compositions"


async def _create_recipe(client: AsyncClient, name: str = "Pepper Steak", **overrides) -> dict:
    payload = {"name": name, "preparation_time": 15, **overrides}
    response = await client.post(f"{RECIPES_URL}/recipes/save", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["content"]


# =================================================================================
# 1. 레시피 (Recipe) 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_create_recipe_records_author(admin_client: AsyncClient, test_admin_user: usr_models.User):
    """(성공) user_id 없이 생성하면 요청한 관리자가 작성자로 기록됨"""
    recipe = await _create_recipe(admin_client, servings=4, difficulty="MEDIUM")
    assert recipe["user_id"] == test_admin_user.id
    assert recipe["difficulty"] == "MEDIUM"
    assert recipe["visibility"] == "DRAFT"


@pytest.mark.asyncio
async def test_create_recipe_duplicate_name(admin_client: AsyncClient):
    """(실패) 같은 이름의 레시피 생성 시 409"""
    await _create_recipe(admin_client)
    response = await admin_client.post(f"{RECIPES_URL}/recipes/save", json={"name": "Pepper Steak", "preparation_time": 5})
    assert response.status_code == 409
    assert response.json()["message"] == "Recipe with this name already exists"


@pytest.mark.asyncio
async def test_create_recipe_requires_preparation_time(admin_client: AsyncClient):
    """(실패) 준비 시간이 1분 미만이면 검증 오류"""
    response = await admin_client.post(f"{RECIPES_URL}/recipes/save", json={"name": "Instant", "preparation_time": 0})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_recipe_unknown_author(admin_client: AsyncClient):
    """(실패) 존재하지 않는 user_id로 생성 시 404"""
    response = await admin_client.post(
        f"{RECIPES_URL}/recipes/save", json={"name": "Ghost Curry", "preparation_time": 10, "user_id": 999}
    )
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_recipes_forbidden_for_customer(authorized_client: AsyncClient):
    """(실패) 권한: CUSTOMER 사용자는 레시피 목록에 접근할 수 없음"""
    response = await authorized_client.get(f"{RECIPES_URL}/recipes/list")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_read_recipe_not_found(admin_client: AsyncClient):
    """(실패) 존재하지 않는 레시피 상세 조회 시 404"""
    response = await admin_client.get(f"{RECIPES_URL}/recipes/get/999")
    assert response.status_code == 404
    assert response.json()["message"] == "Recipe not found"


# =================================================================================
# 2. 레시피 카테고리 / 연결 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_category_link_lifecycle(admin_client: AsyncClient):
    """(성공) 카테고리 slug 생성, 레시피 연결, 중복 연결 거부"""
    category = (
        await admin_client.post(f"{RECIPES_URL}/recipe-categories/save", json={"name": "Main Course"})
    ).json()["content"]
    assert category["slug"] == "main-course"

    recipe = await _create_recipe(admin_client)
    payload = {"recipe_id": recipe["id"], "category_id": category["id"]}
    link = await admin_client.post(f"{RECIPES_URL}/recipe-category-links/save", json=payload)
    assert link.status_code == 201

    duplicate = await admin_client.post(f"{RECIPES_URL}/recipe-category-links/save", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Recipe is already linked to this category"


@pytest.mark.asyncio
async def test_category_link_unknown_category(admin_client: AsyncClient):
    """(실패) 존재하지 않는 카테고리 연결 시 404"""
    recipe = await _create_recipe(admin_client)
    response = await admin_client.post(
        f"{RECIPES_URL}/recipe-category-links/save", json={"recipe_id": recipe["id"], "category_id": 999}
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Recipe category not found"


@pytest.mark.asyncio
async def test_recipe_category_duplicate_name(admin_client: AsyncClient):
    """(실패) 같은 이름의 레시피 카테고리 생성 시 409"""
    await admin_client.post(f"{RECIPES_URL}/recipe-categories/save", json={"name": "Dessert"})
    response = await admin_client.post(f"{RECIPES_URL}/recipe-categories/save", json={"name": "Dessert"})
    assert response.status_code == 409
    assert response.json()["message"] == "Recipe category with this name already exists"


# =================================================================================
# 3. 재료 (Ingredient) / 조리 단계 (Step) 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_ingredient_rules(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(성공/실패) 재료 생성, 미존재 상품 404, 같은 상품 중복 409"""
    recipe = await _create_recipe(admin_client)
    gram = standard_units[0]
    payload = {
        "recipe_id": recipe["id"],
        "product_id": test_product.id,
        "unit_of_measure_id": gram.id,
        "quantity": 12.5,
        "grind_required": True,
    }
    created = await admin_client.post(f"{RECIPES_URL}/ingredients/save", json=payload)
    assert created.status_code == 201
    assert created.json()["content"]["quantity"] == pytest.approx(12.5)

    unknown = await admin_client.post(f"{RECIPES_URL}/ingredients/save", json={**payload, "product_id": 999})
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "Product not found"

    duplicate = await admin_client.post(f"{RECIPES_URL}/ingredients/save", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Ingredient with this product already exists in the recipe"


@pytest.mark.asyncio
async def test_step_number_is_unique_per_recipe(admin_client: AsyncClient):
    """(실패) 같은 레시피에서 단계 번호가 중복되면 409, 다른 레시피에서는 허용"""
    first = await _create_recipe(admin_client)
    second = await _create_recipe(admin_client, name="Pepper Sauce")

    step = {"recipe_id": first["id"], "step_number": 1, "description": "Crack the pepper"}
    assert (await admin_client.post(f"{RECIPES_URL}/steps/save", json=step)).status_code == 201

    duplicate = await admin_client.post(f"{RECIPES_URL}/steps/save", json=step)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Step with this number already exists in the recipe"

    other = await admin_client.post(f"{RECIPES_URL}/steps/save", json={**step, "recipe_id": second["id"]})
    assert other.status_code == 201


@pytest.mark.asyncio
async def test_recipe_detail_includes_children(
    admin_client: AsyncClient,
    test_product: goods_models.Product,
    standard_units: List[conversion_models.UnitOfMeasure],
):
    """(성공) 레시피 상세 조회 시 재료, 조리 단계, 카테고리가 함께 반환됨"""
    recipe = await _create_recipe(admin_client)
    category = (
        await admin_client.post(f"{RECIPES_URL}/recipe-categories/save", json={"name": "Grill"})
    ).json()["content"]
    await admin_client.post(
        f"{RECIPES_URL}/recipe-category-links/save", json={"recipe_id": recipe["id"], "category_id": category["id"]}
    )
    await admin_client.post(
        f"{RECIPES_URL}/ingredients/save",
        json={
            "recipe_id": recipe["id"],
            "product_id": test_product.id,
            "unit_of_measure_id": standard_units[0].id,
            "quantity": 5,
        },
    )
    for number, text in ((1, "Season the steak"), (2, "Sear both sides")):
        await admin_client.post(
            f"{RECIPES_URL}/steps/save", json={"recipe_id": recipe["id"], "step_number": number, "description": text}
        )

    response = await admin_client.get(f"{RECIPES_URL}/recipes/get/{recipe['id']}")
    assert response.status_code == 200
    detail = response.json()["content"]
    assert [i["product_id"] for i in detail["ingredients"]] == [test_product.id]
    assert sorted(s["step_number"] for s in detail["steps"]) == [1, 2]
    assert [c["name"] for c in detail["categories"]] == ["Grill"]


@pytest.mark.asyncio
async def test_steps_filter_by_recipe(admin_client: AsyncClient):
    """(성공) recipe_id 필터로 조리 단계 페이지 조회"""
    first = await _create_recipe(admin_client)
    second = await _create_recipe(admin_client, name="Pepper Sauce")
    await admin_client.post(f"{RECIPES_URL}/steps/save", json={"recipe_id": first["id"], "step_number": 1, "description": "A"})
    await admin_client.post(f"{RECIPES_URL}/steps/save", json={"recipe_id": second["id"], "step_number": 1, "description": "B"})

    response = await admin_client.get(f"{RECIPES_URL}/steps/", params={"filters": f'{{"recipe_id": {second["id"]}}}'})
    assert response.status_code == 200
    page = response.json()["content"]
    assert page["total"] == 1
    assert page["data"][0]["description"] == "B"
