# tests/domains/test_goods_n.py

"""
'goods' 도메인 (상품 카탈로그) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.goods import crud as goods_crud
from app.domains.goods import models as goods_models

GOODS_URL = "/api/v1/admin/goods"


# =================================================================================
# 0. 테스트를 위한 Fixture 설정
# =================================================================================
@pytest.fixture
async def goods_refs(db_session: AsyncSession, test_margin: goods_models.MarginLevel) -> dict:
    """상품 생성에 필요한 카테고리/원산지/공급업체/마진 등급 ID"""
    category = goods_models.ProductCategory(name="Cinnamon", slug="cinnamon")
    origin = goods_models.Origin(country="Sri Lanka")
    supplier = goods_models.Supplier(
        name="Ceylon Traders", address1="5 Harbour Rd", city="Colombo", postal_code="00100", country="Sri Lanka"
    )
    db_session.add_all([category, origin, supplier])
    await db_session.commit()
    return {
        "category_id": category.id,
        "origin_id": origin.id,
        "supplier_id": supplier.id,
        "margin_level_id": test_margin.id,
    }


def _product_payload(refs: dict, **overrides) -> dict:
    payload = {
        "name": "Ceylon Cinnamon",
        "cost_per_gram_whole": 0.2,
        "cost_per_gram_ground": 0.4,
        **refs,
    }
    payload.update(overrides)
    return payload


# =================================================================================
# 1. 원산지 (Origin) 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_create_origin(admin_client: AsyncClient):
    """(성공) 관리자: 새 원산지 생성"""
    response = await admin_client.post(f"{GOODS_URL}/origins/save", json={"country": "Vietnam"})
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Successfully created"
    assert body["content"]["country"] == "Vietnam"


@pytest.mark.asyncio
async def test_create_origin_duplicate(admin_client: AsyncClient):
    """(실패) 중복 국가명으로 원산지 생성 시 409 반환"""
    await admin_client.post(f"{GOODS_URL}/origins/save", json={"country": "Vietnam"})
    response = await admin_client.post(f"{GOODS_URL}/origins/save", json={"country": "Vietnam"})
    assert response.status_code == 409
    assert response.json()["message"] == "Origin with this country already exists"


@pytest.mark.asyncio
async def test_create_origin_fails_for_customer(authorized_client: AsyncClient):
    """(실패) 권한: CUSTOMER 사용자가 원산지 생성 시 403 반환"""
    response = await authorized_client.post(f"{GOODS_URL}/origins/save", json={"country": "Peru"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_origins_pagination(admin_client: AsyncClient, db_session: AsyncSession):
    """(성공) 페이지 크기와 필터를 적용한 원산지 목록 조회"""
    db_session.add_all([goods_models.Origin(country=c) for c in ("Brazil", "Bolivia", "Chile")])
    await db_session.commit()

    response = await admin_client.get(f"{GOODS_URL}/origins/", params={"page": 1, "page_size": 2})
    page = response.json()["content"]
    assert page["total"] == 3
    assert len(page["data"]) == 2
    assert page["page_size"] == 2

    filtered = await admin_client.get(f"{GOODS_URL}/origins/", params={"filters": '{"country": "bo"}'})
    assert [o["country"] for o in filtered.json()["content"]["data"]] == ["Bolivia"]


@pytest.mark.asyncio
async def test_delete_origin(admin_client: AsyncClient, db_session: AsyncSession):
    """(성공) 관리자: 원산지 삭제 후 조회 시 404"""
    origin = goods_models.Origin(country="Madagascar")
    db_session.add(origin)
    await db_session.commit()

    response = await admin_client.delete(f"{GOODS_URL}/origins/delete/{origin.id}")
    assert response.status_code == 204
    assert await goods_crud.origin.get(db_session, origin.id) is None

    missing = await admin_client.get(f"{GOODS_URL}/origins/get/{origin.id}")
    assert missing.status_code == 404


# =================================================================================
# 2. 카테고리 / 하위 카테고리 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_create_category_generates_slug(admin_client: AsyncClient):
    """(성공) 카테고리 생성 시 이름으로 slug 생성"""
    response = await admin_client.post(f"{GOODS_URL}/categories/save", json={"name": "Whole Spices 50g!"})
    assert response.status_code == 201
    assert response.json()["content"]["slug"] == "whole-spices-50g"


@pytest.mark.asyncio
async def test_update_category_regenerates_slug(admin_client: AsyncClient):
    """(성공) 카테고리 이름 변경 시 slug도 갱신"""
    created = (await admin_client.post(f"{GOODS_URL}/categories/save", json={"name": "Herbs"})).json()["content"]
    response = await admin_client.put(f"{GOODS_URL}/categories/update/{created['id']}", json={"name": "Dried Herbs"})
    assert response.status_code == 200
    assert response.json()["content"]["slug"] == "dried-herbs"


@pytest.mark.asyncio
async def test_create_subcategory_duplicate_in_category(admin_client: AsyncClient):
    """(실패) 같은 카테고리 안에서 하위 카테고리명이 중복되면 409"""
    category = (await admin_client.post(f"{GOODS_URL}/categories/save", json={"name": "Chili"})).json()["content"]
    payload = {"name": "Smoked", "category_id": category["id"]}
    await admin_client.post(f"{GOODS_URL}/subcategories/save", json=payload)

    response = await admin_client.post(f"{GOODS_URL}/subcategories/save", json=payload)
    assert response.status_code == 409
    assert response.json()["message"] == "Subcategory with this name already exists in the category"


@pytest.mark.asyncio
async def test_create_subcategory_unknown_category(admin_client: AsyncClient):
    """(실패) 존재하지 않는 카테고리의 하위 카테고리 생성 시 404"""
    response = await admin_client.post(f"{GOODS_URL}/subcategories/save", json={"name": "Orphan", "category_id": 999})
    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"


# =================================================================================
# 3. 공급업체 / 마진 등급 / 태그 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_create_supplier_duplicate_address(admin_client: AsyncClient):
    """(실패) 이름과 주소가 같은 공급업체는 중복 생성 불가"""
    payload = {
        "name": "Spice Hub", "address1": "9 Dock St", "city": "Mumbai",
        "postal_code": "400001", "country": "India",
    }
    first = await admin_client.post(f"{GOODS_URL}/suppliers/save", json=payload)
    assert first.status_code == 201

    response = await admin_client.post(f"{GOODS_URL}/suppliers/save", json=payload)
    assert response.status_code == 409
    assert response.json()["message"] == "Supplier with this name and address already exists"


@pytest.mark.asyncio
async def test_create_margin_level_invalid(admin_client: AsyncClient):
    """(실패) 음수 마진율은 검증 오류(400)"""
    response = await admin_client.post(f"{GOODS_URL}/margins/save", json={"name": "Broken", "margin": -5})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_tag_link_lifecycle(admin_client: AsyncClient, test_product: goods_models.Product):
    """(성공) 태그 생성, 상품 연결, 중복 연결 거부, 상품 상세에 태그 포함"""
    tag = (await admin_client.post(f"{GOODS_URL}/tags/save", json={"name": "Organic"})).json()["content"]

    link = await admin_client.post(f"{GOODS_URL}/tag-links/save", json={"product_id": test_product.id, "tag_id": tag["id"]})
    assert link.status_code == 201

    duplicate = await admin_client.post(f"{GOODS_URL}/tag-links/save", json={"product_id": test_product.id, "tag_id": tag["id"]})
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Product is already linked to this tag"

    detail = await admin_client.get(f"{GOODS_URL}/products/get/{test_product.id}")
    assert detail.status_code == 200
    assert [t["name"] for t in detail.json()["content"]["tags"]] == ["Organic"]


# =================================================================================
# 4. 상품 (Product) 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_create_product_generates_sku_and_price(admin_client: AsyncClient, goods_refs: dict):
    """(성공) 상품 생성 시 SKU와 판매가(원가 + 마진) 계산"""
    response = await admin_client.post(f"{GOODS_URL}/products/save", json=_product_payload(goods_refs))
    assert response.status_code == 201
    product = response.json()["content"]
    assert product["sku"] == "CIN-SR-CEY-0001"
    assert product["price_per_gram_whole"] == pytest.approx(0.3)
    assert product["price_per_gram_ground"] == pytest.approx(0.6)


@pytest.mark.asyncio
async def test_sku_sequence_and_flags(admin_client: AsyncClient, goods_refs: dict):
    """(성공) 같은 접두어의 SKU는 일련번호가 증가하고 속성 플래그가 붙음"""
    await admin_client.post(f"{GOODS_URL}/products/save", json=_product_payload(goods_refs))
    response = await admin_client.post(
        f"{GOODS_URL}/products/save",
        json=_product_payload(goods_refs, name="Cinnamon Quills", is_gluten_free=True, is_gmo_free=True),
    )
    assert response.status_code == 201
    assert response.json()["content"]["sku"] == "CIN-SR-CEY-0002-GF-NM"

    third = await admin_client.post(f"{GOODS_URL}/products/save", json=_product_payload(goods_refs, name="Cinnamon Dust"))
    assert third.json()["content"]["sku"] == "CIN-SR-CEY-0003"


@pytest.mark.asyncio
async def test_sku_sequence_beyond_four_digits(db_session: AsyncSession, test_product: goods_models.Product):
    """(성공) 일련번호가 9999를 넘어도 가장 큰 번호 다음 값을 사용"""
    for name, sku in [("White Pepper", "PEP-IN-SPI-9999"), ("Long Pepper", "PEP-IN-SPI-10000-GF")]:
        db_session.add(goods_models.Product(
            name=name,
            sku=sku,
            cost_per_gram_whole=0.1,
            cost_per_gram_ground=0.12,
            origin_id=test_product.origin_id,
            category_id=test_product.category_id,
            supplier_id=test_product.supplier_id,
            margin_level_id=test_product.margin_level_id,
        ))
    await db_session.commit()

    sku = await goods_crud.generate_sku(
        db_session,
        category_name="Pepper",
        origin_country="India",
        supplier_name="Spice Route",
        is_gluten_free=False,
        is_gmo_free=False,
    )
    assert sku == "PEP-IN-SPI-10001"


@pytest.mark.asyncio
async def test_create_product_unknown_margin(admin_client: AsyncClient, goods_refs: dict):
    """(실패) 존재하지 않는 마진 등급으로 상품 생성 시 404"""
    response = await admin_client.post(f"{GOODS_URL}/products/save", json=_product_payload(goods_refs, margin_level_id=999))
    assert response.status_code == 404
    assert response.json()["message"] == "MarginLevel not found"


@pytest.mark.asyncio
async def test_create_product_duplicate_name(admin_client: AsyncClient, goods_refs: dict):
    """(실패) 같은 이름의 상품 생성 시 409"""
    await admin_client.post(f"{GOODS_URL}/products/save", json=_product_payload(goods_refs))
    response = await admin_client.post(f"{GOODS_URL}/products/save", json=_product_payload(goods_refs))
    assert response.status_code == 409
    assert response.json()["message"] == "Product with this name already exists"


@pytest.mark.asyncio
async def test_update_product_recalculates_price(admin_client: AsyncClient, test_product: goods_models.Product):
    """(성공) 원가 변경 시 판매가 재계산 (마진 50%)"""
    response = await admin_client.put(
        f"{GOODS_URL}/products/update/{test_product.id}", json={"cost_per_gram_whole": 1.0}
    )
    assert response.status_code == 200
    content = response.json()["content"]
    assert content["price_per_gram_whole"] == pytest.approx(1.5)
    assert content["price_per_gram_ground"] == pytest.approx(0.18)


@pytest.mark.asyncio
async def test_products_filter_by_name(admin_client: AsyncClient, test_product: goods_models.Product):
    """(성공) 이름 필터로 상품 페이지 조회"""
    response = await admin_client.get(f"{GOODS_URL}/products/", params={"filters": '{"name": "pepper"}'})
    assert response.status_code == 200
    assert response.json()["content"]["total"] == 1

    none = await admin_client.get(f"{GOODS_URL}/products/", params={"filters": '{"name": "saffron"}'})
    assert none.json()["content"]["total"] == 0
