# app/domains/recipes/routers.py

"""
'recipes' 도메인 (레시피 구성)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
모든 엔드포인트는 관리자(ADMIN) 프로필이 필요합니다.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.filters import generate_where_conditions
from app.core.responses import ApiResponse, Page, http200, http201, http204
from app.domains.usr import models as usr_models
from . import crud as recipe_crud
from . import models as recipe_models
from . import schemas as recipe_schemas

router = APIRouter(
    tags=["Compositions Management (레시피 관리)"],
    dependencies=[Depends(deps.get_current_admin_user)],
    responses={404: {"description": "Not found"}},
)


async def _get_or_404(db: AsyncSession, crud, id: int, label: str):
    obj = await crud.get(db, id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


# =============================================================================
# 1. recipes 엔드포인트
# =============================================================================
@router.get("/recipes/", response_model=ApiResponse[Page[recipe_schemas.RecipeResponse]])
async def read_recipes_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """레시피 목록을 페이지 단위로 조회합니다. 필터: name, description"""
    where = generate_where_conditions(recipe_models.Recipe, params.filters, ["name", "description"])
    return http200(content=await recipe_crud.recipe.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/recipes/list", response_model=ApiResponse[List[recipe_schemas.RecipeResponse]])
async def read_recipes(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await recipe_crud.recipe.get_all(db))


@router.get("/recipes/get/{recipe_id}", response_model=ApiResponse[recipe_schemas.RecipeDetailResponse])
async def read_recipe(recipe_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """레시피 상세 정보를 재료, 조리 단계, 카테고리와 함께 조회합니다."""
    db_obj = await recipe_crud.recipe.get_detail(db, recipe_id)
    if db_obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return http200(content=recipe_schemas.RecipeDetailResponse.model_validate(db_obj))


@router.post("/recipes/save", response_model=ApiResponse[recipe_schemas.RecipeResponse], status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_in: recipe_schemas.RecipeCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """레시피를 생성합니다. user_id가 없으면 요청한 관리자가 작성자로 기록됩니다."""
    return http201(content=await recipe_crud.recipe.create(db, obj_in=recipe_in, user_id=current_admin_user.id))


@router.put("/recipes/update/{recipe_id}", response_model=ApiResponse[recipe_schemas.RecipeResponse])
async def update_recipe(
    recipe_id: int,
    recipe_in: recipe_schemas.RecipeUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, recipe_crud.recipe, recipe_id, "Recipe")
    return http200(content=await recipe_crud.recipe.update(db, db_obj=db_obj, obj_in=recipe_in))


@router.delete("/recipes/delete/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(recipe_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, recipe_crud.recipe, recipe_id, "Recipe")
    await recipe_crud.recipe.delete(db, id=recipe_id)
    return http204()


# =============================================================================
# 2. recipe-categories 엔드포인트
# =============================================================================
@router.get("/recipe-categories/", response_model=ApiResponse[Page[recipe_schemas.RecipeCategoryResponse]])
async def read_recipe_categories_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(recipe_models.RecipeCategory, params.filters, ["name"])
    return http200(content=await recipe_crud.recipe_category.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/recipe-categories/list", response_model=ApiResponse[List[recipe_schemas.RecipeCategoryResponse]])
async def read_recipe_categories(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await recipe_crud.recipe_category.get_all(db))


@router.get("/recipe-categories/get/{category_id}", response_model=ApiResponse[recipe_schemas.RecipeCategoryResponse])
async def read_recipe_category(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, recipe_crud.recipe_category, category_id, "Recipe category"))


@router.post(
    "/recipe-categories/save",
    response_model=ApiResponse[recipe_schemas.RecipeCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_recipe_category(category_in: recipe_schemas.RecipeCategoryCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await recipe_crud.recipe_category.create(db, obj_in=category_in))


@router.put("/recipe-categories/update/{category_id}", response_model=ApiResponse[recipe_schemas.RecipeCategoryResponse])
async def update_recipe_category(
    category_id: int,
    category_in: recipe_schemas.RecipeCategoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, recipe_crud.recipe_category, category_id, "Recipe category")
    return http200(content=await recipe_crud.recipe_category.update(db, db_obj=db_obj, obj_in=category_in))


@router.delete("/recipe-categories/delete/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe_category(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, recipe_crud.recipe_category, category_id, "Recipe category")
    await recipe_crud.recipe_category.delete(db, id=category_id)
    return http204()


# =============================================================================
# 3. recipe-category-links 엔드포인트
# =============================================================================
@router.get("/recipe-category-links/", response_model=ApiResponse[Page[recipe_schemas.RecipeCategoryLinkResponse]])
async def read_recipe_category_links_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(recipe_models.RecipeCategoryLink, params.filters, ["recipe_id", "category_id"])
    return http200(content=await recipe_crud.recipe_category_link.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/recipe-category-links/list", response_model=ApiResponse[List[recipe_schemas.RecipeCategoryLinkResponse]])
async def read_recipe_category_links(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await recipe_crud.recipe_category_link.get_all(db))


@router.get("/recipe-category-links/get/{link_id}", response_model=ApiResponse[recipe_schemas.RecipeCategoryLinkResponse])
async def read_recipe_category_link(link_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, recipe_crud.recipe_category_link, link_id, "Recipe category link"))


@router.post(
    "/recipe-category-links/save",
    response_model=ApiResponse[recipe_schemas.RecipeCategoryLinkResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_recipe_category_link(link_in: recipe_schemas.RecipeCategoryLinkCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await recipe_crud.recipe_category_link.create(db, obj_in=link_in))


@router.put("/recipe-category-links/update/{link_id}", response_model=ApiResponse[recipe_schemas.RecipeCategoryLinkResponse])
async def update_recipe_category_link(
    link_id: int,
    link_in: recipe_schemas.RecipeCategoryLinkUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, recipe_crud.recipe_category_link, link_id, "Recipe category link")
    return http200(content=await recipe_crud.recipe_category_link.update(db, db_obj=db_obj, obj_in=link_in))


@router.delete("/recipe-category-links/delete/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe_category_link(link_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, recipe_crud.recipe_category_link, link_id, "Recipe category link")
    await recipe_crud.recipe_category_link.delete(db, id=link_id)
    return http204()


# =============================================================================
# 4. ingredients 엔드포인트
# =============================================================================
@router.get("/ingredients/", response_model=ApiResponse[Page[recipe_schemas.IngredientResponse]])
async def read_ingredients_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(recipe_models.Ingredient, params.filters, ["recipe_id", "product_id"])
    return http200(content=await recipe_crud.ingredient.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/ingredients/list", response_model=ApiResponse[List[recipe_schemas.IngredientResponse]])
async def read_ingredients(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await recipe_crud.ingredient.get_all(db))


@router.get("/ingredients/get/{ingredient_id}", response_model=ApiResponse[recipe_schemas.IngredientResponse])
async def read_ingredient(ingredient_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, recipe_crud.ingredient, ingredient_id, "Ingredient"))


@router.post(
    "/ingredients/save",
    response_model=ApiResponse[recipe_schemas.IngredientResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_ingredient(ingredient_in: recipe_schemas.IngredientCreate, db: AsyncSession = Depends(deps.get_db_session)):
    """재료를 추가합니다. 레시피, 상품, 측정 단위가 모두 존재해야 합니다."""
    return http201(content=await recipe_crud.ingredient.create(db, obj_in=ingredient_in))


@router.put("/ingredients/update/{ingredient_id}", response_model=ApiResponse[recipe_schemas.IngredientResponse])
async def update_ingredient(
    ingredient_id: int,
    ingredient_in: recipe_schemas.IngredientUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, recipe_crud.ingredient, ingredient_id, "Ingredient")
    return http200(content=await recipe_crud.ingredient.update(db, db_obj=db_obj, obj_in=ingredient_in))


@router.delete("/ingredients/delete/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(ingredient_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, recipe_crud.ingredient, ingredient_id, "Ingredient")
    await recipe_crud.ingredient.delete(db, id=ingredient_id)
    return http204()


# =============================================================================
# 5. steps 엔드포인트
# =============================================================================
@router.get("/steps/", response_model=ApiResponse[Page[recipe_schemas.StepResponse]])
async def read_steps_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(recipe_models.Step, params.filters, ["recipe_id", "description"])
    return http200(content=await recipe_crud.step.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/steps/list", response_model=ApiResponse[List[recipe_schemas.StepResponse]])
async def read_steps(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await recipe_crud.step.get_all(db))


@router.get("/steps/get/{step_id}", response_model=ApiResponse[recipe_schemas.StepResponse])
async def read_step(step_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, recipe_crud.step, step_id, "Step"))


@router.post("/steps/save", response_model=ApiResponse[recipe_schemas.StepResponse], status_code=status.HTTP_201_CREATED)
async def create_step(step_in: recipe_schemas.StepCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await recipe_crud.step.create(db, obj_in=step_in))


@router.put("/steps/update/{step_id}", response_model=ApiResponse[recipe_schemas.StepResponse])
async def update_step(step_id: int, step_in: recipe_schemas.StepUpdate, db: AsyncSession = Depends(deps.get_db_session)):
    db_obj = await _get_or_404(db, recipe_crud.step, step_id, "Step")
    return http200(content=await recipe_crud.step.update(db, db_obj=db_obj, obj_in=step_in))


@router.delete("/steps/delete/{step_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_step(step_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, recipe_crud.step, step_id, "Step")
    await recipe_crud.step.delete(db, id=step_id)
    return http204()
