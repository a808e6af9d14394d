# app/domains/recipes/crud.py

"""
'recipes' 도메인의 CRUD 작업을 담당하는 모듈입니다.

- 참조 대상(레시피, 상품, 측정 단위, 카테고리)이 없으면 404를 반환합니다.
- 연결/재료/단계의 복합 고유 조건이 깨지면 409를 반환합니다.
"""

import logging
from typing import Any, Dict, Optional, Type

from fastapi import HTTPException, status
from sqlalchemy.orm import selectinload
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, CRUDUniqueName
from app.domains.conversion.models import UnitOfMeasure
from app.domains.goods.models import Product
from app.domains.usr.models import User
from app.utils.strings import generate_slug
from . import models as recipe_models
from . import schemas as recipe_schemas

logger = logging.getLogger(__name__)


async def _require(db: AsyncSession, model: Type[SQLModel], id: int, label: str) -> SQLModel:
    obj = await db.get(model, id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


async def _ensure_unique_pair(
    db: AsyncSession,
    model: Type[SQLModel],
    values: Dict[str, Any],
    detail: str,
    exclude_id: Optional[int] = None,
) -> None:
    statement = select(model).where(*[getattr(model, k) == v for k, v in values.items()])
    existing = (await db.execute(statement)).scalars().first()
    if existing and existing.id != exclude_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def _merged(db_obj: SQLModel, update_data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    return {k: update_data[k] if update_data.get(k) is not None else getattr(db_obj, k) for k in keys}


# =============================================================================
# 1. recipe_categories / recipe_category_links
# =============================================================================
class CRUDRecipeCategory(CRUDUniqueName):
    label = "Recipe category"

    def __init__(self):
        super().__init__(model=recipe_models.RecipeCategory)

    async def create(self, db: AsyncSession, *, obj_in: recipe_schemas.RecipeCategoryCreate) -> recipe_models.RecipeCategory:
        data = obj_in.model_dump()
        data["slug"] = generate_slug(obj_in.name)
        return await super().create(db, obj_in=data)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("name"):
            update_data["slug"] = generate_slug(update_data["name"])
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


recipe_category = CRUDRecipeCategory()


class CRUDRecipeCategoryLink(
    CRUDBase[
        recipe_models.RecipeCategoryLink,
        recipe_schemas.RecipeCategoryLinkCreate,
        recipe_schemas.RecipeCategoryLinkUpdate,
    ]
):
    def __init__(self):
        super().__init__(model=recipe_models.RecipeCategoryLink)

    async def _check(self, db: AsyncSession, values: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        await _require(db, recipe_models.Recipe, values["recipe_id"], "Recipe")
        await _require(db, recipe_models.RecipeCategory, values["category_id"], "Recipe category")
        await _ensure_unique_pair(
            db, self.model, values, "Recipe is already linked to this category", exclude_id=exclude_id
        )

    async def create(self, db: AsyncSession, *, obj_in: recipe_schemas.RecipeCategoryLinkCreate):
        await self._check(db, obj_in.model_dump())
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        await self._check(db, _merged(db_obj, update_data, "recipe_id", "category_id"), exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


recipe_category_link = CRUDRecipeCategoryLink()


# =============================================================================
# 2. recipes
# =============================================================================
class CRUDRecipe(CRUDUniqueName):
    label = "Recipe"

    def __init__(self):
        super().__init__(model=recipe_models.Recipe)

    async def create(
        self, db: AsyncSession, *, obj_in: recipe_schemas.RecipeCreate, user_id: Optional[int] = None
    ) -> recipe_models.Recipe:
        """
        레시피를 생성합니다. 요청 본문에 user_id가 없으면 전달된 user_id(요청 관리자)를 기록합니다.
        """
        data = obj_in.model_dump()
        if data.get("user_id") is None:
            data["user_id"] = user_id
        else:
            await _require(db, User, data["user_id"], "User")
        recipe = await super().create(db, obj_in=data)
        logger.info("Recipe '%s' created by user %s", recipe.name, recipe.user_id)
        return recipe

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("user_id") is not None:
            await _require(db, User, update_data["user_id"], "User")
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def get_detail(self, db: AsyncSession, id: int) -> Optional[recipe_models.Recipe]:
        """재료, 조리 단계, 카테고리를 함께 로드하여 레시피를 조회합니다."""
        result = await db.execute(
            select(self.model)
            .options(
                selectinload(self.model.ingredients),
                selectinload(self.model.steps),
                selectinload(self.model.categories),
            )
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()


recipe = CRUDRecipe()


# =============================================================================
# 3. ingredients / steps
# =============================================================================
class CRUDIngredient(
    CRUDBase[recipe_models.Ingredient, recipe_schemas.IngredientCreate, recipe_schemas.IngredientUpdate]
):
    def __init__(self):
        super().__init__(model=recipe_models.Ingredient)

    async def _check(self, db: AsyncSession, values: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        await _require(db, recipe_models.Recipe, values["recipe_id"], "Recipe")
        await _require(db, Product, values["product_id"], "Product")
        await _require(db, UnitOfMeasure, values["unit_of_measure_id"], "Unit of measure")
        await _ensure_unique_pair(
            db,
            self.model,
            {"recipe_id": values["recipe_id"], "product_id": values["product_id"]},
            "Ingredient with this product already exists in the recipe",
            exclude_id=exclude_id,
        )

    async def create(self, db: AsyncSession, *, obj_in: recipe_schemas.IngredientCreate) -> recipe_models.Ingredient:
        await self._check(db, obj_in.model_dump())
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        await self._check(
            db,
            _merged(db_obj, update_data, "recipe_id", "product_id", "unit_of_measure_id"),
            exclude_id=db_obj.id,
        )
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


ingredient = CRUDIngredient()


class CRUDStep(CRUDBase[recipe_models.Step, recipe_schemas.StepCreate, recipe_schemas.StepUpdate]):
    def __init__(self):
        super().__init__(model=recipe_models.Step)

    async def _check(self, db: AsyncSession, values: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        await _require(db, recipe_models.Recipe, values["recipe_id"], "Recipe")
        await _ensure_unique_pair(
            db, self.model, values, "Step with this number already exists in the recipe", exclude_id=exclude_id
        )

    async def create(self, db: AsyncSession, *, obj_in: recipe_schemas.StepCreate) -> recipe_models.Step:
        await self._check(db, {"recipe_id": obj_in.recipe_id, "step_number": obj_in.step_number})
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        if "recipe_id" in update_data or "step_number" in update_data:
            await self._check(db, _merged(db_obj, update_data, "recipe_id", "step_number"), exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


step = CRUDStep()
