# app/domains/recipes/schemas.py

"""
'recipes' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field
from sqlmodel import SQLModel

from app.domains.shared.models import Visibility
from .models import RecipeDifficulty


class _Timestamps(SQLModel):
    id: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 1. recipe_categories / recipe_category_links 스키마
# =============================================================================
class RecipeCategoryBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    image_ref: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)


class RecipeCategoryCreate(RecipeCategoryBase):
    pass


class RecipeCategoryUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    image_ref: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)


class RecipeCategoryResponse(RecipeCategoryBase, _Timestamps):
    slug: str


class RecipeCategoryLinkBase(SQLModel):
    recipe_id: int = Field(..., gt=0)
    category_id: int = Field(..., gt=0)


class RecipeCategoryLinkCreate(RecipeCategoryLinkBase):
    pass


class RecipeCategoryLinkUpdate(SQLModel):
    recipe_id: Optional[int] = Field(None, gt=0)
    category_id: Optional[int] = Field(None, gt=0)


class RecipeCategoryLinkResponse(RecipeCategoryLinkBase, _Timestamps):
    pass


# =============================================================================
# 2. ingredients / steps 스키마
# =============================================================================
class IngredientBase(SQLModel):
    recipe_id: int = Field(..., gt=0)
    product_id: int = Field(..., gt=0)
    unit_of_measure_id: int = Field(..., gt=0)
    quantity: float = Field(..., ge=0)
    grind_required: bool = False


class IngredientCreate(IngredientBase):
    pass


class IngredientUpdate(SQLModel):
    recipe_id: Optional[int] = Field(None, gt=0)
    product_id: Optional[int] = Field(None, gt=0)
    unit_of_measure_id: Optional[int] = Field(None, gt=0)
    quantity: Optional[float] = Field(None, ge=0)
    grind_required: Optional[bool] = None


class IngredientResponse(IngredientBase, _Timestamps):
    pass


class StepBase(SQLModel):
    recipe_id: int = Field(..., gt=0)
    step_number: int = Field(..., ge=1)
    description: str = Field(..., min_length=1, max_length=2000)
    duration: Optional[int] = Field(None, ge=0, description="소요 시간 (분)")


class StepCreate(StepBase):
    pass


class StepUpdate(SQLModel):
    recipe_id: Optional[int] = Field(None, gt=0)
    step_number: Optional[int] = Field(None, ge=1)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    duration: Optional[int] = Field(None, ge=0)


class StepResponse(StepBase, _Timestamps):
    pass


# =============================================================================
# 3. recipes 스키마
# =============================================================================
class RecipeBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    preparation_time: int = Field(..., ge=1, description="준비 시간 (분)")
    cooking_time: Optional[int] = Field(None, ge=0, description="조리 시간 (분)")
    servings: Optional[int] = Field(None, ge=1)
    difficulty: RecipeDifficulty = RecipeDifficulty.EASY
    visibility: Visibility = Visibility.DRAFT
    is_approved: bool = False
    is_promo_awarded: bool = False


class RecipeCreate(RecipeBase):
    """레시피 생성 스키마. user_id가 없으면 요청한 관리자의 ID가 기록됩니다."""
    user_id: Optional[int] = Field(None, gt=0)


class RecipeUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    preparation_time: Optional[int] = Field(None, ge=1)
    cooking_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[RecipeDifficulty] = None
    visibility: Optional[Visibility] = None
    is_approved: Optional[bool] = None
    is_promo_awarded: Optional[bool] = None
    user_id: Optional[int] = Field(None, gt=0)


class RecipeResponse(RecipeBase, _Timestamps):
    user_id: Optional[int] = None


class RecipeDetailResponse(RecipeResponse):
    """레시피 상세 조회 시 재료, 조리 단계, 카테고리를 함께 반환하는 스키마"""
    ingredients: List[IngredientResponse] = []
    steps: List[StepResponse] = []
    categories: List[RecipeCategoryResponse] = []
