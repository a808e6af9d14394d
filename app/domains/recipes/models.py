# app/domains/recipes/models.py

"""
'recipes' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

레시피 카테고리(recipe_categories), 레시피-카테고리 연결(recipe_category_links),
레시피(recipes), 재료(ingredients), 조리 단계(steps) 테이블을 포함합니다.
"""

from enum import Enum
from typing import List, Optional

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from app.domains.shared.models import TimestampMixin, Visibility


class RecipeDifficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


# =============================================================================
# 1. recipe_categories / recipe_category_links 테이블 모델
# =============================================================================
class RecipeCategoryBase(SQLModel):
    name: str = Field(max_length=100, unique=True, description="레시피 카테고리명")
    description: Optional[str] = Field(default=None)
    image_ref: Optional[str] = Field(default=None, max_length=255)
    image_url: Optional[str] = Field(default=None, max_length=500)


class RecipeCategory(RecipeCategoryBase, TimestampMixin, table=True):
    __tablename__ = "recipe_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=120, description="카테고리명으로 생성된 slug")


class RecipeCategoryLinkBase(SQLModel):
    recipe_id: int = Field(foreign_key="recipes.id", ondelete="CASCADE")
    category_id: int = Field(foreign_key="recipe_categories.id", ondelete="CASCADE")


class RecipeCategoryLink(RecipeCategoryLinkBase, TimestampMixin, table=True):
    """Recipe와 RecipeCategory의 다대다 관계를 위한 연결 테이블 모델."""
    __tablename__ = "recipe_category_links"
    __table_args__ = (UniqueConstraint("recipe_id", "category_id", name="uq_recipe_category"),)

    id: Optional[int] = Field(default=None, primary_key=True)


# =============================================================================
# 2. recipes 테이블 모델
# =============================================================================
class RecipeBase(SQLModel):
    name: str = Field(max_length=255, unique=True, description="레시피명")
    description: Optional[str] = Field(default=None)
    preparation_time: int = Field(ge=1, description="준비 시간 (분)")
    cooking_time: Optional[int] = Field(default=None, ge=0, description="조리 시간 (분)")
    servings: Optional[int] = Field(default=None, ge=1, description="인분")
    difficulty: RecipeDifficulty = Field(default=RecipeDifficulty.EASY)
    visibility: Visibility = Field(default=Visibility.DRAFT)
    is_approved: bool = Field(default=False, description="승인 여부")
    is_promo_awarded: bool = Field(default=False, description="프로모션 지급 여부")


class Recipe(RecipeBase, TimestampMixin, table=True):
    __tablename__ = "recipes"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        description="작성자 사용자 ID (FK)",
    )

    ingredients: List["Ingredient"] = Relationship(
        back_populates="recipe",
        sa_relationship_kwargs={"passive_deletes": True},
    )
    steps: List["Step"] = Relationship(
        back_populates="recipe",
        sa_relationship_kwargs={"passive_deletes": True, "order_by": "Step.step_number"},
    )
    categories: List[RecipeCategory] = Relationship(
        link_model=RecipeCategoryLink,
        sa_relationship_kwargs={"passive_deletes": True},
    )


# =============================================================================
# 3. ingredients / steps 테이블 모델
# =============================================================================
class IngredientBase(SQLModel):
    recipe_id: int = Field(foreign_key="recipes.id", ondelete="CASCADE", description="레시피 ID (FK)")
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", description="상품 ID (FK)")
    unit_of_measure_id: int = Field(foreign_key="units_of_measure.id", description="측정 단위 ID (FK)")
    quantity: float = Field(ge=0, description="수량")
    grind_required: bool = Field(default=False, description="분쇄 필요 여부")


class Ingredient(IngredientBase, TimestampMixin, table=True):
    __tablename__ = "ingredients"
    __table_args__ = (UniqueConstraint("recipe_id", "product_id", name="uq_ingredient_recipe_product"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    recipe: Optional[Recipe] = Relationship(back_populates="ingredients")


class StepBase(SQLModel):
    recipe_id: int = Field(foreign_key="recipes.id", ondelete="CASCADE", description="레시피 ID (FK)")
    step_number: int = Field(ge=1, description="단계 번호")
    description: str = Field(description="단계 설명")
    duration: Optional[int] = Field(default=None, ge=0, description="소요 시간 (분)")


class Step(StepBase, TimestampMixin, table=True):
    __tablename__ = "steps"
    __table_args__ = (UniqueConstraint("recipe_id", "step_number", name="uq_step_recipe_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    recipe: Optional[Recipe] = Relationship(back_populates="steps")
