# app/domains/models/__init__.py

"""
이 파일은 모든 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# usr (User, TokenFamily, RefreshToken)
from app.domains.usr.models import User, UserProfile, TokenFamily, RefreshToken, TokenStatus

# goods (Product 및 분류/공급/태그)
from app.domains.goods.models import (
    Origin, ProductCategory, ProductSubcategory, Supplier,
    MarginLevel, ProductTag, ProductTagLink, Product
)

# conversion (UnitOfMeasure, VolumeConversion)
from app.domains.conversion.models import UnitOfMeasure, VolumeConversion

# recipes (Recipe, RecipeCategory, RecipeCategoryLink, Ingredient, Step)
from app.domains.recipes.models import Recipe, RecipeCategory, RecipeCategoryLink, Ingredient, Step

# stock (Warehouse, Inventory, StockMovement)
from app.domains.stock.models import Warehouse, Inventory, StockMovement


#  `from app.domains.models import *` 구문으로 임포트될 모델 목록 정의
__all__ = [
    "User", "UserProfile", "TokenFamily", "RefreshToken", "TokenStatus",
    "Origin", "ProductCategory", "ProductSubcategory", "Supplier",
    "MarginLevel", "ProductTag", "ProductTagLink", "Product",
    "UnitOfMeasure", "VolumeConversion",
    "Recipe", "RecipeCategory", "RecipeCategoryLink", "Ingredient", "Step",
    "Warehouse", "Inventory", "StockMovement",
]
