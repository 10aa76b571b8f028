from enum import Enum
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


class SourceKind(str, Enum):
    CROP = "crop"
    PRODUCE = "produce"


class CropDef(BaseModel):
    """作物定义"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["crop"] = "crop"
    id: str
    name: str
    icon: str = "🌱"
    growthSeconds: float = Field(gt=0)     # 生长时间（秒）
    buyCost: int = Field(ge=0)             # 种子价格
    sellValue: int = Field(ge=0)           # 收获物售价
    unlockLevel: int = Field(default=1, ge=1)
    harvestXp: int = Field(default=15, ge=0)


class AnimalDef(BaseModel):
    """动物定义"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["animal"] = "animal"
    id: str
    name: str
    icon: str = "🐾"
    productionSeconds: float = Field(gt=0)  # 产出周期（秒）
    buyCost: int = Field(ge=0)
    producedItemId: str
    producedName: str
    producedIcon: str = "📦"
    producedValue: int = Field(ge=0)
    collectXp: int = Field(default=20, ge=0)


class MaterialDef(BaseModel):
    """建材定义"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["material"] = "material"
    id: str
    name: str
    icon: str = "🧱"
    buyCost: int = Field(ge=0)


class BuildTierDef(BaseModel):
    """建筑等级定义，materials: {materialId: 数量}"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["build_tier"] = "build_tier"
    tier: int = Field(ge=1)
    name: str
    cost: int = Field(ge=0)
    materials: Dict[str, int] = Field(default_factory=dict)
    xpReward: int = Field(default=0, ge=0)


class ItemDef(BaseModel):
    """可出售物品的统一登记项"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    sellValue: int
    sourceKind: SourceKind
